"""Utility functions for the mapwar simulation core."""

from mapwar.utils.rng import MASK_64, Rng, seed_from_text

__all__ = [
    "MASK_64",
    "Rng",
    "seed_from_text",
]
