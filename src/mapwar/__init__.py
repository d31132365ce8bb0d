"""Deterministic simulation core for the mapwar territorial-conquest game."""

__version__ = "0.1.0"
