"""HTTP surface driving mapwar matches."""
