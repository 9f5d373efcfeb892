"""HTTP API for LoreChat Engine."""
