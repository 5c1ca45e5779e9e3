"""Gold Rush - a planning agent that retrieves the gold and brings it home."""

__version__ = "0.1.0"
