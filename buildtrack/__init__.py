"""Schedule import pipeline for retail build-out project tracking."""

__version__ = "0.1.0"
