"""A falling-block puzzle game with keyboard and GPIO-button controls."""

__version__ = "0.1.0"