"""Interactive SQL shell for Forge SQL webtriggers."""

__version__ = "0.1.0"
