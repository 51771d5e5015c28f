"""LinguaEdge - on-the-fly per-locale translation proxy."""

__version__ = "0.1.0"
