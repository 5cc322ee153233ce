"""Lossy Music Mirror: keep a lossy copy of a lossless music library."""

__version__ = "0.3.0"
