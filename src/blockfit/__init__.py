"""Procedural polyomino puzzle generation and placement validation."""

__version__ = "0.1.0"
