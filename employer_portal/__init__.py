"""Colourful jobs employer portal backend."""

__version__ = "0.1.0"
