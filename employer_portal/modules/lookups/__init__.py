"""Lookup table exports."""

from .models import LOOKUP_KINDS, Lookup

__all__ = ["LOOKUP_KINDS", "Lookup"]
