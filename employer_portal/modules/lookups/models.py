"""Lookup tables used by vacancy and profile forms."""

from __future__ import annotations

from dataclasses import dataclass

LOOKUP_KINDS = ("education_levels", "fields", "function_types", "regions", "sectors")


@dataclass(slots=True)
class Lookup:
    id: str
    kind: str
    name: str
    sort_order: int = 0
