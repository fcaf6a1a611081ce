"""Repository protocol for lookup values."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .models import Lookup


class LookupRepository(Protocol):
    async def get_by_id(self, lookup_id: str) -> Lookup | None:
        ...

    async def list_by_kinds(self, kinds: Iterable[str]) -> Sequence[Lookup]:
        ...

    async def get_or_create(self, kind: str, name: str, sort_order: int = 0) -> Lookup:
        ...
