"""Repository protocol and storage port for media assets."""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .models import MediaAsset, StoredMedia


class MediaAssetRepository(Protocol):
    async def get_by_id(self, asset_id: str) -> MediaAsset | None:
        ...

    async def get_many(self, asset_ids: Iterable[str]) -> Sequence[MediaAsset]:
        ...

    async def list_active(self, employer_id: str, type: str | None = None) -> Sequence[MediaAsset]:
        ...

    async def count_active(self, employer_id: str, type: str) -> int:
        ...

    async def create(
        self,
        *,
        employer_id: str,
        type: str,
        url: str,
        public_id: str | None,
        format: str | None,
        file_size: int | None,
        alt_text: str | None,
    ) -> MediaAsset:
        ...

    async def soft_delete(self, asset_id: str) -> None:
        ...

    async def delete_for_employer(self, employer_id: str) -> None:
        ...


class MediaStorage(Protocol):
    async def upload(
        self,
        content: bytes,
        *,
        filename: str,
        content_type: str | None,
        folder: str,
    ) -> StoredMedia:
        ...
