"""Domain models for the employer media library."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class MediaAsset:
    id: str
    employer_id: str
    type: str
    url: str
    public_id: Optional[str] = None
    format: Optional[str] = None
    file_size: Optional[int] = None
    alt_text: Optional[str] = None
    is_deleted: bool = False
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class StoredMedia:
    """What a storage backend reports back after an upload."""

    secure_url: str
    public_id: str
    bytes: int
    format: str


@dataclass(slots=True)
class MediaLibrary:
    logo: Optional[MediaAsset]
    images: list[MediaAsset] = field(default_factory=list)
    header_image_id: Optional[str] = None
    max_images: int = 10
