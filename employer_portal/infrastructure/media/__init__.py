"""Media storage adapters."""

from .storage import CloudinaryMediaStorage, LocalMediaStorage, build_media_storage

__all__ = ["CloudinaryMediaStorage", "LocalMediaStorage", "build_media_storage"]
