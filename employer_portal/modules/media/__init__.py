"""Employer media library exports."""

from .exceptions import MediaError, MediaNotFoundError, MediaValidationError, StorageError
from .models import MediaAsset, MediaLibrary, StoredMedia

__all__ = [
    "MediaAsset",
    "MediaError",
    "MediaLibrary",
    "MediaNotFoundError",
    "MediaValidationError",
    "StorageError",
    "StoredMedia",
]
