"""Media library exceptions."""


class MediaError(Exception):
    """Base class for media errors."""


class MediaValidationError(MediaError):
    """Raised when an upload or action request is not acceptable."""


class MediaNotFoundError(MediaError):
    """Raised when an asset does not exist for the employer."""


class StorageError(MediaError):
    """Raised by storage adapters when the backend rejects an upload."""
