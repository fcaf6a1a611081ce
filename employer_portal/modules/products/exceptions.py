"""Product catalog exceptions."""


class ProductError(Exception):
    """Base class for catalog errors."""


class ProductNotFoundError(ProductError):
    """Raised when a referenced product does not exist or is inactive."""


class ProductUnavailableError(ProductError):
    """Raised when a product is not offered for the requested usage."""
