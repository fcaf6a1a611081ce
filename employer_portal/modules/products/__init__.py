"""Product catalog exports."""

from .exceptions import ProductError, ProductNotFoundError, ProductUnavailableError
from .models import Product, ProductCreateInput, Quote

__all__ = [
    "Product",
    "ProductCreateInput",
    "ProductError",
    "ProductNotFoundError",
    "ProductUnavailableError",
    "Quote",
]
