"""Repository protocol for the product catalog."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Product, ProductCreateInput


class ProductRepository(Protocol):
    async def get_by_id(self, product_id: str) -> Product | None:
        ...

    async def get_by_slug(self, slug: str) -> Product | None:
        ...

    async def list_products(self, *, type: str | None = None, active_only: bool = True) -> Sequence[Product]:
        ...

    async def create_product(self, payload: ProductCreateInput) -> Product:
        ...
