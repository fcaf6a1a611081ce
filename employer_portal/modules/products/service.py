"""Product catalog service: listing and credit price lookups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.infrastructure.database.repositories.product_repository import SqlProductRepository

from .exceptions import ProductNotFoundError, ProductUnavailableError
from .models import BOOST_OPTION, UPSELL, VACANCY_PACKAGE, Product, ProductCreateInput, Quote
from .repository import ProductRepository


@dataclass(slots=True)
class ProductService:
    repository: ProductRepository

    @classmethod
    def with_session(cls, session: AsyncSession) -> "ProductService":
        return cls(SqlProductRepository(session))

    async def list_products(self, type: str | None = None, availability: str | None = None) -> Sequence[Product]:
        products = await self.repository.list_products(type=type)
        if availability:
            products = [product for product in products if product.is_available_for(availability)]
        return products

    async def get_product(self, product_id: str) -> Product:
        product = await self.repository.get_by_id(product_id)
        if product is None or not product.is_active:
            raise ProductNotFoundError(f"Product niet gevonden: {product_id}")
        return product

    async def ensure_product(self, payload: ProductCreateInput) -> Product:
        existing = await self.repository.get_by_slug(payload.slug)
        if existing is not None:
            return existing
        return await self.repository.create_product(payload)

    async def quote_vacancy(self, package_id: str, upsell_ids: Iterable[str] = ()) -> Quote:
        package = await self.repository.get_by_id(package_id)
        if package is None or not package.is_active or package.type != VACANCY_PACKAGE:
            raise ProductNotFoundError("Geselecteerd pakket niet gevonden")
        upsells = [await self._get_upsell(upsell_id) for upsell_id in upsell_ids]
        return Quote(package=package, upsells=upsells)

    async def quote_boost(self, upsell_ids: Sequence[str]) -> Quote:
        if not upsell_ids:
            raise ProductUnavailableError("Selecteer minimaal één boost optie")
        upsells: list[Product] = []
        for upsell_id in upsell_ids:
            upsell = await self._get_upsell(upsell_id)
            if not upsell.is_available_for(BOOST_OPTION):
                raise ProductUnavailableError(
                    f'Product "{upsell.display_name}" is niet beschikbaar als boost optie'
                )
            upsells.append(upsell)
        return Quote(package=None, upsells=upsells)

    async def _get_upsell(self, upsell_id: str) -> Product:
        upsell = await self.repository.get_by_id(upsell_id)
        if upsell is None or not upsell.is_active or upsell.type != UPSELL:
            raise ProductNotFoundError(f"Upsell product niet gevonden: {upsell_id}")
        return upsell
