"""SQLAlchemy implementation of the product catalog repository."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.db.models import Product as ProductModel
from employer_portal.modules.products.models import Product, ProductCreateInput
from employer_portal.modules.products.repository import ProductRepository


class SqlProductRepository(ProductRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, product_id: str) -> Product | None:
        model = await self._session.get(ProductModel, product_id)
        return self._to_domain(model)

    async def get_by_slug(self, slug: str) -> Product | None:
        stmt = select(ProductModel).where(ProductModel.slug == slug)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def list_products(self, *, type: str | None = None, active_only: bool = True) -> Sequence[Product]:
        stmt = select(ProductModel).order_by(ProductModel.sort_order, ProductModel.display_name)
        if type is not None:
            stmt = stmt.where(ProductModel.type == type)
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def create_product(self, payload: ProductCreateInput) -> Product:
        model = ProductModel(
            slug=payload.slug,
            display_name=payload.display_name,
            description=payload.description,
            type=payload.type,
            credits=payload.credits,
            price_cents=payload.price_cents,
            base_price_cents=payload.base_price_cents,
            duration_days=payload.duration_days,
            availability=list(payload.availability),
            sort_order=payload.sort_order,
            is_active=payload.is_active,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: ProductModel | None) -> Product | None:
        if model is None:
            return None
        return Product(
            id=model.id,
            slug=model.slug,
            display_name=model.display_name,
            description=model.description,
            type=model.type,
            credits=model.credits or 0,
            price_cents=model.price_cents or 0,
            base_price_cents=model.base_price_cents,
            duration_days=model.duration_days,
            availability=list(model.availability or []),
            is_active=bool(model.is_active),
            sort_order=model.sort_order or 0,
        )
