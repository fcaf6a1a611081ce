"""Product catalog and form lookups."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.interfaces.http.deps import get_db_session
from employer_portal.modules.lookups.service import LookupService
from employer_portal.modules.products.service import ProductService
from employer_portal.schemas import LookupResponse, ProductListResponse, ProductResponse

router = APIRouter()


@router.get("/products", response_model=ProductListResponse, summary="Active products")
async def list_products(
    type: Optional[str] = Query(default=None),
    availability: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> ProductListResponse:
    products = await ProductService.with_session(db).list_products(type=type, availability=availability)
    return ProductListResponse(products=[ProductResponse.model_validate(product) for product in products])


@router.get("/lookups", response_model=dict[str, list[LookupResponse]], summary="Lookup values grouped by kind")
async def list_lookups(
    kinds: Optional[str] = Query(default=None, description="Comma separated kinds"),
    db: AsyncSession = Depends(get_db_session),
) -> dict[str, list[LookupResponse]]:
    wanted = [kind.strip() for kind in kinds.split(",")] if kinds else None
    grouped = await LookupService.with_session(db).list_grouped(wanted)
    return {
        kind: [LookupResponse.model_validate(item) for item in items]
        for kind, items in grouped.items()
    }
