"""Domain models for the product catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

VACANCY_PACKAGE = "vacancy_package"
CREDIT_BUNDLE = "credit_bundle"
UPSELL = "upsell"
PRODUCT_TYPES = {VACANCY_PACKAGE, CREDIT_BUNDLE, UPSELL}

ADD_VACANCY = "add-vacancy"
BOOST_OPTION = "boost-option"


@dataclass(slots=True)
class Product:
    id: str
    slug: str
    display_name: str
    type: str
    credits: int
    price_cents: int
    is_active: bool = True
    sort_order: int = 0
    description: Optional[str] = None
    base_price_cents: Optional[int] = None
    duration_days: Optional[int] = None
    availability: list[str] = field(default_factory=list)

    def is_available_for(self, usage: str) -> bool:
        return usage in self.availability


@dataclass(slots=True)
class ProductCreateInput:
    slug: str
    display_name: str
    type: str
    credits: int
    price_cents: int = 0
    description: Optional[str] = None
    base_price_cents: Optional[int] = None
    duration_days: Optional[int] = None
    availability: list[str] = field(default_factory=list)
    sort_order: int = 0
    is_active: bool = True


@dataclass(slots=True)
class Quote:
    """Credit cost of a package plus its upsells."""

    package: Optional[Product]
    upsells: list[Product]

    @property
    def total_credits(self) -> int:
        package_credits = self.package.credits if self.package else 0
        return package_credits + sum(upsell.credits for upsell in self.upsells)
