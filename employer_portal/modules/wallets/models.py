"""Domain models for wallet operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional


@dataclass(slots=True)
class WalletSnapshot:
    id: str
    employer_id: str
    balance: int
    total_purchased: int
    total_spent: int
    updated_at: Optional[datetime]


@dataclass(slots=True)
class CreditTransactionRecord:
    id: str
    wallet_id: str
    employer_id: str
    user_id: Optional[str]
    vacancy_id: Optional[str]
    product_id: Optional[str]
    type: str
    status: str
    reference_type: Optional[str]
    context: Optional[str]
    credits_amount: int
    money_amount_cents: Optional[int]
    invoice_details_snapshot: Optional[dict[str, Any]]
    created_at: Optional[datetime]
    expires_at: Optional[datetime] = None
    remaining_credits: Optional[int] = None


@dataclass(slots=True)
class ExpiredBatch:
    batch_id: str
    employer_id: str
    credits_expired: int
    expires_at: Optional[datetime]
    transaction_id: str


@dataclass(slots=True)
class ExpiringCredits:
    """Credits that lapse within the warning window, summed over batches."""

    total: int
    days_until: int
    earliest_date: date


@dataclass(slots=True)
class CreditCheck:
    sufficient: bool
    shortage: int
    available: int
    required: int


def check_sufficient(required: int, available: int) -> CreditCheck:
    return CreditCheck(
        sufficient=available >= required,
        shortage=max(0, required - available),
        available=available,
        required=required,
    )
