"""Wallet domain exports."""

from .exceptions import (
    InsufficientCreditsError,
    InvalidCreditAmountError,
    ProductNotPurchasableError,
    WalletError,
    WalletNotFoundError,
)
from .models import (
    CreditCheck,
    CreditTransactionRecord,
    ExpiredBatch,
    ExpiringCredits,
    WalletSnapshot,
    check_sufficient,
)

__all__ = [
    "CreditCheck",
    "CreditTransactionRecord",
    "ExpiredBatch",
    "ExpiringCredits",
    "InsufficientCreditsError",
    "InvalidCreditAmountError",
    "ProductNotPurchasableError",
    "WalletError",
    "WalletNotFoundError",
    "WalletSnapshot",
    "check_sufficient",
]
