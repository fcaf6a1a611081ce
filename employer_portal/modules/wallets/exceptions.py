"""Wallet domain specific exceptions."""


class WalletError(Exception):
    """Base class for wallet domain errors."""


class WalletNotFoundError(WalletError):
    """Raised when an employer has no wallet yet."""


class InvalidCreditAmountError(WalletError):
    """Raised when a credit mutation is not a positive integer."""


class InsufficientCreditsError(WalletError):
    """Raised when a deduction exceeds the available balance."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__("Onvoldoende credits")
        self.required = required
        self.available = available

    @property
    def shortage(self) -> int:
        return max(0, self.required - self.available)


class ProductNotPurchasableError(WalletError):
    """Raised when checkout targets something other than an active credit bundle."""
