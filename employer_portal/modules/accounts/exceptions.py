"""Account domain specific exceptions."""


class AccountError(Exception):
    """Base class for account domain errors."""


class AccountAlreadyExistsError(AccountError):
    """Raised when onboarding an email address that already has a user."""


class AccountNotFoundError(AccountError):
    """Raised when the requested user cannot be found."""


class EmployerNotFoundError(AccountError):
    """Raised when a user has no (existing) employer attached."""


class InvalidAccountSectionError(AccountError):
    """Raised for an unknown account section or invalid field values."""


class AccountPermissionError(AccountError):
    """Raised when the user may not act for the requested employer."""
