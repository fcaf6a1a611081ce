"""Account domain exports."""

from .exceptions import (
    AccountAlreadyExistsError,
    AccountError,
    AccountNotFoundError,
    AccountPermissionError,
    EmployerNotFoundError,
    InvalidAccountSectionError,
)
from .models import AccountOverview, Employer, OnboardingInput, OnboardingResult, User

__all__ = [
    "AccountAlreadyExistsError",
    "AccountError",
    "AccountNotFoundError",
    "AccountOverview",
    "AccountPermissionError",
    "Employer",
    "EmployerNotFoundError",
    "InvalidAccountSectionError",
    "OnboardingInput",
    "OnboardingResult",
    "User",
]
