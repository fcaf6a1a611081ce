"""Vacancy domain package."""

from .exceptions import (
    VacancyAccessDeniedError,
    VacancyError,
    VacancyNotFoundError,
    VacancyStateError,
    VacancyValidationError,
)
from .models import BoostResult, SubmitResult, Vacancy, missing_required_fields

__all__ = [
    "BoostResult",
    "SubmitResult",
    "Vacancy",
    "VacancyAccessDeniedError",
    "VacancyError",
    "VacancyNotFoundError",
    "VacancyStateError",
    "VacancyValidationError",
    "missing_required_fields",
]
