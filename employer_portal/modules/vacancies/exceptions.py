"""Vacancy domain specific exceptions."""

from __future__ import annotations


class VacancyError(Exception):
    """Base class for vacancy domain errors."""


class VacancyNotFoundError(VacancyError):
    """Raised when the vacancy does not exist."""


class VacancyAccessDeniedError(VacancyError):
    """Raised when the vacancy belongs to another employer."""


class VacancyStateError(VacancyError):
    """Raised when an operation is not allowed in the current status."""


class VacancyValidationError(VacancyError):
    """Raised when input is invalid; ``fields`` lists offending field names."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []
