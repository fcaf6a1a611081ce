"""Repository protocols for users, employers and roles."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Protocol

from .models import Employer, User


class UserRepository(Protocol):
    """Abstract repository interface for user persistence."""

    async def get_by_id(self, user_id: str) -> User | None:
        ...

    async def get_by_email(self, email: str) -> User | None:
        ...

    async def create_user(
        self,
        *,
        email: str,
        employer_id: str | None,
        status: str,
        first_name: str | None,
        last_name: str | None,
        role: str | None,
        **extra: Any,
    ) -> User:
        ...

    async def update_user(self, user_id: str, changes: Mapping[str, Any]) -> User:
        ...

    async def set_last_login(self, user_id: str, timestamp: datetime) -> None:
        ...

    async def get_by_invite_hash(self, token_hash: str) -> User | None:
        ...

    async def list_by_employer(self, employer_id: str, statuses: Iterable[str] | None = None) -> list[User]:
        ...

    async def count_by_employer(self, employer_id: str) -> int:
        ...

    async def delete_user(self, user_id: str) -> None:
        ...


class EmployerRepository(Protocol):
    async def get_by_id(self, employer_id: str) -> Employer | None:
        ...

    async def get_by_kvk(self, kvk: str) -> Employer | None:
        ...

    async def create_employer(self, *, role_id: str | None) -> Employer:
        ...

    async def update_employer(self, employer_id: str, changes: Mapping[str, Any]) -> Employer:
        ...

    async def delete_employer(self, employer_id: str) -> None:
        ...


class RoleRepository(Protocol):
    async def get_or_create(self, name: str) -> str:
        """Return the id of the role with ``name``, creating it when missing."""
        ...
