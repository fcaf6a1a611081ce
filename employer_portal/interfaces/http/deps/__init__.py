"""Reusable FastAPI dependencies."""

from .account import get_current_employer_user, get_current_user
from .client import client_ip, enforce_rate_limit
from .database import get_app_container, get_db_session

__all__ = [
    "client_ip",
    "enforce_rate_limit",
    "get_app_container",
    "get_current_employer_user",
    "get_current_user",
    "get_db_session",
]
