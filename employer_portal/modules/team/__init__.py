"""Team domain exports."""

from .exceptions import (
    InvitationExpiredError,
    InvitationNotFoundError,
    LastActiveMemberError,
    TeamConflictError,
    TeamError,
    TeamMemberNotFoundError,
    TeamPermissionError,
    TeamValidationError,
)
from .models import Invitation, InvitationDetails, JoinCheck, JoinResult, RemovedMember, domains_match

__all__ = [
    "Invitation",
    "InvitationDetails",
    "InvitationExpiredError",
    "InvitationNotFoundError",
    "JoinCheck",
    "JoinResult",
    "LastActiveMemberError",
    "RemovedMember",
    "TeamConflictError",
    "TeamError",
    "TeamMemberNotFoundError",
    "TeamPermissionError",
    "TeamValidationError",
    "domains_match",
]
