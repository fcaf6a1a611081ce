"""Team domain specific exceptions."""


class TeamError(Exception):
    """Base class for team membership errors."""


class TeamValidationError(TeamError):
    """Raised for missing or malformed input."""


class LastActiveMemberError(TeamValidationError):
    """Raised when a removal would leave the employer without an active member."""


class TeamConflictError(TeamError):
    """Raised when the address already has a pending invitation or an account."""


class TeamPermissionError(TeamError):
    """Raised when acting on a user outside the caller's team."""


class TeamMemberNotFoundError(TeamError):
    """Raised when the user to remove does not exist."""


class InvitationNotFoundError(TeamError):
    """Raised for an unknown or already used invitation token."""


class InvitationExpiredError(TeamError):
    """Raised for an invitation past its expiry or already accepted."""
