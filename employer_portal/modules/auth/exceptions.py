"""Authentication domain specific exceptions."""


class AuthError(Exception):
    """Base class for authentication errors."""


class InvalidTokenError(AuthError):
    """Raised when a sign-in token is unknown, already used or revoked."""


class TokenExpiredError(InvalidTokenError):
    """Raised when a sign-in token is past its expiry."""


class EmailDeliveryError(AuthError):
    """Raised when the sign-in email could not be handed to the mail server."""
