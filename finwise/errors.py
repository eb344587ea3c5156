"""Domain exceptions."""
from typing import Optional


class FinWiseError(Exception):
    """Base class for application errors."""


class NotAuthenticatedError(FinWiseError):
    """Raised when an operation is attempted without a resolved user identity."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class TransactionWriteError(FinWiseError):
    """Raised when the transaction store fails to persist a record."""


class TransactionNotFoundError(FinWiseError):
    """Raised when a transaction does not exist for the requesting user."""


class CompletionServiceError(FinWiseError):
    """Raised by completion adapters on transport, status or empty-body failures."""


def require_user(user_id: Optional[str]) -> str:
    """Return the stripped user id or raise NotAuthenticatedError."""
    if user_id is None or not str(user_id).strip():
        raise NotAuthenticatedError()
    return str(user_id).strip()
