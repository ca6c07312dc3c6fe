"""
Exception types shared across Apicius.

Every error the core raises carries a human-readable `message` that the UI can
show as-is. The UI layer decides how to present it; the core never renders.

Taxonomy:
- Local validation errors (bad input, oversized file): raised before any
  network call is made.
- ApiError: anything that went wrong talking to the backend. `kind` tells
  transport failures apart from errors the backend reported itself.
- AuthError: failures reported by the auth provider.
"""

from typing import List, Optional


class ErrorKind:
    """String constants for ApiError.kind."""
    NETWORK = "network"
    HTTP = "http"
    BACKEND = "backend"
    MALFORMED = "malformed"
    VALIDATION = "validation"
    AUTH = "auth"


class ApiciusError(Exception):
    """Base class for all Apicius errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(ApiciusError):
    """
    An API operation failed.

    Attributes:
        kind: One of the ErrorKind constants
        message: Human-readable message (verbatim from the backend for BACKEND errors)
        status: HTTP status code, if a response was received
        code: Backend-specific error code, if provided
    """

    def __init__(
        self,
        kind: str,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.code = code

    def __repr__(self) -> str:
        return f"ApiError(kind={self.kind!r}, message={self.message!r}, status={self.status!r})"


class ImportInputError(ApiciusError):
    """The import form is missing input or holds an unsupported file."""


class AvatarError(ApiciusError):
    """Avatar validation or upload failed."""


class PreferencesError(ApiciusError):
    """Saving user preferences failed."""


class AuthError(ApiciusError):
    """The auth provider rejected an operation."""


class PasswordPolicyError(ApiciusError):
    """A new password does not satisfy the password rules."""

    def __init__(self, problems: List[str]):
        super().__init__("\n".join(problems))
        self.problems = problems
