"""
Abstract interfaces for the auth, storage and usage providers.

The app never talks to an identity or file-storage service directly. It goes
through these interfaces so the session logic can be driven by a real
provider in production and by fakes in tests.

All implementations must:
- Return sessions as AuthSession models (user + bearer token)
- Report provider failures by raising apicius.errors.AuthError (auth) or
  letting their own exception propagate (storage, usage), which callers wrap
- Deliver auth lifecycle events with the provider's event names:
  INITIAL_SESSION, SIGNED_IN, SIGNED_OUT, PASSWORD_RECOVERY,
  TOKEN_REFRESHED, USER_UPDATED
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from apicius.models import AuthSession

AuthCallback = Callable[[str, Optional[AuthSession]], None]
Unsubscribe = Callable[[], None]


class AuthProvider(ABC):
    """Identity provider: sessions, sign-in/out and password management."""

    @abstractmethod
    def get_session(self) -> Optional[AuthSession]:
        """Return the current session, or None when nobody is signed in."""
        pass

    @abstractmethod
    def on_auth_state_change(self, callback: AuthCallback) -> Unsubscribe:
        """
        Subscribe to auth lifecycle events.

        Args:
            callback: Called with (event_name, session_or_None) for each event

        Returns:
            A callable that cancels the subscription.
        """
        pass

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Sign in; raises AuthError on bad credentials."""
        pass

    @abstractmethod
    def sign_out(self) -> None:
        pass

    @abstractmethod
    def update_password(self, password: str) -> None:
        """Change the signed-in user's password; raises AuthError on failure."""
        pass

    @abstractmethod
    def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        """Send a password-reset email linking back to `redirect_to`."""
        pass


class ObjectStorage(ABC):
    """Bucket-style file storage, used for avatar images."""

    @abstractmethod
    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
        cache_control: str = "3600",
    ) -> None:
        pass

    @abstractmethod
    def list(self, prefix: str) -> List[str]:
        """Names of the files directly under `prefix` (names only, no prefix)."""
        pass

    @abstractmethod
    def remove(self, paths: List[str]) -> None:
        pass

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        pass


class UsageSource(ABC):
    """Per-call AI token usage records."""

    @abstractmethod
    def usage_rows(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Rows for one user, each with prompt_tokens, completion_tokens and
        total_tokens (any of which may be missing or None).
        """
        pass
