"""
Supabase-backed providers using the supabase Python client.

One Supabase client is created per app session; it keeps the signed-in
session in memory and emits auth events synchronously when sign-in,
sign-out, token refresh and password changes happen.

Requires SUPABASE_URL and SUPABASE_ANON_KEY (see apicius.config).
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from apicius.config import SupabaseConfig, validate_required_config
from apicius.errors import AuthError
from apicius.models import AuthSession, AuthUser
from apicius.providers.base import (
    AuthCallback,
    AuthProvider,
    ObjectStorage,
    Unsubscribe,
    UsageSource,
)

logger = logging.getLogger(__name__)

USAGE_TABLE = "openai_usage"


def create_supabase_client(url: Optional[str] = None, key: Optional[str] = None) -> Client:
    """
    Create a Supabase client from explicit values or configuration.

    Raises:
        RuntimeError: If the URL or anon key is missing
    """
    if not url or not key:
        validate_required_config()
    return create_client(url or SupabaseConfig.get_url(), key or SupabaseConfig.get_anon_key())


def to_auth_session(session: Any) -> Optional[AuthSession]:
    """Convert a supabase session object into an AuthSession (None stays None)."""
    if session is None:
        return None
    user = getattr(session, "user", None)
    auth_user = None
    if user is not None:
        auth_user = AuthUser(id=str(user.id), email=getattr(user, "email", None))
    return AuthSession(user=auth_user, access_token=getattr(session, "access_token", "") or "")


class SupabaseAuthProvider(AuthProvider):
    """AuthProvider on top of client.auth."""

    def __init__(self, client: Client):
        self.client = client

    def get_session(self) -> Optional[AuthSession]:
        try:
            return to_auth_session(self.client.auth.get_session())
        except Exception as e:
            raise AuthError(str(e) or "Failed to restore session") from e

    def on_auth_state_change(self, callback: AuthCallback) -> Unsubscribe:
        def forward(event: Any, session: Any) -> None:
            callback(str(getattr(event, "value", event)), to_auth_session(session))

        subscription = self.client.auth.on_auth_state_change(forward)
        return subscription.unsubscribe

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.warning("Sign-in failed: %s", e)
            raise AuthError(str(e) or "Failed to sign in") from e
        session = to_auth_session(response.session)
        if session is None:
            raise AuthError("Failed to sign in")
        return session

    def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except Exception as e:
            raise AuthError(str(e) or "Failed to sign out") from e

    def update_password(self, password: str) -> None:
        try:
            self.client.auth.update_user({"password": password})
        except Exception as e:
            logger.warning("Password update failed: %s", e)
            raise AuthError(str(e) or "Failed to update password") from e

    def reset_password_for_email(self, email: str, redirect_to: str) -> None:
        try:
            self.client.auth.reset_password_for_email(email, {"redirect_to": redirect_to})
        except Exception as e:
            raise AuthError(str(e) or "Failed to send reset password email") from e


class SupabaseObjectStorage(ObjectStorage):
    """ObjectStorage on one Supabase storage bucket."""

    def __init__(self, client: Client, bucket: Optional[str] = None):
        self.client = client
        self.bucket = bucket or SupabaseConfig.get_avatar_bucket()

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
        cache_control: str = "3600",
    ) -> None:
        file_options = {
            "content-type": content_type,
            "cache-control": cache_control,
            "upsert": "true" if upsert else "false",
        }
        self._bucket().upload(path, data, file_options)

    def list(self, prefix: str) -> List[str]:
        entries = self._bucket().list(prefix) or []
        return [entry["name"] for entry in entries if entry.get("name")]

    def remove(self, paths: List[str]) -> None:
        self._bucket().remove(paths)

    def get_public_url(self, path: str) -> str:
        return self._bucket().get_public_url(path)


class SupabaseUsageSource(UsageSource):
    """UsageSource reading the openai_usage table."""

    def __init__(self, client: Client):
        self.client = client

    def usage_rows(self, user_id: str) -> List[Dict[str, Any]]:
        response = (
            self.client.table(USAGE_TABLE)
            .select("prompt_tokens, completion_tokens, total_tokens")
            .eq("user_id", user_id)
            .execute()
        )
        return response.data or []
