"""
Tests for the Supabase-backed providers.

The supabase client is replaced with a Mock; these tests check that calls are
translated to the client's API and that failures surface as AuthError.
"""

from types import SimpleNamespace
from unittest.mock import Mock, patch

import pytest

from apicius.errors import AuthError
from apicius.providers.supabase_provider import (
    SupabaseAuthProvider,
    SupabaseObjectStorage,
    SupabaseUsageSource,
    create_supabase_client,
    to_auth_session,
)


def supabase_session(user_id="user-1", email="cook@example.com", token="jwt"):
    return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email), access_token=token)


class TestCreateClient:
    def test_missing_config_raises(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(RuntimeError) as exc_info:
                create_supabase_client()
        assert "SUPABASE_URL" in str(exc_info.value)

    def test_uses_environment(self):
        env = {"SUPABASE_URL": "https://proj.supabase.co", "SUPABASE_ANON_KEY": "anon"}
        with patch.dict("os.environ", env, clear=True), \
             patch("apicius.providers.supabase_provider.create_client") as mock_create:
            create_supabase_client()

        mock_create.assert_called_once_with("https://proj.supabase.co", "anon")


class TestAuthProvider:
    def test_to_auth_session(self):
        session = to_auth_session(supabase_session())

        assert session.user.id == "user-1"
        assert session.access_token == "jwt"
        assert to_auth_session(None) is None

    def test_events_are_forwarded_as_names(self):
        """Test that enum-like events become plain strings."""
        client = Mock()
        subscription = Mock()
        client.auth.on_auth_state_change.return_value = subscription
        provider = SupabaseAuthProvider(client)
        received = []

        unsubscribe = provider.on_auth_state_change(lambda event, session: received.append((event, session)))
        forward = client.auth.on_auth_state_change.call_args.args[0]
        forward(SimpleNamespace(value="SIGNED_IN"), supabase_session())
        forward("SIGNED_OUT", None)

        assert [event for event, _ in received] == ["SIGNED_IN", "SIGNED_OUT"]
        assert received[0][1].user.id == "user-1"
        assert received[1][1] is None
        assert unsubscribe == subscription.unsubscribe

    def test_sign_in_error_becomes_auth_error(self):
        client = Mock()
        client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        with pytest.raises(AuthError) as exc_info:
            SupabaseAuthProvider(client).sign_in_with_password("cook@example.com", "wrong")

        assert exc_info.value.message == "Invalid login credentials"

    def test_sign_in_returns_session(self):
        client = Mock()
        client.auth.sign_in_with_password.return_value = SimpleNamespace(session=supabase_session())

        session = SupabaseAuthProvider(client).sign_in_with_password("cook@example.com", "pw")

        client.auth.sign_in_with_password.assert_called_once_with({"email": "cook@example.com", "password": "pw"})
        assert session.access_token == "jwt"

    def test_reset_password_passes_redirect(self):
        client = Mock()

        SupabaseAuthProvider(client).reset_password_for_email("cook@example.com", "https://x/change-password")

        client.auth.reset_password_for_email.assert_called_once_with(
            "cook@example.com", {"redirect_to": "https://x/change-password"}
        )


class TestObjectStorage:
    def test_upload_options(self):
        client = Mock()
        bucket = client.storage.from_.return_value

        SupabaseObjectStorage(client, bucket="avatars").upload("u1/avatar.png", b"img", "image/png")

        client.storage.from_.assert_called_with("avatars")
        bucket.upload.assert_called_once_with(
            "u1/avatar.png",
            b"img",
            {"content-type": "image/png", "cache-control": "3600", "upsert": "true"},
        )

    def test_list_returns_names(self):
        client = Mock()
        client.storage.from_.return_value.list.return_value = [{"name": "avatar.jpg"}, {"name": ""}]

        assert SupabaseObjectStorage(client, bucket="avatars").list("u1") == ["avatar.jpg"]


class TestUsageSource:
    def test_reads_user_rows(self):
        client = Mock()
        query = client.table.return_value.select.return_value.eq.return_value
        query.execute.return_value = SimpleNamespace(data=[{"total_tokens": 3}])

        rows = SupabaseUsageSource(client).usage_rows("u1")

        client.table.assert_called_once_with("openai_usage")
        client.table.return_value.select.return_value.eq.assert_called_once_with("user_id", "u1")
        assert rows == [{"total_tokens": 3}]
