"""
Configuration management for Apicius.

This module centralizes environment variable loading from the .env file at the
project root. It should be imported early by the Streamlit entry point so .env
is loaded before any other code reads environment variables.

In production .env will usually not exist; load_dotenv() is safe to call and
will no-op, and the platform's environment variables are used instead.

Environment Variables:
- APICIUS_API_URL: Optional, backend URL (defaults to http://localhost:8000)
- APICIUS_API_TIMEOUT: Optional, per-request timeout in seconds (default: 60)
- SUPABASE_URL: Required for the auth/storage provider
- SUPABASE_ANON_KEY: Required for the auth/storage provider
- APICIUS_AVATAR_BUCKET: Optional, storage bucket for avatars (default: "avatars")
- APICIUS_SITE_URL: Optional, public origin of the frontend (default: http://localhost:8501)
- APICIUS_LOG_LEVEL: Optional, logging level name (default: "INFO")
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    The project root is located by going up from this file's location
    (apicius/config.py -> apicius/ -> project root).

    Safe to call multiple times. Existing environment variables take precedence
    over values from .env (override=False).
    """
    this_file = Path(__file__).resolve()
    project_root = this_file.parent.parent
    env_path = project_root / ".env"
    load_dotenv(env_path, override=False)


# Load .env file on module import
load_env_file()


class ApiConfig:
    """Configuration for the recipe backend API."""

    @staticmethod
    def get_base_url() -> str:
        """
        Get the backend API base URL.

        Returns:
            Backend URL string with trailing slash removed.
            Defaults to http://localhost:8000 for local development.
        """
        url = os.getenv("APICIUS_API_URL", "http://localhost:8000")
        return url.rstrip("/")

    @staticmethod
    def get_timeout() -> float:
        """
        Get the per-request timeout in seconds.

        Extraction calls can take a while, so the default is generous.
        Invalid values fall back to the default.
        """
        raw = os.getenv("APICIUS_API_TIMEOUT", "60")
        try:
            return float(raw)
        except ValueError:
            return 60.0


class SupabaseConfig:
    """Configuration for the Supabase auth and storage provider."""

    @staticmethod
    def get_url() -> Optional[str]:
        """
        Get the Supabase project URL from environment.

        Returns:
            Project URL string or None if not set
        """
        return os.getenv("SUPABASE_URL")

    @staticmethod
    def get_anon_key() -> Optional[str]:
        """
        Get the Supabase anonymous (public) key from environment.

        Returns:
            Anon key string or None if not set
        """
        return os.getenv("SUPABASE_ANON_KEY")

    @staticmethod
    def get_avatar_bucket() -> str:
        """Get the storage bucket used for avatar images (default: "avatars")."""
        return os.getenv("APICIUS_AVATAR_BUCKET", "avatars")


class SiteConfig:
    """Configuration for the public frontend origin."""

    @staticmethod
    def get_site_url() -> str:
        """
        Get the public origin of the frontend, used for auth email redirects.

        Returns:
            Site URL with trailing slash removed (default: http://localhost:8501)
        """
        return os.getenv("APICIUS_SITE_URL", "http://localhost:8501").rstrip("/")

    @staticmethod
    def get_change_password_url() -> str:
        """URL the password-reset email should send the user back to."""
        return f"{SiteConfig.get_site_url()}/change-password"


def get_required_env_vars() -> dict:
    """
    Get a dictionary of all required environment variables and their status.

    Returns:
        Dictionary with keys:
        - supabase_url: bool (True if set)
        - supabase_anon_key: bool (True if set)
    """
    return {
        "supabase_url": SupabaseConfig.get_url() is not None,
        "supabase_anon_key": SupabaseConfig.get_anon_key() is not None,
    }


def validate_required_config() -> None:
    """
    Validate that all required environment variables are set.

    Raises:
        RuntimeError: If any required configuration is missing
    """
    missing = []

    if not SupabaseConfig.get_url():
        missing.append("SUPABASE_URL (required for sign-in and avatars)")

    if not SupabaseConfig.get_anon_key():
        missing.append("SUPABASE_ANON_KEY (required for sign-in and avatars)")

    if missing:
        raise RuntimeError(
            "Missing required environment variables:\n" +
            "\n".join(f"  - {var}" for var in missing) +
            "\n\nPlease create a .env file at the project root with these variables."
        )


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the app.

    Args:
        level: Logging level name. Defaults to APICIUS_LOG_LEVEL or "INFO".
    """
    level_name = (level or os.getenv("APICIUS_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
