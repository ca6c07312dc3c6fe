"""
User Preferences Module.

Loads and saves the per-user preferences record (display name, theme, avatar)
through the backend, and resolves the theme into a light/dark decision.

Loading is best-effort: if the backend cannot be reached or has no record,
the defaults are used so the UI is never blocked on preferences.
"""

import logging
from typing import Callable, Optional

from apicius.api_client import ApiClient
from apicius.avatars import AvatarStore
from apicius.errors import ApiciusError, PreferencesError
from apicius.models import THEME_DARK, THEME_LIGHT, ImageUpload, UserPreferences

logger = logging.getLogger(__name__)

ColorSchemeProbe = Callable[[], bool]


def resolve_dark_mode(theme: str, prefers_dark: ColorSchemeProbe) -> bool:
    """
    Decide whether to render dark.

    Args:
        theme: "light", "dark" or "system"
        prefers_dark: Returns the platform's current dark-mode preference.
            Only consulted for "system", and only at the moment of the call.

    Returns:
        True for dark mode.
    """
    if theme == THEME_DARK:
        return True
    if theme == THEME_LIGHT:
        return False
    return bool(prefers_dark())


class PreferencesService:
    """
    Read and write preferences for the signed-in user.

    Args:
        api: Backend API client
        avatars: Avatar store used when a new avatar is saved
    """

    def __init__(self, api: ApiClient, avatars: Optional[AvatarStore] = None):
        self.api = api
        self.avatars = avatars

    def load(self, user_id: Optional[str] = None) -> UserPreferences:
        """
        Fetch preferences, falling back to defaults on any failure.

        Returns:
            The stored preferences, or UserPreferences() with theme "system".
        """
        result = self.api.get_preferences()
        if not result.is_ok:
            logger.warning("Failed to load preferences, using defaults: %s", result.message)
            return UserPreferences(id=user_id)
        if result.value is None:
            return UserPreferences(id=user_id)
        return result.value

    def save(
        self,
        prefs: UserPreferences,
        user_id: Optional[str],
        avatar: Optional[ImageUpload] = None,
    ) -> UserPreferences:
        """
        Store preferences, uploading a new avatar first when given.

        Returns:
            The preferences as saved (avatar_url replaced by the new upload's URL).

        Raises:
            PreferencesError: If there is no user, or the upload or update fails.
        """
        if not user_id:
            raise PreferencesError("User ID is required")

        to_save = prefs.model_copy(update={"id": user_id})
        try:
            if avatar is not None:
                if self.avatars is None:
                    raise PreferencesError("Avatar uploads are not available")
                to_save.avatar_url = self.avatars.upload(user_id, avatar)
            self.api.update_preferences(to_save.to_update_payload()).unwrap()
        except ApiciusError as e:
            logger.warning("Failed to save settings for user %s: %s", user_id, e.message)
            raise PreferencesError("Failed to save settings") from e

        logger.info("Saved settings for user %s", user_id)
        return to_save
