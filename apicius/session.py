"""
Session and settings context.

SessionContext owns who is signed in and that user's preferences. It listens
to the auth provider's event stream and turns provider events into its own
small state machine:

    UNKNOWN (session not yet resolved) -> ANONYMOUS <-> AUTHENTICATED(user)

Identity-scoped state (preferences, the recipe list cache, and anything the
UI registers with add_clear_hook) is wiped whenever the identity goes away or
changes, and always *before* the login screen is shown.
"""

import logging
from typing import Callable, List, Optional

from apicius.errors import AuthError, PreferencesError
from apicius.models import THEME_SYSTEM, AuthSession, AuthUser, ImageUpload, UserPreferences
from apicius.preferences import ColorSchemeProbe, PreferencesService, resolve_dark_mode
from apicius.providers.base import AuthProvider, Unsubscribe
from apicius.recipe_list import RecipeListCache
from apicius.routes import CHANGE_PASSWORD, LOGIN, Navigator

logger = logging.getLogger(__name__)


class SessionState:
    """String constants for SessionContext.state."""
    UNKNOWN = "unknown"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class AuthEvent:
    """Auth provider lifecycle event names."""
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"

    ALL = [
        INITIAL_SESSION,
        SIGNED_IN,
        SIGNED_OUT,
        PASSWORD_RECOVERY,
        TOKEN_REFRESHED,
        USER_UPDATED,
    ]


class SessionContext:
    """
    Current identity, preferences and theme.

    Args:
        auth: Auth provider to read the session from and subscribe to
        preferences_service: Loads/saves preferences for the signed-in user
        recipe_list: Cache to clear on sign-out and refresh on sign-in
        navigate: Called with a route name when the session forces navigation
        prefers_dark: Platform color-scheme probe for the "system" theme

    Attributes:
        state: One of the SessionState constants
        user: Signed-in AuthUser, or None
        preferences: Loaded preferences, or None when signed out
        is_dark: Resolved theme
    """

    def __init__(
        self,
        auth: AuthProvider,
        preferences_service: PreferencesService,
        recipe_list: RecipeListCache,
        navigate: Navigator,
        prefers_dark: Optional[ColorSchemeProbe] = None,
    ):
        self.auth = auth
        self.preferences_service = preferences_service
        self.recipe_list = recipe_list
        self.navigate = navigate
        self.prefers_dark = prefers_dark or (lambda: False)

        self.state = SessionState.UNKNOWN
        self.user: Optional[AuthUser] = None
        self.preferences: Optional[UserPreferences] = None
        self.is_dark = resolve_dark_mode(THEME_SYSTEM, self.prefers_dark)

        self._session: Optional[AuthSession] = None
        self._clear_hooks: List[Callable[[], None]] = []
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def is_loading(self) -> bool:
        return self.state == SessionState.UNKNOWN

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    def access_token(self) -> Optional[str]:
        """Token provider for the API client; None when signed out."""
        return self._session.access_token if self._session else None

    def add_clear_hook(self, hook: Callable[[], None]) -> None:
        """Register a callable that wipes identity-scoped UI data on sign-out."""
        self._clear_hooks.append(hook)

    # Lifecycle

    def start(self) -> None:
        """Resolve the current session and subscribe to auth events."""
        try:
            session = self.auth.get_session()
        except AuthError as e:
            logger.warning("Could not restore session: %s", e.message)
            session = None
        self._apply_session(session)
        if self._unsubscribe is None:
            self._unsubscribe = self.auth.on_auth_state_change(self.handle_event)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_event(self, event: str, session: Optional[AuthSession]) -> None:
        """
        Apply one auth provider event.

        SIGNED_OUT clears all identity-scoped state and then navigates to login.
        PASSWORD_RECOVERY always navigates to the change-password screen.
        """
        logger.info("Auth state change: %s", event)
        if event not in AuthEvent.ALL:
            logger.warning("Ignoring unknown auth event: %s", event)
            return

        if event == AuthEvent.SIGNED_OUT:
            self._clear_identity()
            self.navigate(LOGIN)
            return

        self._apply_session(session)

        if event == AuthEvent.PASSWORD_RECOVERY:
            self.navigate(CHANGE_PASSWORD)

    def _apply_session(self, session: Optional[AuthSession]) -> None:
        user = session.user if session else None
        if user is None:
            self._clear_identity()
            return

        previous_id = self.user_id
        self._session = session
        self.user = user
        self.state = SessionState.AUTHENTICATED

        if previous_id == user.id:
            return

        if previous_id is not None:
            logger.info("Signed-in user changed from %s to %s", previous_id, user.id)
            self._clear_scoped_data()
        else:
            logger.info("User %s signed in", user.id)
        self.load_preferences()
        self.recipe_list.refresh()

    def _clear_scoped_data(self) -> None:
        self.preferences = None
        self.recipe_list.clear()
        for hook in self._clear_hooks:
            hook()

    def _clear_identity(self) -> None:
        if self.user is not None:
            logger.info("User %s signed out; clearing session data", self.user.id)
        self._session = None
        self.user = None
        self._clear_scoped_data()
        self.is_dark = resolve_dark_mode(THEME_SYSTEM, self.prefers_dark)
        self.state = SessionState.ANONYMOUS

    # Preferences

    def load_preferences(self) -> UserPreferences:
        """Load preferences for the current user and resolve the theme."""
        self.preferences = self.preferences_service.load(self.user_id)
        self.is_dark = resolve_dark_mode(self.preferences.theme, self.prefers_dark)
        return self.preferences

    def refresh_preferences(self) -> None:
        """Reload stored preferences, discarding any previewed theme."""
        if self.is_authenticated:
            self.load_preferences()

    def preview_theme(self, theme: str) -> bool:
        """Re-resolve the theme for an unsaved choice; returns the new is_dark."""
        self.is_dark = resolve_dark_mode(theme, self.prefers_dark)
        return self.is_dark

    def save_preferences(
        self,
        display_name: Optional[str],
        theme: str,
        avatar: Optional[ImageUpload] = None,
    ) -> UserPreferences:
        """
        Save the settings form.

        On failure the theme reverts to the last saved one and the error is re-raised.

        Raises:
            PreferencesError: If saving fails.
        """
        current = self.preferences or UserPreferences(id=self.user_id)
        updated = current.model_copy(update={"display_name": display_name or None, "theme": theme})
        try:
            saved = self.preferences_service.save(updated, self.user_id, avatar=avatar)
        except PreferencesError:
            self.is_dark = resolve_dark_mode(current.theme, self.prefers_dark)
            raise
        self.preferences = saved
        self.is_dark = resolve_dark_mode(saved.theme, self.prefers_dark)
        return saved

    # Auth actions

    def sign_out(self) -> None:
        """
        Ask the provider to sign out.

        The provider's SIGNED_OUT event does the clearing and navigation.

        Raises:
            AuthError: If the provider fails; the session is left unchanged.
        """
        self.auth.sign_out()
