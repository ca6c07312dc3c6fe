"""
Application root.

AppState owns every long-lived piece of client state (session, recipe list,
import flow, detail view) and wires them together. The UI creates one per
browser session and passes it to pages explicitly.

Navigation requested by the core (sign-out, password recovery, deleting the
shown recipe) is recorded as `pending_route`. The UI picks it up with
take_pending_route() after handling an action and switches pages itself.
"""

import logging
from typing import Optional

from apicius.accounts import AccountService
from apicius.api_client import ApiClient
from apicius.avatars import AvatarStore
from apicius.import_flow import ImportFlowController
from apicius.models import UsageSummary
from apicius.persistence import RecipePersistence
from apicius.preferences import ColorSchemeProbe, PreferencesService
from apicius.providers.base import AuthProvider, ObjectStorage, UsageSource
from apicius.recipe_list import RecipeListCache
from apicius.recipe_view import RecipeDetailController, delete_recipe
from apicius.routes import IMPORT
from apicius.session import SessionContext
from apicius.usage import get_usage

logger = logging.getLogger(__name__)


class AppState:
    """
    Root object for one browser session.

    Args:
        auth: Auth provider
        storage: Object storage for avatars
        usage_source: Source of AI usage records
        prefers_dark: Platform color-scheme probe
        api: API client; by default one is built that takes its token from
            this app's session
    """

    def __init__(
        self,
        auth: AuthProvider,
        storage: ObjectStorage,
        usage_source: UsageSource,
        prefers_dark: Optional[ColorSchemeProbe] = None,
        api: Optional[ApiClient] = None,
    ):
        self.pending_route: Optional[str] = None

        self.api = api or ApiClient(token_provider=self._access_token)
        self.recipe_list = RecipeListCache(self.api)
        self.persistence = RecipePersistence(self.api, self.recipe_list)
        self.avatars = AvatarStore(storage)
        self.preferences = PreferencesService(self.api, self.avatars)
        self.session = SessionContext(
            auth,
            self.preferences,
            self.recipe_list,
            navigate=self.navigate,
            prefers_dark=prefers_dark,
        )
        self.importer = ImportFlowController(self.api, self.persistence, self._user_id)
        self.recipe_view = RecipeDetailController(self.api, self.persistence, self._user_id, self.navigate)
        self.accounts = AccountService(auth, self.api, self.navigate)
        self.usage_source = usage_source

        self.session.add_clear_hook(self._reset_views)

    @classmethod
    def from_config(cls, prefers_dark: Optional[ColorSchemeProbe] = None) -> "AppState":
        """Build an AppState backed by Supabase, configured from the environment."""
        from apicius.providers.supabase_provider import (
            SupabaseAuthProvider,
            SupabaseObjectStorage,
            SupabaseUsageSource,
            create_supabase_client,
        )

        client = create_supabase_client()
        return cls(
            auth=SupabaseAuthProvider(client),
            storage=SupabaseObjectStorage(client),
            usage_source=SupabaseUsageSource(client),
            prefers_dark=prefers_dark,
        )

    def _access_token(self) -> Optional[str]:
        return self.session.access_token()

    def _user_id(self) -> Optional[str]:
        return self.session.user_id

    def _reset_views(self) -> None:
        self.importer.reset()
        self.recipe_view.recipe_id = None
        self.recipe_view.content.reset()
        self.recipe_view.error = None

    def start(self) -> None:
        self.session.start()

    # Navigation

    def navigate(self, route: str) -> None:
        logger.debug("Navigation requested: %s", route)
        self.pending_route = route

    def take_pending_route(self) -> Optional[str]:
        route, self.pending_route = self.pending_route, None
        return route

    def enter_page(self, route: Optional[str]) -> None:
        """
        Record which page is rendering.

        The import flow is only attached while its own page is shown; any other
        page detaches it so a late extraction or save result is dropped.
        """
        if route == IMPORT:
            self.importer.attach()
        else:
            self.importer.detach()

    # Cross-component actions

    def delete_recipe(self, recipe_id: str) -> bool:
        """Delete a recipe; leaves the detail view if it was showing it."""
        return delete_recipe(self.persistence, recipe_id, self.recipe_view, self.navigate)

    def usage(self) -> UsageSummary:
        return get_usage(self.usage_source, self.session.user_id)
