"""
Recipe persistence adapter.

Turns the UI's save/delete intents into API calls: a save without a recipe id
creates a recipe, a save with one updates only its markdown. After every
change the recipe list cache is brought up to date before control returns, so
the sidebar never lags behind the main panel.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from apicius.api_client import ApiClient
from apicius.errors import ApiError, ErrorKind
from apicius.models import Recipe
from apicius.recipe_list import RecipeListCache

logger = logging.getLogger(__name__)


class RecipePersistence:
    """
    Create/update/delete recipes and keep the list cache in step.

    Args:
        api: Backend API client
        recipe_list: Cache to refresh (or patch, for deletes) after each change
    """

    def __init__(self, api: ApiClient, recipe_list: RecipeListCache):
        self.api = api
        self.recipe_list = recipe_list

    def save(
        self,
        recipe_markdown: str,
        user_id: Optional[str],
        recipe_id: Optional[str] = None,
    ) -> Optional[Recipe]:
        """
        Save a recipe.

        Args:
            recipe_markdown: Markdown recipe body
            user_id: Current user's id; required to create a recipe
            recipe_id: Existing recipe to update, or None to create

        Returns:
            The created Recipe, or None after an update (the caller already
            holds the markdown it just saved).

        Raises:
            ApiError: kind "validation" when creating without a user id (no
                request is sent), otherwise whatever the backend reported.
        """
        if recipe_id:
            fields = {
                "recipeMarkdown": recipe_markdown,
                "updatedAt": datetime.now(timezone.utc).isoformat(),
            }
            self.api.update_recipe(recipe_id, fields).unwrap()
            logger.info("Updated recipe %s", recipe_id)
            self.recipe_list.refresh()
            return None

        if not user_id:
            raise ApiError(ErrorKind.VALIDATION, "User ID is required")

        created = self.api.create_recipe(recipe_markdown, is_public=False).unwrap()
        logger.info("Created recipe %s for user %s", created.id, user_id)
        self.recipe_list.refresh()
        return created

    def delete(self, recipe_id: str) -> None:
        """
        Delete a recipe and drop it from the list cache.

        Navigating away from a detail view that showed the recipe is the
        caller's responsibility.

        Raises:
            ApiError: If the backend call fails (the cache is left untouched).
        """
        self.api.delete_recipe(recipe_id).unwrap()
        logger.info("Deleted recipe %s", recipe_id)
        self.recipe_list.remove(recipe_id)
