"""
Process-wide list of the current user's recipes.

The navigation sidebar renders from this cache. It is replaced wholesale on
refresh() and only ever patched locally when a recipe is deleted.

# NOTE: Concurrent refresh() calls are not de-duplicated or sequenced; the
    last response to arrive wins. List reads are idempotent and infrequent,
    so this is accepted as a known gap.
"""

import logging
from typing import List, Optional

from apicius.api_client import ApiClient
from apicius.models import Recipe

logger = logging.getLogger(__name__)

REFRESH_ERROR_MESSAGE = "Failed to load recipes"


def sort_recipes(recipes: List[Recipe]) -> List[Recipe]:
    """
    Order recipes by effective-change time, most recent first.

    A recipe that was never edited is compared by its creation time.
    The sort is stable; ties keep their incoming order.
    """
    return sorted(recipes, key=lambda r: r.effective_changed_at, reverse=True)


class RecipeListCache:
    """
    Cached recipe list with loading and error flags.

    Attributes:
        recipes: Current list, most recently changed first
        is_loading: True while a refresh is in flight
        error: Message from the last failed refresh, or None
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.recipes: List[Recipe] = []
        self.is_loading = False
        self.error: Optional[str] = None

    def refresh(self) -> List[Recipe]:
        """
        Fetch the full list and replace the cache.

        On failure the cache is emptied and `error` is set; nothing is raised.

        Returns:
            The new cached list.
        """
        self.is_loading = True
        self.error = None
        try:
            result = self.api.list_recipes()
            if result.is_ok:
                self.recipes = sort_recipes(result.value)
                logger.debug("Recipe list refreshed: %d recipes", len(self.recipes))
            else:
                logger.warning("Failed to load recipes: %s", result.message)
                self.error = REFRESH_ERROR_MESSAGE
                self.recipes = []
        finally:
            self.is_loading = False
        return self.recipes

    def get(self, recipe_id: str) -> Optional[Recipe]:
        for recipe in self.recipes:
            if recipe.id == recipe_id:
                return recipe
        return None

    def remove(self, recipe_id: str) -> None:
        """Drop a deleted recipe from the cached list."""
        self.recipes = [r for r in self.recipes if r.id != recipe_id]

    def clear(self) -> None:
        """Forget everything; used when the user signs out."""
        self.recipes = []
        self.error = None
        self.is_loading = False
