"""
Recipe detail view state.

Shows one stored recipe, lets the user edit it in place (click to edit,
save/cancel), and delete it. When the displayed recipe disappears (deleted,
or the backend returns it without a body) the view navigates back to import.
"""

import logging
from typing import Callable, Optional

from apicius.api_client import ApiClient
from apicius.drafts import MarkdownDraft
from apicius.errors import ApiciusError
from apicius.persistence import RecipePersistence
from apicius.routes import IMPORT, Navigator

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load recipe"


class RecipeDetailController:
    """
    One recipe on screen.

    Args:
        api: Backend API client
        persistence: Adapter for edits and deletes
        user_id_provider: Returns the signed-in user's id
        navigate: Route callback

    Attributes:
        recipe_id: Displayed recipe id, or None
        content: Markdown and its edit buffer
        error: Message to show inline, or None
    """

    def __init__(
        self,
        api: ApiClient,
        persistence: RecipePersistence,
        user_id_provider: Callable[[], Optional[str]],
        navigate: Navigator,
    ):
        self.api = api
        self.persistence = persistence
        self.user_id_provider = user_id_provider
        self.navigate = navigate

        self.recipe_id: Optional[str] = None
        self.content = MarkdownDraft()
        self.error: Optional[str] = None
        self.is_saving = False
        self.is_deleting = False

    @property
    def markdown(self) -> str:
        return self.content.value

    @property
    def is_editing(self) -> bool:
        return self.content.is_editing

    def load(self, recipe_id: str) -> bool:
        """
        Fetch and display a recipe.

        Returns:
            True if the recipe is now displayed.
        """
        self.recipe_id = recipe_id
        self.content.reset()
        self.error = None

        result = self.api.get_recipe(recipe_id)
        if not result.is_ok:
            logger.warning("Failed to load recipe %s: %s", recipe_id, result.message)
            self.error = LOAD_ERROR_MESSAGE
            return False

        recipe = result.value
        if recipe is None or not recipe.recipe_markdown:
            self.navigate(IMPORT)
            return False

        self.content.reset(recipe.recipe_markdown)
        return True

    def start_editing(self) -> None:
        if self.markdown and not self.is_editing:
            self.content.begin()

    def update_draft(self, text: str) -> None:
        self.content.update(text)

    def cancel_edit(self) -> None:
        self.content.cancel()

    def save_edit(self) -> bool:
        """
        Persist the draft as the recipe's new markdown.

        The displayed markdown only changes once the backend accepted it; on
        failure the draft stays open with `error` set.
        """
        if not self.is_editing or not self.recipe_id:
            return False

        self.is_saving = True
        self.error = None
        try:
            self.persistence.save(self.content.draft, self.user_id_provider(), recipe_id=self.recipe_id)
        except ApiciusError as e:
            self.error = e.message
            return False
        finally:
            self.is_saving = False

        self.content.commit()
        return True

    def delete(self) -> bool:
        """
        Delete the displayed recipe and go back to the import screen.

        Returns:
            True if deleted. On failure `error` is set and nothing navigates.
        """
        if not self.recipe_id:
            return False
        return delete_recipe(self.persistence, self.recipe_id, self, self.navigate)


def delete_recipe(
    persistence: RecipePersistence,
    recipe_id: str,
    view: Optional[RecipeDetailController],
    navigate: Navigator,
) -> bool:
    """
    Delete a recipe from anywhere in the app.

    The adapter drops it from the list cache. If `view` is currently showing
    that recipe, the view is cleared and the app navigates to the import screen.

    Returns:
        True if the recipe was deleted; False if the shown recipe could not be
        deleted (the view's `error` says why).

    Raises:
        ApiciusError: If deleting a recipe that is not on screen fails.
    """
    showing = view is not None and view.recipe_id == recipe_id
    if showing:
        view.is_deleting = True
        view.error = None
    try:
        persistence.delete(recipe_id)
    except ApiciusError as e:
        logger.warning("Failed to delete recipe %s: %s", recipe_id, e.message)
        if not showing:
            raise
        view.error = e.message
        return False
    finally:
        if showing:
            view.is_deleting = False

    if showing:
        view.recipe_id = None
        view.content.reset()
        navigate(IMPORT)
    return True
