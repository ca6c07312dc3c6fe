"""
Tests for the recipe detail view and cross-app deletes.
"""

import pytest

from apicius import routes
from apicius.errors import ApiError
from apicius.persistence import RecipePersistence
from apicius.recipe_list import RecipeListCache
from apicius.recipe_view import LOAD_ERROR_MESSAGE, RecipeDetailController, delete_recipe
from apicius.results import Err, Ok
from fakes import make_recipe


@pytest.fixture
def recipe_list(api):
    return RecipeListCache(api)


@pytest.fixture
def persistence(api, recipe_list):
    return RecipePersistence(api, recipe_list)


@pytest.fixture
def view(api, persistence, navigate):
    return RecipeDetailController(api, persistence, lambda: "user-1", navigate)


class TestLoad:
    """Test fetching the displayed recipe."""

    def test_load_shows_markdown(self, view, api):
        api.get_recipe.return_value = Ok(make_recipe("r1", markdown="# Soup"))

        assert view.load("r1")
        assert view.markdown == "# Soup"
        assert view.error is None

    def test_load_failure_sets_message(self, view, api, navigate):
        api.get_recipe.return_value = Err("network", "Could not connect")

        assert not view.load("r1")
        assert view.error == LOAD_ERROR_MESSAGE
        navigate.assert_not_called()

    def test_missing_recipe_goes_to_import(self, view, api, navigate):
        api.get_recipe.return_value = Ok(None)

        assert not view.load("gone")
        navigate.assert_called_once_with(routes.IMPORT)

    def test_empty_markdown_goes_to_import(self, view, api, navigate):
        api.get_recipe.return_value = Ok(make_recipe("r1", markdown=""))

        view.load("r1")
        navigate.assert_called_once_with(routes.IMPORT)


class TestEditing:
    """Test in-place editing of a stored recipe."""

    @pytest.fixture
    def loaded(self, view, api):
        api.get_recipe.return_value = Ok(make_recipe("r1", markdown="# Soup"))
        view.load("r1")
        return view

    def test_save_updates_existing_recipe(self, loaded, api):
        loaded.start_editing()
        loaded.update_draft("# Better Soup")

        assert loaded.save_edit()

        assert loaded.markdown == "# Better Soup"
        assert not loaded.is_editing
        api.create_recipe.assert_not_called()
        assert api.update_recipe.call_args.args[0] == "r1"

    def test_failed_save_keeps_draft_open(self, loaded, api):
        """Test that the shown markdown only changes once the backend accepts it."""
        api.update_recipe.return_value = Err("backend", "Recipe is locked")
        loaded.start_editing()
        loaded.update_draft("# Better Soup")

        assert not loaded.save_edit()

        assert loaded.markdown == "# Soup"
        assert loaded.is_editing
        assert loaded.content.draft == "# Better Soup"
        assert loaded.error == "Recipe is locked"

    def test_cancel_keeps_markdown(self, loaded):
        loaded.start_editing()
        loaded.update_draft("# Other")
        loaded.cancel_edit()

        assert loaded.markdown == "# Soup"
        assert not loaded.is_editing


class TestDelete:
    """Test deleting from the detail view and from the sidebar."""

    @pytest.fixture
    def shown(self, view, api, recipe_list):
        api.list_recipes.return_value = Ok([make_recipe("r1"), make_recipe("r2")])
        recipe_list.refresh()
        api.get_recipe.return_value = Ok(make_recipe("r1", markdown="# Soup"))
        view.load("r1")
        return view

    def test_deleting_shown_recipe_navigates_to_import(self, shown, recipe_list, navigate):
        assert shown.delete()

        assert recipe_list.get("r1") is None
        assert shown.recipe_id is None
        navigate.assert_called_once_with(routes.IMPORT)

    def test_deleting_other_recipe_stays(self, shown, persistence, recipe_list, navigate):
        """Test that deleting a recipe that is not on screen leaves the view alone."""
        assert delete_recipe(persistence, "r2", shown, navigate)

        assert recipe_list.get("r2") is None
        assert shown.markdown == "# Soup"
        navigate.assert_not_called()

    def test_failed_delete_of_shown_recipe(self, shown, api, navigate):
        api.delete_recipe.return_value = Err("http", "Backend returned an error: 500", status=500)

        assert not shown.delete()

        assert shown.error == "Backend returned an error: 500"
        assert shown.recipe_id == "r1"
        assert not shown.is_deleting
        navigate.assert_not_called()

    def test_failed_delete_of_other_recipe_raises(self, shown, persistence, api, navigate):
        api.delete_recipe.return_value = Err("http", "Backend returned an error: 500", status=500)

        with pytest.raises(ApiError):
            delete_recipe(persistence, "r2", shown, navigate)
