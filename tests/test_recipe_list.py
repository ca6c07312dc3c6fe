"""
Tests for the recipe list cache and its ordering.
"""

from datetime import datetime, timedelta, timezone

from apicius.recipe_list import REFRESH_ERROR_MESSAGE, RecipeListCache, sort_recipes
from apicius.results import Err, Ok
from fakes import make_recipe

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestSortRecipes:
    """Test most-recently-changed-first ordering."""

    def test_edit_moves_older_recipe_to_top(self):
        """Test that an update newer than every creation time wins."""
        old = make_recipe("old", created_at=T0, updated_at=T0 + timedelta(days=3))
        new = make_recipe("new", created_at=T0 + timedelta(days=1))

        assert [r.id for r in sort_recipes([new, old])] == ["old", "new"]

    def test_update_not_after_creation_is_ignored(self):
        """Test that updated_at equal to created_at does not count as an edit."""
        a = make_recipe("a", created_at=T0, updated_at=T0)
        b = make_recipe("b", created_at=T0 + timedelta(minutes=1))

        assert [r.id for r in sort_recipes([a, b])] == ["b", "a"]
        assert not a.was_edited

    def test_ties_keep_incoming_order(self):
        first = make_recipe("first", created_at=T0)
        second = make_recipe("second", created_at=T0)

        assert [r.id for r in sort_recipes([first, second])] == ["first", "second"]

    def test_naive_timestamps_compare_with_aware(self):
        naive = make_recipe("naive", created_at=datetime(2024, 3, 2))
        aware = make_recipe("aware", created_at=T0)

        assert [r.id for r in sort_recipes([aware, naive])] == ["naive", "aware"]


class TestRecipeListCache:
    """Test refresh, local patches and failure handling."""

    def test_refresh_replaces_and_sorts(self, api):
        api.list_recipes.return_value = Ok([
            make_recipe("a", created_at=T0),
            make_recipe("b", created_at=T0 + timedelta(hours=1)),
        ])
        cache = RecipeListCache(api)

        cache.refresh()

        assert [r.id for r in cache.recipes] == ["b", "a"]
        assert cache.error is None
        assert not cache.is_loading

    def test_failed_refresh_empties_list(self, api):
        """Test that a failed fetch clears the list and sets a fixed message."""
        api.list_recipes.return_value = Ok([make_recipe("a")])
        cache = RecipeListCache(api)
        cache.refresh()

        api.list_recipes.return_value = Err("network", "Could not connect")
        cache.refresh()

        assert cache.recipes == []
        assert cache.error == REFRESH_ERROR_MESSAGE

    def test_get_and_remove(self, api):
        api.list_recipes.return_value = Ok([make_recipe("a"), make_recipe("b")])
        cache = RecipeListCache(api)
        cache.refresh()

        assert cache.get("b").id == "b"
        cache.remove("b")
        assert cache.get("b") is None
        assert [r.id for r in cache.recipes] == ["a"]

    def test_clear(self, api):
        api.list_recipes.return_value = Ok([make_recipe("a")])
        cache = RecipeListCache(api)
        cache.refresh()

        cache.clear()

        assert cache.recipes == []
        assert cache.error is None
