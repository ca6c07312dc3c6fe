"""
Route names shared by the core and the Streamlit frontend.

The core only ever asks to *go* somewhere; streamlit_app maps these names to
pages. A Navigator is any callable taking a route name.
"""

from typing import Callable

LOGIN = "/login"
IMPORT = "/import"
SETTINGS = "/settings"
RESET_PASSWORD = "/reset-password"
CHANGE_PASSWORD = "/change-password"
BETA_ACCESS = "/"
RECIPE_PREFIX = "/recipes/"

Navigator = Callable[[str], None]


def recipe_route(recipe_id: str) -> str:
    return f"{RECIPE_PREFIX}{recipe_id}"


def recipe_id_from_route(route: str) -> str:
    """Recipe id from a "/recipes/<id>" route, or "" for any other route."""
    if route.startswith(RECIPE_PREFIX):
        return route[len(RECIPE_PREFIX):]
    return ""
