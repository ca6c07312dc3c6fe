"""
App State Management Module.

This module wraps Streamlit's session_state to hold one apicius AppState per
browser session, and maps the core's route names onto Streamlit pages.

The AppState is created on first use and started immediately, which restores
any existing auth session and subscribes to auth events. Pages receive it via
get_app_state() and pass it on explicitly; nothing else reads session_state
for recipe or identity data.

# NOTE: Widget keys that hold identity-scoped input (pasted text, settings
    form values) are prefixed with SCOPED_KEY_PREFIX so they are wiped along
    with everything else when the user signs out.
"""

from typing import Iterable, List, Optional

import streamlit as st

from apicius import routes
from apicius.app_state import AppState
from apicius.models import ImageUpload

APP_STATE_KEY = "apicius_app"
SELECTED_RECIPE_KEY = "selected_recipe_id"
FLASH_KEY = "flash_message"
SCOPED_KEY_PREFIX = "user_"

# Route name -> page script, relative to streamlit_app/app.py
ROUTE_PAGES = {
    routes.BETA_ACCESS: "pages/00_✨_Beta_Access.py",
    routes.IMPORT: "pages/01_📥_Import.py",
    routes.RECIPE_PREFIX: "pages/02_📖_Recipe.py",
    routes.SETTINGS: "pages/03_⚙️_Settings.py",
    routes.LOGIN: "pages/10_🔑_Login.py",
    routes.RESET_PASSWORD: "pages/11_✉️_Reset_Password.py",
    routes.CHANGE_PASSWORD: "pages/12_🔒_Change_Password.py",
}


def prefers_dark() -> bool:
    """Platform color-scheme probe: the Streamlit theme configured for this app."""
    return st.get_option("theme.base") == "dark"


def _clear_scoped_widget_state() -> None:
    for key in list(st.session_state.keys()):
        if key == SELECTED_RECIPE_KEY or str(key).startswith(SCOPED_KEY_PREFIX):
            del st.session_state[key]


def get_app_state() -> AppState:
    """
    Get or create the AppState for this browser session.

    Returns:
        The started AppState stored in st.session_state.
    """
    if APP_STATE_KEY not in st.session_state:
        app = AppState.from_config(prefers_dark=prefers_dark)
        app.session.add_clear_hook(_clear_scoped_widget_state)
        app.start()
        st.session_state[APP_STATE_KEY] = app
    return st.session_state[APP_STATE_KEY]


def go_to(route: str) -> None:
    """
    Switch to the page for a route.

    Recipe routes ("/recipes/<id>") remember the id and open the recipe page.
    """
    recipe_id = routes.recipe_id_from_route(route)
    if recipe_id:
        st.session_state[SELECTED_RECIPE_KEY] = recipe_id
        st.switch_page(ROUTE_PAGES[routes.RECIPE_PREFIX])
    st.switch_page(ROUTE_PAGES.get(route, ROUTE_PAGES[routes.IMPORT]))


def follow_pending_route(app: AppState) -> None:
    """Switch pages if the core asked to navigate while handling an action."""
    route = app.take_pending_route()
    if route:
        go_to(route)


def require_user(app: AppState) -> None:
    """Send anonymous visitors to the login page."""
    follow_pending_route(app)
    if not app.session.is_authenticated:
        go_to(routes.LOGIN)


def selected_recipe_id() -> Optional[str]:
    return st.session_state.get(SELECTED_RECIPE_KEY)


def set_flash(message: str) -> None:
    """Store a one-off success message for the next page."""
    st.session_state[FLASH_KEY] = message


def pop_flash() -> Optional[str]:
    return st.session_state.pop(FLASH_KEY, None)


def to_image_uploads(uploaded_files: Iterable) -> List[ImageUpload]:
    """Convert Streamlit UploadedFile objects into ImageUpload models."""
    return [
        ImageUpload(filename=f.name, content_type=f.type or "", data=f.getvalue())
        for f in uploaded_files
    ]
