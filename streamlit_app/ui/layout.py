"""
Layout primitives for consistent page structure.

Provides the page header and the authenticated sidebar: the recipe list
(newest change first), and the account menu with usage stats and sign-out.
"""

import logging
from typing import Callable, Optional

import streamlit as st

from apicius import routes
from apicius.app_state import AppState
from apicius.config import configure_logging
from apicius.errors import ApiciusError
from apicius.markdown import change_caption
from ui.feedback import show_error
from ui.styles import load_global_styles
from utils.state import ROUTE_PAGES, follow_pending_route, get_app_state, go_to, require_user, selected_recipe_id

logger = logging.getLogger(__name__)


def page_header(title: str, subtitle: Optional[str] = None, right: Optional[Callable[[], None]] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
        right: Optional callable that renders right-side content (e.g., buttons)
    """
    def _title() -> None:
        st.markdown('<div class="apicius-page-header">', unsafe_allow_html=True)
        st.markdown(f"# {title}")
        if subtitle:
            st.markdown(f'<div class="subtitle">{subtitle}</div>', unsafe_allow_html=True)
        st.markdown('</div>', unsafe_allow_html=True)

    if right is None:
        _title()
        return

    col_title, col_right = st.columns([3, 1])
    with col_title:
        _title()
    with col_right:
        right()


def _render_recipe_list(app: AppState) -> None:
    recipe_list = app.recipe_list
    if recipe_list.error:
        show_error(recipe_list.error)
        if st.button("Retry", key="sidebar_retry_recipes"):
            recipe_list.refresh()
            st.rerun()
        return

    if not recipe_list.recipes:
        st.caption("No recipes yet. Import one to get started.")
        return

    current = selected_recipe_id()
    for recipe in recipe_list.recipes:
        col_open, col_delete = st.columns([5, 1])
        with col_open:
            label = f"**{recipe.title}**" if recipe.id == current else recipe.title
            if st.button(label, key=f"sidebar_open_{recipe.id}", use_container_width=True):
                go_to(routes.recipe_route(recipe.id))
            st.markdown(
                f'<div class="apicius-recipe-caption">{change_caption(recipe)}</div>',
                unsafe_allow_html=True,
            )
        with col_delete:
            if st.button("🗑️", key=f"sidebar_delete_{recipe.id}", help="Delete recipe"):
                try:
                    deleted = app.delete_recipe(recipe.id)
                except ApiciusError as e:
                    show_error(e.message)
                    deleted = False
                if not deleted and app.recipe_view.error:
                    show_error(app.recipe_view.error)
                follow_pending_route(app)
                if deleted:
                    st.rerun()


def _render_account_menu(app: AppState) -> None:
    prefs = app.session.preferences
    user = app.session.user
    name = (prefs.display_name if prefs else None) or (user.email if user else None) or "Account"

    with st.popover(f"👤 {name}", use_container_width=True):
        if prefs and prefs.avatar_url:
            st.image(prefs.avatar_url, width=64)
        if user and user.email:
            st.caption(user.email)

        usage = app.usage()
        st.markdown("**AI usage**")
        st.markdown(
            f"{usage.total_calls} calls · {usage.total_tokens:,} tokens "
            f"({usage.prompt_tokens:,} prompt / {usage.completion_tokens:,} completion)"
        )

        if st.button("⚙️ Settings", key="sidebar_settings", use_container_width=True):
            st.switch_page(ROUTE_PAGES[routes.SETTINGS])

        if st.button("Sign out", key="sidebar_sign_out", use_container_width=True):
            try:
                app.session.sign_out()
            except ApiciusError as e:
                logger.error("Sign-out failed: %s", e.message)
                show_error(e.message)
            else:
                follow_pending_route(app)
                st.rerun()


def render_sidebar(app: AppState) -> None:
    """
    Render the sidebar for a signed-in user.

    Args:
        app: This browser session's AppState
    """
    with st.sidebar:
        st.markdown("### 🍲 **Apicius**")
        if st.button("📥 Import recipe", key="sidebar_import", use_container_width=True, type="primary"):
            st.switch_page(ROUTE_PAGES[routes.IMPORT])

        st.divider()
        st.markdown("**Your recipes**")
        _render_recipe_list(app)

        st.divider()
        _render_account_menu(app)


def start_page(
    title: str,
    icon: str = "🍲",
    public: bool = False,
    route: Optional[str] = None,
) -> AppState:
    """
    Common page setup: logging, page config, session, styles and sidebar.

    Must be called before any other Streamlit command on the page.

    Args:
        title: Browser tab title
        icon: Browser tab icon
        public: Page is reachable without signing in (login, reset, beta)
        route: Route this page renders; the import flow is attached only on IMPORT

    Returns:
        This browser session's AppState
    """
    configure_logging()
    st.set_page_config(page_title=f"{title} · Apicius", page_icon=icon, layout="wide")

    app = get_app_state()
    app.enter_page(route)
    if public:
        follow_pending_route(app)
    else:
        require_user(app)

    load_global_styles(app.session.is_dark)
    if app.session.is_authenticated:
        render_sidebar(app)
    return app
