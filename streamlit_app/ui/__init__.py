"""
UI Styling and Layout Module.

This module provides global CSS styling, page layout helpers and feedback
components for the Apicius Streamlit app.
"""

from ui.feedback import show_error, show_success, working_spinner
from ui.layout import page_header, render_sidebar, start_page
from ui.styles import load_global_styles

__all__ = [
    "load_global_styles",
    "page_header",
    "render_sidebar",
    "start_page",
    "show_error",
    "show_success",
    "working_spinner",
]
