"""
Global CSS Styling for Apicius.

This module provides load_global_styles() to inject consistent styling
across all pages: typography, the recipe card, and the dark palette that is
applied whenever the signed-in user's resolved theme is dark.
"""

import streamlit as st

_BASE_CSS = """
<style>
    @import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;600;700&display=swap');

    html, body, [class*="css"] {
        font-family: 'Nunito', 'sans serif' !important;
    }

    h1, h2, h3, h4, h5, h6 {
        font-weight: 600 !important;
        letter-spacing: 0.02em !important;
    }

    .apicius-page-header .subtitle {
        color: #6b7280;
        margin-top: -0.75rem;
        margin-bottom: 1rem;
    }

    .apicius-recipe-caption {
        font-size: 0.8rem;
        color: #9ca3af;
    }

    /* Sidebar recipe list: left-aligned, compact buttons */
    section[data-testid="stSidebar"] .stButton button {
        justify-content: flex-start;
        text-align: left;
        padding: 0.25rem 0.5rem;
    }

    .block-container {
        max-width: 1000px;
    }
</style>
"""

_DARK_CSS = """
<style>
    .stApp, section[data-testid="stSidebar"] {
        background-color: #111827 !important;
        color: #e5e7eb !important;
    }

    .stApp h1, .stApp h2, .stApp h3, .stApp p, .stApp label, .stApp li {
        color: #e5e7eb !important;
    }

    .stApp textarea, .stApp input {
        background-color: #1f2937 !important;
        color: #f9fafb !important;
    }
</style>
"""


def load_global_styles(is_dark: bool = False) -> None:
    """
    Inject global CSS styles for the Apicius app.

    Args:
        is_dark: Add the dark palette on top of the base styles
    """
    st.markdown(_BASE_CSS, unsafe_allow_html=True)
    if is_dark:
        st.markdown(_DARK_CSS, unsafe_allow_html=True)
