"""
Standardized feedback utilities for consistent error, success, and loading states.

Provides reusable components for displaying errors, confirmations, and loading
indicators across all pages in a consistent manner.
"""

from contextlib import contextmanager
from typing import List, Optional
import streamlit as st


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Display a standardized error message with optional hint.

    Multi-line messages (e.g. several broken password rules) are shown as a list.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
    """
    lines: List[str] = [line for line in message.splitlines() if line.strip()]
    if len(lines) > 1:
        st.error("\n".join(f"- {line}" for line in lines))
    else:
        st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_success(message: str) -> None:
    st.success(f"✅ {message}")


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Extracting recipe…"):
            # Do work here
            pass

    Args:
        label: Spinner label text (default: "Working…")
    """
    with st.spinner(label):
        yield
