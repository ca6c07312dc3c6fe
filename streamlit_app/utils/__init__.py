"""
Utility modules for the Streamlit frontend.

This package contains:
- state: Per-browser AppState, page routing and upload conversion helpers
"""
