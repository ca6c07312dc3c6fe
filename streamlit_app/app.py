"""
Apicius - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point. It sets up logging, the
page configuration and the per-browser AppState, then sends the visitor on:
signed-in users go to the import screen, everyone else to the beta-access
landing page.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
Files in `pages/` starting with numbered prefixes (e.g., `01_📥_Import.py`) will appear
as pages in the sidebar navigation.
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import apicius
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import apicius.config  # noqa: F401

from apicius import routes
from ui.layout import start_page
from utils.state import go_to

app = start_page("Recipes", public=True)

if app.session.is_authenticated:
    go_to(routes.IMPORT)
else:
    go_to(routes.BETA_ACCESS)
