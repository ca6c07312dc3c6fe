"""
Apicius core package.

This package contains everything that is independent of the Streamlit UI:
- api_client: Backend API communication (tagged Ok | Err results)
- recipe_list: Process-wide recipe list cache
- persistence: Create/update/delete routing for recipes
- import_flow: Import screen state machine
- session: Auth/session state and user preferences
- providers: Auth, storage and usage provider interfaces + Supabase implementation
"""

__version__ = "0.1.0"
