"""
ASGI entry point for the Fintrack ledger API.

Run with any ASGI server, for example:

    uvicorn app.main:app

Configuration comes from the environment (or a .env file):
AUTH_JWT_SECRET is required; APP_STORAGE_BACKEND selects the store.
"""

from fintrack.api import create_api
from fintrack.orchestrator import create_app_components


app = create_api(create_app_components())
