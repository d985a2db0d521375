"""HTTP API package."""

from fintrack.api.app import create_api, current_identity, error_response

__all__ = ["create_api", "current_identity", "error_response"]
