"""Identity verification package."""

from fintrack.services.identity.verifier import (
    IdentityVerifier,
    JWTIdentityVerifier,
    extract_bearer_token,
)

__all__ = [
    "IdentityVerifier",
    "JWTIdentityVerifier",
    "extract_bearer_token",
]
