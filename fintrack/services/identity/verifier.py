"""
Identity Verification

DESIGN DECISION: This core only VERIFIES credentials; issuing them
(login, registration, token signing) belongs to an external service
that shares the signing secret.

The verified owner id is the only tenancy boundary in the system, so
every ledger operation starts here.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from fintrack.config import AuthSettings, get_settings
from fintrack.errors import InvalidCredentialError, UnauthenticatedError
from fintrack.models.transaction import Identity


BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    Returns None when no header was sent. Any other scheme, or a header
    with no token, is a malformed credential.
    """
    if authorization is None or not authorization.strip():
        return None

    parts = authorization.strip().split(None, 1)
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME or not parts[1].strip():
        raise InvalidCredentialError("Authorization header must be 'Bearer <token>'")
    return parts[1].strip()


class IdentityVerifier(ABC):
    """Contract: turn an opaque credential into a verified Identity."""

    @abstractmethod
    def verify(self, token: Optional[str]) -> Identity:
        """
        Verify a credential.

        Raises:
            UnauthenticatedError: No token supplied
            InvalidCredentialError: Token malformed, expired or badly signed
        """
        pass


class JWTIdentityVerifier(IdentityVerifier):
    """
    Verifies signed JWTs and reads the owner id from a claim.

    The configured claim (``id`` by default) is tried first, then the
    registered ``sub`` claim.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        owner_claim: Optional[str] = None,
        settings: Optional[AuthSettings] = None,
    ):
        if secret is None:
            settings = settings or get_settings().auth
        self._secret = secret if secret is not None else settings.jwt_secret
        self._algorithm = algorithm or (settings.jwt_algorithm if settings else "HS256")
        self._owner_claim = owner_claim or (settings.owner_claim if settings else "id")

    def _owner_from_claims(self, claims: dict[str, Any]) -> str:
        for claim in (self._owner_claim, "sub"):
            value = claims.get(claim)
            if isinstance(value, bool) or value is None:
                continue
            if isinstance(value, (str, int)) and str(value).strip():
                return str(value).strip()
        raise InvalidCredentialError("Token carries no owner identity")

    def verify(self, token: Optional[str]) -> Identity:
        if token is None or not str(token).strip():
            raise UnauthenticatedError("No token provided")

        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise InvalidCredentialError("Token has expired")
        except JWTError as e:
            raise InvalidCredentialError(f"Invalid token: {e}")

        return Identity(owner_id=self._owner_from_claims(claims))
