"""Authentication service for Firebase ID token verification."""

import time
from dataclasses import dataclass
from typing import Any, Optional

import jwt
from jwt import PyJWKClient

from portal.exceptions import InvalidTokenError, MissingTokenError
from portal.utils.logger import get_logger

log = get_logger(__name__)

# Firebase caps uids at 128 characters
MAX_UID_LENGTH = 128


@dataclass
class AuthenticatedUser:
    """Claims of a verified Firebase ID token."""

    uid: str
    admin: bool = False
    email: Optional[str] = None


def bearer_token(authorization_header: Optional[str]) -> str:
    """Pull the token out of an `Authorization: Bearer <token>` header."""
    if not authorization_header:
        raise MissingTokenError()

    scheme, _, token = authorization_header.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token or " " in token:
        raise InvalidTokenError("Invalid authorization header format")
    return token


def user_from_claims(claims: dict[str, Any]) -> AuthenticatedUser:
    """Map verified Firebase claims onto the caller identity."""
    uid = claims.get("sub")
    if not isinstance(uid, str) or not uid or len(uid) > MAX_UID_LENGTH:
        raise InvalidTokenError("Token missing user identifier")

    auth_time = claims.get("auth_time")
    if auth_time is not None and auth_time > time.time():
        raise InvalidTokenError("Token authentication time is in the future")

    # `admin` is a custom claim set through the Admin SDK; anything but true is no
    return AuthenticatedUser(uid=uid, admin=claims.get("admin") is True, email=claims.get("email"))


class AuthService:
    """Verifies Firebase ID tokens against Google's published signing keys."""

    JWKS_URL = (
        "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
    )
    ISSUER_TEMPLATE = "https://securetoken.google.com/{project_id}"

    def __init__(self, project_id: str) -> None:
        self._project_id = project_id
        self._jwks_client: Optional[PyJWKClient] = None

    def _get_jwks_client(self) -> PyJWKClient:
        # PyJWKClient caches the key set between calls
        if self._jwks_client is None:
            self._jwks_client = PyJWKClient(self.JWKS_URL)
        return self._jwks_client

    def _decode(self, token: str) -> dict[str, Any]:
        signing_key = self._get_jwks_client().get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=self._project_id,
            issuer=self.ISSUER_TEMPLATE.format(project_id=self._project_id),
            options={"require": ["exp", "iat", "sub"]},
        )

    async def verify_token(self, authorization_header: Optional[str]) -> AuthenticatedUser:
        """
        Verify a Firebase ID token and return the caller it identifies.

        Fails closed: every problem with the header, the token or the key
        service ends in a 401.

        Raises:
            MissingTokenError: No Authorization header
            InvalidTokenError: Malformed header, bad or expired token, wrong
                project, or signing keys unavailable
        """
        token = bearer_token(authorization_header)

        if not self._project_id:
            log.critical(
                "auth service misconfigured",
                reason="firebase_project_id is not set; every token will be rejected",
            )
            raise InvalidTokenError("Token verification failed")

        try:
            claims = self._decode(token)
        except jwt.ExpiredSignatureError:
            log.warning("token expired")
            raise InvalidTokenError("Token has expired")
        except jwt.PyJWKClientError as e:
            log.error("signing keys unavailable", error=str(e), error_type=type(e).__name__)
            raise InvalidTokenError("Token verification failed")
        except jwt.InvalidTokenError as e:
            log.warning("token rejected", error=str(e))
            raise InvalidTokenError(f"Token validation failed: {e}")
        except Exception as e:
            log.error("token verification failed", error=str(e), error_type=type(e).__name__)
            raise InvalidTokenError("Token verification failed")

        user = user_from_claims(claims)
        log.debug("token verified", uid=user.uid, admin=user.admin)
        return user
