"""
Access token verification against the identity provider.

Users sign in with OAuth through Supabase Auth; the browser sends the
resulting access token as a bearer token. When the project's JWT secret
is configured the token is verified locally, otherwise the provider's
``/auth/v1/user`` endpoint is asked who the token belongs to.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

import httpx
from jose import JWTError, jwt
from pydantic import ValidationError

from clarity.core.config import settings
from clarity.schemas.user import CurrentUser

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """The token is malformed, expired, or was rejected by the provider."""


class IdentityProviderUnavailable(Exception):
    """The provider could not be reached or answered with a server error."""


class IdentityVerifier:
    """Turns a bearer token into a CurrentUser."""

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        jwt_secret: Optional[str] = None,
        anon_key: Optional[str] = None,
        algorithm: str = "HS256",
        audience: str = "authenticated",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.supabase_url = supabase_url.rstrip("/") if supabase_url else None
        self.jwt_secret = jwt_secret
        self.anon_key = anon_key
        self.algorithm = algorithm
        self.audience = audience
        self.timeout = timeout
        self.transport = transport

    async def verify(self, token: str) -> CurrentUser:
        if not token:
            raise InvalidTokenError("Empty token")
        if self.jwt_secret:
            return self.decode_locally(token)
        return await self.fetch_user(token)

    def decode_locally(self, token: str) -> CurrentUser:
        try:
            claims = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.algorithm],
                audience=self.audience,
            )
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        return self._to_user(
            {
                "id": claims.get("sub"),
                "email": claims.get("email"),
                "role": claims.get("role"),
                "user_metadata": claims.get("user_metadata"),
            }
        )

    async def fetch_user(self, token: str) -> CurrentUser:
        if not self.supabase_url:
            raise IdentityProviderUnavailable("SUPABASE_URL is not configured")

        headers = {"Authorization": f"Bearer {token}"}
        if self.anon_key:
            headers["apikey"] = self.anon_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(f"{self.supabase_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Identity provider request failed: %s", exc)
            raise IdentityProviderUnavailable(str(exc)) from exc

        if resp.status_code in (400, 401, 403, 404):
            raise InvalidTokenError(f"Provider rejected token ({resp.status_code})")
        if resp.status_code >= 400:
            logger.warning("Identity provider answered %s", resp.status_code)
            raise IdentityProviderUnavailable(f"Provider error ({resp.status_code})")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise IdentityProviderUnavailable("Provider returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise IdentityProviderUnavailable("Provider returned an unexpected user payload")
        return self._to_user(payload)

    @staticmethod
    def _to_user(payload: Dict[str, Any]) -> CurrentUser:
        if not payload.get("id"):
            raise InvalidTokenError("Token has no subject")
        try:
            return CurrentUser(
                id=payload["id"],
                email=payload.get("email"),
                role=payload.get("role"),
                user_metadata=payload.get("user_metadata") or {},
            )
        except ValidationError as exc:
            raise InvalidTokenError("Token subject is not a user id") from exc


@lru_cache
def get_identity_verifier() -> IdentityVerifier:
    """Process-wide verifier built from settings."""
    return IdentityVerifier(
        supabase_url=settings.SUPABASE_URL,
        jwt_secret=settings.SUPABASE_JWT_SECRET,
        anon_key=settings.SUPABASE_ANON_KEY,
        algorithm=settings.JWT_ALGORITHM,
        audience=settings.JWT_AUDIENCE,
        timeout=settings.IDENTITY_TIMEOUT_SECONDS,
    )
