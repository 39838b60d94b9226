"""
FastAPI dependencies for the application.
"""

import logging

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from clarity.core.identity import (
    IdentityProviderUnavailable,
    IdentityVerifier,
    InvalidTokenError,
    get_identity_verifier,
)
from clarity.db.session import get_db
from clarity.errors import AppError, Unauthorized
from clarity.schemas.user import CurrentUser

logger = logging.getLogger(__name__)

# Security scheme for bearer tokens; we raise our own 401 shape
security = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_current_user", "security"]


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> CurrentUser:
    """
    Get the current authenticated user from the bearer token.

    Raises:
        401: If the header is missing or the token is invalid/expired
        503: If the identity provider cannot be reached
    """
    if credentials is None or not credentials.credentials:
        logger.info("Auth failed: missing or invalid authorization header")
        raise Unauthorized("Missing or invalid authorization header")

    try:
        return await verifier.verify(credentials.credentials)
    except InvalidTokenError as exc:
        logger.info("Auth failed: %s", exc)
        raise Unauthorized("Invalid or expired token") from exc
    except IdentityProviderUnavailable as exc:
        raise AppError(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "IDENTITY_PROVIDER_UNAVAILABLE",
            "Authentication service unavailable, please retry",
        ) from exc
