"""
Authentication dependencies for FastAPI endpoints.
"""

import re
from typing import Dict, Any
from fastapi import Depends, Request
from core.exceptions import AuthenticationException
from core.logging import get_logger
from services.auth_service import AuthService

logger = get_logger(__name__)

BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


def get_auth_service() -> AuthService:
    """Dependency to get auth service instance."""
    return AuthService()


async def get_current_admin(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """
    Dependency guarding admin-only endpoints.

    Reads the ``Authorization: Bearer <token>`` header, verifies the token and
    stores its claims on ``request.state.user``. Runs before the endpoint body,
    so a rejected request never reaches the document or object store.

    Raises:
        AuthenticationException: If the header is missing or the token is
            invalid or expired
    """
    request_id = getattr(request.state, "request_id", "unknown")

    auth_header = request.headers.get("Authorization")
    if not auth_header:
        logger.warning(f"[{request_id}] Unauthorized: missing Authorization header for path: {request.url.path}")
        raise AuthenticationException("No authorization header", error_code="UNAUTHORIZED")

    token = BEARER_PREFIX.sub("", auth_header).strip()
    if not token:
        raise AuthenticationException("Invalid token", error_code="INVALID_TOKEN")

    payload = auth_service.verify_token(token)
    request.state.user = payload
    logger.info(f"[{request_id}] Authenticated admin: {payload.get('username')}")
    return payload
