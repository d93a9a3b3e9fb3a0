"""
Admin authentication service for SML Cars Backend.

A single admin account is configured through ``ADMIN_USERNAME`` and
``ADMIN_PASSWORD``. Successful logins receive an HS256 JWT that protected
routes re-verify on every call; the server keeps no session state.
"""

import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from core.config import Settings, get_settings
from core.exceptions import AuthenticationException
from core.logging import LoggerMixin

ADMIN_USER_ID = "1"
ADMIN_ROLE = "admin"


class AuthService(LoggerMixin):
    """Issues and verifies admin access tokens."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def _secret(self) -> str:
        if not self.settings.jwt_secret:
            self.logger.error("JWT_SECRET is not configured")
            raise AuthenticationException(
                "Authentication service not properly configured",
                error_code="CONFIGURATION_ERROR"
            )
        return self.settings.jwt_secret

    def check_credentials(self, username: str, password: str) -> bool:
        """Compare against the configured admin pair in constant time."""
        expected_password = self.settings.admin_password
        if not expected_password:
            self.logger.warning("ADMIN_PASSWORD is not configured; rejecting login")
            return False

        username_ok = hmac.compare_digest(
            (username or "").encode("utf-8"), self.settings.admin_username.encode("utf-8")
        )
        password_ok = hmac.compare_digest(
            (password or "").encode("utf-8"), expected_password.encode("utf-8")
        )
        return username_ok and password_ok

    def issue_token(self, username: str, issued_at: Optional[datetime] = None) -> str:
        """
        Sign a token for the admin.

        Args:
            username: Username embedded in the token
            issued_at: Issue time, defaults to now

        Returns:
            Encoded JWT valid for ``JWT_EXPIRES_HOURS``
        """
        now = issued_at or datetime.now(timezone.utc)
        claims = {
            "userId": ADMIN_USER_ID,
            "username": username,
            "role": ADMIN_ROLE,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(hours=self.settings.jwt_expires_hours)).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self.settings.jwt_algorithm)

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        Exchange the admin credentials for a token.

        Raises:
            AuthenticationException: If the pair does not match
        """
        self.logger.info(f"Login attempt for username: {username}")

        if not self.check_credentials(username, password):
            self.logger.warning(f"Invalid credentials for username: {username}")
            raise AuthenticationException("Invalid credentials", error_code="INVALID_CREDENTIALS")

        token = self.issue_token(self.settings.admin_username)
        self.logger.info(f"Admin login successful: {username}")

        return {
            "token": token,
            "user": {"username": self.settings.admin_username}
        }

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry of a token.

        Returns:
            The token claims

        Raises:
            AuthenticationException: ``TOKEN_EXPIRED`` or ``INVALID_TOKEN``
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.settings.jwt_algorithm],
                options={"require": ["exp", "iat"]},
            )
        except ExpiredSignatureError:
            self.logger.warning("Token expired")
            raise AuthenticationException("Token expired", error_code="TOKEN_EXPIRED")
        except InvalidTokenError as e:
            self.logger.warning(f"Invalid token: {str(e)}")
            raise AuthenticationException("Invalid token", error_code="INVALID_TOKEN")
