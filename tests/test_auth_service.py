"""
Admin login and token verification.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from core.config import Settings
from core.exceptions import AuthenticationException
from services.auth_service import AuthService


class TestLogin:

    def setup_method(self):
        self.service = AuthService()

    def test_admin_credentials_issue_verifiable_token(self):
        result = self.service.login("admin", "admin123")

        claims = self.service.verify_token(result["token"])
        assert result["user"] == {"username": "admin"}
        assert claims["username"] == "admin"
        assert claims["role"] == "admin"
        assert claims["userId"] == "1"
        assert claims["exp"] - claims["iat"] == 24 * 3600

    @pytest.mark.parametrize("username,password", [
        ("admin", "wrong"),
        ("root", "admin123"),
        ("", ""),
        ("ADMIN", "admin123"),
    ])
    def test_any_other_pair_fails(self, username, password):
        with pytest.raises(AuthenticationException) as exc_info:
            self.service.login(username, password)

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid credentials"

    def test_login_fails_when_no_password_configured(self):
        settings = Settings()
        settings.admin_password = None
        service = AuthService(settings=settings)

        with pytest.raises(AuthenticationException):
            service.login("admin", "")


class TestVerifyToken:

    def setup_method(self):
        self.service = AuthService()

    def test_token_still_valid_just_before_expiry(self):
        issued_at = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
        token = self.service.issue_token("admin", issued_at=issued_at)

        assert self.service.verify_token(token)["username"] == "admin"

    def test_token_rejected_after_expiry(self):
        issued_at = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
        token = self.service.issue_token("admin", issued_at=issued_at)

        with pytest.raises(AuthenticationException) as exc_info:
            self.service.verify_token(token)

        assert exc_info.value.error_code == "TOKEN_EXPIRED"

    def test_token_signed_with_other_secret_is_invalid(self):
        now = datetime.now(timezone.utc)
        forged = jwt.encode(
            {"username": "admin", "iat": int(now.timestamp()), "exp": int((now + timedelta(hours=1)).timestamp())},
            "not-the-secret",
            algorithm="HS256"
        )

        with pytest.raises(AuthenticationException) as exc_info:
            self.service.verify_token(forged)

        assert exc_info.value.error_code == "INVALID_TOKEN"

    def test_token_without_expiry_is_invalid(self, settings):
        token = jwt.encode({"username": "admin", "iat": 0}, settings.jwt_secret, algorithm="HS256")

        with pytest.raises(AuthenticationException) as exc_info:
            self.service.verify_token(token)

        assert exc_info.value.error_code == "INVALID_TOKEN"

    def test_garbage_is_invalid(self):
        with pytest.raises(AuthenticationException) as exc_info:
            self.service.verify_token("not.a.token")

        assert exc_info.value.error_code == "INVALID_TOKEN"
