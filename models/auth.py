"""
Pydantic models for admin authentication.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Request model for admin login."""
    username: str
    password: str


class UserResponse(BaseModel):
    """Public view of the logged-in admin."""
    username: str


class LoginResponse(BaseModel):
    """Response model for admin login."""
    success: bool = True
    token: str
    user: UserResponse


class ProfileResponse(BaseModel):
    """Claims of the token presented by the caller."""
    success: bool = True
    user: Dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error envelope."""
    success: bool = False
    error: str
    code: Optional[str] = None
    details: Optional[dict] = None
    request_id: Optional[str] = None
