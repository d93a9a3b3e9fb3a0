"""
Admin authentication API routes for SML Cars Backend.
"""

from typing import Dict, Any
from fastapi import APIRouter, Depends
from models.auth import LoginRequest, LoginResponse, ProfileResponse, ErrorResponse
from services.auth_service import AuthService
from core.dependencies import get_auth_service, get_current_admin
from core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing username or password"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"}
    },
    summary="Admin Login",
    description="Exchange the admin credentials for a signed 24-hour token."
)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Authenticate the admin.

    - **username**: Admin username
    - **password**: Admin password

    Returns the token to send as `Authorization: Bearer <token>`.
    """
    result = auth_service.login(request.username, request.password)
    return LoginResponse(**result)


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"}},
    summary="Current Admin",
    description="Return the claims of the presented token."
)
async def profile(current_user: Dict[str, Any] = Depends(get_current_admin)):
    return ProfileResponse(user=current_user)
