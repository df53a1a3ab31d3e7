"""
Authentication API endpoints.
"""
from fastapi import APIRouter, Depends, status

from ..dependencies import get_auth_service, get_current_identity
from ..schemas.auth_schemas import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    UserSummary,
    VerifyResponse,
)
from ...application.services.auth_service import AuthService
from ...domain.entities.user import Identity

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate and return a bearer token.

    Tokens are valid for seven days by default.
    """
    result = await auth_service.login(request.username, request.password)
    return AuthResponse(token=result.token, user=UserSummary.from_identity(result.identity))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "User exists or weak password"},
    },
)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register a new user account and log it in."""
    result = await auth_service.register(request.username, request.password)
    return AuthResponse(token=result.token, user=UserSummary.from_identity(result.identity))


@router.get(
    "/verify",
    response_model=VerifyResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
    },
)
async def verify(identity: Identity = Depends(get_current_identity)):
    """Validate the bearer token and return the current user."""
    return VerifyResponse(user=UserSummary.from_identity(identity))
