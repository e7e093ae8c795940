"""
Authentication API Routes
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ...config.settings import settings
from ...models.base import get_db
from ...schemas.auth import (
    SignupRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    AuthResponse,
    StatusResponse
)
from ...services.auth_service import AuthService, RESET_REQUESTED
from ...middleware.auth import auth_service as middleware_auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Share the instance the auth dependency verifies tokens with
auth_service: AuthService = middleware_auth_service


def _set_token_cookie(response: Response, token: str):
    response.set_cookie(
        key="token",
        value=token,
        httponly=True,
        secure=settings.ENVIRONMENT == "production",
        samesite="lax",
        max_age=settings.JWT_EXPIRATION_HOURS * 3600,
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    request: SignupRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """Create an account and sign the user in"""
    success, data, error = await auth_service.signup(db, request)
    if not success:
        status = 409 if "already exists" in (error or "") else 500
        raise HTTPException(status_code=status, detail=error)

    _set_token_cookie(response, data["token"])
    return AuthResponse(message="Account created", token=data["token"], user=data["user"])


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    success, data, error = await auth_service.authenticate_user(db, request.email, request.password)
    if not success:
        raise HTTPException(status_code=401, detail=error)

    _set_token_cookie(response, data["token"])
    return AuthResponse(message="Logged in", token=data["token"], user=data["user"])


@router.post("/logout", response_model=StatusResponse)
async def logout(response: Response):
    response.delete_cookie("token")
    return StatusResponse(message="Logged out")


@router.post("/forgot-password", response_model=StatusResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Send a password reset link

    Answers the same way whether or not the account exists.
    """
    await auth_service.request_password_reset(db, request.email)
    return StatusResponse(message=RESET_REQUESTED)


@router.post("/reset-password", response_model=StatusResponse)
async def reset_password(
    request: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db)
):
    success, _, error = await auth_service.reset_password(db, request.token, request.new_password)
    if not success:
        raise HTTPException(status_code=400, detail=error)
    return StatusResponse(message="Your password has been reset. You can now log in.")
