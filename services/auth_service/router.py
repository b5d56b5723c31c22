from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import LOGIN_RATE_LIMIT, Principal, get_authenticated_user, limiter

from .schemas import AccountResponse, ChangePasswordRequest, LoginRequest, TokenResponse
from .service import AuthService

router = APIRouter(tags=["Authentication"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "auth", "status": "running"}


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate and receive a JWT access token",
)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,                          # slowapi needs this to check IP/Headers
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    return await service.login(payload)


@router.get(
    "/me",
    response_model=AccountResponse,
    summary="Get the current authenticated account",
)
async def get_me(
    principal: Principal = Depends(get_authenticated_user),
    service: AuthService = Depends(get_auth_service),
):
    return await service.get_account(principal)


@router.post(
    "/change-password",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace the caller's password and clear the reset flag",
)
async def change_password(
    payload: ChangePasswordRequest,
    principal: Principal = Depends(get_authenticated_user),
    service: AuthService = Depends(get_auth_service),
):
    await service.change_password(principal, payload)
