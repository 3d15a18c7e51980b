"""API router for registration, verification, password reset and sessions."""

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ....application.services.account_service import AccountService
from ....core.config import Settings
from ....core.dependencies import get_account_service, get_settings
from ...api.dependencies import enforce_login_rate_limit
from ...api.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    NewPasswordRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    VerifyEmailRequest,
)
from ...api.schemas.user_schemas import UserResponse

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse)
async def register(
    payload: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    user = await service.register(
        email=payload.email,
        firstname=payload.firstname,
        lastname=payload.lastname,
        password=payload.password,
        date_of_birth=payload.date_of_birth,
        gender=payload.gender,
    )
    return MessageResponse(message=f"A verification email was sent to {user.email}")


@router.get("/verify/{token}", response_model=MessageResponse)
async def verify_from_link(
    token: str,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    return await _verify(service, token)


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    payload: VerifyEmailRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    return await _verify(service, payload.token)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    user = await service.forgot_password(payload.email)
    return MessageResponse(message=f"A password reset email was sent to {user.email}")


@router.patch("/new-password/{token}", response_model=MessageResponse)
async def set_new_password(
    token: str,
    payload: NewPasswordRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    return await _set_password(service, token, payload.password)


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    return await _set_password(service, payload.token, payload.new_password)


@router.post(
    "/login",
    response_model=TokenResponse,
    dependencies=[Depends(enforce_login_rate_limit)],
)
async def login(
    payload: LoginRequest,
    response: Response,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    result = await service.login(payload.email, payload.password)
    _set_refresh_cookie(response, settings, result.refresh_token)
    return TokenResponse(
        message="User logged in",
        access_token=result.access_token,
        user=UserResponse.from_user(result.user),
    )


@router.get("/refresh", response_model=TokenResponse)
async def refresh(
    request: Request,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    result = await service.refresh(request.cookies.get(settings.refresh_cookie_name))
    return TokenResponse(
        message="New access token generated",
        access_token=result.access_token,
        user=UserResponse.from_user(result.user),
    )


@router.api_route("/logout", methods=["GET", "POST"], response_model=None)
async def logout(
    request: Request,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> Response:
    if not service.logout(request.cookies.get(settings.refresh_cookie_name)):
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    response = JSONResponse({"success": True, "message": "Cookie cleared"})
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path=settings.refresh_cookie_path,
        secure=True,
        httponly=True,
        samesite="none",
    )
    return response


async def _verify(service: AccountService, token: str) -> MessageResponse:
    user = await service.verify_email(token)
    return MessageResponse(
        message=f"User {user.full_name} with email: {user.email} verified",
    )


async def _set_password(service: AccountService, token: str, password: str) -> MessageResponse:
    user = await service.set_new_password(token, password)
    return MessageResponse(
        message=f"User {user.full_name} with email: {user.email} password changed",
    )


def _set_refresh_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        max_age=settings.refresh_cookie_max_age,
        path=settings.refresh_cookie_path,
        secure=True,
        httponly=True,
        samesite="none",
    )
