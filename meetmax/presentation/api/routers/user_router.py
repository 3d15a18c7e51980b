"""API router for user management. Every route sits behind the bearer gate."""

from fastapi import APIRouter, Depends

from meetmax.core.dependencies import get_user_service
from meetmax.presentation.api.dependencies import require_authenticated_email
from meetmax.presentation.api.schemas.auth import MessageResponse
from meetmax.presentation.api.schemas.user_schemas import (
    UserDeleteRequest,
    UserListResponse,
    UserProfileResponse,
    UserResponse,
    UserUpdateRequest,
)
from meetmax.services.user_service import UserService

router = APIRouter(
    prefix="/api/user",
    tags=["users"],
    dependencies=[Depends(require_authenticated_email)],
)


@router.get("/me", response_model=UserProfileResponse)
async def get_profile(
    email: str = Depends(require_authenticated_email),
    user_service: UserService = Depends(get_user_service),
) -> UserProfileResponse:
    """Get the authenticated user's profile."""
    user = user_service.get_profile(email)
    return UserProfileResponse(message="User retrieved", data=UserResponse.from_user(user))


@router.get("/all-users", response_model=UserListResponse)
async def list_users(
    user_service: UserService = Depends(get_user_service),
) -> UserListResponse:
    """List every user without password hashes."""
    users = user_service.list_users()
    return UserListResponse(
        message="Users retrieved",
        data=[UserResponse.from_user(user) for user in users],
    )


@router.patch("/update-user", response_model=MessageResponse)
async def update_user(
    request: UserUpdateRequest,
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Update a verified user's profile and optionally their password."""
    user = user_service.update_user(
        user_id=request.id,
        email=request.email,
        firstname=request.firstname,
        lastname=request.lastname,
        date_of_birth=request.date_of_birth,
        gender=request.gender,
        password=request.password,
    )
    return MessageResponse(
        message=f"User {user.full_name} with email: {user.email} updated",
    )


@router.delete("/delete-user", response_model=MessageResponse)
async def delete_user(
    request: UserDeleteRequest,
    user_service: UserService = Depends(get_user_service),
) -> MessageResponse:
    """Delete a user by ID."""
    user = user_service.delete_user(request.id)
    return MessageResponse(
        message=f"User {user.full_name} with email: {user.email} deleted",
    )
