"""Pydantic schemas for user API endpoints."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from meetmax.domain.models.user import User

MAX_USER_ID = 2**63 - 1


class UserResponse(BaseModel):
    """Response schema for user data. The password hash is never included."""

    id: int
    email: str
    firstname: str
    lastname: str
    date_of_birth: date
    gender: str
    is_verified: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            firstname=user.firstname,
            lastname=user.lastname,
            date_of_birth=user.date_of_birth,
            gender=user.gender.value,
            is_verified=user.is_verified,
            created_at=user.created_at,
        )


class UserListResponse(BaseModel):
    success: bool = True
    message: str
    data: List[UserResponse]


class UserProfileResponse(BaseModel):
    success: bool = True
    message: str
    data: UserResponse


class UserUpdateRequest(BaseModel):
    """Request schema for profile updates; password is optional."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = Field(default=None, ge=1, le=MAX_USER_ID)
    email: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    password: Optional[str] = None
    date_of_birth: Optional[str] = Field(default=None, alias="dateOfBirth")
    gender: Optional[str] = None


class UserDeleteRequest(BaseModel):
    id: Optional[int] = Field(default=None, ge=1, le=MAX_USER_ID)
