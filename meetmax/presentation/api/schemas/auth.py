"""Pydantic schemas for the authentication endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .user_schemas import UserResponse


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterRequest(_Payload):
    email: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    password: Optional[str] = None
    date_of_birth: Optional[str] = Field(default=None, alias="dateOfBirth")
    gender: Optional[str] = None


class VerifyEmailRequest(_Payload):
    token: Optional[str] = None


class ForgotPasswordRequest(_Payload):
    email: Optional[str] = None


class NewPasswordRequest(_Payload):
    password: Optional[str] = None


class ResetPasswordRequest(_Payload):
    token: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")


class LoginRequest(_Payload):
    email: Optional[str] = None
    password: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class TokenResponse(BaseModel):
    """Access token plus the password-free user representation."""

    success: bool = True
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
