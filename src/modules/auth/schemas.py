"""Pydantic schemas for auth module."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    """Schema for user registration."""

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    phone: str | None = None


class UserLogin(BaseModel):
    """Schema for user login."""

    model_config = ConfigDict(populate_by_name=True)

    username_or_email: str = Field(..., alias="usernameOrEmail")
    password: str


class UserResponse(BaseModel):
    """Schema for user response (no sensitive data)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    email: EmailStr
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    phone: str | None = None
    roles: list[str] = []


class LoginResponse(BaseModel):
    """Token plus the profile of the user that logged in."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(alias="accessToken")
    token_type: str = Field("bearer", alias="tokenType")
    user: UserResponse
