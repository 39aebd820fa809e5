"""Authentication schemas."""

from pydantic import ConfigDict, EmailStr, Field, field_validator

from mareye.schemas.base import CamelModel


class UserRegister(CamelModel):
    """User registration request."""

    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    first_name: str = Field("", max_length=255)
    last_name: str = Field("", max_length=255)
    dob: str = Field("", max_length=32)
    avatar: str = Field("", max_length=1024)


class UserLogin(CamelModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(CamelModel):
    """User information returned after authentication."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    dob: str = ""
    avatar: str = ""
    is_email_verified: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: int | str) -> str:
        return str(v)


class AuthResponse(CamelModel):
    """Authentication response; the token itself travels in the cookie."""

    message: str
    success: bool = True
    user: UserResponse


class MessageResponse(CamelModel):
    """Plain message response."""

    message: str
    success: bool = True
