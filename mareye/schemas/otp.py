"""OTP request schemas."""

from typing import Any

from pydantic import EmailStr, Field

from mareye.schemas.base import CamelModel
from mareye.services.otp_store import OTPPurpose


class SendOTPRequest(CamelModel):
    """Request a verification code."""

    email: EmailStr = Field(..., max_length=255)
    type: OTPPurpose = OTPPurpose.REGISTRATION
    # Registration details, held until the code is verified
    user_data: dict[str, Any] | None = None


class VerifyOTPRequest(CamelModel):
    """Submit a verification code."""

    email: EmailStr = Field(..., max_length=255)
    otp: str = Field(..., min_length=1, max_length=16)
    type: str = OTPPurpose.REGISTRATION.value
