"""Profile schemas."""

from datetime import date

from mareye.schemas.base import CamelModel


class SubscriptionInfo(CamelModel):
    plan: str
    status: str


class TokenUsage(CamelModel):
    daily_limit: int
    used_today: int
    last_reset_date: date
    total_used: int


class ProfileUser(CamelModel):
    first_name: str
    last_name: str
    email: str
    dob: str
    avatar: str
    subscription: SubscriptionInfo
    tokens: TokenUsage


class ProfileResponse(CamelModel):
    """Profile of the authenticated user."""

    success: bool = True
    user: ProfileUser
