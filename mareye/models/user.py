"""User model."""

from datetime import date

from sqlalchemy import Boolean, Column, Date, Integer, String

from mareye.database import Base
from mareye.models.enums import SubscriptionPlan, SubscriptionStatus
from mareye.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User account with profile, subscription and daily token usage."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(255), nullable=True)
    # Google-only accounts have no password
    password_hash = Column(String(255), nullable=True)
    first_name = Column(String(255), nullable=False, default="")
    last_name = Column(String(255), nullable=False, default="")
    dob = Column(String(32), nullable=False, default="")
    avatar = Column(String(1024), nullable=False, default="")
    google_id = Column(String(255), unique=True, nullable=True, index=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)

    subscription_plan = Column(String(20), nullable=False, default=SubscriptionPlan.BASIC.value)
    subscription_status = Column(
        String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value
    )

    tokens_daily_limit = Column(Integer, nullable=False, default=10)
    tokens_used_today = Column(Integer, nullable=False, default=0)
    tokens_last_reset = Column(Date, nullable=False, default=date.today)
    tokens_total_used = Column(Integer, nullable=False, default=0)

    @property
    def display_first_name(self) -> str:
        """First name, falling back to username for accounts without one."""
        return self.first_name or self.username or ""
