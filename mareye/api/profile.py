"""Profile API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mareye.api.dependencies import get_current_user
from mareye.database import get_db
from mareye.models.user import User
from mareye.schemas.profile import ProfileResponse, ProfileUser, SubscriptionInfo, TokenUsage
from mareye.services.usage import reset_daily_tokens

router = APIRouter(prefix="/api", tags=["profile"])


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the authenticated user's profile, subscription and token usage."""
    reset_daily_tokens(db, current_user)
    return ProfileResponse(
        user=ProfileUser(
            first_name=current_user.display_first_name,
            last_name=current_user.last_name or "",
            email=current_user.email,
            dob=current_user.dob or "",
            avatar=current_user.avatar or "",
            subscription=SubscriptionInfo(
                plan=current_user.subscription_plan,
                status=current_user.subscription_status,
            ),
            tokens=TokenUsage(
                daily_limit=current_user.tokens_daily_limit,
                used_today=current_user.tokens_used_today,
                last_reset_date=current_user.tokens_last_reset,
                total_used=current_user.tokens_total_used,
            ),
        )
    )
