"""Daily AI token accounting."""

from datetime import date

from sqlalchemy.orm import Session

from mareye.models.user import User


def reset_daily_tokens(db: Session, user: User, today: date | None = None) -> None:
    """Zero today's token usage when the last reset was on an earlier day."""
    today = today or date.today()
    if user.tokens_last_reset is None or user.tokens_last_reset < today:
        user.tokens_used_today = 0
        user.tokens_last_reset = today
        db.commit()
        db.refresh(user)


def record_token_usage(db: Session, user: User, tokens: int = 1) -> None:
    """Count one AI analysis against today's and the lifetime totals."""
    reset_daily_tokens(db, user)
    user.tokens_used_today += tokens
    user.tokens_total_used += tokens
    db.commit()
