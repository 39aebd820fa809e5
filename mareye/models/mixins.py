"""Column mixins shared by the MarEye tables."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import declared_attr


class TimestampMixin:
    """created_at / updated_at, both set by the database."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class UserOwnedMixin:
    """Rows that belong to one account and are always queried per user."""

    @declared_attr
    def user_id(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
