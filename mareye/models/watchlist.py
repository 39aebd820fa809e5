"""Watchlist model."""

from sqlalchemy import Column, Float, Integer, String, Text
from sqlalchemy.orm import relationship

from mareye.database import Base
from mareye.models.mixins import TimestampMixin, UserOwnedMixin


class WatchlistItem(Base, UserOwnedMixin, TimestampMixin):
    """A user-owned bookmark pointing at an analysis result."""

    __tablename__ = "watchlist_items"

    id = Column(Integer, primary_key=True, index=True)
    item_type = Column(String(32), nullable=False)
    reference_id = Column(String(255), nullable=True)
    title = Column(String(255), nullable=True)
    summary = Column(Text, nullable=True)
    # Denormalized for list rendering
    data_preview = Column(Text, nullable=True)
    score = Column(Float, nullable=True)

    user = relationship("User", backref="watchlist_items")
