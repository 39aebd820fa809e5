"""Watchlist schemas."""

from datetime import datetime

from pydantic import ConfigDict, Field

from mareye.models.enums import WatchlistItemType
from mareye.schemas.base import CamelModel


class WatchlistItemCreate(CamelModel):
    """Bookmark an analysis result."""

    item_type: WatchlistItemType
    reference_id: str | None = Field(None, max_length=255)
    title: str | None = Field(None, max_length=255)
    summary: str | None = None
    data_preview: str | None = None
    score: float | None = None


class WatchlistItemResponse(CamelModel):
    """Watchlist item."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_type: str
    reference_id: str | None
    title: str | None
    summary: str | None
    data_preview: str | None
    score: float | None
    created_at: datetime


class WatchlistResponse(CamelModel):
    items: list[WatchlistItemResponse]


class WatchlistCreateResponse(CamelModel):
    success: bool = True
    id: int
