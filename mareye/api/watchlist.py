"""Watchlist API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from mareye.api.dependencies import get_current_user
from mareye.database import get_db
from mareye.models.user import User
from mareye.models.watchlist import WatchlistItem
from mareye.schemas.watchlist import (
    WatchlistCreateResponse,
    WatchlistItemCreate,
    WatchlistResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/watchlist", tags=["watchlist"])

WATCHLIST_LIMIT = 100


@router.get("", response_model=WatchlistResponse)
def get_watchlist(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the caller's watchlist, newest first."""
    items = (
        db.query(WatchlistItem)
        .filter(WatchlistItem.user_id == current_user.id)
        .order_by(WatchlistItem.created_at.desc(), WatchlistItem.id.desc())
        .limit(WATCHLIST_LIMIT)
        .all()
    )
    return WatchlistResponse(items=items)


@router.post("", response_model=WatchlistCreateResponse, status_code=status.HTTP_201_CREATED)
def add_to_watchlist(
    item_data: WatchlistItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Bookmark an analysis result."""
    item = WatchlistItem(
        user_id=current_user.id,
        item_type=item_data.item_type.value,
        reference_id=item_data.reference_id or None,
        title=item_data.title or None,
        summary=item_data.summary or None,
        data_preview=item_data.data_preview or None,
        score=item_data.score,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return WatchlistCreateResponse(id=item.id)


@router.delete("/{item_id}")
def remove_from_watchlist(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Remove a watchlist item owned by the caller."""
    item = (
        db.query(WatchlistItem)
        .filter(WatchlistItem.id == item_id, WatchlistItem.user_id == current_user.id)
        .first()
    )
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    db.delete(item)
    db.commit()
    return {"success": True}
