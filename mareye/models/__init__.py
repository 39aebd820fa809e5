"""SQLAlchemy models."""

from mareye.models.analysis import AIAnalysis, GeneSequence
from mareye.models.user import User
from mareye.models.watchlist import WatchlistItem

__all__ = [
    "User",
    "WatchlistItem",
    "AIAnalysis",
    "GeneSequence",
]
