"""Analysis history API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mareye.api.dependencies import get_current_user
from mareye.database import get_db
from mareye.models.analysis import AIAnalysis, GeneSequence
from mareye.models.user import User
from mareye.schemas.history import HistoryResponse

router = APIRouter(prefix="/api", tags=["history"])

HISTORY_LIMIT = 50


@router.get("/history", response_model=HistoryResponse)
def get_history(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the caller's most recent analyses and gene sequences, newest first."""
    analyses = (
        db.query(AIAnalysis)
        .filter(AIAnalysis.user_id == current_user.id)
        .order_by(AIAnalysis.created_at.desc(), AIAnalysis.id.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )
    gene_sequences = (
        db.query(GeneSequence)
        .filter(GeneSequence.user_id == current_user.id)
        .order_by(GeneSequence.created_at.desc(), GeneSequence.id.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )
    return HistoryResponse(analyses=analyses, gene_sequences=gene_sequences)
