"""AI analysis history models."""

from sqlalchemy import JSON, Column, Integer, String, Text

from mareye.database import Base
from mareye.models.enums import AnalysisStatus
from mareye.models.mixins import TimestampMixin, UserOwnedMixin


class AIAnalysis(Base, UserOwnedMixin, TimestampMixin):
    """Result of an AI analysis run on behalf of a user."""

    __tablename__ = "ai_analyses"

    id = Column(Integer, primary_key=True, index=True)
    analysis_type = Column(String(50), nullable=False)
    input_type = Column(String(50), nullable=False)
    results = Column(JSON, nullable=False, default=dict)
    model_used = Column(String(100), nullable=True)
    processing_time_ms = Column(Integer, nullable=True)


class GeneSequence(Base, UserOwnedMixin, TimestampMixin):
    """A submitted DNA sequence and its analysis outcome."""

    __tablename__ = "gene_sequences"

    id = Column(Integer, primary_key=True, index=True)
    sequence_id = Column(String(64), nullable=False, index=True)
    dna_sequence = Column(Text, nullable=False)
    sequence_type = Column(String(10), nullable=False)
    analysis_status = Column(String(20), nullable=False, default=AnalysisStatus.PENDING.value)
    analysis_results = Column(JSON, nullable=True)
