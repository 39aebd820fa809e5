"""Analysis history schemas."""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict

from mareye.schemas.base import CamelModel


class AIAnalysisResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: int
    analysis_type: str
    input_type: str
    results: dict[str, Any]
    model_used: str | None
    processing_time_ms: int | None
    created_at: datetime


class GeneSequenceResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sequence_id: str
    dna_sequence: str
    sequence_type: str
    analysis_status: str
    analysis_results: dict[str, Any] | None
    created_at: datetime


class HistoryResponse(CamelModel):
    """Most recent analyses and gene sequences of the caller."""

    analyses: list[AIAnalysisResponse]
    gene_sequences: list[GeneSequenceResponse]
