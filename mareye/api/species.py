"""Species identification endpoints (image and DNA barcode)."""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from mareye.api.dependencies import get_current_user, get_species_service
from mareye.database import get_db
from mareye.models.analysis import AIAnalysis, GeneSequence
from mareye.models.enums import AnalysisInputType, AnalysisStatus, AnalysisType
from mareye.models.user import User
from mareye.schemas.species import (
    GeneSequenceAnalysisResponse,
    GeneSequenceRequest,
    SpeciesAnalysisResponse,
    SpeciesResult,
)
from mareye.services.errors import LLMNotConfiguredError
from mareye.services.species_service import SpeciesAnalysisError, SpeciesService
from mareye.services.usage import record_token_usage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["species"])

SUPPORTED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
MAX_IMAGE_BYTES = 10 * 1024 * 1024


@router.post("/species", response_model=SpeciesAnalysisResponse)
async def identify_species(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    species_service: Annotated[SpeciesService, Depends(get_species_service)],
    image: UploadFile = File(...),
    context: str | None = Form(None),
):
    """Identify the marine organism in an uploaded photo."""
    if image.content_type not in SUPPORTED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported image type. Allowed: {', '.join(sorted(SUPPORTED_IMAGE_TYPES))}",
        )
    image_data = await image.read()
    if not image_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image is empty")
    if len(image_data) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Image exceeds 10 MB",
        )

    try:
        analysis = await species_service.identify_from_image(
            image_data, image.content_type, context
        )
    except SpeciesAnalysisError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e

    record = AIAnalysis(
        user_id=current_user.id,
        analysis_type=AnalysisType.SPECIES_IDENTIFICATION.value,
        input_type=AnalysisInputType.IMAGE.value,
        results=analysis.result.to_dict(),
        model_used=analysis.model_used,
        processing_time_ms=analysis.processing_time_ms,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    record_token_usage(db, current_user)

    logger.info(
        f"Species analysis {record.id} for user {current_user.id}: "
        f"{analysis.result.species or 'unidentified'} ({analysis.result.confidence_level})"
    )
    return SpeciesAnalysisResponse(
        analysis_id=record.id,
        result=SpeciesResult.model_validate(analysis.result.to_dict()),
        model_used=analysis.model_used,
        processing_time_ms=analysis.processing_time_ms,
    )


def mark_sequence_failed(db: Session, sequence: GeneSequence, error: str) -> None:
    """Close out a sequence so it never stays in processing."""
    sequence.analysis_status = AnalysisStatus.FAILED.value
    sequence.analysis_results = {"error": error}
    db.commit()


@router.post("/gene-sequence", response_model=GeneSequenceAnalysisResponse)
async def analyze_gene_sequence(
    request: GeneSequenceRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    species_service: Annotated[SpeciesService, Depends(get_species_service)],
):
    """Identify the organism a DNA barcode came from and keep it in history."""
    if not species_service.chat_service.is_configured:
        raise LLMNotConfiguredError("Grok API key not configured")

    sequence = GeneSequence(
        user_id=current_user.id,
        sequence_id=f"SEQ-{uuid.uuid4().hex[:12].upper()}",
        dna_sequence=request.dna_sequence,
        sequence_type=request.sequence_type.value,
        analysis_status=AnalysisStatus.PROCESSING.value,
    )
    db.add(sequence)
    db.commit()
    db.refresh(sequence)

    try:
        analysis = await species_service.identify_from_sequence(
            request.dna_sequence, request.sequence_type.value, request.location_context
        )
    except SpeciesAnalysisError as e:
        mark_sequence_failed(db, sequence, str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    except Exception:
        mark_sequence_failed(db, sequence, "Unexpected analysis error")
        logger.exception(f"Gene sequence {sequence.sequence_id} failed unexpectedly")
        raise

    sequence.analysis_status = AnalysisStatus.COMPLETED.value
    sequence.analysis_results = analysis.result.to_dict()
    db.commit()
    record_token_usage(db, current_user)

    return GeneSequenceAnalysisResponse(
        sequence_id=sequence.sequence_id,
        result=SpeciesResult.model_validate(analysis.result.to_dict()),
        model_used=analysis.model_used,
        processing_time_ms=analysis.processing_time_ms,
    )
