"""Species identification schemas."""

import re

from pydantic import ConfigDict, Field, field_validator

from mareye.models.enums import SequenceType
from mareye.schemas.base import CamelModel

# IUPAC nucleotide codes, RNA U included
_NUCLEOTIDES = re.compile(r"^[ACGTUNRYKMSWBDHV]+$")


class GeneSequenceRequest(CamelModel):
    """DNA barcode submitted for identification."""

    dna_sequence: str = Field(..., min_length=1, max_length=20000)
    sequence_type: SequenceType = SequenceType.COI
    location_context: str | None = Field(None, max_length=500)

    @field_validator("dna_sequence")
    @classmethod
    def normalize_sequence(cls, v: str) -> str:
        sequence = re.sub(r"\s+", "", v).upper()
        if not sequence or not _NUCLEOTIDES.match(sequence):
            raise ValueError("DNA sequence may only contain nucleotide codes")
        return sequence


class TaxonomicClassification(CamelModel):
    kingdom: str | None = None
    phylum: str | None = None
    class_: str | None = Field(None, alias="class")
    order: str | None = None
    family: str | None = None
    genus: str | None = None


class SpeciesResult(CamelModel):
    """Structured identification; confidenceLevel is "low" when no species was found."""

    model_config = ConfigDict(from_attributes=True)

    species: str | None
    scientific_name: str | None
    common_name: str | None
    confidence: float | None
    classification: TaxonomicClassification
    habitat: str | None
    conservation_status: str | None
    threats: list[str]
    description: str | None
    confidence_level: str


class SpeciesAnalysisResponse(CamelModel):
    model_config = ConfigDict(protected_namespaces=())

    success: bool = True
    analysis_id: int
    result: SpeciesResult
    model_used: str
    processing_time_ms: int


class GeneSequenceAnalysisResponse(CamelModel):
    model_config = ConfigDict(protected_namespaces=())

    success: bool = True
    sequence_id: str
    result: SpeciesResult
    model_used: str
    processing_time_ms: int
