"""Enums for model fields."""

from enum import Enum


class SubscriptionPlan(str, Enum):
    """Subscription tiers."""

    BASIC = "basic"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    """Subscription lifecycle states."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    CANCELLED = "cancelled"


class WatchlistItemType(str, Enum):
    """Kinds of analysis results a user can bookmark."""

    GENE_SEQUENCE = "gene_sequence"
    IMAGE_RECOGNITION = "image_recognition"


class AnalysisType(str, Enum):
    """AI analysis categories recorded in history."""

    SPECIES_IDENTIFICATION = "species_identification"
    THREAT_ASSESSMENT = "threat_assessment"
    CONSERVATION_RECOMMENDATION = "conservation_recommendation"


class AnalysisInputType(str, Enum):
    """What the analysis was run on."""

    IMAGE = "image"
    GENE_SEQUENCE = "gene_sequence"
    ENVIRONMENTAL_DATA = "environmental_data"


class SequenceType(str, Enum):
    """Marker gene used for a DNA sequence."""

    COI = "COI"
    S16 = "16S"
    S18 = "18S"
    ITS = "ITS"
    OTHER = "other"


class AnalysisStatus(str, Enum):
    """Processing state of a gene sequence analysis."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
