"""Threat detection backend response shapes.

Bodies are passed through untouched; these models only document them.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PassthroughModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, protected_namespaces=())


class BoundingBox(PassthroughModel):
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    height: float
    center_x: float
    center_y: float


class Threat(PassthroughModel):
    id: int
    class_name: str = Field(alias="class")
    class_id: int
    confidence: float
    confidence_percentage: float
    threat_level: Literal["CRITICAL", "HIGH", "MEDIUM", "LOW"]
    bounding_box: BoundingBox
    area_pixels: float
    relative_size: float


class ImageMetadata(PassthroughModel):
    image_path: str
    image_width: int
    image_height: int
    image_size_kb: float
    model_used: str
    confidence_threshold: float
    detection_timestamp: str


class ImageDetectionResult(PassthroughModel):
    success: bool
    type: Literal["image"] = "image"
    filename: str
    threats: list[Threat] = []
    threat_count: int = 0
    overall_threat_level: str
    overall_threat_score: float
    # Base64 encoded image with boxes drawn
    annotated_image: str | None = None
    metadata: ImageMetadata | None = None
    error: str | None = None


class VideoMetadata(PassthroughModel):
    duration_seconds: float
    fps: float
    total_frames: int
    processed_frames: int
    frame_interval: int
    resolution: str


class VideoFrame(PassthroughModel):
    frame_number: int
    timestamp: float
    threats: list[Threat] = []
    threat_count: int = 0
    threat_level: str


class VideoSummary(PassthroughModel):
    frames_analyzed: int
    frames_with_detections: int
    detection_rate: float


class VideoDetectionResult(PassthroughModel):
    success: bool
    type: Literal["video"] = "video"
    filename: str
    video_metadata: VideoMetadata
    total_detections: int
    total_threats: int
    overall_threat_level: str
    frames_with_threats: list[VideoFrame] = []
    summary: VideoSummary
    error: str | None = None


class BackendHealth(PassthroughModel):
    status: str | None = None
    model_loaded: bool | None = None
    details: dict[str, Any] | None = None
