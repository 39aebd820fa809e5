"""Threat detection proxy endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, UploadFile

from mareye.api.dependencies import get_detection_client
from mareye.api.uploads import read_upload
from mareye.schemas.detection import BackendHealth, ImageDetectionResult, VideoDetectionResult
from mareye.services.detection_client import DEFAULT_FRAME_INTERVAL, DetectionClient

router = APIRouter(prefix="/api/detection", tags=["detection"])


@router.get("/health", responses={200: {"model": BackendHealth}})
async def detection_health(
    client: Annotated[DetectionClient, Depends(get_detection_client)],
) -> dict[str, Any]:
    """Health of the detection backend."""
    return await client.health()


@router.get("/model-info")
async def model_info(
    client: Annotated[DetectionClient, Depends(get_detection_client)],
) -> dict[str, Any]:
    return await client.model_info()


@router.post("/image", responses={200: {"model": ImageDetectionResult}})
async def detect_image(
    client: Annotated[DetectionClient, Depends(get_detection_client)],
    file: UploadFile = File(...),
) -> dict[str, Any]:
    """Detect threats in a single image."""
    return await client.detect_image(await read_upload(file, "image.jpg"))


@router.post("/video", responses={200: {"model": VideoDetectionResult}})
async def detect_video(
    client: Annotated[DetectionClient, Depends(get_detection_client)],
    file: UploadFile = File(...),
    frame_interval: int = Form(DEFAULT_FRAME_INTERVAL, ge=1),
) -> dict[str, Any]:
    """Detect threats in sampled video frames."""
    return await client.detect_video(await read_upload(file, "video.mp4"), frame_interval)


@router.post("/detect")
async def detect(
    client: Annotated[DetectionClient, Depends(get_detection_client)],
    file: UploadFile = File(...),
) -> dict[str, Any]:
    """Detect threats in an image or video; the backend picks by file type."""
    return await client.detect(await read_upload(file))
