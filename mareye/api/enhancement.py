"""CNN image enhancement proxy endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, UploadFile

from mareye.api.dependencies import get_enhancement_client
from mareye.api.uploads import read_upload
from mareye.schemas.enhancement import JetsonDeployRequest, OnnxExportRequest, ProcessingResult
from mareye.services.enhancement_client import DEFAULT_MODEL, EnhancementClient

router = APIRouter(prefix="/api/enhancement", tags=["enhancement"])


@router.post("/image", responses={200: {"model": ProcessingResult}})
async def enhance_image(
    client: Annotated[EnhancementClient, Depends(get_enhancement_client)],
    image: UploadFile = File(...),
    model: str = Form(DEFAULT_MODEL),
) -> dict[str, Any]:
    """Enhance an underwater image; PSNR, SSIM and UIQM metrics are passed through."""
    return await client.process_image(await read_upload(image, "image.jpg"), model)


@router.post("/video", responses={200: {"model": ProcessingResult}})
async def enhance_video(
    client: Annotated[EnhancementClient, Depends(get_enhancement_client)],
    video: UploadFile = File(...),
    model: str = Form(DEFAULT_MODEL),
) -> dict[str, Any]:
    return await client.process_video(await read_upload(video, "video.mp4"), model)


@router.post("/analytics", responses={200: {"model": ProcessingResult}})
async def run_analytics(
    client: Annotated[EnhancementClient, Depends(get_enhancement_client)],
    file: UploadFile = File(...),
    analysis_type: str = Form("comprehensive"),
) -> dict[str, Any]:
    return await client.run_analytics(await read_upload(file), analysis_type)


@router.post("/export-onnx", responses={200: {"model": ProcessingResult}})
async def export_onnx(
    client: Annotated[EnhancementClient, Depends(get_enhancement_client)],
    request: OnnxExportRequest | None = None,
) -> dict[str, Any]:
    """Ask the backend to export the model to ONNX."""
    request = request or OnnxExportRequest()
    return await client.export_onnx(request.format, request.optimization)


@router.post("/deploy-jetson", responses={200: {"model": ProcessingResult}})
async def deploy_jetson(
    client: Annotated[EnhancementClient, Depends(get_enhancement_client)],
    request: JetsonDeployRequest | None = None,
) -> dict[str, Any]:
    """Ask the backend to package the model for a Jetson device."""
    request = request or JetsonDeployRequest()
    return await client.deploy_jetson(request.device, request.optimization)
