"""Client for the hosted CNN underwater image-enhancement backend."""

from typing import Any

from mareye.config import get_settings
from mareye.services.upstream import UploadPart, UpstreamClient

DEFAULT_MODEL = "epoch4"


class EnhancementClient(UpstreamClient):
    """Forwards uploads to the CNN service; metrics come back as psnr/ssim/uiqm."""

    service_name = "CNN backend"

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        super().__init__(base_url or get_settings().cnn_api_url, timeout)

    async def process_image(self, upload: UploadPart, model: str = DEFAULT_MODEL) -> dict[str, Any]:
        return await self.request(
            "POST", "/api/process-image", files={"image": upload}, data={"model": model}
        )

    async def process_video(self, upload: UploadPart, model: str = DEFAULT_MODEL) -> dict[str, Any]:
        return await self.request(
            "POST", "/api/process-video", files={"video": upload}, data={"model": model}
        )

    async def run_analytics(
        self, upload: UploadPart, analysis_type: str = "comprehensive"
    ) -> dict[str, Any]:
        return await self.request(
            "POST",
            "/api/run-analytics",
            files={"file": upload},
            data={"analysis_type": analysis_type},
        )

    async def export_onnx(
        self, export_format: str = "standard", optimization: bool = True
    ) -> dict[str, Any]:
        return await self.request(
            "POST",
            "/api/export-onnx",
            json={"format": export_format, "optimization": optimization},
        )

    async def deploy_jetson(
        self, device: str = "jetson_orin", optimization: str = "tensorrt_fp16"
    ) -> dict[str, Any]:
        return await self.request(
            "POST",
            "/api/deploy-jetson",
            json={"device": device, "optimization": optimization},
        )
