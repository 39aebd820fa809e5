"""Client for the hosted YOLO threat-detection backend."""

from typing import Any

from mareye.config import get_settings
from mareye.services.upstream import UploadPart, UpstreamClient

DEFAULT_FRAME_INTERVAL = 30


class DetectionClient(UpstreamClient):
    """Forwards uploads to the detection service unmodified."""

    service_name = "detection backend"

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        super().__init__(base_url or get_settings().detection_api_url, timeout)

    async def health(self) -> dict[str, Any]:
        return await self.request("GET", "/health")

    async def model_info(self) -> dict[str, Any]:
        return await self.request("GET", "/api/model/info")

    async def detect_image(self, upload: UploadPart) -> dict[str, Any]:
        return await self.request("POST", "/api/detect/image", files={"file": upload})

    async def detect_video(
        self, upload: UploadPart, frame_interval: int = DEFAULT_FRAME_INTERVAL
    ) -> dict[str, Any]:
        return await self.request(
            "POST",
            "/api/detect/video",
            files={"file": upload},
            data={"frame_interval": str(frame_interval)},
        )

    async def detect(self, upload: UploadPart) -> dict[str, Any]:
        """Let the backend decide between image and video handling."""
        return await self.request("POST", "/api/detect", files={"file": upload})
