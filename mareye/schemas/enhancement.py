"""CNN enhancement backend shapes."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class EnhancementMetrics(BaseModel):
    model_config = ConfigDict(extra="allow")

    psnr: float | None = None
    ssim: float | None = None
    uiqm_improvement: float | None = None


class ProcessingResult(BaseModel):
    """Documented shape of enhancement responses, which are passed through."""

    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any | None = None
    error: str | None = None
    metrics: EnhancementMetrics | None = None


class OnnxExportRequest(BaseModel):
    format: str = "standard"
    optimization: bool = True


class JetsonDeployRequest(BaseModel):
    device: str = "jetson_orin"
    optimization: str = "tensorrt_fp16"
