"""Shared HTTP plumbing for the externally hosted AI backends."""

import logging
from typing import Any

import httpx

from mareye.config import get_settings
from mareye.services.errors import UpstreamServiceError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

# (filename, content, content type) as httpx expects for multipart parts
UploadPart = tuple[str, bytes, str]


class UpstreamClient:
    """Single-attempt JSON client for one backend base URL."""

    service_name = "upstream service"

    def __init__(self, base_url: str, timeout: float | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else get_settings().upstream_timeout_seconds

    async def request(
        self,
        method: str,
        path: str,
        *,
        files: dict[str, UploadPart] | None = None,
        data: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises:
            UpstreamUnavailableError: the backend could not be reached
            UpstreamServiceError: the backend answered with an error status
        """
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, files=files, data=data, json=json)
        except httpx.RequestError as e:
            logger.error(f"HTTP error calling {self.service_name} at {url}: {e}")
            raise UpstreamUnavailableError(self.service_name) from e

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            logger.error(f"{self.service_name} returned a non-JSON body from {url}")
            status_code = response.status_code if response.is_error else httpx.codes.BAD_GATEWAY
            raise UpstreamServiceError(
                self.service_name,
                status_code,
                {"success": False, "error": f"{self.service_name} returned an invalid response"},
            )

        if response.is_error:
            logger.warning(f"{self.service_name} returned HTTP {response.status_code} for {url}")
            raise UpstreamServiceError(self.service_name, response.status_code, body)
        return body
