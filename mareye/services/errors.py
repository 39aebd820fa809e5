"""Exceptions raised by clients of external services."""

from typing import Any


class UpstreamServiceError(Exception):
    """An external service answered with an error status.

    The upstream status and JSON body are passed through to the caller.
    """

    def __init__(self, service: str, status_code: int, payload: dict[str, Any]) -> None:
        self.service = service
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"{service} returned HTTP {status_code}")


class UpstreamUnavailableError(Exception):
    """An external service could not be reached at all."""

    def __init__(self, service: str) -> None:
        self.service = service
        super().__init__(f"Network error: Unable to connect to {service}")


class LLMNotConfiguredError(Exception):
    """The API key for an LLM provider is missing."""
