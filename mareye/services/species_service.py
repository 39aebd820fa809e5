"""Species identification from images (Claude Vision) and DNA barcodes (chat LLM)."""

import base64
import logging
import time
from dataclasses import dataclass

import anthropic
import httpx

from mareye.config import get_settings
from mareye.services.chatbot import ChatService
from mareye.services.errors import LLMNotConfiguredError
from mareye.services.llm_prompts import (
    GENE_SEQUENCE_SYSTEM_PROMPT,
    get_gene_sequence_prompt,
    get_species_image_prompt,
)
from mareye.services.species_parser import SpeciesIdentification, SpeciesResponseParser

logger = logging.getLogger(__name__)

MAX_VISION_ATTEMPTS = 4


class SpeciesAnalysisError(Exception):
    """The model call failed after any retries."""


@dataclass
class SpeciesAnalysis:
    """Parsed identification plus bookkeeping for history records."""

    result: SpeciesIdentification
    model_used: str
    processing_time_ms: int


class SpeciesService:
    """Service for identifying marine species with hosted models."""

    def __init__(self, chat_service: ChatService | None = None) -> None:
        """Initialize the species service."""
        settings = get_settings()
        self.api_key = settings.anthropic_api_key
        self.vision_model = settings.vision_model
        self.timeout = settings.vision_timeout_seconds
        self.chat_service = chat_service or ChatService()

    @property
    def is_configured(self) -> bool:
        """Check if the Anthropic API is configured."""
        return bool(self.api_key)

    async def identify_from_image(
        self, image_data: bytes, media_type: str, additional_context: str | None = None
    ) -> SpeciesAnalysis:
        """Identify the organism in an image.

        The SDK retries rate-limit and overload responses with exponential
        backoff and jitter; anything else fails on the first attempt.
        """
        if not self.is_configured:
            raise LLMNotConfiguredError("Anthropic API not configured")

        image_base64 = base64.standard_b64encode(image_data).decode("utf-8")
        content = [
            {
                "type": "image",
                "source": {"type": "base64", "media_type": media_type, "data": image_base64},
            },
            {"type": "text", "text": get_species_image_prompt(additional_context)},
        ]

        started = time.monotonic()
        try:
            async with anthropic.AsyncAnthropic(
                api_key=self.api_key,
                max_retries=MAX_VISION_ATTEMPTS - 1,
                timeout=self.timeout,
            ) as client:
                message = await client.messages.create(
                    model=self.vision_model,
                    max_tokens=1024,
                    messages=[{"role": "user", "content": content}],
                )
        except anthropic.APIError as e:
            logger.error(f"Species identification error: {e}")
            raise SpeciesAnalysisError(f"Failed to identify species from image: {e}") from e

        text = "".join(block.text for block in message.content if block.type == "text")
        result = SpeciesResponseParser.parse(text)
        if result.is_low_confidence:
            logger.warning("Vision answer had no species label; returning low-confidence result")
        return SpeciesAnalysis(
            result=result,
            model_used=self.vision_model,
            processing_time_ms=int((time.monotonic() - started) * 1000),
        )

    async def identify_from_sequence(
        self, dna_sequence: str, sequence_type: str, location_context: str | None = None
    ) -> SpeciesAnalysis:
        """Identify the organism a DNA barcode most likely came from."""
        started = time.monotonic()
        try:
            text = await self.chat_service.generate(
                get_gene_sequence_prompt(dna_sequence, sequence_type, location_context),
                system_prompt=GENE_SEQUENCE_SYSTEM_PROMPT,
                temperature=0.2,
            )
        # ValueError covers a 200 whose body is not JSON
        except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
            logger.error(f"Gene sequence analysis error: {e}")
            raise SpeciesAnalysisError(f"Failed to analyze gene sequence: {e}") from e

        return SpeciesAnalysis(
            result=SpeciesResponseParser.parse(text),
            model_used=self.chat_service.model,
            processing_time_ms=int((time.monotonic() - started) * 1000),
        )
