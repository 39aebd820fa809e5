"""Chat completions against the Groq OpenAI-compatible API."""

import logging

import httpx

from mareye.config import get_settings
from mareye.services.errors import LLMNotConfiguredError
from mareye.services.llm_prompts import get_chatbot_system_prompt

logger = logging.getLogger(__name__)


class ChatService:
    """Service for generating text with a hosted Llama model."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self.base_url = self.settings.groq_base_url.rstrip("/")
        self.api_key = self.settings.grok_api_key
        self.model = self.settings.chat_model
        self.timeout = 60.0

    @property
    def is_configured(self) -> bool:
        """Check if the Groq API key is set."""
        return bool(self.api_key)

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> str:
        """Generate a response from the LLM."""
        if not self.is_configured:
            raise LLMNotConfiguredError("Grok API key not configured")

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": self.model,
                    "messages": messages,
                    "temperature": temperature,
                    "max_tokens": max_tokens,
                },
            )
            response.raise_for_status()
            data = response.json()
            return data["choices"][0]["message"]["content"]

    async def reply(self, message: str, context: str | None = None) -> str:
        """Answer a chatbot message with the platform system prompt."""
        try:
            return await self.generate(message, system_prompt=get_chatbot_system_prompt(context))
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Groq: {e}")
            raise
