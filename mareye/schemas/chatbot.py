"""Chatbot schemas."""

from mareye.schemas.base import CamelModel


class ChatRequest(CamelModel):
    message: str = ""
    context: str | None = None


class ChatResponse(CamelModel):
    response: str
