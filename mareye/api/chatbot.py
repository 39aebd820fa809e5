"""Chatbot API endpoint."""

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from mareye.api.dependencies import get_chat_service
from mareye.schemas.chatbot import ChatRequest, ChatResponse
from mareye.services.chatbot import ChatService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["chatbot"])


@router.post("/chatbot", response_model=ChatResponse)
async def chatbot(
    request: ChatRequest,
    chat: Annotated[ChatService, Depends(get_chat_service)],
):
    """Answer a question about the platform."""
    if not request.message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")
    if not chat.is_configured:
        logger.error("GROK_API_KEY not found in environment variables")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Grok API key not configured",
        )

    try:
        reply = await chat.reply(request.message, request.context)
    except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate response: {e}",
        ) from e
    return ChatResponse(response=reply)
