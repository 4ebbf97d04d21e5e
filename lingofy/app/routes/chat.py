"""
Chat Routes: assistant proxy.

- POST /api/v1/chat {"messages": [{role, content}, ...]} → {"text": ...}

Errors come back as {"error": ...}: 400 for a bad transcript, 502 when the
provider fails, so the client can show the message in the transcript.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from lingofy.app.providers.base import ChatError
from lingofy.app.services.chat import INVALID_MESSAGES, ChatService

logger = logging.getLogger(__name__)

api_router = APIRouter()


@api_router.post("/chat", response_model=None)
async def chat(request: Request) -> dict[str, Any] | JSONResponse:
    """Reply to the transcript."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(status_code=400, content={"error": "Body must be valid JSON."})

    messages = body.get("messages") if isinstance(body, dict) else None

    service = ChatService(request.app.state.provider, request.app.state.config)
    try:
        text = await service.reply(messages)
    except ChatError as e:
        status_code = 400 if e.code == INVALID_MESSAGES else 502
        if status_code == 502:
            logger.error(f"Chat API error: {e}")
        return JSONResponse(status_code=status_code, content={"error": e.message})

    return {"text": text}
