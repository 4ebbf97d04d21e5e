"""
Save Routes: persistence stub.

- POST /api/v1/save → logs the received profile, stores nothing

The payload is echoed to the log with inline images summarized; emails
and phone numbers are masked when logging.mask_pii is on.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from lingofy.core.logging import format_payload
from lingofy.domain.constants import SAVE_DEFAULT_SUCCESS_MESSAGE

logger = logging.getLogger(__name__)

api_router = APIRouter()


@api_router.post("/save", response_model=None)
async def save_data(request: Request) -> dict[str, Any] | JSONResponse:
    """
    Receive a profile to save.

    Returns:
        {"success": true, "message": ...}; 400 {"error"} for a non-object body
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(status_code=400, content={"error": "Body must be valid JSON."})

    if not isinstance(payload, dict):
        return JSONResponse(status_code=400, content={"error": "Body must be a JSON object."})

    config: dict = getattr(request.app.state, "config", None) or {}
    mask = bool((config.get("logging", {}) or {}).get("mask_pii", False))

    logger.info("Received data to save:\n%s", format_payload(payload, mask=mask))

    return {"success": True, "message": SAVE_DEFAULT_SUCCESS_MESSAGE}
