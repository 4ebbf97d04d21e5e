"""
Persistence Service: send the profile + gallery to the save collaborator.

- One POST per call, no retries.
- Error message precedence: body "error", body "message", generic text.
- The profile passed in is never modified.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from lingofy.core.form_state import with_images
from lingofy.domain.constants import (
    SAVE_DEFAULT_FAILURE_MESSAGE,
    SAVE_DEFAULT_SUCCESS_MESSAGE,
    SAVE_GENERIC_ERROR_MESSAGE,
)
from lingofy.domain.errors import ErrorCodes, SaveError
from lingofy.domain.schemas import ImageReference, SavedConfirmation, StoreProfile

logger = logging.getLogger(__name__)


def build_save_payload(
    state: StoreProfile,
    images: Sequence[ImageReference],
) -> dict[str, Any]:
    """Profile wire form with product.images replaced by the gallery."""
    return with_images(state, list(images)).to_dict()


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _body_message(body: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


async def save_profile(
    state: StoreProfile,
    images: Sequence[ImageReference],
    client: httpx.AsyncClient,
    url: str,
    timeout: float | None = None,
) -> SavedConfirmation:
    """
    Save the profile through the persistence endpoint.

    Args:
        state: profile to save
        images: current gallery (replaces product.images)
        client: shared HTTP client
        url: save endpoint URL
        timeout: request timeout in seconds (None → client default)

    Returns:
        SavedConfirmation

    Raises:
        SaveError: transport failure, non-2xx, or success != true
    """
    payload = build_save_payload(state, images)
    request_kwargs: dict[str, Any] = {"json": payload}
    if timeout is not None:
        request_kwargs["timeout"] = timeout

    try:
        response = await client.post(url, **request_kwargs)
    except httpx.HTTPError as e:
        logger.error(f"Failed to save data: {e}")
        raise SaveError(
            ErrorCodes.SAVE_TRANSPORT_ERROR,
            SAVE_GENERIC_ERROR_MESSAGE,
            cause=str(e),
        ) from e

    body = _json_body(response)

    if not response.is_success:
        message = _body_message(body, "error", "message") or SAVE_GENERIC_ERROR_MESSAGE
        logger.warning(
            "Save rejected with HTTP %d: %s", response.status_code, message
        )
        raise SaveError(
            ErrorCodes.SAVE_FAILED,
            message,
            status_code=response.status_code,
        )

    if body.get("success") is not True:
        message = _body_message(body, "message", "error") or SAVE_DEFAULT_FAILURE_MESSAGE
        raise SaveError(
            ErrorCodes.SAVE_REJECTED,
            message,
            status_code=response.status_code,
        )

    message = _body_message(body, "message") or SAVE_DEFAULT_SUCCESS_MESSAGE
    logger.info("Profile saved (%d image(s))", len(images))
    return SavedConfirmation(message=message)
