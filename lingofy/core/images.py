"""
Image intake: file batch → inline gallery images.

Rules:
- Validation is all-or-nothing per batch. One bad file rejects the batch;
  every failing reason is collected, the first one is the message.
- Conversion is also all-or-nothing: a read failure drops the batch.
- Accepted files are appended in input order; the input list is never
  mutated.
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from typing import TypeVar

from lingofy.domain.constants import (
    ALLOWED_IMAGE_TYPES,
    IMAGE_PROMPT_EXTRA_TEMPLATE,
    IMAGE_PROMPT_TEMPLATE,
    IMAGE_SOURCE_UPLOAD,
    MAX_IMAGE_SIZE_BYTES,
)
from lingofy.domain.errors import ErrorCodes, ImageReadError, ImageValidationError
from lingofy.domain.schemas import ImageReference, SelectedFile, StoreProfile

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Validation
# =============================================================================

def _format_size_limit(max_size: int) -> str:
    mib = max_size / (1024 * 1024)
    return f"{mib:g}MB"


def _size_reason(name: str, max_size: int) -> str:
    return f'File "{name}" exceeds the {_format_size_limit(max_size)} size limit.'


def _check(
    name: str,
    size: int,
    mime_type: str | None,
    max_size: int,
    allowed_types: Iterable[str],
) -> str | None:
    if size > max_size:
        return _size_reason(name, max_size)
    if (mime_type or "").lower() not in tuple(allowed_types):
        return (
            f'File type for "{name}" is not supported '
            f"(use JPG, PNG, WEBP)."
        )
    return None


def check_file(
    selected: SelectedFile,
    max_size: int = MAX_IMAGE_SIZE_BYTES,
    allowed_types: Iterable[str] = ALLOWED_IMAGE_TYPES,
) -> str | None:
    """
    Check one file against the intake policy.

    Returns:
        failure reason, or None when the file is acceptable
    """
    return _check(selected.name, selected.size, selected.mime_type, max_size, allowed_types)


def validate_batch(
    files: Sequence[SelectedFile],
    max_size: int = MAX_IMAGE_SIZE_BYTES,
    allowed_types: Iterable[str] = ALLOWED_IMAGE_TYPES,
) -> list[str]:
    """Reasons for every failing file, in batch order."""
    allowed = tuple(t.lower() for t in allowed_types)
    reasons: list[str] = []
    for selected in files:
        reason = check_file(selected, max_size, allowed)
        if reason is not None:
            reasons.append(reason)
    return reasons


def validate_images(
    images: Sequence[ImageReference],
    max_size: int = MAX_IMAGE_SIZE_BYTES,
    allowed_types: Iterable[str] = ALLOWED_IMAGE_TYPES,
) -> None:
    """
    Apply the intake policy to images that arrive already inline
    (a seeded profile). Unnamed images are reported as "image <n>".

    Raises:
        ImageValidationError: any image broke the size/type policy
    """
    allowed = tuple(t.lower() for t in allowed_types)
    reasons: list[str] = []
    for position, image in enumerate(images, start=1):
        name = image.name or f"image {position}"
        reason = _check(name, image.size, image.mime_type, max_size, allowed)
        if reason is not None:
            reasons.append(reason)
    if reasons:
        logger.info("Rejected %d seeded image(s): %s", len(reasons), reasons[0])
        raise ImageValidationError(reasons, rejected=len(reasons), batch=len(images))


# =============================================================================
# Ingest
# =============================================================================

async def _read_all(files: Sequence[SelectedFile]) -> list[bytes]:
    try:
        return list(await asyncio.gather(*(f.read() for f in files)))
    except Exception as e:
        logger.error(f"Error reading image files: {e}", exc_info=True)
        raise ImageReadError(
            ErrorCodes.IMAGE_READ_FAILED,
            "An error occurred while reading the image files.",
            cause=str(e),
        ) from e


async def validate_and_ingest(
    files: Sequence[SelectedFile],
    existing: Sequence[ImageReference],
    max_size: int = MAX_IMAGE_SIZE_BYTES,
    allowed_types: Iterable[str] = ALLOWED_IMAGE_TYPES,
) -> list[ImageReference]:
    """
    Validate a file batch and append it to the gallery.

    Args:
        files: batch from one file-picker interaction
        existing: current gallery
        max_size: per-file byte limit
        allowed_types: accepted MIME types

    Returns:
        new gallery list (existing + converted files, input order)

    Raises:
        ImageValidationError: any file broke the size/type policy
        ImageReadError: any file could not be read
    """
    allowed = tuple(t.lower() for t in allowed_types)

    reasons = validate_batch(files, max_size, allowed)
    if reasons:
        logger.info(
            "Rejected image batch of %d file(s): %s", len(files), reasons[0]
        )
        raise ImageValidationError(reasons, rejected=len(reasons), batch=len(files))

    if not files:
        return list(existing)

    payloads = await _read_all(files)

    # declared size may understate the real payload
    oversized = [
        _size_reason(selected.name, max_size)
        for selected, payload in zip(files, payloads)
        if len(payload) > max_size
    ]
    if oversized:
        raise ImageValidationError(oversized, rejected=len(oversized), batch=len(files))

    converted = [
        ImageReference.from_bytes(
            payload,
            selected.mime_type.lower(),
            source=IMAGE_SOURCE_UPLOAD,
            name=selected.name,
        )
        for selected, payload in zip(files, payloads)
    ]
    logger.info("Ingested %d image(s)", len(converted))
    return [*existing, *converted]


def remove_at(images: list[T], index: int) -> list[T]:
    """
    Remove one gallery entry by position.

    Out-of-range (including negative) indexes return `images` unchanged.
    """
    if index < 0 or index >= len(images):
        return images
    return images[:index] + images[index + 1:]


# =============================================================================
# Generation Prompt
# =============================================================================

def build_image_prompt(profile: StoreProfile, extra_prompt: str | None = None) -> str:
    """
    Product photo prompt from the product title/description.

    Blank extra instructions are ignored; others are trimmed and appended.
    """
    prompt = IMAGE_PROMPT_TEMPLATE.format(
        title=profile.product.title,
        description=profile.product.description,
    )
    extra = (extra_prompt or "").strip()
    if extra:
        prompt += IMAGE_PROMPT_EXTRA_TEMPLATE.format(extra=extra)
    return prompt
