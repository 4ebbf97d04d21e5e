"""
Logging setup and save-echo payload summaries.

Rules:
- Saved payloads are echoed to the log, never stored.
- Inline images are reduced to "<mime, N bytes>" before logging.
- PII masking (emails, phone numbers) is opt-in via logging.mask_pii.
"""

import json
import logging
import re
from typing import Any

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Masking patterns (regex)
PII_PATTERNS: list[str] = [
    r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}",  # email
    r"\+?\d[\d\s().-]{7,}\d",                            # phone
]

_DATA_URL_RE = re.compile(r"^data:([\w.+-]+/[\w.+-]+);base64,(.*)$", re.S)


# =============================================================================
# Setup
# =============================================================================

def configure_logging(config: dict[str, Any] | None = None) -> None:
    """
    Configure root logging from the `logging` config section.

    Args:
        config: full app config (uses logging.level / logging.format)
    """
    log_config = (config or {}).get("logging", {}) or {}
    level_name = str(log_config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format=log_config.get("format", DEFAULT_LOG_FORMAT),
    )
    logging.getLogger("lingofy").setLevel(level)


# =============================================================================
# Payload Summaries
# =============================================================================

def mask_pii(text: str, patterns: list[str] | None = None) -> str:
    """Replace PII matches with [MASKED]."""
    for pattern in patterns or PII_PATTERNS:
        text = re.sub(pattern, "[MASKED]", text)
    return text


def summarize_image(value: str) -> str:
    """data URL → "<image/png, 1234 bytes>"; other strings unchanged."""
    match = _DATA_URL_RE.match(value)
    if match is None:
        return value
    data = match.group(2)
    size = len(data) * 3 // 4 - data[-2:].count("=")
    return f"<{match.group(1)}, {size} bytes>"


def _summarize(value: Any, mask: bool) -> Any:
    if isinstance(value, dict):
        return {k: _summarize(v, mask) for k, v in value.items()}
    if isinstance(value, list):
        return [_summarize(v, mask) for v in value]
    if isinstance(value, str):
        summarized = summarize_image(value)
        if mask and summarized == value:
            return mask_pii(value)
        return summarized
    return value


def summarize_payload(payload: Any, mask: bool = False) -> Any:
    """
    Loggable copy of a saved payload.

    Args:
        payload: JSON-like data as received
        mask: mask emails/phone numbers in string values

    Returns:
        new structure; the input is not modified
    """
    return _summarize(payload, mask)


def format_payload(payload: Any, mask: bool = False) -> str:
    """Pretty JSON of summarize_payload() for the save echo."""
    return json.dumps(summarize_payload(payload, mask), indent=2, ensure_ascii=False)
