"""
Core layer: studio state rules.

- Form state edits (dotted paths, numeric coercion)
- Image intake (batch validation, inline conversion)
- Logging setup and save-echo summaries
"""

from .form_state import apply_field_edit, parse_number, with_images
from .images import build_image_prompt, remove_at, validate_and_ingest, validate_images
from .logging import configure_logging, summarize_payload

__all__ = [
    # form_state
    "apply_field_edit",
    "parse_number",
    "with_images",
    # images
    "validate_and_ingest",
    "validate_images",
    "remove_at",
    "build_image_prompt",
    # logging
    "configure_logging",
    "summarize_payload",
]
