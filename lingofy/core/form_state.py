"""
Form state: dotted-path edits on a StoreProfile.

Rules:
- Edits never mutate: the touched section is replaced, every other section
  object is carried over as-is.
- A path without "." is a silent no-op (partially wired inputs).
- Numeric input that does not parse becomes 0 (or keeps the previous value
  under the "keep" policy). Price stays finite and non-negative.
"""

import logging
import math
import re
from dataclasses import replace
from typing import Any

from lingofy.domain.errors import ErrorCodes, FieldPathError
from lingofy.domain.schemas import (
    SECTION_NAMES,
    FieldKind,
    StoreProfile,
    section_leaves,
)

logger = logging.getLogger(__name__)

INVALID_NUMBER_ZERO = "zero"
INVALID_NUMBER_KEEP = "keep"

# Leading float, like a browser's parseFloat: "12.5kg" → 12.5
_LEADING_FLOAT_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number(raw_value: Any) -> float | None:
    """
    Parse numeric input.

    Returns:
        finite non-negative float, or None when the input is unusable
    """
    if isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, (int, float)):
        try:
            number = float(raw_value)
        except OverflowError:
            # int beyond float range
            return None
    else:
        match = _LEADING_FLOAT_RE.match(str(raw_value))
        if match is None:
            return None
        number = float(match.group(1))

    if not math.isfinite(number) or number < 0:
        return None
    return number


def split_path(path: str) -> tuple[str, str] | None:
    """"section.field" → (section, field); None when there is no separator."""
    if "." not in path:
        return None
    section, _, field_name = path.partition(".")
    return section, field_name


def apply_field_edit(
    state: StoreProfile,
    path: str,
    raw_value: Any,
    field_kind: FieldKind | str | None = None,
    invalid_number: str = INVALID_NUMBER_ZERO,
) -> StoreProfile:
    """
    Apply one form edit.

    Args:
        state: current profile
        path: "<section>.<field>" with wire keys (e.g. "product.price")
        raw_value: value as typed by the user
        field_kind: "number" or "text"; None uses the schema's kind
        invalid_number: "zero" | "keep" for unparsable numeric input

    Returns:
        new StoreProfile (or `state` itself for a path without ".")

    Raises:
        FieldPathError: unknown section/field, or a non-editable leaf
    """
    parts = split_path(path)
    if parts is None:
        return state
    section_name, wire_key = parts

    if section_name not in SECTION_NAMES:
        raise FieldPathError(
            ErrorCodes.UNKNOWN_FIELD_PATH,
            f"Unknown section: {section_name!r}",
            path=path,
        )

    section = getattr(state, section_name)
    leaf = section_leaves(section).get(wire_key)
    if leaf is None:
        raise FieldPathError(
            ErrorCodes.UNKNOWN_FIELD_PATH,
            f"Unknown field: {path!r}",
            path=path,
        )

    schema_kind: FieldKind = leaf.metadata["kind"]
    if schema_kind is FieldKind.IMAGES:
        raise FieldPathError(
            ErrorCodes.UNKNOWN_FIELD_PATH,
            "Gallery images are not editable as a form field",
            path=path,
        )

    kind = FieldKind(field_kind) if field_kind is not None else schema_kind

    value: Any
    if kind is FieldKind.NUMBER or schema_kind is FieldKind.NUMBER:
        parsed = parse_number(raw_value)
        if parsed is not None:
            value = parsed
        elif invalid_number == INVALID_NUMBER_KEEP:
            logger.debug("Ignoring invalid numeric input for %s: %r", path, raw_value)
            return state
        else:
            value = 0.0
    else:
        value = "" if raw_value is None else str(raw_value)

    new_section = replace(section, **{leaf.name: value})
    return replace(state, **{section_name: new_section})


def with_images(state: StoreProfile, images: list[Any]) -> StoreProfile:
    """Profile copy whose product.images is the given gallery."""
    return replace(state, product=replace(state.product, images=tuple(images)))
