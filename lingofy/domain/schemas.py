"""
Data schemas for the studio.

Rules:
- Wire keys are camelCase (siteName, baseCurrency ...) and come from field
  metadata; Python attributes stay snake_case.
- Every leaf has a default, so a fresh StoreProfile() is complete.
- Profile objects are frozen: edits build new objects (see core.form_state).
"""

import base64
import binascii
import math
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

from lingofy.domain.constants import (
    DEFAULT_GENERATED_MIME_TYPE,
    IMAGE_SOURCE_GENERATED,
    IMAGE_SOURCE_UPLOAD,
    SAVE_DEFAULT_SUCCESS_MESSAGE,
)

# =============================================================================
# Field Kinds
# =============================================================================

class FieldKind(str, Enum):
    """Input kind of an editable leaf."""
    TEXT = "text"
    NUMBER = "number"
    IMAGES = "images"  # gallery, not editable by path


def _wire(key: str, kind: FieldKind = FieldKind.TEXT) -> dict[str, Any]:
    return {"wire": key, "kind": kind}


# =============================================================================
# Image Schemas
# =============================================================================

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.S)


@dataclass(frozen=True)
class ImageReference:
    """
    Inline-encoded gallery image.

    data holds the base64 text of the image bytes; data_url is the form
    stored in product.images on the wire.
    """
    mime_type: str
    data: str
    source: str = IMAGE_SOURCE_UPLOAD  # upload, generated
    name: str | None = None

    @classmethod
    def from_bytes(
        cls,
        payload: bytes,
        mime_type: str,
        source: str = IMAGE_SOURCE_UPLOAD,
        name: str | None = None,
    ) -> "ImageReference":
        return cls(
            mime_type=mime_type or DEFAULT_GENERATED_MIME_TYPE,
            data=base64.b64encode(payload).decode("ascii"),
            source=source,
            name=name,
        )

    @classmethod
    def from_data_url(
        cls,
        data_url: str,
        source: str = IMAGE_SOURCE_UPLOAD,
        name: str | None = None,
    ) -> "ImageReference":
        """
        Parse a `data:<mime>;base64,<payload>` string.

        Raises:
            ValueError: not a base64 data URL
        """
        match = _DATA_URL_RE.match(data_url.strip())
        if match is None:
            raise ValueError("not a base64 data URL")

        data = match.group("data")
        try:
            base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"invalid base64 payload: {e}") from e

        return cls(mime_type=match.group("mime"), data=data, source=source, name=name)

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    @property
    def size(self) -> int:
        """Decoded payload size in bytes."""
        padding = self.data[-2:].count("=")
        return len(self.data) * 3 // 4 - padding

    @property
    def is_generated(self) -> bool:
        return self.source == IMAGE_SOURCE_GENERATED

    def to_dict(self) -> dict[str, Any]:
        return {
            "mime_type": self.mime_type,
            "source": self.source,
            "name": self.name,
            "size": self.size,
            "data_url": self.data_url,
        }


@dataclass
class SelectedFile:
    """
    One file from a file-picker batch.

    size and mime_type are what the client declared; read() returns the
    bytes once.
    """
    name: str
    mime_type: str
    size: int
    read: Callable[[], Awaitable[bytes]]

    @classmethod
    def from_bytes(cls, name: str, mime_type: str, payload: bytes) -> "SelectedFile":
        async def _read() -> bytes:
            return payload

        return cls(name=name, mime_type=mime_type, size=len(payload), read=_read)


# =============================================================================
# Store Profile
# =============================================================================

@dataclass(frozen=True)
class MetaSection:
    site_name: str = field(default="My Creative Store", metadata=_wire("siteName"))
    site_slug: str = field(default="my-creative-store", metadata=_wire("siteSlug"))
    base_language: str = field(default="en-US", metadata=_wire("baseLanguage"))
    base_currency: str = field(default="USD", metadata=_wire("baseCurrency"))


@dataclass(frozen=True)
class CreatorSection:
    bio: str = field(
        default="I am a passionate creator sharing my work with the world.",
        metadata=_wire("bio"),
    )
    location: str = field(default="Global", metadata=_wire("location"))


@dataclass(frozen=True)
class ProductSection:
    title: str = field(default="Handcrafted Wonder", metadata=_wire("title"))
    description: str = field(
        default="A unique piece, crafted with love and care. Perfect for any occasion.",
        metadata=_wire("description"),
    )
    price: float = field(default=49.99, metadata=_wire("price", FieldKind.NUMBER))
    # index 0 is the primary image
    images: tuple[ImageReference, ...] = field(
        default=(), metadata=_wire("images", FieldKind.IMAGES)
    )


@dataclass(frozen=True)
class ContactSection:
    email: str = field(default="hello@creator.com", metadata=_wire("email"))
    phone: str = field(default="+1 (555) 123-4567", metadata=_wire("phone"))


@dataclass(frozen=True)
class SocialsSection:
    twitter: str = field(default="https://twitter.com/creator", metadata=_wire("twitter"))
    instagram: str = field(
        default="https://instagram.com/creator", metadata=_wire("instagram")
    )
    linkedin: str = field(
        default="https://linkedin.com/in/creator", metadata=_wire("linkedin")
    )


@dataclass(frozen=True)
class SeoSection:
    title: str = field(
        default="My Creative Store | Handcrafted Goods", metadata=_wire("title")
    )
    description: str = field(
        default="Discover unique handcrafted goods from a passionate creator.",
        metadata=_wire("description"),
    )


@dataclass(frozen=True)
class StoreProfile:
    """
    Editable storefront record.

    Section attribute names double as wire keys.
    """
    meta: MetaSection = field(default_factory=MetaSection)
    creator: CreatorSection = field(default_factory=CreatorSection)
    product: ProductSection = field(default_factory=ProductSection)
    contact: ContactSection = field(default_factory=ContactSection)
    socials: SocialsSection = field(default_factory=SocialsSection)
    seo: SeoSection = field(default_factory=SeoSection)

    def to_dict(self) -> dict[str, Any]:
        """JSON form with camelCase keys; images as data URLs."""
        result: dict[str, Any] = {}
        for section_field in fields(self):
            section = getattr(self, section_field.name)
            data: dict[str, Any] = {}
            for leaf in fields(section):
                value = getattr(section, leaf.name)
                if leaf.metadata["kind"] is FieldKind.IMAGES:
                    value = [image.data_url for image in value]
                data[leaf.metadata["wire"]] = value
            result[section_field.name] = data
        return result


SECTION_NAMES: tuple[str, ...] = tuple(f.name for f in fields(StoreProfile))


def section_leaves(section: Any) -> dict[str, Any]:
    """Wire key → dataclass Field for one section object or class."""
    return {leaf.metadata["wire"]: leaf for leaf in fields(section)}


def coerce_price(value: Any) -> float:
    """Finite non-negative float, else 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def profile_from_dict(data: dict[str, Any] | None) -> StoreProfile:
    """
    Build a StoreProfile from its wire form.

    Missing sections or leaves keep their defaults; unknown keys are
    ignored. Text leaves are stringified, numeric leaves coerced.

    Raises:
        ValueError: an entry in product.images is not a data URL
    """
    profile = StoreProfile()
    if not data:
        return profile

    sections: dict[str, Any] = {}
    for section_name in SECTION_NAMES:
        raw = data.get(section_name)
        default_section = getattr(profile, section_name)
        if not isinstance(raw, dict):
            sections[section_name] = default_section
            continue

        values: dict[str, Any] = {}
        for wire_key, leaf in section_leaves(default_section).items():
            if wire_key not in raw:
                continue
            value = raw[wire_key]
            kind = leaf.metadata["kind"]
            if kind is FieldKind.NUMBER:
                values[leaf.name] = coerce_price(value)
            elif kind is FieldKind.IMAGES:
                values[leaf.name] = tuple(
                    ImageReference.from_data_url(str(item)) for item in value or []
                )
            else:
                values[leaf.name] = "" if value is None else str(value)

        sections[section_name] = type(default_section)(
            **{
                leaf.name: values.get(leaf.name, getattr(default_section, leaf.name))
                for leaf in fields(default_section)
            }
        )

    return StoreProfile(**sections)


# =============================================================================
# Chat / Save Schemas
# =============================================================================

@dataclass
class ChatTurn:
    """One chat transcript entry."""
    role: str  # user, model
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class SavedConfirmation:
    """Successful save acknowledgement."""
    message: str = SAVE_DEFAULT_SUCCESS_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "message": self.message}
