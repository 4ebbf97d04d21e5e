"""
Pytest fixtures for the studio tests.

- profiles, image batches and fake collaborators shared across layers
"""

import base64
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
import yaml

from lingofy.app.providers.base import AIProvider, ImageGenerationError
from lingofy.domain.schemas import ChatTurn, ImageReference, SelectedFile, StoreProfile

# 1x1 white pixel PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake jpeg body" + b"\xff\xd9"

MIB = 1024 * 1024


# =============================================================================
# Path / Config Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """Project root."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """default.yaml contents."""
    with open(project_root / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def test_config() -> dict:
    """Small config for unit tests."""
    return {
        "ai": {"timeout": 1.0},
        "images": {
            "max_size_bytes": 5 * MIB,
            "allowed_types": ["image/jpeg", "image/png", "image/webp"],
        },
        "studio": {"invalid_number": "zero", "single_flight": True},
        "persistence": {"url": "http://persistence.test/api/v1/save"},
        "logging": {"level": "DEBUG", "mask_pii": False},
    }


# =============================================================================
# Domain Fixtures
# =============================================================================

@pytest.fixture
def profile() -> StoreProfile:
    """Default profile (price 49.99)."""
    return StoreProfile()


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def make_file() -> Callable[..., SelectedFile]:
    """
    SelectedFile factory.

    size overrides the declared size without allocating the payload.
    """

    def _make(
        name: str = "photo.png",
        mime_type: str = "image/png",
        payload: bytes = PNG_BYTES,
        size: int | None = None,
    ) -> SelectedFile:
        selected = SelectedFile.from_bytes(name, mime_type, payload)
        if size is not None:
            selected.size = size
        return selected

    return _make


@pytest.fixture
def existing_image() -> ImageReference:
    return ImageReference.from_bytes(PNG_BYTES, "image/png", name="existing.png")


# =============================================================================
# Fake Collaborators
# =============================================================================

class FakeProvider(AIProvider):
    """Scripted AI provider."""

    def __init__(
        self,
        reply: str = "Hello from the assistant",
        image: ImageReference | None = None,
        error: Exception | None = None,
    ):
        self.reply = reply
        self.image = image
        self.error = error
        self.chat_calls: list[list[ChatTurn]] = []
        self.prompts: list[str] = []

    async def chat(self, turns: list[ChatTurn]) -> str:
        self.chat_calls.append(turns)
        if self.error is not None:
            raise self.error
        return self.reply

    async def generate_image(self, prompt: str) -> ImageReference:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.image is None:
            raise ImageGenerationError("NO_IMAGE_RETURNED", "AI did not return a valid image.")
        return self.image


@pytest.fixture
def generated_image() -> ImageReference:
    return ImageReference.from_bytes(PNG_BYTES, "image/png", source="generated")


@pytest.fixture
def fake_provider(generated_image: ImageReference) -> FakeProvider:
    return FakeProvider(image=generated_image)


def json_transport(status_code: int, body: dict | None = None) -> httpx.MockTransport:
    """Transport answering every request with one JSON response."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)
