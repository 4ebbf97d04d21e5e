"""
Studio Service: one editing session per session id.

A session owns one StoreProfile and its gallery. Collaborators (AI
provider, HTTP client for saves) are injected by the app; nothing is
module-level except the registry's in-memory map.

Concurrency:
- Single asyncio loop, so plain attribute updates need no lock.
- save / generate are single-flight per session when studio.single_flight
  is on (default): a second call while one is running is refused instead
  of racing and applying a stale result.
- Failures leave profile and gallery untouched so the user can retry.
"""

import asyncio
import logging
import uuid
from collections import OrderedDict
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

import httpx

from lingofy.app.providers.base import AIProvider, ProviderError
from lingofy.app.services.persistence import save_profile
from lingofy.core.form_state import INVALID_NUMBER_ZERO, apply_field_edit, with_images
from lingofy.core.images import (
    build_image_prompt,
    remove_at,
    validate_and_ingest,
    validate_images,
)
from lingofy.domain.constants import (
    ALLOWED_IMAGE_TYPES,
    DEFAULT_AI_TIMEOUT,
    DEFAULT_MAX_SESSIONS,
    DEFAULT_PERSISTENCE_URL,
    MAX_IMAGE_SIZE_BYTES,
)
from lingofy.domain.errors import (
    ErrorCodes,
    GenerationError,
    OperationInProgressError,
    SessionNotFoundError,
)
from lingofy.domain.schemas import (
    FieldKind,
    ImageReference,
    SavedConfirmation,
    SelectedFile,
    StoreProfile,
    profile_from_dict,
)

logger = logging.getLogger(__name__)

OP_SAVE = "save"
OP_GENERATE = "generate"


class StudioSession:
    """
    Editing session.

    Lifecycle per save/generate call: idle → running → succeeded | failed.
    """

    def __init__(
        self,
        session_id: str,
        provider: AIProvider,
        http_client: httpx.AsyncClient,
        config: dict | None = None,
        profile: StoreProfile | None = None,
    ):
        """
        Args:
            session_id: session ID
            provider: AI provider for image generation
            http_client: client for the persistence endpoint
            config: app config (studio.*, images.*, persistence.*, ai.timeout)
            profile: initial profile (None → defaults)

        Raises:
            ImageValidationError: a seeded image breaks the size/type policy
        """
        config = config or {}
        studio_config = config.get("studio", {}) or {}
        images_config = config.get("images", {}) or {}
        persistence_config = config.get("persistence", {}) or {}
        ai_config = config.get("ai", {}) or {}

        self.session_id = session_id
        self.provider = provider
        self.http_client = http_client

        self.invalid_number: str = studio_config.get("invalid_number", INVALID_NUMBER_ZERO)
        self.single_flight: bool = bool(studio_config.get("single_flight", True))
        self.max_image_size: int = int(images_config.get("max_size_bytes", MAX_IMAGE_SIZE_BYTES))
        self.allowed_types: tuple[str, ...] = tuple(
            images_config.get("allowed_types", ALLOWED_IMAGE_TYPES)
        )
        self.save_url: str = persistence_config.get("url", DEFAULT_PERSISTENCE_URL)
        self.save_timeout: float | None = persistence_config.get("timeout")
        self.ai_timeout = float(ai_config.get("timeout", DEFAULT_AI_TIMEOUT))

        initial = profile or StoreProfile()
        validate_images(initial.product.images, self.max_image_size, self.allowed_types)
        # gallery is held apart from the profile and merged at save time
        self.images: list[ImageReference] = list(initial.product.images)
        self.profile: StoreProfile = with_images(initial, [])

        self.created_at = datetime.now(UTC).isoformat()
        self.updated_at = self.created_at
        self._in_flight: set[str] = set()

    # =========================================================================
    # Single-flight
    # =========================================================================

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        if self.single_flight and name in self._in_flight:
            raise OperationInProgressError(
                ErrorCodes.OPERATION_IN_PROGRESS,
                f"A {name} is already in progress for this session.",
                session_id=self.session_id,
                operation=name,
            )
        self._in_flight.add(name)
        try:
            yield
        finally:
            self._in_flight.discard(name)

    def is_busy(self, name: str) -> bool:
        return name in self._in_flight

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC).isoformat()

    # =========================================================================
    # Operations
    # =========================================================================

    def edit_field(
        self,
        path: str,
        value: Any,
        kind: FieldKind | str | None = None,
    ) -> StoreProfile:
        """Apply a dotted-path edit (see core.form_state.apply_field_edit)."""
        self.profile = apply_field_edit(
            self.profile,
            path,
            value,
            kind,
            invalid_number=self.invalid_number,
        )
        self._touch()
        return self.profile

    async def ingest_files(self, files: Sequence[SelectedFile]) -> list[ImageReference]:
        """Validate and append a file batch; the gallery is untouched on failure."""
        self.images = await validate_and_ingest(
            files,
            self.images,
            max_size=self.max_image_size,
            allowed_types=self.allowed_types,
        )
        self._touch()
        return self.images

    def remove_image(self, index: int) -> list[ImageReference]:
        self.images = remove_at(self.images, index)
        self._touch()
        return self.images

    async def generate_image(self, extra_prompt: str | None = None) -> ImageReference:
        """
        Generate a product image and append it to the gallery.

        Raises:
            GenerationError: provider failure, timeout, or no image
            OperationInProgressError: a generation is already running
        """
        with self._operation(OP_GENERATE):
            prompt = build_image_prompt(self.profile, extra_prompt)
            try:
                image = await asyncio.wait_for(
                    self.provider.generate_image(prompt),
                    timeout=self.ai_timeout,
                )
            except TimeoutError as e:
                logger.warning(f"Image generation timed out after {self.ai_timeout}s")
                raise GenerationError(
                    ErrorCodes.GENERATION_TIMEOUT,
                    "Image generation took too long. Please try again.",
                    timeout=self.ai_timeout,
                ) from e
            except ProviderError as e:
                code = (
                    ErrorCodes.NO_IMAGE_RETURNED
                    if e.code == ErrorCodes.NO_IMAGE_RETURNED
                    else ErrorCodes.GENERATION_FAILED
                )
                raise GenerationError(code, e.message, provider_code=e.code) from e

            self.images = [*self.images, image]
            self._touch()
            return image

    async def save(self) -> SavedConfirmation:
        """
        Save profile + gallery.

        Raises:
            SaveError
            OperationInProgressError: a save is already running
        """
        with self._operation(OP_SAVE):
            return await save_profile(
                self.profile,
                self.images,
                self.http_client,
                self.save_url,
                timeout=self.save_timeout,
            )

    def snapshot(self) -> dict[str, Any]:
        """JSON view: profile (without inline images) + indexed gallery."""
        profile = self.profile.to_dict()
        profile["product"].pop("images", None)
        return {
            "session_id": self.session_id,
            "profile": profile,
            "images": [
                {"index": i, **image.to_dict()}
                for i, image in enumerate(self.images)
            ],
            "saving": self.is_busy(OP_SAVE),
            "generating": self.is_busy(OP_GENERATE),
            "updated_at": self.updated_at,
        }


class SessionRegistry:
    """
    In-memory session_id → StudioSession map.

    Nothing is persisted; sessions end with the process. At most
    studio.max_sessions are held: creating one more evicts the least
    recently used idle session.
    """

    def __init__(
        self,
        provider: AIProvider,
        http_client: httpx.AsyncClient,
        config: dict | None = None,
    ):
        self.provider = provider
        self.http_client = http_client
        self.config = config or {}
        studio_config = self.config.get("studio", {}) or {}
        self.max_sessions = max(1, int(studio_config.get("max_sessions", DEFAULT_MAX_SESSIONS)))
        # least recently used first
        self._sessions: OrderedDict[str, StudioSession] = OrderedDict()

    def create(self, profile_data: dict[str, Any] | None = None) -> StudioSession:
        """
        New session, optionally seeded from a profile in wire form.

        Raises:
            ValueError: profile_data has an invalid image entry
            ImageValidationError: a seeded image breaks the size/type policy
        """
        session_id = str(uuid.uuid4())
        session = StudioSession(
            session_id,
            provider=self.provider,
            http_client=self.http_client,
            config=self.config,
            profile=profile_from_dict(profile_data),
        )
        self._evict()
        self._sessions[session_id] = session
        logger.info("Created studio session %s", session_id)
        return session

    def get(self, session_id: str) -> StudioSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(
                ErrorCodes.SESSION_NOT_FOUND,
                "Session not found.",
                session_id=session_id,
            )
        self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def _evict(self) -> None:
        """Make room for one session; busy sessions are never evicted."""
        while len(self._sessions) >= self.max_sessions:
            victim = next(
                (
                    sid for sid, s in self._sessions.items()
                    if not (s.is_busy(OP_SAVE) or s.is_busy(OP_GENERATE))
                ),
                None,
            )
            if victim is None:
                break
            del self._sessions[victim]
            logger.info("Evicted idle studio session %s", victim)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
