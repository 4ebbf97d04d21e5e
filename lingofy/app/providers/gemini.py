"""
Google Gemini Provider.

Exception policy (chat):
- FALLBACK_ERRORS: NotFound, ServiceUnavailable, ResourceExhausted → fallback model
- REJECT_IMMEDIATELY: InvalidArgument, PermissionDenied, Unauthenticated → reject

Image generation is a single attempt on the image model; every failure is
an ImageGenerationError.
"""

import logging
import os
from typing import Any

from lingofy.domain.constants import (
    CHAT_SYSTEM_INSTRUCTION,
    DEFAULT_CHAT_MODEL,
    DEFAULT_GENERATED_MIME_TYPE,
    DEFAULT_IMAGE_MODEL,
    IMAGE_SOURCE_GENERATED,
)
from lingofy.domain.schemas import ChatTurn, ImageReference

from .base import AIProvider, ChatError, ImageGenerationError

logger = logging.getLogger(__name__)

# =============================================================================
# Exception Mapping
# =============================================================================

FALLBACK_ERRORS: tuple[type[Exception], ...] = ()

REJECT_IMMEDIATELY: tuple[type[Exception], ...] = ()

# google-api-core ships with google-generativeai
try:
    from google.api_core.exceptions import (
        InvalidArgument,
        NotFound,
        PermissionDenied,
        ResourceExhausted,
        ServiceUnavailable,
        Unauthenticated,
    )

    FALLBACK_ERRORS = (
        NotFound,            # unknown/unsupported model
        ServiceUnavailable,  # 5xx
        ResourceExhausted,   # 429 quota/rate limit
    )

    REJECT_IMMEDIATELY = (
        InvalidArgument,    # bad input
        PermissionDenied,   # permissions
        Unauthenticated,    # API key
    )
except ImportError:
    pass


class GeminiProvider(AIProvider):
    """
    Gemini chat + image provider.

    Usage:
        provider = GeminiProvider(
            chat_model="gemini-2.5-flash",
            image_model="gemini-2.5-flash-image",
        )
        reply = await provider.chat([ChatTurn("user", "Hi")])
    """

    def __init__(
        self,
        chat_model: str = DEFAULT_CHAT_MODEL,
        chat_fallback: str | None = None,
        image_model: str = DEFAULT_IMAGE_MODEL,
        api_key: str | None = None,
        system_instruction: str = CHAT_SYSTEM_INSTRUCTION,
    ):
        """
        Args:
            chat_model: chat model ID (from config)
            chat_fallback: chat fallback model (None → no second attempt)
            image_model: image generation model ID
            api_key: API key (defaults to GOOGLE_API_KEY)
            system_instruction: assistant persona for chat
        """
        self.chat_model = chat_model
        self.chat_fallback = chat_fallback
        self.image_model = image_model
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        self.system_instruction = system_instruction
        self._client: Any = None

    @classmethod
    def from_config(cls, config: dict) -> "GeminiProvider":
        """Build from the `ai` config section."""
        ai_config = config.get("ai", {}) or {}
        chat_config = ai_config.get("chat", {}) or {}
        image_config = ai_config.get("image", {}) or {}
        return cls(
            chat_model=chat_config.get("model", DEFAULT_CHAT_MODEL),
            chat_fallback=chat_config.get("fallback"),
            image_model=image_config.get("model", DEFAULT_IMAGE_MODEL),
        )

    def _get_client(self) -> Any:
        """Gemini client (lazy init)."""
        if self._client is None:
            try:
                import google.generativeai as genai
                genai.configure(api_key=self.api_key)
                self._client = genai
            except ImportError as e:
                raise ChatError(
                    "GEMINI_NOT_INSTALLED",
                    "google-generativeai package not installed. "
                    "Run: pip install google-generativeai",
                ) from e
        return self._client

    # =========================================================================
    # Chat
    # =========================================================================

    async def chat(self, turns: list[ChatTurn]) -> str:
        try:
            return await self._call_chat(self.chat_model, turns)

        except FALLBACK_ERRORS as e:
            logger.warning(
                f"Primary chat model ({self.chat_model}) failed with fallback error: {e}. "
                f"Attempting fallback..."
            )

            if self.chat_fallback is None:
                raise ChatError(
                    "NO_FALLBACK",
                    self._get_user_friendly_error_message(e),
                    model=self.chat_model,
                ) from e

            try:
                logger.info(f"Trying fallback model: {self.chat_fallback}")
                text = await self._call_chat(self.chat_fallback, turns)
                logger.info("Fallback model succeeded")
                return text
            except Exception as fallback_error:
                logger.error(f"Fallback model also failed: {fallback_error}")
                raise ChatError(
                    "FALLBACK_FAILED",
                    f"{self._get_user_friendly_error_message(fallback_error)} "
                    f"Both the primary and the fallback model failed.",
                    primary_model=self.chat_model,
                    fallback_model=self.chat_fallback,
                ) from fallback_error

        except REJECT_IMMEDIATELY as e:
            logger.error(f"Authentication or input error: {e}", exc_info=True)
            raise ChatError(
                "AUTH_OR_INPUT_ERROR",
                self._get_user_friendly_error_message(e),
                model=self.chat_model,
            ) from e

        except ChatError:
            raise

        except Exception as e:
            logger.error(f"Chat failed with unexpected error: {e}", exc_info=True)
            raise ChatError(
                "CHAT_FAILED",
                self._get_user_friendly_error_message(e),
                model=self.chat_model,
            ) from e

    async def _call_chat(self, model: str, turns: list[ChatTurn]) -> str:
        """Gemini chat call."""
        genai = self._get_client()
        model_instance = genai.GenerativeModel(
            model,
            system_instruction=self.system_instruction,
        )

        contents = [
            {"role": turn.role, "parts": [turn.content]}
            for turn in turns
        ]
        response = await model_instance.generate_content_async(contents)

        try:
            text = response.text
        except ValueError as e:
            # blocked or empty candidate
            raise ChatError(
                "EMPTY_RESPONSE",
                "The assistant returned no text. Please rephrase and try again.",
                model=model,
            ) from e

        return text or ""

    # =========================================================================
    # Image
    # =========================================================================

    async def generate_image(self, prompt: str) -> ImageReference:
        try:
            genai = self._get_client()
            model_instance = genai.GenerativeModel(self.image_model)
            response = await model_instance.generate_content_async(
                prompt,
                generation_config={"response_modalities": ["IMAGE"]},
            )
        except ChatError as e:
            raise ImageGenerationError(e.code, e.message) from e
        except Exception as e:
            logger.error(f"AI image generation error: {e}", exc_info=True)
            raise ImageGenerationError(
                "GENERATION_FAILED",
                self._get_user_friendly_error_message(e),
                model=self.image_model,
            ) from e

        image = self._extract_image(response)
        if image is None:
            raise ImageGenerationError(
                "NO_IMAGE_RETURNED",
                "AI did not return a valid image.",
                model=self.image_model,
            )
        return image

    def _extract_image(self, response: Any) -> ImageReference | None:
        """First inline image part of the first candidate."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None

        content = getattr(candidates[0], "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None) if inline is not None else None
            if not data:
                continue

            mime_type = getattr(inline, "mime_type", None) or DEFAULT_GENERATED_MIME_TYPE
            if isinstance(data, str):
                # already base64 text
                return ImageReference(
                    mime_type=mime_type,
                    data=data,
                    source=IMAGE_SOURCE_GENERATED,
                )
            return ImageReference.from_bytes(
                bytes(data),
                mime_type,
                source=IMAGE_SOURCE_GENERATED,
            )
        return None

    # =========================================================================
    # Errors
    # =========================================================================

    def _get_user_friendly_error_message(self, error: Exception) -> str:
        """User-facing message for a provider exception."""
        try:
            from google.api_core.exceptions import (
                InvalidArgument,
                PermissionDenied,
                ResourceExhausted,
                ServiceUnavailable,
                Unauthenticated,
            )

            if isinstance(error, Unauthenticated):
                return (
                    "Google API authentication failed. "
                    "Check the GOOGLE_API_KEY environment variable."
                )
            elif isinstance(error, PermissionDenied):
                return "The API key is not allowed to perform this request."
            elif isinstance(error, ResourceExhausted):
                return "The AI usage limit was reached. Please try again later."
            elif isinstance(error, ServiceUnavailable):
                return "The AI service is temporarily unavailable. Please try again."
            elif isinstance(error, InvalidArgument):
                return "The request to the AI service was not valid."
        except ImportError:
            pass

        error_str = str(error)
        lowered = error_str.lower()
        if "api_key" in lowered or "api key" in lowered:
            return "Check the API key configuration."
        elif "quota" in lowered or "limit" in lowered:
            return "The AI usage limit was reached. Please try again later."
        elif "connection" in lowered:
            return "A network error occurred."
        elif "timeout" in lowered:
            return "The request timed out. Please try again."

        return f"The AI request failed: {error_str}"
