"""
AI Provider abstract interface.

The studio depends only on this interface; the concrete provider is built
from config and injected (no module-level client).
"""

from abc import ABC, abstractmethod
from typing import Any

from lingofy.domain.schemas import ChatTurn, ImageReference


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider error."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class ChatError(ProviderError):
    """Chat completion error."""
    pass


class ImageGenerationError(ProviderError):
    """Image generation error."""
    pass


# =============================================================================
# Abstract Provider
# =============================================================================

class AIProvider(ABC):
    """
    Generative AI provider.

    Role: chat replies and product image generation. Single attempt per
    image call; retries are the caller's decision.
    """

    @abstractmethod
    async def chat(self, turns: list[ChatTurn]) -> str:
        """
        Reply to a chat transcript.

        Args:
            turns: ordered transcript, last turn is the user's message

        Returns:
            reply text

        Raises:
            ChatError
        """
        ...

    @abstractmethod
    async def generate_image(self, prompt: str) -> ImageReference:
        """
        Generate one image.

        Args:
            prompt: text prompt

        Returns:
            ImageReference with source "generated"

        Raises:
            ImageGenerationError: call failed or no image in the response
        """
        ...
