"""
AI Provider Abstraction.

Model names come from config only.
"""

from .base import AIProvider, ChatError, ImageGenerationError, ProviderError
from .gemini import GeminiProvider

__all__ = [
    "AIProvider",
    "ProviderError",
    "ChatError",
    "ImageGenerationError",
    "GeminiProvider",
]
