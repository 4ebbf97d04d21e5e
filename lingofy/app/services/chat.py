"""
Chat Service: assistant transcript → provider reply.

The client sends the whole transcript each time (its greeting excluded);
nothing is kept server-side.
"""

import asyncio
import logging
from typing import Any

from lingofy.app.providers.base import AIProvider, ChatError
from lingofy.domain.constants import CHAT_ROLES, DEFAULT_AI_TIMEOUT
from lingofy.domain.schemas import ChatTurn

logger = logging.getLogger(__name__)

INVALID_MESSAGES = "INVALID_MESSAGES"


def parse_turns(messages: Any) -> list[ChatTurn]:
    """
    Validate a raw `messages` array.

    Raises:
        ChatError: INVALID_MESSAGES (empty, bad role/content, or the last
            turn is not the user's)
    """
    if not isinstance(messages, list) or not messages:
        raise ChatError(INVALID_MESSAGES, "Messages are required.")

    turns: list[ChatTurn] = []
    for i, item in enumerate(messages):
        if not isinstance(item, dict):
            raise ChatError(INVALID_MESSAGES, f"Message {i} must be an object.", index=i)
        role = item.get("role")
        content = item.get("content")
        if role not in CHAT_ROLES:
            raise ChatError(
                INVALID_MESSAGES,
                f"Message {i} has an invalid role: {role!r}.",
                index=i,
            )
        if not isinstance(content, str) or not content.strip():
            raise ChatError(INVALID_MESSAGES, f"Message {i} is empty.", index=i)
        turns.append(ChatTurn(role=role, content=content))

    if turns[-1].role != "user":
        raise ChatError(INVALID_MESSAGES, "The last message must come from the user.")

    return turns


class ChatService:
    """Assistant chat through the configured provider."""

    def __init__(self, provider: AIProvider, config: dict | None = None):
        """
        Args:
            provider: AI provider (injected)
            config: app config (ai.timeout)
        """
        self.provider = provider
        ai_config = (config or {}).get("ai", {}) or {}
        self.timeout = float(ai_config.get("timeout", DEFAULT_AI_TIMEOUT))

    async def reply(self, messages: Any) -> str:
        """
        Reply to a raw transcript.

        Raises:
            ChatError
        """
        turns = parse_turns(messages)
        try:
            return await asyncio.wait_for(self.provider.chat(turns), timeout=self.timeout)
        except TimeoutError as e:
            logger.warning(f"Chat timed out after {self.timeout}s")
            raise ChatError(
                "TIMEOUT",
                "The assistant took too long to answer. Please try again.",
                timeout=self.timeout,
            ) from e
