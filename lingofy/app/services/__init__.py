"""
Services: studio sessions, persistence and chat.
"""

from .chat import ChatService
from .persistence import save_profile
from .studio import SessionRegistry, StudioSession

__all__ = [
    "ChatService",
    "save_profile",
    "SessionRegistry",
    "StudioSession",
]
