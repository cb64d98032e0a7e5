"""Conversation state caching for the chat client."""

from .conversation_list import ConversationList
from .events import (
    ChatMessageEvent,
    ConversationEvent,
    MembershipChangeEvent,
    RenameEvent,
    wrap_event,
)
from .observer import ConversationObserver
from .queue import SendQueue
from .store import ConversationStore

__all__ = [
    "ChatMessageEvent",
    "ConversationEvent",
    "ConversationList",
    "ConversationObserver",
    "ConversationStore",
    "MembershipChangeEvent",
    "RenameEvent",
    "SendQueue",
    "wrap_event",
]
