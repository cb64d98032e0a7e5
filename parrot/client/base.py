"""
Base Chat Client

Abstract base class defining the network operations the conversation layer
relies on. Concrete clients own the transport and wire encoding; the
conversation layer only awaits these coroutines.
"""

import itertools
import logging
import time
from abc import ABC, abstractmethod

from parrot.models.wire import (
    EventRequestHeader,
    GetConversationResponse,
    NotificationLevel,
    Segment,
    TypingType,
)

logger = logging.getLogger(__name__)


class BaseChatClient(ABC):
    """
    Abstract base class for chat service clients.

    All methods are coroutines completed by the service's response. Clients
    raise on transport failure; they do not retry.
    """

    def __init__(self) -> None:
        self._client_generated_ids = itertools.count(int(time.time() * 1000))

    def get_client_generated_id(self) -> int:
        """Return a new ID used by the server to de-duplicate sent events."""
        return next(self._client_generated_ids)

    @abstractmethod
    async def send_chat_message(
        self,
        request_header: EventRequestHeader,
        segments: list[Segment],
        image_id: str | None = None,
    ) -> None:
        """Send a chat message to the conversation named in the header."""
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def upload_image(self, data: bytes, filename: str) -> str:
        """
        Upload an image for use in a later message.

        Returns:
            The image ID to reference from ``send_chat_message``
        """
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def get_conversation(
        self,
        conversation_id: str,
        event_timestamp: int,
        max_events: int,
    ) -> GetConversationResponse:
        """Fetch up to ``max_events`` events older than ``event_timestamp``."""
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def update_watermark(self, conversation_id: str, read_timestamp: int) -> None:
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def set_typing(self, conversation_id: str, typing: TypingType) -> None:
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def set_focus(self, conversation_id: str) -> None:
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def rename_conversation(self, conversation_id: str, name: str) -> None:
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def remove_user(self, conversation_id: str) -> None:
        """Leave a group conversation."""
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def delete_conversation(self, conversation_id: str) -> None:
        """Delete a one-to-one conversation."""
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def set_conversation_notification_level(
        self, conversation_id: str, level: NotificationLevel
    ) -> None:
        pass  # pragma: no cover - abstract method
