"""Observer interface for conversation state changes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from parrot.models.user import User
from parrot.models.wire import TypingType, WatermarkNotification

if TYPE_CHECKING:
    from parrot.conversations.events import ConversationEvent
    from parrot.conversations.store import ConversationStore


class ConversationObserver:
    """
    Receives notifications from a ConversationStore.

    Every method is a no-op here; subclasses override the ones they need.
    """

    def on_typing_status_change(
        self, conversation: ConversationStore, user: User, status: TypingType
    ) -> None:
        pass

    def on_event(self, conversation: ConversationStore, event: ConversationEvent) -> None:
        pass

    def on_watermark_notification(
        self, conversation: ConversationStore, notification: WatermarkNotification
    ) -> None:
        pass

    def on_events_loaded(self, conversation: ConversationStore) -> None:
        """Historical events were merged into the cache."""
        pass

    def on_conversation_update(self, conversation: ConversationStore) -> None:
        """Conversation metadata changed; the sort timestamp probably moved."""
        pass
