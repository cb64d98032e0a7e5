"""Collection of conversation stores with routing of server updates."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from parrot.client.base import BaseChatClient
from parrot.config import ConversationSettings, get_settings
from parrot.conversations.events import ConversationEvent
from parrot.conversations.store import ConversationStore
from parrot.models.user import UserList
from parrot.models.wire import (
    Conversation,
    ConversationState,
    Event,
    TypingNotification,
    WatermarkNotification,
)

logger = logging.getLogger(__name__)


class ConversationList:
    """
    All known conversations, keyed by conversation ID.

    Stores report metadata and read-state changes back through
    ``conversation_did_update`` so the list can re-sort.
    """

    def __init__(
        self,
        client: BaseChatClient,
        user_list: UserList,
        states: Iterable[ConversationState] = (),
        on_change: Callable[[ConversationStore], None] | None = None,
        settings: ConversationSettings | None = None,
    ) -> None:
        self._client = client
        self._user_list = user_list
        self._settings = settings or get_settings().conversation
        self._stores: dict[str, ConversationStore] = {}
        self._sorted: list[ConversationStore] | None = None
        self._on_change = on_change

        for state in states:
            self.add_conversation(state.conversation, state.event)

    def __len__(self) -> int:
        return len(self._stores)

    def __contains__(self, conversation_id: object) -> bool:
        return conversation_id in self._stores

    def get(self, conversation_id: str) -> ConversationStore:
        """Raises KeyError for an unknown conversation ID."""
        return self._stores[conversation_id]

    @property
    def conversations(self) -> list[ConversationStore]:
        """Stores ordered by last modification, most recent first."""
        if self._sorted is None:
            self._sorted = sorted(
                self._stores.values(),
                key=lambda store: (-store.last_modified, store.id),
            )
        return self._sorted

    @property
    def unread_conversations(self) -> list[ConversationStore]:
        return [store for store in self.conversations if store.has_unread_events]

    def add_conversation(
        self, conversation: Conversation, events: Iterable[Event] = ()
    ) -> ConversationStore:
        store = ConversationStore(
            self._client,
            self._user_list,
            conversation,
            events=events,
            conversation_list=self,
            settings=self._settings,
        )
        self._stores[store.id] = store
        self._sorted = None
        logger.debug("Added conversation", extra={"conversation_id": store.id})
        return store

    def conversation_did_update(self, store: ConversationStore) -> None:
        self._sorted = None
        if self._on_change is not None:
            self._on_change(store)

    # ------------------------------------------------------------------
    # Routing of server-pushed updates
    # ------------------------------------------------------------------

    def handle_event(self, event: Event) -> ConversationEvent | None:
        store = self._lookup(event.conversation_id.id, "event")
        if store is None:
            return None
        conv_event = store.add_event(event)
        if conv_event is not None:
            store.handle_event(conv_event)
        return conv_event

    def handle_conversation_delta(self, conversation: Conversation) -> ConversationStore:
        conversation_id = conversation.conversation_id.id
        store = self._stores.get(conversation_id)
        if store is None:
            return self.add_conversation(conversation)
        store.update_conversation(conversation)
        return store

    def handle_typing_notification(self, notification: TypingNotification) -> None:
        store = self._lookup(notification.conversation_id.id, "typing notification")
        if store is None:
            return
        user = self._user_list.get_user(notification.sender_id)
        store.handle_typing_status(notification.type, user)

    def handle_watermark_notification(self, notification: WatermarkNotification) -> None:
        store = self._lookup(notification.conversation_id.id, "watermark notification")
        if store is None:
            return
        store.handle_watermark_notification(notification)

    def _lookup(self, conversation_id: str, kind: str) -> ConversationStore | None:
        store = self._stores.get(conversation_id)
        if store is None:
            logger.warning(
                f"Ignoring {kind} for unknown conversation",
                extra={"conversation_id": conversation_id},
            )
        return store
