"""In-memory chat client used for offline inspection and tests."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from parrot.client.base import BaseChatClient
from parrot.models.wire import (
    ConversationState,
    Event,
    EventRequestHeader,
    GetConversationResponse,
    NotificationLevel,
    ResponseHeader,
    ResponseStatus,
    Segment,
    TypingType,
)

logger = logging.getLogger(__name__)


@dataclass
class ClientCall:
    """One recorded client request."""

    method: str
    conversation_id: str | None
    arguments: dict[str, Any] = field(default_factory=dict)


class InMemoryChatClient(BaseChatClient):
    """
    Chat client that serves history from preloaded conversation states.

    Every request is appended to ``calls``; nothing leaves the process.
    """

    def __init__(self, states: Iterable[ConversationState] = ()) -> None:
        super().__init__()
        self._states: dict[str, ConversationState] = {}
        self._uploads: dict[str, bytes] = {}
        self.calls: list[ClientCall] = []
        self.history_status = ResponseStatus.OK
        for state in states:
            self.add_state(state)

    def add_state(self, state: ConversationState) -> None:
        self._states[state.conversation.conversation_id.id] = state

    def calls_to(self, method: str) -> list[ClientCall]:
        return [call for call in self.calls if call.method == method]

    def _record(self, method: str, conversation_id: str | None, **arguments: Any) -> None:
        logger.debug(f"{method} request", extra={"conversation_id": conversation_id})
        self.calls.append(ClientCall(method, conversation_id, arguments))

    async def send_chat_message(
        self,
        request_header: EventRequestHeader,
        segments: list[Segment],
        image_id: str | None = None,
    ) -> None:
        self._record(
            "send_chat_message",
            request_header.conversation_id.id,
            request_header=request_header,
            segments=segments,
            image_id=image_id,
        )

    async def upload_image(self, data: bytes, filename: str) -> str:
        image_id = f"image-{len(self._uploads) + 1}"
        self._uploads[image_id] = data
        self._record("upload_image", None, filename=filename, size=len(data))
        return image_id

    async def get_conversation(
        self,
        conversation_id: str,
        event_timestamp: int,
        max_events: int,
    ) -> GetConversationResponse:
        self._record(
            "get_conversation",
            conversation_id,
            event_timestamp=event_timestamp,
            max_events=max_events,
        )
        if self.history_status != ResponseStatus.OK:
            return GetConversationResponse(
                response_header=ResponseHeader(
                    status=self.history_status,
                    error_description="history unavailable",
                )
            )
        state = self._states.get(conversation_id)
        if state is None:
            return GetConversationResponse(
                response_header=ResponseHeader(
                    status=ResponseStatus.INVALID_REQUEST,
                    error_description=f"unknown conversation {conversation_id}",
                )
            )
        older: list[Event] = sorted(
            (event for event in state.event if event.timestamp < event_timestamp),
            key=lambda event: event.timestamp,
        )
        page = older[-max_events:] if max_events else []
        return GetConversationResponse(
            conversation_state=ConversationState(conversation=state.conversation, event=page)
        )

    async def update_watermark(self, conversation_id: str, read_timestamp: int) -> None:
        self._record("update_watermark", conversation_id, read_timestamp=read_timestamp)

    async def set_typing(self, conversation_id: str, typing: TypingType) -> None:
        self._record("set_typing", conversation_id, typing=typing)

    async def set_focus(self, conversation_id: str) -> None:
        self._record("set_focus", conversation_id)

    async def rename_conversation(self, conversation_id: str, name: str) -> None:
        self._record("rename_conversation", conversation_id, name=name)

    async def remove_user(self, conversation_id: str) -> None:
        self._record("remove_user", conversation_id)

    async def delete_conversation(self, conversation_id: str) -> None:
        self._record("delete_conversation", conversation_id)

    async def set_conversation_notification_level(
        self, conversation_id: str, level: NotificationLevel
    ) -> None:
        self._record("set_conversation_notification_level", conversation_id, level=level)
