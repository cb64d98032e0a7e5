"""Conversation event wrappers, one class per event variant."""

from __future__ import annotations

from parrot.models.message import ChatMessageSegment
from parrot.models.wire import (
    Attachment,
    Event,
    EventType,
    MembershipChangeType,
    UserID,
)


class ConversationEvent:
    """An event which becomes part of a conversation's history."""

    def __init__(self, event: Event) -> None:
        self._event = event

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, timestamp={self.timestamp})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConversationEvent):
            return NotImplemented
        return self._event == other._event

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def event(self) -> Event:
        return self._event

    @property
    def id(self) -> str:
        return self._event.event_id

    @property
    def timestamp(self) -> int:
        return self._event.timestamp

    @property
    def user_id(self) -> UserID:
        return self._event.sender_id

    @property
    def conversation_id(self) -> str:
        return self._event.conversation_id.id

    @property
    def event_type(self) -> EventType:
        return self._event.event_type


class ChatMessageEvent(ConversationEvent):
    """An event containing a chat message."""

    @property
    def segments(self) -> list[ChatMessageSegment]:
        if self._event.chat_message is None:
            return []
        return [
            ChatMessageSegment.deserialize(segment)
            for segment in self._event.chat_message.message_content.segment
        ]

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)

    @property
    def attachments(self) -> list[Attachment]:
        if self._event.chat_message is None:
            return []
        return list(self._event.chat_message.message_content.attachment)


class RenameEvent(ConversationEvent):
    """An event that renames a conversation."""

    @property
    def new_name(self) -> str:
        rename = self._event.conversation_rename
        return rename.new_name if rename else ""

    @property
    def old_name(self) -> str:
        rename = self._event.conversation_rename
        return rename.old_name if rename else ""


class MembershipChangeEvent(ConversationEvent):
    """An event that adds or removes participants."""

    @property
    def type(self) -> MembershipChangeType:
        change = self._event.membership_change
        if change is not None:
            return change.type
        if self._event.event_type == EventType.REMOVE_USER:
            return MembershipChangeType.LEAVE
        return MembershipChangeType.JOIN

    @property
    def participant_ids(self) -> list[UserID]:
        change = self._event.membership_change
        return list(change.participant_ids) if change else []


_EVENT_CLASSES: dict[EventType, type[ConversationEvent]] = {
    EventType.REGULAR_CHAT_MESSAGE: ChatMessageEvent,
    EventType.SMS: ChatMessageEvent,
    EventType.RENAME_CONVERSATION: RenameEvent,
    EventType.ADD_USER: MembershipChangeEvent,
    EventType.REMOVE_USER: MembershipChangeEvent,
}


def wrap_event(event: Event) -> ConversationEvent:
    """Wrap a wire event in the class named by its event_type."""
    return _EVENT_CLASSES.get(event.event_type, ConversationEvent)(event)
