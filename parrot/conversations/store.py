"""Per-conversation event cache and the actions a user can take on it."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from parrot.client.base import BaseChatClient
from parrot.config import ConversationSettings, get_settings
from parrot.conversations.events import ChatMessageEvent, ConversationEvent, wrap_event
from parrot.conversations.observer import ConversationObserver
from parrot.conversations.queue import SendQueue
from parrot.models.errors import (
    EventNotFoundError,
    InvalidServerResponseError,
    UnsupportedContentError,
)
from parrot.models.message import ChatMessageSegment, Content, segments_from_content
from parrot.models.user import User, UserList
from parrot.models.wire import (
    Conversation,
    ConversationType,
    ConversationView,
    DeliveryMedium,
    DeliveryMediumType,
    Event,
    EventRequestHeader,
    NotificationLevel,
    OffTheRecordStatus,
    ResponseStatus,
    TypingType,
    UserID,
    WatermarkNotification,
)

if TYPE_CHECKING:
    from parrot.conversations.conversation_list import ConversationList

logger = logging.getLogger(__name__)

EventsCallback = Callable[[list[ConversationEvent]], None]


class ConversationStore:
    """
    Cache of one conversation's events and state, wrapping a chat client.

    All methods are expected to run on a single event loop. Sends are
    serialized through a per-conversation SendQueue.
    """

    def __init__(
        self,
        client: BaseChatClient,
        user_list: UserList,
        conversation: Conversation,
        events: Iterable[Event] = (),
        conversation_list: ConversationList | None = None,
        observer: ConversationObserver | None = None,
        settings: ConversationSettings | None = None,
    ) -> None:
        self._client = client
        self._user_list = user_list
        self._conversation = conversation.model_copy(deep=True)
        self._settings = settings or get_settings().conversation
        self._events_dict: dict[str, ConversationEvent] = {}
        self._cached_events: list[ConversationEvent] | None = None
        self._typing_statuses: dict[UserID, TypingType] = {}
        self._send_queue = SendQueue(self.id)
        self.conversation_list = conversation_list
        self.observer = observer

        for event in events:
            self.add_event(event)

    def __repr__(self) -> str:
        return f"ConversationStore(id={self.id!r}, events={len(self._events_dict)})"

    # ------------------------------------------------------------------
    # Conversation record
    # ------------------------------------------------------------------

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def id(self) -> str:
        return self._conversation.conversation_id.id

    @property
    def send_queue(self) -> SendQueue:
        return self._send_queue

    @property
    def users(self) -> list[User]:
        self_id = self._user_list.self_user.id
        users = []
        for participant in self._conversation.participant_data:
            if participant.id in self._user_list:
                users.append(self._user_list.get_user(participant.id))
            else:
                users.append(User.from_participant(participant, self_id))
        return users

    @property
    def name(self) -> str:
        """Explicit conversation name, else the other participants' names."""
        if self._conversation.name:
            return self._conversation.name
        return ", ".join(user.full_name for user in self.users if not user.is_self)

    @property
    def last_modified(self) -> int:
        return self._conversation.self_conversation_state.sort_timestamp

    @property
    def latest_read_timestamp(self) -> int:
        return self._conversation.self_conversation_state.self_read_state.latest_read_timestamp

    @latest_read_timestamp.setter
    def latest_read_timestamp(self, value: int) -> None:
        self._conversation.self_conversation_state.self_read_state.latest_read_timestamp = value

    @property
    def is_archived(self) -> bool:
        return ConversationView.ARCHIVED in self._conversation.self_conversation_state.view

    @property
    def is_quiet(self) -> bool:
        return (
            self._conversation.self_conversation_state.notification_level
            == NotificationLevel.QUIET
        )

    @property
    def is_off_the_record(self) -> bool:
        return self._conversation.otr_status == OffTheRecordStatus.OFF_THE_RECORD

    def get_user(self, user_id: UserID) -> User:
        return self._user_list.get_user(user_id)

    def update_conversation(self, conversation: Conversation) -> None:
        """
        Replace the conversation record with a server update.

        Updates are deltas where unset fields mean "unchanged", so the read
        watermark and delivery medium options are carried over when the
        update leaves them empty.
        """
        old_state = self._conversation.self_conversation_state
        old_timestamp = old_state.self_read_state.latest_read_timestamp
        self._conversation = conversation.model_copy(deep=True)

        new_state = self._conversation.self_conversation_state
        if not new_state.delivery_medium_option:
            new_state.delivery_medium_option = list(old_state.delivery_medium_option)
        if self.latest_read_timestamp == 0:
            self.latest_read_timestamp = old_timestamp

        self._notify_updated()

    # ------------------------------------------------------------------
    # Event cache
    # ------------------------------------------------------------------

    @property
    def events(self) -> list[ConversationEvent]:
        """Cached events, oldest first. Ties are ordered by event ID."""
        if self._cached_events is None:
            self._cached_events = sorted(
                self._events_dict.values(), key=lambda event: (event.timestamp, event.id)
            )
        return list(self._cached_events)

    @property
    def messages(self) -> list[ChatMessageEvent]:
        return [event for event in self.events if isinstance(event, ChatMessageEvent)]

    @property
    def unread_events(self) -> list[ConversationEvent]:
        """
        Events newer than the read watermark, oldest first.

        Some clients don't advance the watermark for membership changes, so
        this may include events those clients consider read.
        """
        watermark = self.latest_read_timestamp
        return [event for event in self.events if event.timestamp > watermark]

    @property
    def has_unread_events(self) -> bool:
        return bool(self.unread_events)

    def add_event(self, event: Event) -> ConversationEvent | None:
        """
        Wrap a wire event and add it to the cache.

        Returns the wrapped event, or None when the ID is already cached and
        the duplicate policy is "ignore".
        """
        return self._insert(wrap_event(event))

    def _insert(self, conv_event: ConversationEvent) -> ConversationEvent | None:
        if conv_event.id in self._events_dict and self._settings.duplicate_events == "ignore":
            logger.debug(
                "Ignoring duplicate event",
                extra={"conversation_id": self.id, "event_id": conv_event.id},
            )
            return None
        self._events_dict[conv_event.id] = conv_event
        self._cached_events = None
        return conv_event

    def get_event(self, event_id: str) -> ConversationEvent | None:
        return self._events_dict.get(event_id)

    def next_event(self, event_id: str, prev: bool = False) -> ConversationEvent | None:
        """
        Return the event following ``event_id`` (or preceding it if ``prev``).

        Returns None at either end of the history.

        Raises:
            EventNotFoundError: If no cached event has this ID
        """
        if event_id not in self._events_dict:
            raise EventNotFoundError(event_id)
        events = self.events
        index = self._index_of(event_id)
        if prev:
            return events[index - 1] if index > 0 else None
        return events[index + 1] if index + 1 < len(events) else None

    def _index_of(self, event_id: str) -> int:
        for index, event in enumerate(self.events):
            if event.id == event_id:
                return index
        raise EventNotFoundError(event_id)

    async def get_events(
        self,
        event_id: str | None = None,
        max_events: int | None = None,
        callback: EventsCallback | None = None,
    ) -> list[ConversationEvent] | None:
        """
        Return cached events, loading older history when needed.

        Without ``event_id`` the whole cached history is returned. With an
        anchor that isn't the oldest cached event, the cached events from the
        anchor onward are returned. When the anchor is the oldest cached
        event, up to ``max_events`` older events are requested from the
        server, merged into the cache and returned.

        Returns None (and skips ``callback``) when the anchor is unknown or
        the server rejects the request.
        """
        if event_id is None:
            events = self.events
            if callback is not None:
                callback(events)
            return events

        conv_event = self.get_event(event_id)
        if conv_event is None:
            logger.warning(
                "Event not found", extra={"conversation_id": self.id, "event_id": event_id}
            )
            return None

        events = self.events
        if events[0].id != event_id:
            page = events[self._index_of(event_id) :]
            if callback is not None:
                callback(page)
            return page

        if max_events is None:
            max_events = self._settings.history_page_size
        response = await self._client.get_conversation(
            self.id, conv_event.timestamp, max_events
        )
        header = response.response_header
        if header.status != ResponseStatus.OK:
            error = InvalidServerResponseError(
                "History request rejected",
                context={
                    "conversation_id": self.id,
                    "status": header.status.value,
                    "error_description": header.error_description,
                },
            )
            logger.warning(error.message, extra={"error": error.to_dict()})
            return None

        fetched = []
        if response.conversation_state is not None:
            fetched = [wrap_event(event) for event in response.conversation_state.event]
        for fetched_event in fetched:
            self._insert(fetched_event)

        logger.debug(
            "Loaded historical events",
            extra={"conversation_id": self.id, "count": len(fetched)},
        )
        if callback is not None:
            callback(fetched)
        if self.observer is not None:
            self.observer.on_events_loaded(self)
        return fetched

    # ------------------------------------------------------------------
    # Inbound notifications
    # ------------------------------------------------------------------

    def handle_event(self, event: ConversationEvent) -> None:
        if self.observer is not None:
            self.observer.on_event(self, event)
            return
        user = self.get_user(event.user_id)
        if not user.is_self and self._settings.log_notifications:
            logger.info(
                f"Notification {event!r} from user {user.full_name}",
                extra={"conversation_id": self.id, "event_id": event.id},
            )

    def handle_typing_status(self, status: TypingType, user: User) -> None:
        if self._typing_statuses.get(user.id) == status:
            return
        self._typing_statuses[user.id] = status
        if self.observer is not None:
            self.observer.on_typing_status_change(self, user, status)

    def handle_watermark_notification(self, notification: WatermarkNotification) -> None:
        if self.get_user(notification.sender_id).is_self:
            if notification.latest_read_timestamp > self.latest_read_timestamp:
                self.latest_read_timestamp = notification.latest_read_timestamp
                if self.conversation_list is not None:
                    self.conversation_list.conversation_did_update(self)
        if self.observer is not None:
            self.observer.on_watermark_notification(self, notification)

    @property
    def typing_statuses(self) -> dict[UserID, TypingType]:
        return dict(self._typing_statuses)

    @property
    def other_user_is_typing(self) -> bool:
        return any(
            status == TypingType.STARTED
            for user_id, status in self._typing_statuses.items()
            if not self.get_user(user_id).is_self
        )

    # ------------------------------------------------------------------
    # Outbound actions
    # ------------------------------------------------------------------

    async def update_read_timestamp(self, read_timestamp: int | None = None) -> bool:
        """
        Advance the read watermark, by default to the newest event.

        The watermark is updated before the request goes out so repeated
        calls don't issue duplicate requests. Returns True if a request was
        sent.
        """
        if read_timestamp is None:
            if not self.events:
                return False
            read_timestamp = self.events[-1].timestamp
        if read_timestamp <= self.latest_read_timestamp:
            return False

        self.latest_read_timestamp = read_timestamp
        self._notify_updated()
        await self._client.update_watermark(self.id, read_timestamp)
        return True

    async def send_message(
        self,
        segments: list[ChatMessageSegment],
        image_data: bytes | None = None,
        image_name: str | None = None,
        image_id: str | None = None,
    ) -> None:
        """
        Send a message to this conversation.

        Sends run one at a time in submission order. When ``image_data`` and
        ``image_name`` are both given the image is uploaded first and its ID
        takes precedence over ``image_id``.
        """

        async def send() -> None:
            request_header = self._get_event_request_header()
            resolved_image_id = image_id
            if image_data is not None and image_name:
                resolved_image_id = await self._client.upload_image(image_data, image_name)
            await self._client.send_chat_message(
                request_header,
                [segment.serialize() for segment in segments],
                image_id=resolved_image_id,
            )

        await self._send_queue.run(send)

    async def send_content(self, content: Content) -> None:
        """
        Send a single piece of content.

        Raises:
            UnsupportedContentError: For kinds other than text, rich text,
                snippets and local images
        """
        if content.kind == "image":
            url = urlparse(content.url or "")
            path = Path(unquote(url.path))
            if url.scheme not in ("", "file") or not await asyncio.to_thread(path.is_file):
                raise UnsupportedContentError(
                    content.type_id, context={"kind": content.kind, "url": content.url}
                )
            image_data = await asyncio.to_thread(path.read_bytes)
            await self.send_message([], image_data=image_data, image_name=path.name)
            return
        await self.send_message(segments_from_content(content))

    async def leave(self) -> None:
        if self._conversation.type == ConversationType.GROUP:
            await self._client.remove_user(self.id)
        elif self._conversation.type == ConversationType.STICKY_ONE_TO_ONE:
            await self._client.delete_conversation(self.id)

    async def rename(self, name: str) -> None:
        """
        Rename the conversation.

        Only group renames are officially supported; a custom name on a
        one-to-one conversation may not show up in every client.
        """
        await self._client.rename_conversation(self.id, name)

    async def set_notification_level(self, level: NotificationLevel) -> None:
        await self._client.set_conversation_notification_level(self.id, level)

    async def set_typing(self, typing: TypingType = TypingType.STARTED) -> None:
        await self._client.set_typing(self.id, typing)

    async def set_focus(self) -> None:
        await self._client.set_focus(self.id)

    def _get_default_delivery_medium(self) -> DeliveryMedium:
        """First delivery medium option, or the one marked current default."""
        options = self._conversation.self_conversation_state.delivery_medium_option
        if not options:
            logger.warning(
                "Conversation has no delivery medium", extra={"conversation_id": self.id}
            )
            return DeliveryMedium(medium_type=DeliveryMediumType.BABEL)
        default_medium = options[0].delivery_medium
        for option in options:
            if option.current_default:
                default_medium = option.delivery_medium
        return default_medium

    def _get_event_request_header(self) -> EventRequestHeader:
        expected_otr = (
            OffTheRecordStatus.OFF_THE_RECORD
            if self.is_off_the_record
            else OffTheRecordStatus.ON_THE_RECORD
        )
        return EventRequestHeader(
            conversation_id=self._conversation.conversation_id,
            client_generated_id=self._client.get_client_generated_id(),
            expected_otr=expected_otr,
            delivery_medium=self._get_default_delivery_medium(),
        )

    def _notify_updated(self) -> None:
        if self.observer is not None:
            self.observer.on_conversation_update(self)
        if self.conversation_list is not None:
            self.conversation_list.conversation_did_update(self)
