"""
Wire Models

Pydantic models for the records produced by the chat protocol layer.
They mirror the generated protocol messages closely enough for the
conversation layer to consume; transport and encoding belong to the client.

Timestamps are integer microseconds since the Unix epoch. A value of 0
means the field was not set by the producer.

Usage:
    from parrot.models.wire import Event, EventType

    event = Event.model_validate(payload)
    if event.event_type == EventType.REGULAR_CHAT_MESSAGE:
        print(event.chat_message.message_content.segment)
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ============================================================================
# Enumerations
# ============================================================================


class ConversationType(StrEnum):
    STICKY_ONE_TO_ONE = "STICKY_ONE_TO_ONE"
    GROUP = "GROUP"


class OffTheRecordStatus(StrEnum):
    OFF_THE_RECORD = "OFF_THE_RECORD"
    ON_THE_RECORD = "ON_THE_RECORD"


class NotificationLevel(StrEnum):
    QUIET = "QUIET"
    RING = "RING"


class ConversationView(StrEnum):
    INBOX = "INBOX"
    ARCHIVED = "ARCHIVED"


class TypingType(StrEnum):
    STARTED = "STARTED"
    PAUSED = "PAUSED"
    STOPPED = "STOPPED"


class ResponseStatus(StrEnum):
    OK = "OK"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"


class EventType(StrEnum):
    REGULAR_CHAT_MESSAGE = "REGULAR_CHAT_MESSAGE"
    SMS = "SMS"
    RENAME_CONVERSATION = "RENAME_CONVERSATION"
    ADD_USER = "ADD_USER"
    REMOVE_USER = "REMOVE_USER"
    OTR_MODIFICATION = "OTR_MODIFICATION"
    HANGOUT = "HANGOUT"
    UNKNOWN = "UNKNOWN"


class MembershipChangeType(StrEnum):
    JOIN = "JOIN"
    LEAVE = "LEAVE"


class DeliveryMediumType(StrEnum):
    BABEL = "BABEL"
    GOOGLE_VOICE = "GOOGLE_VOICE"


class SegmentType(StrEnum):
    TEXT = "TEXT"
    LINE_BREAK = "LINE_BREAK"
    LINK = "LINK"


def from_timestamp(microseconds: int) -> datetime:
    """Convert a protocol timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(microseconds / 1_000_000, tz=UTC)


def to_timestamp(value: datetime) -> int:
    """Convert an aware datetime to a protocol timestamp."""
    return int(value.timestamp() * 1_000_000)


# ============================================================================
# Identifiers
# ============================================================================


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class UserID(BaseModel):
    """Participant identifier. Hashable so it can key dictionaries."""

    chat_id: str = Field(..., description="Chat service identifier")
    gaia_id: str = Field(default="", description="Account identifier")

    model_config = ConfigDict(frozen=True, extra="ignore")


class ConversationId(_WireModel):
    id: str = Field(..., min_length=1, description="Opaque conversation identifier")


# ============================================================================
# Conversation Records
# ============================================================================


class ReadState(_WireModel):
    participant_id: UserID | None = None
    latest_read_timestamp: int = Field(default=0, ge=0)


class DeliveryMedium(_WireModel):
    medium_type: DeliveryMediumType = DeliveryMediumType.BABEL
    phone_number: str | None = None


class DeliveryMediumOption(_WireModel):
    delivery_medium: DeliveryMedium = Field(default_factory=DeliveryMedium)
    current_default: bool = False


class SelfConversationState(_WireModel):
    self_read_state: ReadState = Field(default_factory=ReadState)
    sort_timestamp: int = Field(default=0, ge=0)
    notification_level: NotificationLevel = NotificationLevel.RING
    view: list[ConversationView] = Field(default_factory=list)
    delivery_medium_option: list[DeliveryMediumOption] = Field(default_factory=list)


class ParticipantData(_WireModel):
    id: UserID
    fallback_name: str | None = None


class Conversation(_WireModel):
    """
    Conversation metadata record.

    Updates pushed by the server are deltas: unset fields mean "unchanged".
    """

    conversation_id: ConversationId
    type: ConversationType = ConversationType.GROUP
    name: str | None = None
    otr_status: OffTheRecordStatus = OffTheRecordStatus.ON_THE_RECORD
    participant_data: list[ParticipantData] = Field(default_factory=list)
    self_conversation_state: SelfConversationState = Field(
        default_factory=SelfConversationState
    )
    read_state: list[ReadState] = Field(default_factory=list)


# ============================================================================
# Events
# ============================================================================


class Formatting(_WireModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False


class LinkData(_WireModel):
    link_target: str


class Segment(_WireModel):
    type: SegmentType = SegmentType.TEXT
    text: str = ""
    formatting: Formatting = Field(default_factory=Formatting)
    link_data: LinkData | None = None


class Attachment(_WireModel):
    image_id: str | None = None
    url: str | None = None


class MessageContent(_WireModel):
    segment: list[Segment] = Field(default_factory=list)
    attachment: list[Attachment] = Field(default_factory=list)


class ChatMessage(_WireModel):
    message_content: MessageContent = Field(default_factory=MessageContent)


class ConversationRename(_WireModel):
    new_name: str = ""
    old_name: str = ""


class MembershipChange(_WireModel):
    type: MembershipChangeType = MembershipChangeType.JOIN
    participant_ids: list[UserID] = Field(default_factory=list)


class Event(_WireModel):
    """
    A single conversation event.

    ``event_type`` is the variant discriminant. Producers that leave it out
    get it inferred once here from the populated payload, in the order
    chat message, rename, membership change.
    """

    conversation_id: ConversationId
    sender_id: UserID
    timestamp: int = Field(..., ge=0)
    event_id: str = Field(..., min_length=1)
    event_type: EventType = EventType.UNKNOWN
    chat_message: ChatMessage | None = None
    conversation_rename: ConversationRename | None = None
    membership_change: MembershipChange | None = None

    @model_validator(mode="before")
    @classmethod
    def infer_event_type(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("event_type"):
            return data
        if data.get("chat_message") is not None:
            event_type = EventType.REGULAR_CHAT_MESSAGE
        elif data.get("conversation_rename") is not None:
            event_type = EventType.RENAME_CONVERSATION
        elif data.get("membership_change") is not None:
            change = data["membership_change"]
            change_type = (
                change.get("type") if isinstance(change, dict) else getattr(change, "type", None)
            )
            event_type = (
                EventType.REMOVE_USER
                if change_type == MembershipChangeType.LEAVE
                else EventType.ADD_USER
            )
        else:
            event_type = EventType.UNKNOWN
        return {**data, "event_type": event_type}


# ============================================================================
# Requests, Responses and Notifications
# ============================================================================


class ResponseHeader(_WireModel):
    status: ResponseStatus = ResponseStatus.OK
    error_description: str | None = None


class ConversationState(_WireModel):
    conversation: Conversation
    event: list[Event] = Field(default_factory=list)


class GetConversationResponse(_WireModel):
    response_header: ResponseHeader = Field(default_factory=ResponseHeader)
    conversation_state: ConversationState | None = None


class WatermarkNotification(_WireModel):
    sender_id: UserID
    conversation_id: ConversationId
    latest_read_timestamp: int = Field(..., ge=0)


class TypingNotification(_WireModel):
    conversation_id: ConversationId
    sender_id: UserID
    timestamp: int = Field(default=0, ge=0)
    type: TypingType = TypingType.STARTED


class EventRequestHeader(_WireModel):
    conversation_id: ConversationId
    client_generated_id: int
    expected_otr: OffTheRecordStatus
    delivery_medium: DeliveryMedium
