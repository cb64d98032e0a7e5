"""
Parrot Models Module

Pydantic models for the records exchanged with the chat service.

Available Models:
    Wire Models:
        - Conversation: Conversation metadata record (delta on update)
        - Event: Conversation event with an explicit event_type discriminant
        - WatermarkNotification: A participant's read position changed
        - TypingNotification: A participant's typing status changed
        - GetConversationResponse: Historical fetch response

    User Models:
        - User: Chat participant
        - UserList: Directory of participants keyed by UserID

    Message Models:
        - Content: Tagged message content
        - Message: Presentable message
        - ChatMessageSegment: Formatted run of outgoing text

    Errors:
        - ParrotError: Base exception
        - UnsupportedContentError: Content kind cannot be sent or rendered
        - InvalidServerResponseError: Server rejected the request
        - EventNotFoundError: No cached event with that ID

Usage:
    from parrot.models import Conversation, Event, UserList
"""

from parrot.models.errors import (
    EventNotFoundError,
    InvalidServerResponseError,
    ParrotError,
    UnsupportedContentError,
)
from parrot.models.message import (
    ChatMessageSegment,
    Content,
    ContentType,
    Message,
    segments_from_content,
)
from parrot.models.user import User, UserList
from parrot.models.wire import (
    Conversation,
    ConversationId,
    ConversationState,
    ConversationType,
    ConversationView,
    DeliveryMedium,
    DeliveryMediumOption,
    DeliveryMediumType,
    Event,
    EventRequestHeader,
    EventType,
    GetConversationResponse,
    NotificationLevel,
    OffTheRecordStatus,
    ParticipantData,
    ReadState,
    ResponseHeader,
    ResponseStatus,
    SelfConversationState,
    TypingNotification,
    TypingType,
    UserID,
    WatermarkNotification,
)

__all__ = [
    # Errors
    "EventNotFoundError",
    "InvalidServerResponseError",
    "ParrotError",
    "UnsupportedContentError",
    # Message models
    "ChatMessageSegment",
    "Content",
    "ContentType",
    "Message",
    "segments_from_content",
    # Users
    "User",
    "UserList",
    # Wire models
    "Conversation",
    "ConversationId",
    "ConversationState",
    "ConversationType",
    "ConversationView",
    "DeliveryMedium",
    "DeliveryMediumOption",
    "DeliveryMediumType",
    "Event",
    "EventRequestHeader",
    "EventType",
    "GetConversationResponse",
    "NotificationLevel",
    "OffTheRecordStatus",
    "ParticipantData",
    "ReadState",
    "ResponseHeader",
    "ResponseStatus",
    "SelfConversationState",
    "TypingNotification",
    "TypingType",
    "UserID",
    "WatermarkNotification",
]
