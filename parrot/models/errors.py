"""
Conversation Errors

Exception hierarchy shared by the message model and the conversation store.
"""

from typing import Any


class ParrotError(Exception):
    """
    Base exception for conversation layer errors.

    Attributes:
        message: Error description
        context: Additional context for debugging
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }


class UnsupportedContentError(ParrotError):
    """The message's content type is unsupported by the service."""

    def __init__(self, content_type: str, context: dict[str, Any] | None = None):
        self.content_type = content_type
        super().__init__(f"Unsupported content type: {content_type}", context=context)


class InvalidServerResponseError(ParrotError):
    """The server rejected a request as invalid."""

    pass


class EventNotFoundError(ParrotError, KeyError):
    """No cached event has the requested ID."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event not found: {event_id}", context={"event_id": event_id})

    def __str__(self) -> str:
        return self.message
