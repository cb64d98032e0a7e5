"""
Message Content Models

Service-agnostic description of what a message carries, and the chat
message segments used to build outgoing text.

Usage:
    from parrot.models.message import ChatMessageSegment, Content

    segments = ChatMessageSegment.from_str("see https://example.com\\nthanks")
    content = Content.text_content("hello")
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from parrot.models.errors import UnsupportedContentError
from parrot.models.user import User
from parrot.models.wire import Formatting, LinkData, Segment, SegmentType


class ContentType:
    """Identifiers for the kinds of content a service may support."""

    TEXT = "com.avaidyam.Parrot.MessageType.text"
    RICH_TEXT = "com.avaidyam.Parrot.MessageType.richText"
    IMAGE = "com.avaidyam.Parrot.MessageType.image"
    AUDIO = "com.avaidyam.Parrot.MessageType.audio"
    VIDEO = "com.avaidyam.Parrot.MessageType.video"
    FILE = "com.avaidyam.Parrot.MessageType.file"
    SNIPPET = "com.avaidyam.Parrot.MessageType.snippet"
    LOCATION = "com.avaidyam.Parrot.MessageType.location"


ContentKind = Literal["text", "rich_text", "image", "audio", "video", "file", "snippet", "location"]

_CONTENT_TYPE_IDS: dict[str, str] = {
    "text": ContentType.TEXT,
    "rich_text": ContentType.RICH_TEXT,
    "image": ContentType.IMAGE,
    "audio": ContentType.AUDIO,
    "video": ContentType.VIDEO,
    "file": ContentType.FILE,
    "snippet": ContentType.SNIPPET,
    "location": ContentType.LOCATION,
}

_TEXT_KINDS = {"text", "rich_text", "snippet"}
_URL_KINDS = {"image", "audio", "video", "file"}


class Content(BaseModel):
    """One piece of message content, tagged by ``kind``."""

    kind: ContentKind
    text: str | None = None
    segments: list[Segment] = Field(default_factory=list)
    url: str | None = None
    latitude: float | None = Field(None, ge=-90.0, le=90.0)
    longitude: float | None = Field(None, ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def check_payload(self) -> Content:
        if self.kind in {"text", "snippet"} and self.text is None:
            raise ValueError(f"{self.kind} content requires text")
        if self.kind == "rich_text" and not self.segments:
            raise ValueError("rich_text content requires segments")
        if self.kind in _URL_KINDS and not self.url:
            raise ValueError(f"{self.kind} content requires a url")
        if self.kind == "location" and (self.latitude is None or self.longitude is None):
            raise ValueError("location content requires latitude and longitude")
        return self

    @property
    def type_id(self) -> str:
        return _CONTENT_TYPE_IDS[self.kind]

    @classmethod
    def text_content(cls, text: str) -> Content:
        return cls(kind="text", text=text)


class Message(BaseModel):
    """A message as presented to the rest of the application."""

    identifier: str
    sender: User | None = Field(None, description="None for global events")
    timestamp: datetime
    content: Content

    @property
    def text(self) -> str:
        if self.content.kind != "text":
            return ""
        return self.content.text or ""


_LINK_PATTERN = re.compile(r"https?://\S+")


class ChatMessageSegment:
    """A formatted run of text within a chat message."""

    def __init__(
        self,
        text: str,
        segment_type: SegmentType = SegmentType.TEXT,
        is_bold: bool = False,
        is_italic: bool = False,
        is_strikethrough: bool = False,
        is_underline: bool = False,
        link_target: str | None = None,
    ) -> None:
        if link_target is not None and segment_type == SegmentType.TEXT:
            segment_type = SegmentType.LINK
        self.text = text
        self.type = segment_type
        self.is_bold = is_bold
        self.is_italic = is_italic
        self.is_strikethrough = is_strikethrough
        self.is_underline = is_underline
        self.link_target = link_target

    def __repr__(self) -> str:
        return f"ChatMessageSegment(text={self.text!r}, type={self.type.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChatMessageSegment):
            return NotImplemented
        return self.serialize() == other.serialize()

    @classmethod
    def from_str(cls, text: str) -> list[ChatMessageSegment]:
        """
        Build segments from plain text.

        Newlines become LINE_BREAK segments and http(s) URLs become LINK
        segments pointing at themselves.
        """
        segments: list[ChatMessageSegment] = []
        for index, line in enumerate(text.split("\n")):
            if index > 0:
                segments.append(cls("\n", SegmentType.LINE_BREAK))
            position = 0
            for match in _LINK_PATTERN.finditer(line):
                if match.start() > position:
                    segments.append(cls(line[position : match.start()]))
                segments.append(cls(match.group(), link_target=match.group()))
                position = match.end()
            if position < len(line):
                segments.append(cls(line[position:]))
        return segments

    @classmethod
    def deserialize(cls, segment: Segment) -> ChatMessageSegment:
        return cls(
            segment.text,
            segment_type=segment.type,
            is_bold=segment.formatting.bold,
            is_italic=segment.formatting.italic,
            is_strikethrough=segment.formatting.strikethrough,
            is_underline=segment.formatting.underline,
            link_target=segment.link_data.link_target if segment.link_data else None,
        )

    def serialize(self) -> Segment:
        return Segment(
            type=self.type,
            text=self.text,
            formatting=Formatting(
                bold=self.is_bold,
                italic=self.is_italic,
                strikethrough=self.is_strikethrough,
                underline=self.is_underline,
            ),
            link_data=LinkData(link_target=self.link_target) if self.link_target else None,
        )


def segments_from_content(content: Content) -> list[ChatMessageSegment]:
    """
    Convert textual content into chat message segments.

    Raises:
        UnsupportedContentError: For content that is not text, rich text or a snippet
    """
    if content.kind not in _TEXT_KINDS:
        raise UnsupportedContentError(content.type_id, context={"kind": content.kind})
    if content.kind == "rich_text":
        return [ChatMessageSegment.deserialize(segment) for segment in content.segments]
    return ChatMessageSegment.from_str(content.text or "")
