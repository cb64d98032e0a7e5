"""
Unit tests for message content models.

Tests content validation, segment parsing, and unsupported content errors.
"""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from parrot.models.errors import ParrotError, UnsupportedContentError
from parrot.models.message import (
    ChatMessageSegment,
    Content,
    ContentType,
    Message,
    segments_from_content,
)
from parrot.models.wire import Formatting, Segment, SegmentType


class TestContent:
    """Test content validation."""

    def test_text_content(self):
        content = Content.text_content("hello")

        assert content.kind == "text"
        assert content.type_id == ContentType.TEXT

    def test_text_requires_text(self):
        with pytest.raises(ValidationError, match="requires text"):
            Content(kind="text")

    def test_image_requires_url(self):
        with pytest.raises(ValidationError, match="requires a url"):
            Content(kind="image")

    def test_location_bounds(self):
        with pytest.raises(ValidationError):
            Content(kind="location", latitude=120.0, longitude=0.0)

    def test_message_text_only_for_text_content(self):
        sent = datetime(2024, 1, 1, tzinfo=UTC)
        text = Message(identifier="1", timestamp=sent, content=Content.text_content("hi"))
        image = Message(
            identifier="2", timestamp=sent, content=Content(kind="image", url="file:///a.png")
        )

        assert text.text == "hi"
        assert image.text == ""
        assert text.sender is None


class TestChatMessageSegment:
    """Test segment construction and conversion."""

    def test_from_str_plain(self):
        segments = ChatMessageSegment.from_str("just text")

        assert segments == [ChatMessageSegment("just text")]

    def test_from_str_line_breaks(self):
        segments = ChatMessageSegment.from_str("one\ntwo")

        assert [segment.type for segment in segments] == [
            SegmentType.TEXT,
            SegmentType.LINE_BREAK,
            SegmentType.TEXT,
        ]

    def test_from_str_links(self):
        segments = ChatMessageSegment.from_str("see https://example.com/x now")

        assert [(s.type, s.text) for s in segments] == [
            (SegmentType.TEXT, "see "),
            (SegmentType.LINK, "https://example.com/x"),
            (SegmentType.TEXT, " now"),
        ]
        assert segments[1].link_target == "https://example.com/x"

    def test_from_str_empty(self):
        assert ChatMessageSegment.from_str("") == []

    def test_serialize_formatting(self):
        segment = ChatMessageSegment("bold", is_bold=True, is_underline=True).serialize()

        assert segment == Segment(
            type=SegmentType.TEXT,
            text="bold",
            formatting=Formatting(bold=True, underline=True),
        )

    def test_deserialize_link(self):
        segment = Segment.model_validate(
            {"type": "LINK", "text": "site", "link_data": {"link_target": "https://x.test"}}
        )

        parsed = ChatMessageSegment.deserialize(segment)

        assert parsed.type == SegmentType.LINK
        assert parsed.link_target == "https://x.test"
        assert parsed.serialize() == segment


class TestSegmentsFromContent:
    """Test content to segment conversion."""

    def test_snippet(self):
        segments = segments_from_content(Content(kind="snippet", text="a\nb"))

        assert [segment.text for segment in segments] == ["a", "\n", "b"]

    def test_rich_text(self):
        content = Content(
            kind="rich_text",
            segments=[Segment(text="x", formatting=Formatting(italic=True))],
        )

        segments = segments_from_content(content)

        assert segments[0].is_italic

    @pytest.mark.parametrize("kind", ["audio", "video", "file"])
    def test_media_unsupported(self, kind):
        with pytest.raises(UnsupportedContentError) as exc_info:
            segments_from_content(Content(kind=kind, url="file:///tmp/x"))

        error = exc_info.value
        assert isinstance(error, ParrotError)
        assert error.to_dict()["type"] == "UnsupportedContentError"
        assert error.context == {"kind": kind}
