"""Unit tests for ConversationList routing and ordering."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from conftest import ALICE_ID, SELF_ID, make_conversation, make_event

from parrot.config import ConversationSettings
from parrot.conversations.conversation_list import ConversationList
from parrot.conversations.observer import ConversationObserver
from parrot.models.wire import (
    ConversationId,
    ConversationState,
    ReadState,
    SelfConversationState,
    TypingNotification,
    TypingType,
    WatermarkNotification,
)


def _conversation(conversation_id: str, sort_timestamp: int, read_timestamp: int = 0):
    return make_conversation(
        conversation_id=conversation_id,
        self_conversation_state=SelfConversationState(
            sort_timestamp=sort_timestamp,
            self_read_state=ReadState(latest_read_timestamp=read_timestamp),
        ),
    )


@pytest.fixture
def on_change():
    return MagicMock()


@pytest.fixture
def conversation_list(client, user_list, on_change):
    states = [
        ConversationState(
            conversation=_conversation("old", 100, read_timestamp=5),
            event=[make_event("o1", 5, conversation_id="old")],
        ),
        ConversationState(
            conversation=_conversation("new", 300),
            event=[make_event("n1", 7, conversation_id="new")],
        ),
        ConversationState(conversation=_conversation("mid", 200)),
    ]
    return ConversationList(
        client, user_list, states, on_change=on_change, settings=ConversationSettings()
    )


def test_conversations_sorted_most_recent_first(conversation_list):
    assert [store.id for store in conversation_list.conversations] == ["new", "mid", "old"]
    assert len(conversation_list) == 3
    assert "mid" in conversation_list


def test_unread_conversations(conversation_list):
    assert [store.id for store in conversation_list.unread_conversations] == ["new"]


def test_get_unknown_raises(conversation_list):
    with pytest.raises(KeyError):
        conversation_list.get("missing")


def test_delta_resorts_and_notifies(conversation_list, on_change):
    store = conversation_list.handle_conversation_delta(_conversation("old", 999))

    assert store is conversation_list.get("old")
    assert [s.id for s in conversation_list.conversations] == ["old", "new", "mid"]
    assert store.latest_read_timestamp == 5
    on_change.assert_called_once_with(store)


def test_delta_for_unknown_conversation_adds_it(conversation_list):
    store = conversation_list.handle_conversation_delta(_conversation("fresh", 50))

    assert conversation_list.get("fresh") is store
    assert store.conversation_list is conversation_list


def test_event_routed_to_store_and_observer(conversation_list):
    store = conversation_list.get("mid")
    store.observer = MagicMock(spec=ConversationObserver)

    conv_event = conversation_list.handle_event(make_event("m1", 40, conversation_id="mid"))

    assert store.get_event("m1") is conv_event
    store.observer.on_event.assert_called_once_with(store, conv_event)


def test_event_for_unknown_conversation_ignored(conversation_list, caplog):
    assert conversation_list.handle_event(make_event("x", 1, conversation_id="nope")) is None
    assert any("unknown conversation" in r.getMessage() for r in caplog.records)


def test_typing_notification_routed(conversation_list):
    store = conversation_list.get("new")

    conversation_list.handle_typing_notification(
        TypingNotification(
            conversation_id=ConversationId(id="new"),
            sender_id=ALICE_ID,
            type=TypingType.STARTED,
        )
    )

    assert store.other_user_is_typing


def test_watermark_notification_routed(conversation_list, on_change):
    store = conversation_list.get("new")

    conversation_list.handle_watermark_notification(
        WatermarkNotification(
            sender_id=SELF_ID,
            conversation_id=ConversationId(id="new"),
            latest_read_timestamp=7,
        )
    )

    assert store.latest_read_timestamp == 7
    assert conversation_list.unread_conversations == []
    on_change.assert_called_once_with(store)


@pytest.mark.asyncio
async def test_read_timestamp_update_notifies_list(conversation_list, on_change, client):
    store = conversation_list.get("new")

    await store.update_read_timestamp()

    on_change.assert_called_once_with(store)
    assert client.calls_to("update_watermark")[0].conversation_id == "new"
