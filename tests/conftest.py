"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging

import pytest

from parrot.client.memory import InMemoryChatClient
from parrot.config import ConversationSettings
from parrot.conversations.store import ConversationStore
from parrot.models.user import User, UserList
from parrot.models.wire import (
    ChatMessage,
    Conversation,
    ConversationId,
    ConversationRename,
    ConversationType,
    Event,
    MembershipChange,
    MessageContent,
    ParticipantData,
    ReadState,
    Segment,
    SelfConversationState,
    UserID,
)

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "slow: mark test as slow (takes more than 1 second)")
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """
    Configure logging for tests.

    Sets up log capture and configures log levels.
    This fixture runs automatically for all tests.
    """
    caplog.set_level(logging.DEBUG)
    yield


# ============================================================================
# Conversation Fixtures
# ============================================================================

CONVERSATION_ID = "conv-1"
SELF_ID = UserID(chat_id="self", gaia_id="self")
ALICE_ID = UserID(chat_id="alice", gaia_id="alice")
BOB_ID = UserID(chat_id="bob", gaia_id="bob")


def make_event(
    event_id: str,
    timestamp: int,
    sender: UserID = ALICE_ID,
    text: str | None = "hello",
    conversation_id: str = CONVERSATION_ID,
    **payload,
) -> Event:
    """Build a wire event; pass rename/membership payloads as keywords."""
    if text is not None and not payload:
        payload["chat_message"] = ChatMessage(
            message_content=MessageContent(segment=[Segment(text=text)])
        )
    return Event(
        conversation_id=ConversationId(id=conversation_id),
        sender_id=sender,
        timestamp=timestamp,
        event_id=event_id,
        **payload,
    )


def make_rename(event_id: str, timestamp: int, new_name: str) -> Event:
    return make_event(
        event_id,
        timestamp,
        text=None,
        conversation_rename=ConversationRename(new_name=new_name, old_name="old"),
    )


def make_membership(event_id: str, timestamp: int, change: MembershipChange) -> Event:
    return make_event(event_id, timestamp, text=None, membership_change=change)


def make_conversation(
    conversation_id: str = CONVERSATION_ID,
    read_timestamp: int = 0,
    conversation_type: ConversationType = ConversationType.GROUP,
    **fields,
) -> Conversation:
    state = fields.pop("self_conversation_state", None) or SelfConversationState(
        self_read_state=ReadState(participant_id=SELF_ID, latest_read_timestamp=read_timestamp)
    )
    fields.setdefault(
        "participant_data",
        [
            ParticipantData(id=SELF_ID, fallback_name="Me Myself"),
            ParticipantData(id=ALICE_ID, fallback_name="Alice Archer"),
            ParticipantData(id=BOB_ID, fallback_name="Bob Builder"),
        ],
    )
    return Conversation(
        conversation_id=ConversationId(id=conversation_id),
        type=conversation_type,
        self_conversation_state=state,
        **fields,
    )


@pytest.fixture
def self_user():
    return User(id=SELF_ID, full_name="Me Myself", first_name="Me", is_self=True)


@pytest.fixture
def alice():
    return User(id=ALICE_ID, full_name="Alice Archer", first_name="Alice")


@pytest.fixture
def bob():
    return User(id=BOB_ID, full_name="Bob Builder", first_name="Bob")


@pytest.fixture
def user_list(self_user, alice, bob):
    return UserList(self_user, [alice, bob])


@pytest.fixture
def conversation_settings():
    return ConversationSettings(
        history_page_size=50, duplicate_events="replace", log_notifications=True
    )


@pytest.fixture
def client():
    return InMemoryChatClient()


@pytest.fixture
def store(client, user_list, conversation_settings):
    return ConversationStore(
        client, user_list, make_conversation(), settings=conversation_settings
    )
