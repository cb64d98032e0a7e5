"""
Chat Client Module

Interface to the chat service consumed by the conversation layer.

Usage:
    from parrot.client import BaseChatClient, InMemoryChatClient
"""

from parrot.client.base import BaseChatClient
from parrot.client.memory import ClientCall, InMemoryChatClient

__all__ = [
    "BaseChatClient",
    "ClientCall",
    "InMemoryChatClient",
]
