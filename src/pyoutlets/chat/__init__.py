"""Conversational outlet queries."""

from pyoutlets.chat.backend import ChatBackend, HttpChatBackend
from pyoutlets.chat.coordinator import SessionCoordinator
from pyoutlets.chat.parser import is_outlet_message, parse_outlet_info

__all__ = [
    "ChatBackend",
    "HttpChatBackend",
    "SessionCoordinator",
    "is_outlet_message",
    "parse_outlet_info",
]
