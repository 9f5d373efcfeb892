"""Models package for LoreChat Engine."""

from .contact import Contact, ChatMessage, MessageRole
from .world_book import WorldBookCategory, WorldBookEntry

__all__ = [
    "Contact",
    "ChatMessage",
    "MessageRole",
    "WorldBookCategory",
    "WorldBookEntry",
]
