"""Repository pattern for database operations."""

from .contact_repository import ContactRepository
from .message_repository import MessageRepository
from .world_book_repository import WorldBookRepository

__all__ = [
    "ContactRepository",
    "MessageRepository",
    "WorldBookRepository",
]
