"""Database models for contacts and their chat messages."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Enum, Boolean
from sqlalchemy.orm import relationship
import enum
import uuid

from lorechat_engine.db.database import Base


def generate_uuid():
    """Generate a UUID string."""
    return str(uuid.uuid4())


class MessageRole(str, enum.Enum):
    """Message role types."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Contact(Base):
    """
    A contact is a character the user chats with.
    
    Imported characters keep their composed description (persona plus
    scenario) and an optional link to the world book category that was
    extracted from the same card.
    """
    __tablename__ = "contacts"
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(200), nullable=False)
    remark = Column(String(200), nullable=True)
    ai_name = Column(String(200), nullable=True)
    my_nickname = Column(String(200), nullable=False, default="我")
    avatar = Column(Text, nullable=True)  # emoji or data URL
    subtitle = Column(String(200), nullable=True)
    intro = Column(Text, nullable=True)
    description = Column(Text, nullable=False, default="")
    first_message = Column(Text, nullable=True)
    group_name = Column(String(100), nullable=False, default="未分组")
    is_pinned = Column(Boolean, nullable=False, default=False)
    world_book_id = Column(
        String(36),
        ForeignKey("world_book_categories.id", ondelete="SET NULL"),
        nullable=True
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    # Relationships
    messages = relationship(
        "ChatMessage",
        back_populates="contact",
        cascade="all, delete-orphan",
        order_by="ChatMessage.created_at"
    )
    world_book = relationship("WorldBookCategory")
    
    def __repr__(self):
        return f"<Contact(id={self.id}, name={self.name}, world_book={self.world_book_id})>"


class ChatMessage(Base):
    """A single message in a contact's chat history."""
    __tablename__ = "chat_messages"
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    contact_id = Column(String(36), ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False)
    role = Column(Enum(MessageRole), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="text")
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    contact = relationship("Contact", back_populates="messages")
    
    def __repr__(self):
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"<ChatMessage(id={self.id}, role={self.role}, content={preview})>"
