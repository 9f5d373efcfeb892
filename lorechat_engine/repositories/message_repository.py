"""Repository for chat message operations."""

from typing import List
from sqlalchemy.orm import Session

from lorechat_engine.models.contact import ChatMessage, MessageRole


class MessageRepository:
    """Handle database operations for chat messages."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(
        self,
        contact_id: str,
        role: MessageRole,
        content: str,
        message_type: str = "text",
        commit: bool = True
    ) -> ChatMessage:
        """
        Create a new message.
        
        Args:
            contact_id: Owning contact ID
            role: Message role (system/user/assistant)
            content: Message content
            message_type: Message kind shown by the UI
            commit: Commit immediately (False to batch with other writes)
        
        Returns:
            Created message
        """
        message = ChatMessage(
            contact_id=contact_id,
            role=role,
            content=content,
            type=message_type,
        )
        self.db.add(message)
        if commit:
            self.db.commit()
            self.db.refresh(message)
        else:
            self.db.flush()
        return message
    
    def list_by_contact(self, contact_id: str) -> List[ChatMessage]:
        """List a contact's messages, oldest first."""
        return (
            self.db.query(ChatMessage)
            .filter(ChatMessage.contact_id == contact_id)
            .order_by(ChatMessage.created_at.asc())
            .all()
        )
