"""Repository for contact operations."""

from typing import List, Optional
from sqlalchemy.orm import Session

from lorechat_engine.models.contact import Contact


class ContactRepository:
    """Handle database operations for contacts."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(
        self,
        name: str,
        description: str = "",
        first_message: Optional[str] = None,
        avatar: Optional[str] = None,
        world_book_id: Optional[str] = None,
        my_nickname: str = "我",
        group_name: str = "未分组",
        commit: bool = True
    ) -> Contact:
        """
        Create a new contact.
        
        Args:
            name: Character name (also used as remark and AI name)
            description: Persona text shown to the model
            first_message: Greeting, also used for intro and list subtitle
            avatar: Emoji or image data URL
            world_book_id: Linked world book category
            my_nickname: How the character addresses the user
            group_name: Contact list group
            commit: Commit immediately (False to batch with other writes)
        
        Returns:
            Created contact
        """
        contact = Contact(
            name=name,
            remark=name,
            ai_name=name,
            avatar=avatar,
            intro=first_message,
            subtitle=self._subtitle(first_message),
            description=description,
            first_message=first_message,
            world_book_id=world_book_id,
            my_nickname=my_nickname,
            group_name=group_name,
        )
        self.db.add(contact)
        if commit:
            self.db.commit()
            self.db.refresh(contact)
        else:
            self.db.flush()
        return contact
    
    def get_by_id(self, contact_id: str) -> Optional[Contact]:
        """Get contact by ID, or None if not found."""
        return self.db.query(Contact).filter(Contact.id == contact_id).first()
    
    def list_all(self) -> List[Contact]:
        """List contacts, pinned first, then newest first."""
        return (
            self.db.query(Contact)
            .order_by(Contact.is_pinned.desc(), Contact.created_at.desc())
            .all()
        )
    
    def delete(self, contact_id: str) -> bool:
        """
        Delete contact (cascades to messages).
        
        Returns:
            True if deleted, False if not found
        """
        contact = self.get_by_id(contact_id)
        if not contact:
            return False
        
        self.db.delete(contact)
        self.db.commit()
        return True
    
    @staticmethod
    def _subtitle(first_message: Optional[str]) -> Optional[str]:
        if not first_message:
            return None
        return first_message[:20] + "..."
