"""
Card Import Service
==================

Persists an imported character card: the embedded lorebook becomes a new
world book category, the character becomes a contact, and the greeting
seeds the contact's chat history.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from lorechat_engine.config.models import ImportConfig
from lorechat_engine.models.contact import Contact, MessageRole
from lorechat_engine.repositories import (
    ContactRepository,
    MessageRepository,
    WorldBookRepository,
)
from lorechat_engine.services.character_cards import CardImportResult

logger = logging.getLogger(__name__)


class CardImportService:
    """Write an imported card into the contact and world book stores."""
    
    def __init__(self, db: Session, settings: Optional[ImportConfig] = None):
        self.db = db
        self.settings = settings or ImportConfig()
        self.contacts = ContactRepository(db)
        self.messages = MessageRepository(db)
        self.world_book = WorldBookRepository(db)
    
    def import_result(self, result: CardImportResult) -> Contact:
        """
        Persist an import result in a single transaction.
        
        Args:
            result: Output of CharacterCardImporter
            
        Returns:
            The created contact
        """
        character = result.character
        
        try:
            world_book_id = None
            if result.lorebook is not None:
                world_book_id = self.world_book.add_lorebook(result.lorebook, commit=False)
            
            contact = self.contacts.create(
                name=character.display_name,
                description=character.description,
                first_message=character.greeting,
                avatar=result.avatar or self.settings.default_avatar,
                world_book_id=world_book_id,
                my_nickname=self.settings.my_nickname,
                group_name=self.settings.default_group,
                commit=False,
            )
            
            if character.greeting:
                self.messages.create(
                    contact_id=contact.id,
                    role=MessageRole.ASSISTANT,
                    content=character.greeting,
                    commit=False,
                )
            
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        
        self.db.refresh(contact)
        logger.info(
            f"Created contact '{contact.name}' ({contact.id})"
            + (f" linked to world book {world_book_id}" if world_book_id else "")
        )
        return contact
