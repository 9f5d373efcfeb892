"""Repository for world book operations."""

import logging
from typing import TYPE_CHECKING, List, Optional
from sqlalchemy.orm import Session, selectinload

from lorechat_engine.models.world_book import WorldBookCategory, WorldBookEntry

if TYPE_CHECKING:
    from lorechat_engine.services.character_cards.models import NormalizedLorebook

logger = logging.getLogger(__name__)


class WorldBookRepository:
    """Handle database operations for world book categories and entries."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def add_lorebook(self, lorebook: "NormalizedLorebook", commit: bool = True) -> str:
        """
        Append an imported lorebook as a new category.
        
        Existing categories are left untouched. Entries keep the lorebook's
        order.
        
        Args:
            lorebook: Normalized lorebook from a character card
            commit: Commit immediately (False to batch with other writes)
        
        Returns:
            ID of the new category (the lorebook's id)
        """
        category = WorldBookCategory(id=lorebook.id, name=lorebook.name)
        category.entries = [
            WorldBookEntry(
                position=position,
                keys=list(entry.trigger_keys),
                content=entry.content,
                enabled=entry.enabled,
            )
            for position, entry in enumerate(lorebook.entries)
        ]
        self.db.add(category)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        
        logger.info(f"Added world book category '{lorebook.name}' ({len(lorebook.entries)} entries)")
        return category.id
    
    def get_by_id(self, category_id: str) -> Optional[WorldBookCategory]:
        """Get category by ID, or None if not found."""
        return (
            self.db.query(WorldBookCategory)
            .options(selectinload(WorldBookCategory.entries))
            .filter(WorldBookCategory.id == category_id)
            .first()
        )
    
    def list_categories(self) -> List[WorldBookCategory]:
        """List all categories in creation order."""
        return (
            self.db.query(WorldBookCategory)
            .options(selectinload(WorldBookCategory.entries))
            .order_by(WorldBookCategory.created_at.asc())
            .all()
        )
