"""Database models for the world book (lore) store."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, JSON, Integer, Boolean
from sqlalchemy.orm import relationship

from lorechat_engine.db.database import Base
from lorechat_engine.models.contact import generate_uuid


class WorldBookCategory(Base):
    """
    A named group of lore entries.
    
    Categories created by card import reuse the lorebook id produced by
    the normalizer, so contacts can reference them before they are saved.
    """
    __tablename__ = "world_book_categories"
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(300), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    entries = relationship(
        "WorldBookEntry",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="WorldBookEntry.position"
    )
    
    def __repr__(self):
        return f"<WorldBookCategory(id={self.id}, name={self.name})>"


class WorldBookEntry(Base):
    """A lore entry, injected into context when one of its keys appears."""
    __tablename__ = "world_book_entries"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(
        String(36),
        ForeignKey("world_book_categories.id", ondelete="CASCADE"),
        nullable=False
    )
    position = Column(Integer, nullable=False, default=0)
    keys = Column(JSON, nullable=False, default=list)
    content = Column(Text, nullable=False, default="")
    enabled = Column(Boolean, nullable=False, default=True)
    
    category = relationship("WorldBookCategory", back_populates="entries")
    
    def __repr__(self):
        return f"<WorldBookEntry(id={self.id}, category={self.category_id}, keys={self.keys})>"
