"""FastAPI application and routes."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional, List

from fastapi import FastAPI, HTTPException, Depends, UploadFile, File
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from sqlalchemy.orm import Session

from lorechat_engine.config import ConfigLoader, SystemConfig
from lorechat_engine.db import configure_database, get_db, init_db
from lorechat_engine.models import Contact, WorldBookCategory
from lorechat_engine.repositories import (
    ContactRepository,
    MessageRepository,
    WorldBookRepository,
)
from lorechat_engine.services import CardImportService
from lorechat_engine.services.character_cards import (
    CardImportError,
    CharacterCardImporter,
)

logger = logging.getLogger(__name__)

IMPORT_FAILED_MESSAGE = "导入失败，请检查文件格式"


# Global state
app_state = {
    "system_config": SystemConfig(),
    "card_importer": CharacterCardImporter(),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting LoreChat Engine...")
    
    loader = ConfigLoader()
    system_config = loader.load_system_config()
    app_state["system_config"] = system_config
    
    configure_database(system_config.database_url, echo=system_config.database.echo)
    init_db()
    
    yield
    
    logger.info("Shutting down LoreChat Engine...")


app = FastAPI(
    title="LoreChat Engine",
    description="Roleplay chat backend with character card import",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Response models

class WorldBookEntryResponse(BaseModel):
    id: int
    keys: List[str]
    content: str
    enabled: bool


class WorldBookCategoryResponse(BaseModel):
    id: str
    name: str
    entries: List[WorldBookEntryResponse]
    
    @classmethod
    def from_model(cls, category: WorldBookCategory) -> "WorldBookCategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            entries=[
                WorldBookEntryResponse(
                    id=entry.id,
                    keys=entry.keys or [],
                    content=entry.content,
                    enabled=entry.enabled,
                )
                for entry in category.entries
            ],
        )


class ContactResponse(BaseModel):
    id: str
    name: str
    remark: Optional[str] = None
    ai_name: Optional[str] = None
    my_nickname: str
    avatar: Optional[str] = None
    subtitle: Optional[str] = None
    description: str
    first_message: Optional[str] = None
    group_name: str
    is_pinned: bool
    world_book_id: Optional[str] = None
    created_at: datetime
    
    @classmethod
    def from_model(cls, contact: Contact) -> "ContactResponse":
        return cls(
            id=contact.id,
            name=contact.name,
            remark=contact.remark,
            ai_name=contact.ai_name,
            my_nickname=contact.my_nickname,
            avatar=contact.avatar,
            subtitle=contact.subtitle,
            description=contact.description,
            first_message=contact.first_message,
            group_name=contact.group_name,
            is_pinned=contact.is_pinned,
            world_book_id=contact.world_book_id,
            created_at=contact.created_at,
        )


class MessageResponse(BaseModel):
    id: str
    role: str
    content: str
    type: str
    created_at: datetime


class ImportedWorldBook(BaseModel):
    id: str
    name: str
    entry_count: int


class CharacterImportResponse(BaseModel):
    contact: ContactResponse
    world_book: Optional[ImportedWorldBook] = None
    format: str
    warnings: List[str]


# Routes

@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}


@app.post("/characters/import", response_model=CharacterImportResponse, status_code=201)
async def import_character_card(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """
    Import a character card (.png with embedded 'chara' metadata, or .json).
    
    An embedded lorebook is added to the world book as a new category and
    linked to the created contact.
    """
    settings = app_state["system_config"].import_
    content = await file.read()
    
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")
    
    importer: CharacterCardImporter = app_state["card_importer"]
    
    try:
        result = importer.import_bytes(content, file.content_type, file.filename)
        contact = CardImportService(db, settings).import_result(result)
    except CardImportError as e:
        logger.warning(f"Rejected character card '{file.filename}': {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to import character card '{file.filename}': {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=IMPORT_FAILED_MESSAGE)
    
    world_book = None
    if result.lorebook is not None:
        world_book = ImportedWorldBook(
            id=result.lorebook.id,
            name=result.lorebook.name,
            entry_count=len(result.lorebook.entries),
        )
    
    return CharacterImportResponse(
        contact=ContactResponse.from_model(contact),
        world_book=world_book,
        format=result.format.value,
        warnings=result.warnings,
    )


@app.get("/contacts", response_model=List[ContactResponse])
async def list_contacts(db: Session = Depends(get_db)):
    """List contacts, pinned first."""
    return [ContactResponse.from_model(c) for c in ContactRepository(db).list_all()]


@app.get("/contacts/{contact_id}", response_model=ContactResponse)
async def get_contact(contact_id: str, db: Session = Depends(get_db)):
    """Get a single contact."""
    contact = ContactRepository(db).get_by_id(contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail=f"Contact '{contact_id}' not found")
    return ContactResponse.from_model(contact)


@app.get("/contacts/{contact_id}/messages", response_model=List[MessageResponse])
async def list_contact_messages(contact_id: str, db: Session = Depends(get_db)):
    """Get a contact's chat history."""
    if not ContactRepository(db).get_by_id(contact_id):
        raise HTTPException(status_code=404, detail=f"Contact '{contact_id}' not found")
    
    return [
        MessageResponse(
            id=m.id,
            role=m.role.value,
            content=m.content,
            type=m.type,
            created_at=m.created_at,
        )
        for m in MessageRepository(db).list_by_contact(contact_id)
    ]


@app.get("/worldbook", response_model=List[WorldBookCategoryResponse])
async def list_world_book(db: Session = Depends(get_db)):
    """List world book categories with their entries."""
    return [
        WorldBookCategoryResponse.from_model(category)
        for category in WorldBookRepository(db).list_categories()
    ]
