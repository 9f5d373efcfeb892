"""
Character Card Data Models
=========================

Pydantic models for character card import: the loose intermediate record
read from card JSON, and the normalized character / lorebook values.
"""

from enum import Enum
from typing import Optional, Dict, List, Any, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class CardFormat(str, Enum):
    """Known character card schema variants."""
    TAVERN_V1 = "tavern_v1"
    SILLYTAVERN_V2 = "chara_card_v2"
    SILLYTAVERN_V3 = "chara_card_v3"


# ===========================
# Loose card input
# ===========================

class RawCharacterCard(BaseModel):
    """
    Loosely-typed view of a parsed card.

    Every field is optional and may hold any JSON value. Aliases from the
    different card generations all live side by side here; the normalizer
    decides which one wins.
    """
    model_config = ConfigDict(extra='allow')

    name: Optional[Any] = None
    char_name: Optional[Any] = None
    description: Optional[Any] = None
    persona: Optional[Any] = None
    personality: Optional[Any] = None
    scenario: Optional[Any] = None
    first_mes: Optional[Any] = None
    greeting: Optional[Any] = None
    character_book: Optional[Any] = None
    lorebook: Optional[Any] = None

    def first_of(self, *keys: str) -> Any:
        """Return the first value among keys that is present and not None."""
        extra = self.model_extra or {}
        for key in keys:
            value = getattr(self, key) if key in type(self).model_fields else extra.get(key)
            if value is not None:
                return value
        return None


# ===========================
# Normalized output
# ===========================

class LoreEntry(BaseModel):
    """A single world book entry."""
    model_config = ConfigDict(frozen=True)

    trigger_keys: List[str] = Field(default_factory=list)
    content: str = ""
    enabled: bool = True


class NormalizedLorebook(BaseModel):
    """Lorebook extracted from a character card."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    entries: List[LoreEntry] = Field(default_factory=list)


class NormalizedCharacter(BaseModel):
    """Character record ready to become a contact."""
    model_config = ConfigDict(frozen=True)

    display_name: str
    description: str = ""
    greeting: str
    lorebook_ref: Optional[str] = None


class NormalizationResult(BaseModel):
    """Normalizer output: the character and its optional companion lorebook."""
    model_config = ConfigDict(frozen=True)

    character: NormalizedCharacter
    lorebook: Optional[NormalizedLorebook] = None
    warnings: List[str] = Field(default_factory=list)


# ===========================
# Import sources / results
# ===========================

class PngCardSource(BaseModel):
    """Raw bytes of a PNG character card."""
    kind: Literal["png"] = "png"
    data: bytes


class JsonCardSource(BaseModel):
    """Decoded text of a JSON character card."""
    kind: Literal["json"] = "json"
    text: str


CardSource = Union[PngCardSource, JsonCardSource]


class CardImportResult(BaseModel):
    """Result of character card import operation."""
    character: NormalizedCharacter
    lorebook: Optional[NormalizedLorebook] = None
    format: CardFormat
    avatar: Optional[str] = None  # data URL for PNG cards
    warnings: List[str] = Field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        """Short description used in logs and CLI output."""
        return {
            "name": self.character.display_name,
            "format": self.format.value,
            "lore_entries": len(self.lorebook.entries) if self.lorebook else 0,
            "warnings": len(self.warnings),
        }
