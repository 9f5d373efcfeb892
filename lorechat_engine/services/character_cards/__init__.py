"""
Character Card System
====================

Character definitions embedded in PNG images (base64 JSON in a tEXt chunk
keyed 'chara') or shipped as plain JSON.

Supports:
- TavernAI V1 flat cards
- SillyTavern V2/V3 wrapped cards
- Embedded lorebooks (character_book / lorebook)
"""

from .card_importer import CardDataNotFoundError, CharacterCardImporter
from .card_normalizer import (
    CardImportError,
    CharacterCardNormalizer,
    MalformedCardError,
    normalize_card,
)
from .format_detector import CharacterCardSource, FormatDetector, UnsupportedCardFileError
from .metadata_handler import PngMetadataExtractor, extract_card_text
from .models import (
    CardFormat,
    CardImportResult,
    JsonCardSource,
    LoreEntry,
    NormalizationResult,
    NormalizedCharacter,
    NormalizedLorebook,
    PngCardSource,
)

__all__ = [
    'CardDataNotFoundError',
    'CardFormat',
    'CardImportError',
    'CardImportResult',
    'CharacterCardImporter',
    'CharacterCardNormalizer',
    'CharacterCardSource',
    'FormatDetector',
    'JsonCardSource',
    'LoreEntry',
    'MalformedCardError',
    'NormalizationResult',
    'NormalizedCharacter',
    'NormalizedLorebook',
    'PngCardSource',
    'PngMetadataExtractor',
    'UnsupportedCardFileError',
    'extract_card_text',
    'normalize_card',
]
