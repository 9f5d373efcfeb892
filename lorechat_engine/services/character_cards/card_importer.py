"""
Character Card Importer
======================

Import character cards from PNG or JSON files.

The importer only reads and normalizes; persisting the result is left to
CardImportService so a card can be previewed before it is saved.
"""

import base64
import json
import logging
from typing import Optional

from .card_normalizer import CardImportError, CharacterCardNormalizer
from .format_detector import CharacterCardSource, FormatDetector
from .metadata_handler import PngMetadataExtractor
from .models import CardFormat, CardImportResult, CardSource, PngCardSource

logger = logging.getLogger(__name__)

NO_CARD_DATA_MESSAGE = "未能在图片中找到有效的角色数据 (Tavern/V2格式)"
INVALID_JSON_MESSAGE = "导入失败：请确保文件是标准的 JSON 角色卡格式。"


class CardDataNotFoundError(CardImportError):
    """PNG carries no readable character card metadata."""
    pass


class CharacterCardImporter:
    """Import character cards from PNG and JSON files."""

    def __init__(self, normalizer: Optional[CharacterCardNormalizer] = None):
        self.normalizer = normalizer or CharacterCardNormalizer()

    def import_bytes(
        self,
        data: bytes,
        content_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> CardImportResult:
        """Tag an uploaded file and import it."""
        source = CharacterCardSource.from_upload(data, content_type, filename)
        return self.import_card(source)

    def import_card(self, source: CardSource) -> CardImportResult:
        """
        Import a character card.

        Args:
            source: PNG or JSON card source

        Returns:
            CardImportResult with normalized character, lorebook, format and warnings

        Raises:
            MalformedCardError: If the card JSON is not an object
            CardDataNotFoundError: If a PNG has no card chunk or its text is not JSON
            CardImportError: If a JSON card is not valid JSON
        """
        avatar = None
        if isinstance(source, PngCardSource):
            logger.info(f"Importing character card from PNG ({len(source.data)} bytes)")
            text = PngMetadataExtractor.extract(source.data)
            if text is None:
                raise CardDataNotFoundError(NO_CARD_DATA_MESSAGE)
            avatar = "data:image/png;base64," + base64.b64encode(source.data).decode("ascii")
        else:
            logger.info("Importing character card from JSON")
            text = source.text

        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse character card JSON: {e}")
            if isinstance(source, PngCardSource):
                raise CardDataNotFoundError(NO_CARD_DATA_MESSAGE) from e
            raise CardImportError(INVALID_JSON_MESSAGE) from e

        card_format = (
            FormatDetector.detect(parsed) if isinstance(parsed, dict) else CardFormat.TAVERN_V1
        )
        normalized = self.normalizer.normalize(parsed)

        warnings = list(normalized.warnings)
        if card_format == CardFormat.SILLYTAVERN_V3:
            warnings.append("SillyTavern V3 format detected - only V2 fields are imported")

        result = CardImportResult(
            character=normalized.character,
            lorebook=normalized.lorebook,
            format=card_format,
            avatar=avatar,
            warnings=warnings,
        )

        logger.info(
            f"Imported {FormatDetector.get_format_name(card_format)} card: {result.summary()}"
        )
        return result
