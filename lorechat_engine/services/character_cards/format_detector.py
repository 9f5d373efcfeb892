"""
Card Format Detector
===================

Decides once, at the upload boundary, whether a file is a PNG or JSON
card, and which card schema a parsed card follows.
"""

import logging
from pathlib import PurePath
from typing import Any, Dict, Optional

from .card_normalizer import CardImportError
from .metadata_handler import PngMetadataExtractor
from .models import CardFormat, CardSource, JsonCardSource, PngCardSource

logger = logging.getLogger(__name__)

PNG_MEDIA_TYPES = {"image/png", "image/apng"}
JSON_MEDIA_TYPES = {"application/json", "text/json"}


class UnsupportedCardFileError(CardImportError):
    """Upload is neither a PNG nor a JSON character card."""
    pass


def _decode_json_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnsupportedCardFileError(f"JSON card is not valid UTF-8 text: {e}")


class CharacterCardSource:
    """Build tagged card sources from uploads."""

    @staticmethod
    def png(data: bytes) -> PngCardSource:
        return PngCardSource(data=data)

    @staticmethod
    def json(text: str) -> JsonCardSource:
        return JsonCardSource(text=text)

    @classmethod
    def from_upload(
        cls,
        data: bytes,
        content_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> CardSource:
        """
        Tag an uploaded file as a PNG or JSON card.

        The declared media type wins, then the file extension, then the
        content itself (PNG signature, else UTF-8 text).

        Raises:
            UnsupportedCardFileError: If the file cannot be a card
        """
        media_type = (content_type or "").split(";")[0].strip().lower()
        suffix = PurePath(filename).suffix.lower() if filename else ""

        if media_type in PNG_MEDIA_TYPES:
            return cls.png(data)
        if media_type in JSON_MEDIA_TYPES:
            return cls.json(_decode_json_text(data))

        if suffix == ".png":
            return cls.png(data)
        if suffix == ".json":
            return cls.json(_decode_json_text(data))

        if PngMetadataExtractor.has_signature(data):
            logger.debug(f"Sniffed PNG signature for upload '{filename}' ({media_type or 'no type'})")
            return cls.png(data)

        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise UnsupportedCardFileError(
                f"Unsupported card file '{filename or 'upload'}': expected .png or .json"
            )
        if text.lstrip().startswith(("{", "[")):
            return cls.json(text)

        raise UnsupportedCardFileError(
            f"Unsupported card file '{filename or 'upload'}': expected .png or .json"
        )


class FormatDetector:
    """Detect the schema variant of a parsed card."""

    @staticmethod
    def detect(parsed: Dict[str, Any]) -> CardFormat:
        spec = parsed.get("spec")
        if spec == CardFormat.SILLYTAVERN_V3.value:
            return CardFormat.SILLYTAVERN_V3
        if spec == CardFormat.SILLYTAVERN_V2.value or isinstance(parsed.get("data"), dict):
            return CardFormat.SILLYTAVERN_V2
        return CardFormat.TAVERN_V1

    @classmethod
    def get_format_name(cls, format: CardFormat) -> str:
        """Get human-readable format name."""
        names = {
            CardFormat.TAVERN_V1: "TavernAI V1",
            CardFormat.SILLYTAVERN_V2: "SillyTavern V2",
            CardFormat.SILLYTAVERN_V3: "SillyTavern V3",
        }
        return names.get(format, "Unknown")
