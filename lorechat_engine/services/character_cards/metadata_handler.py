"""
PNG Metadata Handler
===================

Reads tEXt chunks out of PNG character cards.

Only the chunk headers are walked; image data is never decoded and chunk
CRCs are never checked, so truncated or otherwise damaged images still
yield their metadata as long as the tEXt chunk itself is intact.
"""

import base64
import binascii
import logging
import struct
from typing import Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
TEXT_CHUNK_TYPE = b"tEXt"
CHARA_KEYWORD = "chara"

# length + type before the data, CRC after it
_CHUNK_HEADER = struct.Struct(">I4s")
_CHUNK_OVERHEAD = 12


class PngMetadataExtractor:
    """Locate and decode the character card payload of a PNG image."""

    @staticmethod
    def has_signature(data: bytes) -> bool:
        """Check the fixed 8-byte PNG signature."""
        return data[:len(PNG_SIGNATURE)] == PNG_SIGNATURE

    @classmethod
    def iter_chunks(cls, data: bytes) -> Iterator[Tuple[bytes, bytes]]:
        """
        Yield (type_tag, payload) for each chunk in order.

        Stops quietly at the end of the buffer or at the first chunk whose
        header or declared length does not fit in it.
        """
        if not cls.has_signature(data):
            return

        offset = len(PNG_SIGNATURE)
        total = len(data)
        while offset < total:
            if offset + _CHUNK_HEADER.size > total:
                logger.debug(f"Truncated chunk header at offset {offset}, stopping scan")
                return

            length, type_tag = _CHUNK_HEADER.unpack_from(data, offset)
            start = offset + _CHUNK_HEADER.size
            end = start + length
            if end > total:
                logger.debug(
                    f"Chunk {type_tag!r} at offset {offset} declares {length} bytes "
                    f"past end of buffer, stopping scan"
                )
                return

            yield type_tag, data[start:end]
            offset += length + _CHUNK_OVERHEAD

    @classmethod
    def iter_text_chunks(cls, data: bytes) -> Iterator[Tuple[str, bytes]]:
        """
        Yield (keyword, raw_text) for every well-formed tEXt chunk.

        Chunks without a NUL separator, or whose keyword is not valid
        UTF-8, are skipped.
        """
        for type_tag, payload in cls.iter_chunks(data):
            if type_tag != TEXT_CHUNK_TYPE:
                continue

            separator = payload.find(b"\x00")
            if separator == -1:
                logger.debug("tEXt chunk without keyword separator, skipping")
                continue

            try:
                keyword = payload[:separator].decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("tEXt chunk with undecodable keyword, skipping")
                continue

            yield keyword, payload[separator + 1:]

    @classmethod
    def extract(cls, data: bytes, keyword: str = CHARA_KEYWORD) -> Optional[str]:
        """
        Extract the decoded card payload from PNG data.

        Args:
            data: PNG file data as bytes
            keyword: tEXt keyword holding the card (exact, case-sensitive)

        Returns:
            Decoded text if a matching chunk is found, None otherwise
        """
        if not cls.has_signature(data):
            logger.debug("Data does not start with the PNG signature")
            return None

        for found_keyword, text in cls.iter_text_chunks(data):
            if found_keyword != keyword:
                continue
            logger.debug(f"Found tEXt chunk with keyword '{keyword}' ({len(text)} bytes)")
            return cls.decode_payload(text)

        logger.debug(f"tEXt chunk with keyword '{keyword}' not found")
        return None

    @staticmethod
    def decode_payload(text: bytes) -> str:
        """
        Decode a base64 tEXt payload to a UTF-8 string.

        Falls back to the raw text when the payload is not valid base64
        (older cards stored the JSON directly). Invalid UTF-8 sequences
        become U+FFFD and a leading byte order mark is dropped.
        """
        cleaned = b"".join(text.split())
        cleaned += b"=" * (-len(cleaned) % 4)
        try:
            decoded = base64.b64decode(cleaned, validate=True)
        except binascii.Error as e:
            logger.warning(f"Card payload is not valid base64 text, using raw chunk text: {e}")
            return text.decode("utf-8-sig", errors="replace")
        return decoded.decode("utf-8-sig", errors="replace")


def extract_card_text(data: bytes) -> Optional[str]:
    """Module-level shortcut for PngMetadataExtractor.extract."""
    return PngMetadataExtractor.extract(data)
