"""Helpers that build PNG byte streams chunk by chunk for card tests."""

import base64
import json
import struct
import zlib

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# 1x1 RGB image header
IHDR_PAYLOAD = struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0)


def make_chunk(type_tag: bytes, payload: bytes) -> bytes:
    crc = zlib.crc32(type_tag + payload) & 0xFFFFFFFF
    return struct.pack(">I", len(payload)) + type_tag + payload + struct.pack(">I", crc)


def text_chunk(keyword: str, text: bytes) -> bytes:
    return make_chunk(b"tEXt", keyword.encode("latin-1") + b"\x00" + text)


def make_png(*chunks: bytes) -> bytes:
    """Signature, IHDR, the given chunks, then IEND."""
    return (
        PNG_SIGNATURE
        + make_chunk(b"IHDR", IHDR_PAYLOAD)
        + b"".join(chunks)
        + make_chunk(b"IEND", b"")
    )


def encode_card(card) -> bytes:
    return base64.b64encode(json.dumps(card, ensure_ascii=False).encode("utf-8"))


def card_png(card, keyword: str = "chara") -> bytes:
    """PNG carrying card as base64 JSON in a tEXt chunk."""
    return make_png(text_chunk(keyword, encode_card(card)))
