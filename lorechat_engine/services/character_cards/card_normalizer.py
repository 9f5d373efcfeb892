"""
Character Card Normalizer
========================

Projects the many near-standard character card schemas (TavernAI flat
cards, SillyTavern V2/V3 wrapped cards, hand-written JSON) onto one
normalized character and an optional lorebook.
"""

import logging
import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, List, Optional, Tuple

from .models import (
    LoreEntry,
    NormalizationResult,
    NormalizedCharacter,
    NormalizedLorebook,
    RawCharacterCard,
)

logger = logging.getLogger(__name__)

DEFAULT_CHARACTER_NAME = "导入角色"
DEFAULT_GREETING = "你好"
SCENARIO_SEPARATOR = "\n\n[Scenario]: "
LOREBOOK_NAME_SUFFIX = "的世界书 (导入)"

# Alias priority per logical field, first present non-null value wins
NAME_KEYS = ("name", "char_name")
DESCRIPTION_KEYS = ("description", "persona", "personality")
SCENARIO_KEYS = ("scenario",)
GREETING_KEYS = ("first_mes", "greeting")
LORE_CONTAINER_KEYS = ("character_book", "lorebook")
LORE_ENTRIES_KEYS = ("entries", "entries_list")
ENTRY_KEYS_KEYS = ("keys", "key")


class CardImportError(Exception):
    """Base exception for character card import failures."""
    pass


class MalformedCardError(CardImportError):
    """Parsed card data is not a JSON object."""
    pass


def _new_lorebook_id() -> str:
    return uuid.uuid4().hex


def _first_present(source: Mapping, keys: Tuple[str, ...]) -> Any:
    for key in keys:
        value = source.get(key)
        if value is not None:
            return value
    return None


def _as_text(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    return str(value)


def _as_key_list(value: Any) -> List[str]:
    """Trigger keys may arrive as a list, a single string, or nothing."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [item if isinstance(item, str) else str(item) for item in value if item is not None]
    return [str(value)]


def unwrap_card(parsed: Dict[str, Any]) -> Dict[str, Any]:
    """Return the field-bearing object of a card (V2/V3 cards nest it under 'data')."""
    data = parsed.get("data")
    if isinstance(data, Mapping):
        return dict(data)
    return parsed


class CharacterCardNormalizer:
    """Normalize parsed character card JSON."""

    def __init__(self, id_factory: Optional[Callable[[], str]] = None):
        """
        Args:
            id_factory: Produces lorebook identifiers (defaults to uuid4 hex)
        """
        self.id_factory = id_factory or _new_lorebook_id

    def normalize(self, parsed: Any) -> NormalizationResult:
        """
        Normalize a parsed card.

        Args:
            parsed: Result of json.loads on the card text

        Returns:
            NormalizationResult with character, optional lorebook and warnings

        Raises:
            MalformedCardError: If parsed is not a JSON object
        """
        if not isinstance(parsed, Mapping):
            raise MalformedCardError(
                f"Character card must be a JSON object, got {type(parsed).__name__}"
            )

        card = RawCharacterCard.model_validate(unwrap_card(dict(parsed)))
        warnings: List[str] = []

        name = _as_text(card.first_of(*NAME_KEYS), DEFAULT_CHARACTER_NAME)
        description = _as_text(card.first_of(*DESCRIPTION_KEYS), "")
        scenario = _as_text(card.first_of(*SCENARIO_KEYS), "")
        greeting = _as_text(card.first_of(*GREETING_KEYS), DEFAULT_GREETING)

        lorebook = None
        container = card.first_of(*LORE_CONTAINER_KEYS)
        if container is not None:
            lorebook = self._extract_lorebook(name, container, warnings)

        character = NormalizedCharacter(
            display_name=name,
            description=f"{description}{SCENARIO_SEPARATOR}{scenario}",
            greeting=greeting,
            lorebook_ref=lorebook.id if lorebook else None,
        )

        logger.info(
            f"Normalized character card '{name}'"
            + (f" with lorebook ({len(lorebook.entries)} entries)" if lorebook else "")
        )
        return NormalizationResult(character=character, lorebook=lorebook, warnings=warnings)

    def _extract_lorebook(
        self,
        character_name: str,
        container: Any,
        warnings: List[str],
    ) -> Optional[NormalizedLorebook]:
        """Build the companion lorebook, or None when there is nothing to import."""
        if not isinstance(container, Mapping):
            warnings.append("Lorebook data is not an object, skipped")
            return None

        raw_entries = _first_present(container, LORE_ENTRIES_KEYS)
        if isinstance(raw_entries, Mapping):
            # SillyTavern world info keys entries by uid
            raw_entries = list(raw_entries.values())

        if (
            not raw_entries
            or isinstance(raw_entries, (str, bytes))
            or not isinstance(raw_entries, Sequence)
        ):
            warnings.append("Lorebook has no entries, skipped")
            return None

        entries = []
        for index, raw in enumerate(raw_entries):
            if not isinstance(raw, Mapping):
                warnings.append(f"Lorebook entry {index} is not an object, skipped")
                continue
            entries.append(self._normalize_entry(raw))

        if not entries:
            return None

        return NormalizedLorebook(
            id=self.id_factory(),
            name=f"{character_name}{LOREBOOK_NAME_SUFFIX}",
            entries=entries,
        )

    @staticmethod
    def _normalize_entry(raw: Mapping) -> LoreEntry:
        # Only an explicit false disables an entry
        return LoreEntry(
            trigger_keys=_as_key_list(_first_present(raw, ENTRY_KEYS_KEYS)),
            content=_as_text(raw.get("content"), ""),
            enabled=raw.get("enabled") is not False,
        )


def normalize_card(parsed: Any) -> NormalizationResult:
    """Normalize with a default CharacterCardNormalizer."""
    return CharacterCardNormalizer().normalize(parsed)
