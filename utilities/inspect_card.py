"""
Character Card Inspector

Prints the tEXt keywords of a card image and the normalized character and
lorebook as YAML. Nothing is written to the database.
Usage: python utilities/inspect_card.py <card.png|card.json>
Example: python utilities/inspect_card.py cards/shen_mo.png
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path so we can import lorechat_engine
sys.path.insert(0, str(Path(__file__).parent.parent))

import yaml

from lorechat_engine.services.character_cards import (
    CardImportError,
    CharacterCardImporter,
    PngMetadataExtractor,
)


def truncate(text, max_length=80):
    """Truncate text for display."""
    if len(text) <= max_length:
        return text
    return text[:max_length-3] + "..."


def main():
    parser = argparse.ArgumentParser(description="Inspect a character card without importing it")
    parser.add_argument("path", type=Path, help="PNG or JSON character card")
    parser.add_argument("--full", action="store_true", help="Do not truncate long text fields")
    args = parser.parse_args()
    
    if not args.path.exists():
        print(f"File not found: {args.path}", file=sys.stderr)
        sys.exit(1)
    
    data = args.path.read_bytes()
    
    if PngMetadataExtractor.has_signature(data):
        keywords = [keyword for keyword, _ in PngMetadataExtractor.iter_text_chunks(data)]
        print(f"tEXt keywords: {', '.join(keywords) if keywords else '(none)'}")
    
    try:
        result = CharacterCardImporter().import_bytes(data, filename=args.path.name)
    except CardImportError as e:
        print(f"Import failed: {e}", file=sys.stderr)
        sys.exit(1)

    summary = result.summary()
    print(
        f"{summary['name']} [{summary['format']}]: "
        f"{summary['lore_entries']} lore entries, {summary['warnings']} warnings"
    )

    report = result.model_dump(mode='json', exclude={'avatar'})
    if not args.full:
        character = report['character']
        character['description'] = truncate(character['description'])
        if report['lorebook']:
            for entry in report['lorebook']['entries']:
                entry['content'] = truncate(entry['content'])
    
    yaml.dump(report, sys.stdout, default_flow_style=False, allow_unicode=True, sort_keys=False)


if __name__ == "__main__":
    main()
