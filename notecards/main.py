#!/usr/bin/env python3
"""
Notecards CLI - Flashcard deck generator
Usage: notecards notes.md [--mode auto|enriched|baseline] [--max-cards N] [--output deck.json] [--show N]
       notecards --download-nltk-data

Reads a .txt or .md note, generates a flashcard deck and prints a summary.
The deck can be written as camelCase JSON with --output.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from notecards.exceptions import AnalyzerUnavailableError, NoteLoadError
from notecards.flashcards.generate import ANALYZER_MODES, FlashcardGenerator
from notecards.models import Note
from notecards.utils.nlp import download_nltk_data, missing_resources

logger = logging.getLogger(__name__)

ACCEPTED_SUFFIXES = ('.txt', '.md')


def load_note(path) -> Note:
    """
    Read a note file from disk.

    Args:
        path: Path to a .txt or .md file.

    Returns:
        Note: Title from the content's heading or first short line, else the file stem.

    Raises:
        NoteLoadError: If the file is missing, has another extension or cannot be decoded.
    """
    input_path = Path(path)
    if not input_path.is_file():
        raise NoteLoadError(f"Input file not found: {path}")
    if input_path.suffix.lower() not in ACCEPTED_SUFFIXES:
        raise NoteLoadError(f"Unsupported file type '{input_path.suffix}': expected .txt or .md")

    try:
        content = input_path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise NoteLoadError(f"Could not read {path}: {e}") from e

    return Note.from_text(content, file_name=input_path.name)


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be zero or positive, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='notecards',
        description='Generate question/answer flashcards from study notes.',
    )
    parser.add_argument('input', nargs='?', help='note file (.txt or .md)')
    parser.add_argument('--mode', choices=ANALYZER_MODES, default=None,
                        help='analyzer to use (default: NOTECARDS_ANALYZER or auto)')
    parser.add_argument('--max-cards', type=non_negative_int, default=None, help='override the card cap')
    parser.add_argument('--output', help='write the deck as JSON to this file')
    parser.add_argument('--show', type=int, default=5, help='number of cards to print (default: 5)')
    parser.add_argument('--download-nltk-data', action='store_true',
                        help='download the NLTK data used by the enriched analyzer and exit')
    return parser


def run_download() -> int:
    missing = missing_resources()
    if not missing:
        print("✓ All required NLTK data already available")
        return 0

    print(f"⊗ Missing NLTK data: {', '.join(missing)}; downloading...")
    failed = download_nltk_data(quiet=False)
    if failed:
        print(f"\n✗ Failed to download: {', '.join(failed)}")
        print(f"  Try manual download with: python -m nltk.downloader {' '.join(failed)}")
        return 1

    print("\n✓ All required NLTK data downloaded successfully")
    return 0


def print_summary(deck, result, show: int) -> None:
    print(f"\n{'='*70}")
    print(f"{deck.title.upper()}")
    print(f"{'='*70}")
    print(deck.description)
    print(f"Analyzer: {result.analyzer}")
    print(f"Cards: {len(deck.cards)}")
    print(f"Keyphrases: {', '.join(kp.phrase for kp in result.keyphrases[:10]) or 'None'}")
    print(f"Cards per extractor (before dedup): {result.source_counts}")

    if show > 0 and deck.cards:
        print(f"\n{'='*70}")
        print(f"SAMPLE FLASHCARDS (first {min(show, len(deck.cards))})")
        print(f"{'='*70}")
        for i, card in enumerate(deck.cards[:show], 1):
            print(f"\n[{i}] {card.question}")
            print(f"    Answer: {card.answer}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.download_nltk_data:
        return run_download()

    if not args.input:
        parser.print_usage()
        print("notecards: error: an input file is required")
        return 1

    try:
        note = load_note(args.input)
        generator = FlashcardGenerator(mode=args.mode, max_cards=args.max_cards)
    except (NoteLoadError, AnalyzerUnavailableError) as e:
        logger.error(str(e))
        print(f"✗ {e}")
        return 1

    deck, result = generator.generate_with_details(note)
    print_summary(deck, result, args.show)

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(deck.model_dump_json(by_alias=True, indent=2), encoding='utf-8')
        print(f"\n✓ Deck written to {output_path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
