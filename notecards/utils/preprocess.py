"""
Text segmentation for flashcard generation.

This module splits raw note text into the three granularities the extractors
work on:
- Sections: blank-line-delimited blocks, trimmed; short blocks are dropped
- Sentences: runs of text between terminal punctuation (. ! ?)
- Words: lower-cased tokens split on non-word characters, optionally
  filtered by length and a stop-word set

All functions are pure: the same text always yields the same segments, and
nothing is cached between calls.

Usage Example:
    from notecards.utils.preprocess import segment_text

    segments = segment_text(open('notes.md').read())
    for section in segments.sections:
        print(section[:80])
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from notecards import config
from notecards.exceptions import PreprocessingError

logger = logging.getLogger(__name__)

SECTION_BREAK = re.compile(r'\n\s*\n')
SENTENCE_BREAK = re.compile(r'[.!?]+')
SENTENCE_WITH_PUNCTUATION = re.compile(r'[^.!?]+[.!?]*')
WORD_BREAK = re.compile(r'\W+', re.ASCII)
NUMBER = re.compile(r'^\d+$')

# Common words excluded from frequency analysis
STOP_WORDS = frozenset({
    'the', 'is', 'at', 'which', 'on', 'and', 'a', 'to', 'are', 'as', 'was', 'were',
    'been', 'be', 'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would', 'could',
    'should', 'may', 'might', 'must', 'can', 'this', 'that', 'these', 'those', 'i',
    'you', 'he', 'she', 'it', 'we', 'they', 'me', 'him', 'her', 'us', 'them', 'my',
    'your', 'his', 'its', 'our', 'their', 'with', 'from', 'by', 'for', 'of',
    'in', 'into', 'through', 'during', 'before', 'after', 'above', 'below', 'up',
    'down', 'out', 'off', 'over', 'under', 'again', 'further', 'then', 'once',
})


@dataclass
class SegmentedText:
    """A note split into sections, sentences and frequency tokens."""
    text: str
    sections: List[str] = field(default_factory=list)
    sentences: List[str] = field(default_factory=list)
    words: List[str] = field(default_factory=list)


def _require_text(text) -> str:
    if text is None or not isinstance(text, str):
        raise PreprocessingError("Input text must be a string, not None or other type")
    return text


def split_sections(text: str, min_length: int = config.MIN_SECTION_LENGTH) -> List[str]:
    """
    Split text into blank-line-delimited sections.

    Args:
        text (str): Raw note text.
        min_length (int): Sections shorter than this (after trimming) are
                          dropped. Default: NOTECARDS_MIN_SECTION_LENGTH (10)

    Returns:
        List[str]: Trimmed sections in document order.

    Raises:
        PreprocessingError: If text is not a string.

    Examples:
        >>> split_sections("First block of text\\n\\n  \\nSecond block here")
        ['First block of text', 'Second block here']
    """
    text = _require_text(text)
    sections = [section.strip() for section in SECTION_BREAK.split(text)]
    return [section for section in sections if len(section) >= min_length]


def split_sentences(text: str, min_length: int = 0, keep_punctuation: bool = False) -> List[str]:
    """
    Split text into sentences on runs of '.', '!' and '?'.

    Args:
        text (str): Text to split.
        min_length (int): Only sentences strictly longer than this (after
                          trimming) are returned. Default: 0
        keep_punctuation (bool): Keep the terminal punctuation attached to
                                 each sentence. Default: False

    Returns:
        List[str]: Trimmed sentences in document order.

    Examples:
        >>> split_sentences("Short. This one is long enough!", min_length=10)
        ['This one is long enough']
        >>> split_sentences("One here. Two there!", keep_punctuation=True)
        ['One here.', 'Two there!']
    """
    text = _require_text(text)
    if keep_punctuation:
        pieces = SENTENCE_WITH_PUNCTUATION.findall(text)
    else:
        pieces = SENTENCE_BREAK.split(text)
    sentences = [piece.strip() for piece in pieces]
    return [sentence for sentence in sentences if sentence and len(sentence) > min_length]


def tokenize_words(
    text: str,
    min_length: int = 3,
    stop_words: Optional[Iterable[str]] = STOP_WORDS,
    drop_numbers: bool = False
) -> List[str]:
    """
    Lower-case and split text into word tokens.

    Args:
        text (str): Text to tokenize.
        min_length (int): Only tokens strictly longer than this are kept.
                          Default: 3
        stop_words: Tokens in this set are dropped. Pass None to keep them.
        drop_numbers (bool): Drop purely numeric tokens. Default: False

    Returns:
        List[str]: Tokens in document order (duplicates preserved).
    """
    text = _require_text(text)
    stop_words = frozenset(stop_words or ())
    tokens = []
    for token in WORD_BREAK.split(text.lower()):
        if len(token) <= min_length:
            continue
        if token in stop_words:
            continue
        if drop_numbers and NUMBER.match(token):
            continue
        tokens.append(token)
    return tokens


def find_context_sentence(phrase: str, text: str) -> str:
    """Return the first sentence of text containing phrase (case-insensitive), or ''."""
    if not phrase:
        return ''
    needle = phrase.lower()
    for sentence in SENTENCE_BREAK.split(_require_text(text)):
        if needle in sentence.lower():
            return sentence.strip()
    return ''


def segment_text(
    text: str,
    min_section_length: int = config.MIN_SECTION_LENGTH,
    min_sentence_length: int = 10
) -> SegmentedText:
    """
    Segment a whole note in one pass.

    Args:
        text (str): Raw note text.
        min_section_length (int): Passed to split_sections().
        min_sentence_length (int): Passed to split_sentences().

    Returns:
        SegmentedText: sections, sentences and stop-word-free tokens.
    """
    text = _require_text(text)
    segments = SegmentedText(
        text=text,
        sections=split_sections(text, min_length=min_section_length),
        sentences=split_sentences(text, min_length=min_sentence_length),
        words=tokenize_words(text, drop_numbers=True),
    )
    logger.debug(
        f"Segmented text: {len(segments.sections)} sections, "
        f"{len(segments.sentences)} sentences, {len(segments.words)} words"
    )
    return segments
