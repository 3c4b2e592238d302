"""Card post-processing: de-duplication, quality ranking and truncation."""

import re
from typing import Iterable, List, Sequence

from notecards.models import Flashcard, KeyPhrase

_NON_WORD = re.compile(r'[^\w\s]', re.ASCII)
_WHITESPACE = re.compile(r'\s+')


def dedup_key(card: Flashcard) -> str:
    """Lower-cased question + answer with non-ASCII-word characters removed and whitespace collapsed."""
    key = card.question.lower() + card.answer.lower()
    return _WHITESPACE.sub(' ', _NON_WORD.sub('', key))


def remove_duplicate_cards(cards: Iterable[Flashcard]) -> List[Flashcard]:
    """Keep the first card for every dedup key, preserving order."""
    seen = set()
    unique = []
    for card in cards:
        key = dedup_key(card)
        if key in seen:
            continue
        seen.add(key)
        unique.append(card)
    return unique


def card_quality(card: Flashcard, keyphrases: Sequence[KeyPhrase]) -> int:
    """
    Heuristic quality score.

    +2 for an answer of 50-200 characters (else +1 for 20-300), +1 when the
    question contains "explain" or "describe", +2 when the question or answer
    mentions any keyphrase.
    """
    score = 0

    answer_length = len(card.answer)
    if 50 <= answer_length <= 200:
        score += 2
    elif 20 <= answer_length <= 300:
        score += 1

    # Case-sensitive: "Explain the concept of ..." does not count
    if 'explain' in card.question or 'describe' in card.question:
        score += 1

    question = card.question.lower()
    answer = card.answer.lower()
    if any(kp.phrase.lower() in question or kp.phrase.lower() in answer for kp in keyphrases):
        score += 2

    return score


def rank_cards(cards: Sequence[Flashcard], keyphrases: Sequence[KeyPhrase]) -> List[Flashcard]:
    """Sort by quality, highest first; ties keep their emission order."""
    return sorted(cards, key=lambda card: card_quality(card, keyphrases), reverse=True)


def finalize_cards(cards: Iterable[Flashcard], keyphrases: Sequence[KeyPhrase],
                   max_cards: int, rank: bool = False) -> List[Flashcard]:
    """Dedup, optionally rank, then truncate to max_cards."""
    unique = remove_duplicate_cards(cards)
    if rank:
        unique = rank_cards(unique, keyphrases)
    return unique[:max_cards]
