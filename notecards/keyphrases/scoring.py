"""Score formulas for candidate keyphrases.

All scores are products of ad hoc weights: raw frequency, where the phrase
first appears, how many words it has and (enriched only) whether it looks
technical or capitalised. The multipliers are part of the ranking contract;
changing one changes which cards a note produces.
"""

import re

TECHNICAL_NOUN = re.compile(r'\b(algorithm|method|process|system|framework|model|technique)\b', re.IGNORECASE)
UPPERCASE = re.compile(r'[A-Z]')


def count_occurrences(phrase: str, text: str) -> int:
    """Case-insensitive, non-overlapping occurrences of phrase in text."""
    if not phrase:
        return 0
    return text.lower().count(phrase.lower())


def first_position_ratio(phrase: str, text: str) -> float:
    """Offset of the first occurrence as a fraction of the text length.

    A phrase that never occurs is treated as appearing at the start.
    """
    if not text:
        return 0.0
    position = text.lower().find(phrase.lower())
    return max(position, 0) / len(text)


def positional_score(phrase: str, text: str) -> float:
    """1.5 in the first 20% of the text, 1.2 in the first half, else 1.0."""
    ratio = first_position_ratio(phrase, text)
    if ratio < 0.2:
        return 1.5
    if ratio < 0.5:
        return 1.2
    return 1.0


def enriched_positional_score(phrase: str, text: str) -> float:
    ratio = first_position_ratio(phrase, text)
    if ratio < 0.1:
        return 2.0
    if ratio < 0.3:
        return 1.5
    if ratio < 0.7:
        return 1.2
    return 1.0


def word_count(phrase: str) -> int:
    return len(phrase.split(' '))


def phrase_importance(phrase: str, text: str) -> float:
    """Frequency times a length bonus of min(words * 0.5, 2)."""
    length_bonus = min(word_count(phrase) * 0.5, 2)
    return count_occurrences(phrase, text) * length_bonus


def enriched_phrase_importance(phrase: str, text: str) -> float:
    """Frequency, technical-noun boost (x1.3) and a 1 + min(words * 0.4, 2) length bonus."""
    linguistic = 1.3 if TECHNICAL_NOUN.search(phrase) else 1.0
    length_bonus = min(word_count(phrase) * 0.4, 2.0)
    return count_occurrences(phrase, text) * linguistic * (1 + length_bonus)


def enriched_keyword_score(keyword: str, text: str) -> float:
    """Frequency, finer positional ladder, length bonus and a x1.2 capitalisation boost."""
    length_bonus = min(word_count(keyword) * 0.3, 1.5)
    capital_bonus = 1.2 if UPPERCASE.search(keyword) else 1.0
    return (
        count_occurrences(keyword, text)
        * enriched_positional_score(keyword, text)
        * (1 + length_bonus)
        * capital_bonus
    )
