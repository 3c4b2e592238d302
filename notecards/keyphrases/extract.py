"""
Keyphrase extraction: baseline heuristics and NLTK-backed enrichment.

Both extractors gather candidates from several independent signals, sort
them by score (stable, highest first), collapse duplicates and cap the list:

- Baseline: frequent words, capitalised terms, sentence-level TF-IDF and
  multi-word academic phrases; duplicates collapse on lower-cased text.
- Enriched: keywords, noun phrases, proper-noun runs, noun compounds,
  process verbs, numpy TF-IDF over stemmed tokens and technical-term
  patterns; duplicates collapse on the Porter stem of every word.

Usage Example:
    from notecards.keyphrases import extract_keyphrases

    for kp in extract_keyphrases(text)[:5]:
        print(f"{kp.score:6.2f} {kp.type.value:10} {kp.phrase}")
"""

import logging
import math
import re
from collections import Counter
from typing import Callable, Iterable, List

import numpy as np

from notecards import config
from notecards.models import KeyPhrase, KeyPhraseType
from notecards.utils.nlp import (
    find_verbs,
    noun_compounds,
    noun_phrases,
    proper_noun_runs,
)
from notecards.utils.preprocess import (
    find_context_sentence,
    split_sentences,
    tokenize_words,
)
from .scoring import (
    enriched_keyword_score,
    enriched_phrase_importance,
    phrase_importance,
    positional_score,
)

logger = logging.getLogger(__name__)

CAPITALIZED_TERM = re.compile(r'\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b')

MULTI_WORD_PATTERNS = [
    re.compile(r'\b\w+(?:\s+\w+){1,2}\s+(?:method|process|system|approach|technique|algorithm|procedure)\b', re.IGNORECASE),
    re.compile(r'\b(?:the|a|an)\s+\w+(?:\s+\w+){1,2}\s+(?:is|are|was|were)\b', re.IGNORECASE),
    re.compile(r'\b\w+(?:\s+\w+){1,2}\s+(?:theory|principle|concept|model|framework)\b', re.IGNORECASE),
]

TECHNICAL_PATTERNS = [
    re.compile(r'\b\w+(?:\s+\w+){0,2}\s+(?:algorithm|method|process|system|approach|technique|procedure|framework|model|protocol|standard)\b', re.IGNORECASE),
    re.compile(r'\b(?:machine|deep|artificial|neural|computer|data|information|software|hardware)\s+\w+(?:\s+\w+){0,2}\b', re.IGNORECASE),
    re.compile(r'\b\w+(?:\s+\w+){0,2}\s+(?:analysis|optimization|implementation|development|engineering|architecture)\b', re.IGNORECASE),
]

PROCESS_VERBS = ('implement', 'process', 'analyze', 'calculate', 'determine', 'evaluate', 'execute', 'perform')

TFIDF_FLOOR = 0.015
ENRICHED_TFIDF_FLOOR = 0.1


def rank_keyphrases(candidates: Iterable[KeyPhrase], key: Callable[[str], str], limit: int) -> List[KeyPhrase]:
    """Sort by score (stable, descending), keep the first phrase per key, cap at limit."""
    ranked = sorted(candidates, key=lambda kp: kp.score, reverse=True)
    seen = set()
    unique = []
    for kp in ranked:
        k = key(kp.phrase)
        if k in seen:
            continue
        seen.add(k)
        unique.append(kp)
    return unique[:limit]


# ---------------------------------------------------------------------------
# Baseline signals
# ---------------------------------------------------------------------------

def frequent_keywords(text: str, limit: int = 15) -> List[KeyPhrase]:
    """Words (>3 chars, no stop words or numbers) seen more than once."""
    frequencies = Counter(tokenize_words(text, drop_numbers=True))
    repeated = [(word, freq) for word, freq in frequencies.items() if freq > 1]
    repeated.sort(key=lambda item: item[1], reverse=True)
    return [
        KeyPhrase(phrase=word, score=freq * positional_score(word, text), type=KeyPhraseType.NOUN)
        for word, freq in repeated[:limit]
    ]


def capitalized_terms(text: str) -> List[KeyPhrase]:
    """Runs of capitalised words, scored at twice their frequency."""
    frequencies = Counter(term for term in CAPITALIZED_TERM.findall(text) if len(term) > 3)
    return [
        KeyPhrase(phrase=term, score=freq * 2, type=KeyPhraseType.CONCEPT)
        for term, freq in frequencies.items()
    ]


def tfidf_keyphrases(text: str) -> List[KeyPhrase]:
    """
    Term frequency over the whole text times inverse sentence frequency.

    tf = count / total_words, idf = ln(sentences / (sentences_containing + 1));
    terms above 0.015 are kept and scored tf-idf * 10.
    """
    sentences = [s.lower() for s in split_sentences(text, min_length=10)]
    words = tokenize_words(text, stop_words=None)
    if not sentences or not words:
        return []

    phrases = []
    for term, count in Counter(words).items():
        tf = count / len(words)
        containing = sum(1 for sentence in sentences if term in sentence)
        tfidf = tf * math.log(len(sentences) / (containing + 1))
        if tfidf > TFIDF_FLOOR:
            phrases.append(KeyPhrase(phrase=term, score=tfidf * 10, type=KeyPhraseType.NOUN))
    return phrases


def multi_word_phrases(text: str) -> List[KeyPhrase]:
    phrases = []
    for pattern in MULTI_WORD_PATTERNS:
        for match in pattern.findall(text):
            cleaned = match.strip().lower()
            if len(cleaned) > 10:
                phrases.append(KeyPhrase(
                    phrase=cleaned,
                    score=phrase_importance(cleaned, text),
                    type=KeyPhraseType.CONCEPT,
                ))
    return phrases


def extract_keyphrases(text: str, max_keyphrases: int = config.BASELINE_MAX_KEYPHRASES) -> List[KeyPhrase]:
    """
    Baseline keyphrase extraction using frequency, position and regex signals only.

    Args:
        text (str): Full note text.
        max_keyphrases (int): Cap on the returned list. Default: 20

    Returns:
        List[KeyPhrase]: Highest score first, unique by lower-cased phrase.
    """
    candidates = []
    candidates.extend(frequent_keywords(text))
    candidates.extend(capitalized_terms(text))
    candidates.extend(tfidf_keyphrases(text))
    candidates.extend(multi_word_phrases(text))

    keyphrases = rank_keyphrases(candidates, key=str.lower, limit=max_keyphrases)
    logger.debug(f"Baseline keyphrases: {len(candidates)} candidates, kept {len(keyphrases)}")
    return keyphrases


# ---------------------------------------------------------------------------
# Enriched signals
# ---------------------------------------------------------------------------

def _context(phrase: str, text: str):
    return find_context_sentence(phrase, text) or None


def keyword_candidates(text: str, toolkit) -> List[KeyPhrase]:
    """Distinct lower-cased non-stop-word tokens, scored with the enriched keyword formula."""
    keywords = dict.fromkeys(tokenize_words(text, min_length=2, stop_words=toolkit.stop_words))
    return [
        KeyPhrase(phrase=kw, score=enriched_keyword_score(kw, text), type=KeyPhraseType.NOUN)
        for kw in keywords
    ]


def linguistic_candidates(text: str, toolkit) -> List[KeyPhrase]:
    """Noun phrases, proper nouns, noun compounds and process verbs from POS tags."""
    tagged = toolkit.tag(text)
    phrases = []

    for phrase, tags in noun_phrases(tagged):
        if len(phrase) > 2:
            phrases.append(KeyPhrase(
                phrase=phrase,
                score=enriched_phrase_importance(phrase, text),
                type=KeyPhraseType.NOUN,
                pos=tags,
                context=_context(phrase, text),
            ))

    for entity in proper_noun_runs(tagged):
        if len(entity) > 1:
            phrases.append(KeyPhrase(
                phrase=entity,
                score=enriched_phrase_importance(entity, text) * 1.5,
                type=KeyPhraseType.ENTITY,
                pos=['NNP'],
                context=_context(entity, text),
            ))

    for compound in noun_compounds(tagged):
        if len(compound) > 5:
            phrases.append(KeyPhrase(
                phrase=compound,
                score=enriched_phrase_importance(compound, text) * 1.3,
                type=KeyPhraseType.CONCEPT,
                context=_context(compound, text),
            ))

    for verb in find_verbs(tagged, PROCESS_VERBS, substring=True):
        phrases.append(KeyPhrase(
            phrase=verb,
            score=enriched_phrase_importance(verb, text),
            type=KeyPhraseType.PROCESS,
            pos=['VB'],
            context=_context(verb, text),
        ))

    return phrases


def enriched_tfidf_keyphrases(text: str, toolkit) -> List[KeyPhrase]:
    """
    TF-IDF over stemmed tokens with each sentence treated as a document.

    Scores are normalised by the best term; terms above 0.1 are kept and
    scored normalised * 10. The phrase is the stem itself.
    """
    documents = [
        [toolkit.stem(token) for token in tokenize_words(sentence, stop_words=toolkit.stop_words)]
        for sentence in toolkit.sentences(text)
    ]
    vocabulary = list(dict.fromkeys(term for doc in documents for term in doc))
    if not vocabulary:
        return []

    column = {term: i for i, term in enumerate(vocabulary)}
    counts = np.zeros((len(documents), len(vocabulary)))
    for row, doc in enumerate(documents):
        for term in doc:
            counts[row, column[term]] += 1

    tf = counts.sum(axis=0) / counts.sum()
    df = (counts > 0).sum(axis=0)
    scores = tf * np.log(len(documents) / (df + 1))

    best = scores.max()
    if best <= 0:
        return []

    normalized = scores / best
    return [
        KeyPhrase(phrase=term, score=float(normalized[i]) * 10, type=KeyPhraseType.NOUN)
        for i, term in enumerate(vocabulary)
        if normalized[i] > ENRICHED_TFIDF_FLOOR
    ]


def technical_terms(text: str) -> List[KeyPhrase]:
    phrases = []
    for pattern in TECHNICAL_PATTERNS:
        for match in pattern.findall(text):
            cleaned = match.strip().lower()
            if len(cleaned) > 8:
                phrases.append(KeyPhrase(
                    phrase=cleaned,
                    score=enriched_phrase_importance(cleaned, text) * 1.4,
                    type=KeyPhraseType.TECHNICAL,
                    context=_context(cleaned, text),
                ))
    return phrases


def stem_key(phrase: str, toolkit) -> str:
    return ' '.join(toolkit.stem(word) for word in phrase.lower().split())


def extract_keyphrases_enriched(text: str, toolkit,
                                max_keyphrases: int = config.ENRICHED_MAX_KEYPHRASES) -> List[KeyPhrase]:
    """
    Enriched keyphrase extraction.

    Args:
        text (str): Full note text.
        toolkit: Linguistic toolkit (see notecards.utils.nlp.NltkToolkit).
        max_keyphrases (int): Cap on the returned list. Default: 25

    Returns:
        List[KeyPhrase]: Highest score first, unique by stemmed phrase.
    """
    candidates = []
    candidates.extend(keyword_candidates(text, toolkit))
    candidates.extend(linguistic_candidates(text, toolkit))
    candidates.extend(enriched_tfidf_keyphrases(text, toolkit))
    candidates.extend(technical_terms(text))

    keyphrases = rank_keyphrases(
        candidates,
        key=lambda phrase: stem_key(phrase, toolkit),
        limit=max_keyphrases,
    )
    logger.debug(f"Enriched keyphrases: {len(candidates)} candidates, kept {len(keyphrases)}")
    return keyphrases
