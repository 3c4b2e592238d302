"""
Linguistic tooling for the enriched analyzer.

Features
--------
- Capability probe: checks that every NLTK data package the enriched analyzer
  needs is installed and that a one-sentence smoke run succeeds
- NltkToolkit: sentence splitting, POS tagging, named-entity chunking,
  Porter stemming and the English stop-word corpus behind one small object
- Pure helpers over ``(word, tag)`` lists: noun phrases, proper-noun runs,
  noun compounds, verbs from a closed vocabulary, relation triples

Design notes
------------
- The probe runs once, when a generator is built; generation never downloads
- Anything exposing ``sentences``, ``tag``, ``named_entities``, ``stem`` and
  ``stop_words`` can replace NltkToolkit (tests use a deterministic tagger)
- Tag helpers never call a tagger themselves, so they behave the same for
  real and fake toolkits
"""

from __future__ import annotations

import logging
from typing import Callable, FrozenSet, Iterable, List, Sequence, Tuple

import nltk
from nltk.chunk import RegexpParser
from nltk.corpus import stopwords
from nltk.stem import PorterStemmer
from nltk.tree import Tree

logger = logging.getLogger(__name__)

TaggedWord = Tuple[str, str]

# Each entry lists interchangeable (resource path, download package) pairs.
# Newer NLTK releases ship the *_tab / *_eng variants.
REQUIRED_RESOURCES = (
    (('tokenizers/punkt_tab', 'punkt_tab'), ('tokenizers/punkt', 'punkt')),
    (('taggers/averaged_perceptron_tagger_eng', 'averaged_perceptron_tagger_eng'),
     ('taggers/averaged_perceptron_tagger', 'averaged_perceptron_tagger')),
    (('chunkers/maxent_ne_chunker_tab', 'maxent_ne_chunker_tab'),
     ('chunkers/maxent_ne_chunker', 'maxent_ne_chunker')),
    (('corpora/words', 'words'),),
    (('corpora/stopwords', 'stopwords'),),
)

SMOKE_SENTENCE = "Ada Lovelace wrote the first algorithm in London."

NOUN_PHRASE_GRAMMAR = 'NP: {<JJ.*>*<NN.*>+}'
_noun_phrase_parser = RegexpParser(NOUN_PHRASE_GRAMMAR)

ENTITY_LABELS = frozenset({'PERSON', 'GPE', 'LOCATION', 'ORGANIZATION'})
RELATION_VERBS = frozenset({'is', 'are', 'has', 'have', 'contains', 'includes', 'requires', 'uses'})


def _resource_available(path: str) -> bool:
    try:
        nltk.data.find(path)
        return True
    except LookupError:
        return False


def missing_resources() -> List[str]:
    """Return the download package names of required resources not installed."""
    missing = []
    for alternatives in REQUIRED_RESOURCES:
        if not any(_resource_available(path) for path, _ in alternatives):
            missing.append(alternatives[0][1])
    return missing


def download_nltk_data(quiet: bool = True) -> List[str]:
    """
    Download every required NLTK package that is not installed yet.

    Args:
        quiet (bool): Suppress NLTK's own download progress output.

    Returns:
        List[str]: Packages that still could not be installed (empty on success).
    """
    failed = []
    for package in missing_resources():
        logger.info(f"Downloading NLTK {package}...")
        if not nltk.download(package, quiet=quiet):
            logger.error(f"NLTK download failed: {package}")
            failed.append(package)
    return failed


class NltkToolkit:
    """Enriched linguistic operations backed by NLTK models and corpora."""

    name = 'nltk'

    def __init__(self, language: str = 'english'):
        self.language = language
        self._stemmer = PorterStemmer()
        self.stop_words: FrozenSet[str] = frozenset(stopwords.words(language))

    def sentences(self, text: str) -> List[str]:
        return [s.strip() for s in nltk.sent_tokenize(text, language=self.language) if s.strip()]

    def tag(self, text: str) -> List[TaggedWord]:
        tokens = nltk.word_tokenize(text, language=self.language)
        if not tokens:
            return []
        return nltk.pos_tag(tokens)

    def named_entities(self, text: str) -> List[Tuple[str, str]]:
        """Return ``(name, label)`` pairs for every NE chunk, in document order."""
        entities = []
        for sentence in self.sentences(text):
            tagged = self.tag(sentence)
            if not tagged:
                continue
            for subtree in nltk.ne_chunk(tagged):
                if isinstance(subtree, Tree):
                    name = ' '.join(word for word, _ in subtree.leaves())
                    entities.append((name, subtree.label()))
        return entities

    def stem(self, word: str) -> str:
        return self._stemmer.stem(word)


def probe_enriched_support() -> Tuple[bool, str]:
    """
    Decide whether the enriched analyzer can run in this environment.

    Returns:
        Tuple[bool, str]: (available, human-readable reason)
    """
    missing = missing_resources()
    if missing:
        return False, f"missing NLTK data: {', '.join(missing)}"

    try:
        NltkToolkit().named_entities(SMOKE_SENTENCE)
    except Exception as e:
        return False, f"NLTK smoke run failed: {e}"

    return True, 'NLTK data available'


# ---------------------------------------------------------------------------
# Helpers over tagged words
# ---------------------------------------------------------------------------

def is_noun(tag: str) -> bool:
    return tag.startswith('NN')


def is_proper_noun(tag: str) -> bool:
    return tag in ('NNP', 'NNPS')


def is_verb(tag: str) -> bool:
    return tag.startswith('VB')


def has_noun(tagged: Sequence[TaggedWord]) -> bool:
    return any(is_noun(tag) for _, tag in tagged)


def _runs(tagged: Sequence[TaggedWord], predicate: Callable[[str], bool], min_length: int = 1) -> List[List[TaggedWord]]:
    runs, current = [], []
    for word, tag in tagged:
        if predicate(tag):
            current.append((word, tag))
            continue
        if len(current) >= min_length:
            runs.append(current)
        current = []
    if len(current) >= min_length:
        runs.append(current)
    return runs


def _join(words: Iterable[TaggedWord]) -> str:
    return ' '.join(word for word, _ in words)


def noun_phrases(tagged: Sequence[TaggedWord]) -> List[Tuple[str, List[str]]]:
    """
    Chunk adjective* noun+ sequences.

    Returns:
        List of (phrase, tags) in document order.
    """
    if not tagged:
        return []
    phrases = []
    for subtree in _noun_phrase_parser.parse(list(tagged)):
        if isinstance(subtree, Tree) and subtree.label() == 'NP':
            leaves = subtree.leaves()
            phrases.append((_join(leaves), [tag for _, tag in leaves]))
    return phrases


def proper_noun_runs(tagged: Sequence[TaggedWord]) -> List[str]:
    return [_join(run) for run in _runs(tagged, is_proper_noun)]


def noun_compounds(tagged: Sequence[TaggedWord]) -> List[str]:
    """Runs of two or more consecutive nouns ("gradient descent step")."""
    return [_join(run) for run in _runs(tagged, is_noun, min_length=2)]


def find_verbs(tagged: Sequence[TaggedWord], vocabulary: Iterable[str], substring: bool = False) -> List[str]:
    """
    Return verb tokens drawn from a closed vocabulary.

    Args:
        tagged: Tagged words.
        vocabulary: Lower-case verbs to look for.
        substring (bool): Match when a vocabulary entry occurs inside the token
                          ("processing" matches "process") instead of exactly.
    """
    vocabulary = tuple(vocabulary)
    verbs = []
    for word, tag in tagged:
        if not is_verb(tag):
            continue
        lowered = word.lower()
        if substring:
            matched = any(entry in lowered for entry in vocabulary)
        else:
            matched = lowered in vocabulary
        if matched:
            verbs.append(word)
    return verbs


def relation_triples(tagged: Sequence[TaggedWord], verbs: FrozenSet[str] = RELATION_VERBS) -> List[str]:
    """
    Find ``noun+ <relation verb> noun+`` spans.

    The verb must sit directly between two noun runs, e.g. "Python uses
    indentation" but not "Python uses the indentation".
    """
    triples = []
    for i, (word, _) in enumerate(tagged):
        if word.lower() not in verbs:
            continue
        if i == 0 or i + 1 >= len(tagged):
            continue
        if not (is_noun(tagged[i - 1][1]) and is_noun(tagged[i + 1][1])):
            continue

        start = i - 1
        while start > 0 and is_noun(tagged[start - 1][1]):
            start -= 1
        end = i + 1
        while end + 1 < len(tagged) and is_noun(tagged[end + 1][1]):
            end += 1

        triples.append(_join(tagged[start:end + 1]))
    return triples
