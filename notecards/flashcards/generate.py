"""Flashcard generation from notes.

This module turns a Note into a Deck by running one of two interchangeable
analyzers over the note content:

1. BaselineAnalyzer: regex, frequency and position heuristics only
2. EnrichedAnalyzer: adds POS tags, named entities, noun phrases and
   stemming from an injected linguistic toolkit (NLTK by default)

Architecture:
    - Analyzer: common interface; analyze(content) -> AnalysisResult
    - select_analyzer(): picks a strategy once, from the configured mode and
      the enriched capability probe
    - FlashcardGenerator: owns one analyzer plus a baseline fallback; an
      enriched failure switches that generator to baseline for good
    - assemble_deck(): wraps the final cards into a Deck record

Pipeline per analyzer:
    content -> keyphrases -> section extractors -> whole-note extractors
            -> general fallback (only when nothing matched)
            -> dedup -> rank (enriched only) -> truncate

All working state lives inside a single analyze() call.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from notecards import config
from notecards.exceptions import AnalysisError, AnalyzerUnavailableError
from notecards.keyphrases import extract_keyphrases, extract_keyphrases_enriched
from notecards.models import Deck, Flashcard, KeyPhrase, Note, generate_id
from notecards.utils.logger import (
    log_analyzer_fallback,
    log_analyzer_selected,
    log_flashcard_generation,
    reset_generation_context,
    set_generation_context,
)
from notecards.utils.nlp import NltkToolkit, probe_enriched_support
from notecards.utils.preprocess import split_sections
from . import extractors
from .postprocess import finalize_cards

logger = logging.getLogger(__name__)

ANALYZER_MODES = ('auto', 'enriched', 'baseline')


@dataclass
class AnalysisResult:
    """Output of one analyze() call.

    Attributes:
        analyzer: Name of the analyzer that produced the cards
        cards: Final cards, most relevant first
        keyphrases: Keyphrases used to drive and rank the cards
        source_counts: Cards emitted per extractor, before dedup and truncation
    """
    analyzer: str
    cards: List[Flashcard] = field(default_factory=list)
    keyphrases: List[KeyPhrase] = field(default_factory=list)
    source_counts: Dict[str, int] = field(default_factory=dict)


class _CardCollector:
    def __init__(self):
        self.cards: List[Flashcard] = []
        self.counts: Dict[str, int] = defaultdict(int)

    def add(self, source: str, cards: Iterable[Flashcard]) -> None:
        cards = list(cards)
        self.cards.extend(cards)
        self.counts[source] += len(cards)


class Analyzer(ABC):
    """Strategy interface shared by the baseline and enriched analyzers."""

    name = ''
    description_suffix = ''

    def __init__(self, max_cards: int, max_keyphrases: int,
                 min_section_length: int = config.MIN_SECTION_LENGTH):
        if max_cards < 0:
            raise ValueError(f"max_cards must be zero or positive, got {max_cards}")
        self.max_cards = max_cards
        self.max_keyphrases = max_keyphrases
        self.min_section_length = min_section_length

    @abstractmethod
    def analyze(self, content: str) -> AnalysisResult:
        """Generate ranked, de-duplicated cards for the given note content."""

    def __repr__(self):
        return f"{type(self).__name__}(max_cards={self.max_cards})"


class BaselineAnalyzer(Analyzer):
    name = 'baseline'

    def __init__(self, max_cards: Optional[int] = None, max_keyphrases: Optional[int] = None):
        super().__init__(
            max_cards=config.BASELINE_MAX_CARDS if max_cards is None else max_cards,
            max_keyphrases=config.BASELINE_MAX_KEYPHRASES if max_keyphrases is None else max_keyphrases,
        )

    def analyze(self, content: str) -> AnalysisResult:
        if not content.strip():
            return AnalysisResult(analyzer=self.name)

        keyphrases = extract_keyphrases(content, max_keyphrases=self.max_keyphrases)
        collector = _CardCollector()

        for section in split_sections(content, min_length=self.min_section_length):
            collector.add('definition', extractors.extract_definitions(section, keyphrases))
            collector.add('concept', extractors.extract_concepts(section, keyphrases))
            collector.add('list', extractors.extract_list_items(section))
            collector.add('process', extractors.extract_process_steps(section, keyphrases))

        collector.add('keyphrase', extractors.keyphrase_cards(content, keyphrases))

        if not collector.cards:
            collector.add('general', extractors.general_cards(content))

        return AnalysisResult(
            analyzer=self.name,
            cards=finalize_cards(collector.cards, keyphrases, self.max_cards),
            keyphrases=keyphrases,
            source_counts=dict(collector.counts),
        )


class EnrichedAnalyzer(Analyzer):
    """Analyzer backed by a linguistic toolkit.

    Args:
        toolkit: Object providing sentences/tag/named_entities/stem/stop_words.
                 Defaults to a new NltkToolkit.
        max_cards: Card cap. Default: NOTECARDS_ENRICHED_MAX_CARDS (30)
        max_keyphrases: Keyphrase cap. Default: NOTECARDS_ENRICHED_MAX_KEYPHRASES (25)

    Raises:
        AnalysisError: From analyze(), wrapping anything the toolkit or an
                       extractor raised.
    """

    name = 'enriched'
    description_suffix = ' using advanced NLP'

    def __init__(self, toolkit=None, max_cards: Optional[int] = None, max_keyphrases: Optional[int] = None):
        super().__init__(
            max_cards=config.ENRICHED_MAX_CARDS if max_cards is None else max_cards,
            max_keyphrases=config.ENRICHED_MAX_KEYPHRASES if max_keyphrases is None else max_keyphrases,
        )
        self.toolkit = toolkit if toolkit is not None else NltkToolkit()

    def analyze(self, content: str) -> AnalysisResult:
        try:
            return self._analyze(content)
        except Exception as e:
            raise AnalysisError(f"Enriched analysis failed: {e}") from e

    def _analyze(self, content: str) -> AnalysisResult:
        if not content.strip():
            return AnalysisResult(analyzer=self.name)

        toolkit = self.toolkit
        keyphrases = extract_keyphrases_enriched(content, toolkit, max_keyphrases=self.max_keyphrases)
        collector = _CardCollector()

        for section in split_sections(content, min_length=self.min_section_length):
            collector.add('definition', extractors.extract_definitions_enriched(section, keyphrases, toolkit))
            collector.add('concept', extractors.extract_concepts_enriched(section, keyphrases, toolkit))
            collector.add('named_entity', extractors.extract_named_entities(section, toolkit))
            collector.add('list', extractors.extract_list_items(section))
            collector.add('process', extractors.extract_process_steps_enriched(section, keyphrases, toolkit))

        collector.add('keyphrase', extractors.keyphrase_cards_enriched(keyphrases))
        collector.add('relationship', extractors.extract_relationships(content, toolkit))

        if not collector.cards:
            collector.add('general', extractors.general_cards(content))

        return AnalysisResult(
            analyzer=self.name,
            cards=finalize_cards(collector.cards, keyphrases, self.max_cards, rank=True),
            keyphrases=keyphrases,
            source_counts=dict(collector.counts),
        )


def select_analyzer(mode: Optional[str] = None, toolkit=None, max_cards: Optional[int] = None) -> Analyzer:
    """
    Choose the analyzer for a generator.

    Args:
        mode (str): 'auto', 'enriched' or 'baseline'. Default: NOTECARDS_ANALYZER
        toolkit: Inject a toolkit instead of probing for NLTK.
        max_cards (int): Card cap override for the chosen analyzer.

    Returns:
        Analyzer: EnrichedAnalyzer when allowed and available, else BaselineAnalyzer.

    Raises:
        ValueError: If mode is not one of ANALYZER_MODES.
        AnalyzerUnavailableError: If mode is 'enriched' and NLTK data is missing.
    """
    mode = (mode or config.ANALYZER_MODE).lower()
    if mode not in ANALYZER_MODES:
        raise ValueError(f"Unknown analyzer mode '{mode}', expected one of {', '.join(ANALYZER_MODES)}")

    if mode == 'baseline':
        log_analyzer_selected('baseline', 'baseline mode requested')
        return BaselineAnalyzer(max_cards=max_cards)

    if toolkit is not None:
        log_analyzer_selected('enriched', f'injected toolkit {type(toolkit).__name__}')
        return EnrichedAnalyzer(toolkit=toolkit, max_cards=max_cards)

    available, reason = probe_enriched_support()
    if available:
        log_analyzer_selected('enriched', reason)
        return EnrichedAnalyzer(max_cards=max_cards)

    if mode == 'enriched':
        raise AnalyzerUnavailableError(f"Enriched analyzer requested but unavailable: {reason}")

    log_analyzer_selected('baseline', reason)
    return BaselineAnalyzer(max_cards=max_cards)


def assemble_deck(note: Note, cards: List[Flashcard], description_suffix: str = '') -> Deck:
    return Deck(
        title=f"{note.title} - Flashcards",
        description=f'Flashcards generated from "{note.file_name}"{description_suffix}',
        cards=cards,
        created_from_note=note.id,
    )


class FlashcardGenerator:
    """Generates flashcard decks from notes.

    The analyzer is chosen once, at construction. If the enriched analyzer
    fails on a note, that note is re-analyzed with the baseline analyzer and
    the generator keeps using baseline for every later note.

    Attributes:
        analyzer: Analyzer currently in use
        fallback: BaselineAnalyzer used after an enriched failure
    """

    def __init__(self,
                 analyzer: Optional[Analyzer] = None,
                 mode: Optional[str] = None,
                 toolkit=None,
                 max_cards: Optional[int] = None):
        """Initialize FlashcardGenerator.

        Args:
            analyzer: Use this analyzer instead of selecting one
            mode: 'auto', 'enriched' or 'baseline' (see select_analyzer)
            toolkit: Linguistic toolkit to inject into the enriched analyzer
            max_cards: Card cap override, applied to the fallback as well

        Raises:
            AnalyzerUnavailableError: If mode is 'enriched' and NLTK data is missing
        """
        self.analyzer = analyzer or select_analyzer(mode=mode, toolkit=toolkit, max_cards=max_cards)
        if isinstance(self.analyzer, BaselineAnalyzer):
            self.fallback = self.analyzer
        else:
            self.fallback = BaselineAnalyzer(max_cards=max_cards)

    @property
    def enriched_disabled(self) -> bool:
        return self.analyzer is self.fallback

    def analyze(self, content: str) -> AnalysisResult:
        analyzer = self.analyzer
        try:
            return analyzer.analyze(content)
        except AnalysisError as e:
            if analyzer is self.fallback:
                raise
            log_analyzer_fallback(analyzer.name, self.fallback.name, e)
            self.analyzer = self.fallback
            return self.fallback.analyze(content)

    def generate_with_details(self, note: Note):
        """Generate a deck and also return the AnalysisResult behind it."""
        token = set_generation_context(generate_id(), note.id)
        logger.debug(f"Generating flashcards for note {note.id} with the {self.analyzer.name} analyzer")
        start = time.perf_counter()
        try:
            result = self.analyze(note.content)
            suffix = EnrichedAnalyzer.description_suffix if result.analyzer == EnrichedAnalyzer.name else ''
            deck = assemble_deck(note, result.cards, suffix)

            log_flashcard_generation(
                analyzer=result.analyzer,
                flashcard_count=len(deck.cards),
                keyphrase_count=len(result.keyphrases),
                source_counts=result.source_counts,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return deck, result
        finally:
            reset_generation_context(token)

    def generate(self, note: Note) -> Deck:
        deck, _ = self.generate_with_details(note)
        return deck


_generators: Dict[Tuple[Optional[str], Optional[int]], FlashcardGenerator] = {}


def get_generator(mode: Optional[str] = None, max_cards: Optional[int] = None) -> FlashcardGenerator:
    """
    Return the shared generator for (mode, max_cards), building it on first use.

    The analyzer is probed once per combination, and an enriched failure keeps
    that generator on baseline for every later call.
    """
    key = ((mode or config.ANALYZER_MODE).lower(), max_cards)
    generator = _generators.get(key)
    if generator is None:
        generator = FlashcardGenerator(mode=key[0], max_cards=max_cards)
        _generators[key] = generator
    return generator


def generate_deck(note: Note, mode: Optional[str] = None, max_cards: Optional[int] = None) -> Deck:
    """Generate a deck for note with the shared generator for mode and max_cards."""
    return get_generator(mode=mode, max_cards=max_cards).generate(note)
