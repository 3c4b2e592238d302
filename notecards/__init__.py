"""Heuristic flashcard generation from study notes"""

__version__ = '0.1.0'

from .exceptions import (
    AnalysisError,
    AnalyzerUnavailableError,
    DeckEditError,
    NoteLoadError,
    NotecardsError,
    PreprocessingError,
)
from .models import Deck, Flashcard, KeyPhrase, KeyPhraseType, Note
from .flashcards import (
    BaselineAnalyzer,
    EnrichedAnalyzer,
    FlashcardGenerator,
    generate_deck,
    select_analyzer,
)

__all__ = [
    'AnalysisError',
    'AnalyzerUnavailableError',
    'BaselineAnalyzer',
    'Deck',
    'DeckEditError',
    'EnrichedAnalyzer',
    'Flashcard',
    'FlashcardGenerator',
    'KeyPhrase',
    'KeyPhraseType',
    'Note',
    'NoteLoadError',
    'NotecardsError',
    'PreprocessingError',
    'generate_deck',
    'select_analyzer',
]
