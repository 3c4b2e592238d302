"""Flashcard extraction, post-processing and deck generation"""

from .generate import (
    AnalysisResult,
    Analyzer,
    BaselineAnalyzer,
    EnrichedAnalyzer,
    FlashcardGenerator,
    assemble_deck,
    generate_deck,
    get_generator,
    select_analyzer,
)

__all__ = [
    'AnalysisResult',
    'Analyzer',
    'BaselineAnalyzer',
    'EnrichedAnalyzer',
    'FlashcardGenerator',
    'assemble_deck',
    'generate_deck',
    'get_generator',
    'select_analyzer',
]
