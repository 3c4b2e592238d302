"""Utility subpackage: logging, text segmentation and linguistic tooling"""

from .logger import (
    get_logger,
    log_error,
    log_analyzer_selected,
    log_analyzer_fallback,
    log_flashcard_generation,
    set_generation_context,
    reset_generation_context,
    get_generation_context,
)
from .preprocess import (
    STOP_WORDS,
    SegmentedText,
    segment_text,
    split_sections,
    split_sentences,
    tokenize_words,
    find_context_sentence,
)

__all__ = [
    'get_logger',
    'log_error',
    'log_analyzer_selected',
    'log_analyzer_fallback',
    'log_flashcard_generation',
    'set_generation_context',
    'reset_generation_context',
    'get_generation_context',
    'STOP_WORDS',
    'SegmentedText',
    'segment_text',
    'split_sections',
    'split_sentences',
    'tokenize_words',
    'find_context_sentence',
]
