class NotecardsError(Exception):
    pass


class PreprocessingError(NotecardsError, ValueError):
    """Raised when the segmenter receives input it cannot split."""


class AnalyzerUnavailableError(NotecardsError):
    """Raised when enriched tooling is required but cannot be loaded."""


class AnalysisError(NotecardsError):
    """Raised when an analyzer fails part-way through a note."""


class DeckEditError(NotecardsError):
    pass


class NoteLoadError(NotecardsError):
    pass
