"""
Pytest fixtures and test data for notecards tests.
"""
import re
from unittest.mock import MagicMock

import pytest

from notecards.models import Note
from notecards.utils.preprocess import STOP_WORDS


@pytest.fixture(autouse=True)
def mock_logger(monkeypatch):
    # Route structured event logging to a mock so tests stay quiet and can assert on it
    import notecards.utils.logger as logger_mod
    mock = MagicMock()
    monkeypatch.setattr(logger_mod, 'get_logger', lambda *a, **k: mock)
    yield mock


class FakeToolkit:
    """Deterministic stand-in for NltkToolkit.

    Tags by word lists and capitalisation, stems by dropping a trailing 's',
    and reports only the named entities it was built with.
    """

    name = 'fake'

    DETERMINERS = {'a', 'an', 'the', 'this', 'these', 'that', 'those'}
    PREPOSITIONS = {'in', 'of', 'by', 'for', 'with', 'to', 'from', 'on', 'at', 'into'}
    CONJUNCTIONS = {'and', 'or', 'but'}
    PRONOUNS = {'it', 'they', 'you', 'we', 'he', 'she'}
    LINKING_VERBS = {'is', 'are', 'was', 'were', 'has', 'have', 'contains', 'includes', 'requires', 'uses'}
    VERBS = {'implement', 'execute', 'perform', 'analyze', 'calculate', 'learn', 'need',
             'proposed', 'minimises', 'store', 'guide', 'carry', 'create'}
    ADJECTIVES = {'deep', 'small', 'large', 'computational', 'biological', 'neural', 'famous', 'standard'}

    def __init__(self, entities=None):
        self.entities = dict(entities or {})
        self.stop_words = frozenset(STOP_WORDS | {'an', 'or', 'but', 'not'})

    def sentences(self, text):
        return [s.strip() for s in re.findall(r'[^.!?]+[.!?]*', text) if s.strip()]

    def _tag_word(self, word):
        lowered = word.lower()
        if not re.match(r'\w', word):
            return '.'
        if word.isdigit():
            return 'CD'
        if lowered in self.DETERMINERS:
            return 'DT'
        if lowered in self.PREPOSITIONS:
            return 'IN'
        if lowered in self.CONJUNCTIONS:
            return 'CC'
        if lowered in self.PRONOUNS:
            return 'PRP'
        if lowered in self.LINKING_VERBS:
            return 'VBZ'
        if lowered in self.VERBS:
            return 'VB'
        if lowered in self.ADJECTIVES:
            return 'JJ'
        if lowered.endswith('ly'):
            return 'RB'
        if word[0].isupper():
            return 'NNP'
        return 'NN'

    def tag(self, text):
        return [(word, self._tag_word(word)) for word in re.findall(r'\w+|[^\w\s]', text)]

    def named_entities(self, text):
        found = [(text.find(name), name, label) for name, label in self.entities.items() if name in text]
        return [(name, label) for _, name, label in sorted(found)]

    def stem(self, word):
        if len(word) > 3 and word.endswith('s'):
            return word[:-1]
        return word


class FailingToolkit(FakeToolkit):
    """Toolkit whose tagger blows up, as a broken NLTK install would."""

    def tag(self, text):
        raise RuntimeError('tagger model could not be loaded')


@pytest.fixture
def fake_toolkit():
    return FakeToolkit(entities={'Alan Turing': 'PERSON', 'Cambridge': 'GPE'})


@pytest.fixture
def failing_toolkit():
    return FailingToolkit()


@pytest.fixture
def sample_text():
    """Study note with a heading, definitions, a list and a numbered process."""
    return """# Machine Learning Basics

Machine learning is a field of study that gives computers the ability to learn without being explicitly programmed.

Neural Network: A computational model inspired by biological neural networks.

Common Algorithms
- Linear regression predicts continuous values
- Decision trees split data on feature thresholds
- Clustering groups similar examples together

The training process follows these steps:
1. Collect and label the training data
2. Choose a model and a loss function
3. Optimise the parameters with gradient descent

Overfitting causes poor performance on unseen data. Regularisation reduces overfitting by penalising large weights.

Alan Turing proposed the imitation game while working in Cambridge. Gradient descent minimises the loss function step by step."""


@pytest.fixture
def fallback_paragraph():
    """Unstructured paragraph: no colons, connectives, bullets or numbers."""
    return (
        "Rivers carry sediment from mountains toward the sea. Along the way, water slowly "
        "carves valleys and shapes the surrounding land. Over many centuries these forces "
        "create broad plains where farming communities often settle."
    )


@pytest.fixture
def make_note():
    def _make(content, title='Study Notes', file_name='notes.md', note_id='note-1'):
        return Note(id=note_id, title=title, content=content, file_name=file_name)
    return _make


@pytest.fixture
def empty_text():
    """Empty and whitespace-only text."""
    return {
        'empty': '',
        'spaces': '   ',
        'newlines': '\n\n\n',
        'tabs': '\t\t\t'
    }
