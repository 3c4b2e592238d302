"""
Pattern extractors: independent strategies that turn text into candidate cards.

Each extractor scans a section (or the whole note) for one surface pattern and
returns zero or more Flashcards. Extractors never raise on text they cannot
use; they guard their own minimum lengths and match counts and simply return
an empty list.

Baseline extractors need nothing but regular expressions. The enriched ones
take a linguistic toolkit (see notecards.utils.nlp) as an explicit argument.

Question templates:
    definition          What is {term}?
    connective concept  What {connective} {object}?
    enriched concept    Explain the concept of "{phrase}"
    list                List the items related to: {title}
                        What is one key point about this topic?
    process             What are the steps in this process?
                        What are the key points of this process?
                        How do you {verb}?
    named entity        What do you know about {name}?
    relationship        What is the relationship described in: "{text}"?
    keyphrase context   depends on the keyphrase type
    general fallback    What does this section discuss? ({first sentence})
"""

import re
from typing import List, Optional, Sequence

from notecards.models import Flashcard, KeyPhrase, KeyPhraseType
from notecards.utils.nlp import ENTITY_LABELS, find_verbs, has_noun, relation_triples
from notecards.utils.preprocess import find_context_sentence, split_sections, split_sentences

DEFINITION_PATTERNS = [
    re.compile(r'(.+?)\s+(?:is|are|means|refers to|defined as|represents|denotes)\s+(.+)', re.IGNORECASE),
    re.compile(r'(.+?):\s*(.+)'),
    re.compile(r'(.+?)\s*[-–—]\s*(.+)'),
    re.compile(r'(.+?)\s+can be defined as\s+(.+)', re.IGNORECASE),
    re.compile(r'(.+?)\s+is known as\s+(.+)', re.IGNORECASE),
]

ENRICHED_DEFINITION_PATTERNS = [
    re.compile(r'(.+?)\s+(?:is|are|means|refers to|defined as|represents|denotes|constitutes)\s+(.+)', re.IGNORECASE),
    re.compile(r'(.+?):\s*(.+)'),
    re.compile(r'(.+?)\s*[-–—]\s*(.+)'),
    re.compile(r'(.+?)\s+can be (?:defined|described|characterized) as\s+(.+)', re.IGNORECASE),
]

CONNECTIVES = (
    'causes', 'leads to', 'results in', 'produces', 'enables',
    'allows', 'affects', 'determines', 'depends on', 'consists of',
)
CONNECTIVE_CLAUSE = re.compile(
    r'^(.+?)\s+(' + '|'.join(re.escape(c) for c in CONNECTIVES) + r')\s+(.+)$',
    re.IGNORECASE | re.DOTALL,
)

LIST_ITEM = re.compile(r'^[\s]*[•\-\*\d]+[\.\)]*\s*(.+)$', re.MULTILINE)
LIST_MARKER = re.compile(r'^[\s]*[•\-\*\d]')
BULLET_LINE = re.compile(r'^[\s]*[•\-\*]\s*(.+)$', re.MULTILINE)
NUMBERED_STEP = re.compile(r'\d+\.\s*[^0-9][\s\S]*?(?=\d+\.|\Z)')
FIRST_SENTENCE_END = re.compile(r'[.!?]')

PROCESS_KEYWORDS = ('step', 'process', 'procedure', 'method', 'algorithm', 'workflow', 'approach', 'technique')
PROCESS_CARD_VERBS = ('implement', 'execute', 'perform', 'analyze', 'process', 'calculate')


def make_card(question: str, answer: str) -> Optional[Flashcard]:
    """Build a card, or None when either side is blank after trimming."""
    question = question.strip()
    answer = answer.strip()
    if not question or not answer:
        return None
    return Flashcard(question=question, answer=answer)


def _add(cards: List[Flashcard], question: str, answer: str) -> None:
    card = make_card(question, answer)
    if card is not None:
        cards.append(card)


def matches_keyphrase(term: str, keyphrases: Sequence[KeyPhrase]) -> bool:
    """True when term contains a keyphrase or a keyphrase contains term."""
    term = term.lower()
    return any(kp.phrase.lower() in term or term in kp.phrase.lower() for kp in keyphrases)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

def extract_definitions(text: str, keyphrases: Sequence[KeyPhrase]) -> List[Flashcard]:
    """
    Find "term <separator> definition" sentences.

    Every pattern is tried on every sentence longer than 20 characters, so
    one sentence can yield more than one card; duplicates are removed later.

    Args:
        text (str): A section of the note.
        keyphrases: Keyphrases of the whole note.

    Returns:
        List[Flashcard]: "What is {term}?" cards.

    Examples:
        >>> [c.question for c in extract_definitions(
        ...     "Neural Network: A computational model inspired by biological neural networks.", [])]
        ['What is Neural Network?']
    """
    cards = []
    for sentence in split_sentences(text, min_length=20, keep_punctuation=True):
        for pattern in DEFINITION_PATTERNS:
            match = pattern.search(sentence)
            if not match:
                continue
            term = match.group(1).strip()
            definition = match.group(2).strip()
            if len(term) > 2 and len(definition) > 10 and (matches_keyphrase(term, keyphrases) or len(term) < 50):
                _add(cards, f"What is {term}?", definition)
    return cards


def extract_definitions_enriched(text: str, keyphrases: Sequence[KeyPhrase], toolkit) -> List[Flashcard]:
    """Definition cards whose term must contain a noun and whose definition exceeds 15 characters."""
    cards = []
    for sentence in toolkit.sentences(text):
        for pattern in ENRICHED_DEFINITION_PATTERNS:
            match = pattern.search(sentence)
            if not match:
                continue
            term = match.group(1).strip()
            definition = match.group(2).strip()
            if len(term) <= 2 or len(definition) <= 15:
                continue
            if not (matches_keyphrase(term, keyphrases) or len(term) < 60):
                continue
            if has_noun(toolkit.tag(term)):
                _add(cards, f"What is {term}?", definition)
    return cards


# ---------------------------------------------------------------------------
# Concepts
# ---------------------------------------------------------------------------

def extract_concepts(text: str, keyphrases: Sequence[KeyPhrase] = ()) -> List[Flashcard]:
    """
    Split sentences on an explanatory connective ("causes", "leads to", ...).

    The clause after the connective becomes the subject of the question and
    the clause before it the answer:
        "Increased pressure causes the boiling point to rise"
        -> What causes the boiling point to rise? / Increased pressure
    """
    cards = []
    for sentence in split_sentences(text, min_length=20):
        match = CONNECTIVE_CLAUSE.match(sentence)
        if not match:
            continue
        answer, connective, subject = (part.strip() for part in match.groups())
        if len(subject) > 2 and len(answer) > 10:
            _add(cards, f"What {connective.lower()} {subject}?", answer)
    return cards


def extract_concepts_enriched(text: str, keyphrases: Sequence[KeyPhrase], toolkit) -> List[Flashcard]:
    """Concept cards for the top ten concept/entity (or score > 5) keyphrases."""
    cards = []
    selected = [kp for kp in keyphrases
                if kp.type in (KeyPhraseType.CONCEPT, KeyPhraseType.ENTITY) or kp.score > 5][:10]
    for kp in selected:
        question = f'Explain the concept of "{kp.phrase}"'
        if kp.context and len(kp.context) > 20:
            _add(cards, question, kp.context)
            continue

        needle = kp.phrase.lower()
        relevant = [s for s in toolkit.sentences(text) if needle in s.lower() and len(s) > 30]
        if relevant:
            _add(cards, question, ' '.join(relevant[:2]))
    return cards


# ---------------------------------------------------------------------------
# Lists and processes
# ---------------------------------------------------------------------------

def extract_list_items(text: str) -> List[Flashcard]:
    """
    Cards from bulleted or numbered lists with at least two items.

    An aggregate card is emitted only when the first line of the section is
    a plain title rather than a list item.
    """
    items = [item.strip() for item in LIST_ITEM.findall(text)]
    if len(items) < 2:
        return []

    cards = []
    title = text.split('\n')[0].strip()
    if title and not LIST_MARKER.match(title):
        _add(cards, f"List the items related to: {title}", '\n• '.join(items))

    for item in items[:5]:
        if len(item) > 15:
            _add(cards, "What is one key point about this topic?", item)
    return cards


def has_process_keyword(text: str) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in PROCESS_KEYWORDS)


def extract_process_steps(text: str, keyphrases: Sequence[KeyPhrase] = ()) -> List[Flashcard]:
    """Numbered-step and bullet-point aggregates from sections that talk about a process."""
    if not has_process_keyword(text):
        return []

    cards = []
    steps = NUMBERED_STEP.findall(text)
    if len(steps) > 1:
        _add(cards, "What are the steps in this process?", '\n'.join(step.strip() for step in steps))

    bullets = [m.group(0).strip() for m in BULLET_LINE.finditer(text)]
    if len(bullets) > 2:
        _add(cards, "What are the key points of this process?", '\n'.join(bullets))
    return cards


def extract_process_steps_enriched(text: str, keyphrases: Sequence[KeyPhrase], toolkit) -> List[Flashcard]:
    """Process aggregates plus one "How do you {verb}?" card per process verb with enough context."""
    if not has_process_keyword(text):
        return []

    cards = extract_process_steps(text, keyphrases)
    for verb in find_verbs(toolkit.tag(text), PROCESS_CARD_VERBS):
        context = find_context_sentence(verb, text)
        if len(context) > 30:
            _add(cards, f"How do you {verb.lower()}?", context)
    return cards


# ---------------------------------------------------------------------------
# Enriched-only extractors
# ---------------------------------------------------------------------------

def extract_named_entities(text: str, toolkit) -> List[Flashcard]:
    """One card per person, place or organisation with a context sentence over 20 characters."""
    cards = []
    for name, label in toolkit.named_entities(text):
        if label not in ENTITY_LABELS or len(name) <= 2:
            continue
        context = find_context_sentence(name, text)
        if len(context) > 20:
            _add(cards, f"What do you know about {name}?", context)
    return cards


def extract_relationships(content: str, toolkit) -> List[Flashcard]:
    """Cards for "noun is/has/uses/... noun" spans found anywhere in the note."""
    cards = []
    for relation in relation_triples(toolkit.tag(content)):
        if len(relation) <= 10:
            continue
        _add(cards, f'What is the relationship described in: "{relation}"?',
             find_context_sentence(relation, content))
    return cards


# ---------------------------------------------------------------------------
# Keyphrase context and general fallback
# ---------------------------------------------------------------------------

def question_for_keyphrase(keyphrase: KeyPhrase) -> str:
    phrase = keyphrase.phrase
    if keyphrase.type == KeyPhraseType.ENTITY:
        return f"What is {phrase}?"
    if keyphrase.type == KeyPhraseType.TECHNICAL:
        return f"Explain the technical concept: {phrase}"
    if keyphrase.type == KeyPhraseType.PROCESS:
        return f"How does {phrase} work?"
    if keyphrase.type == KeyPhraseType.CONCEPT:
        return f"What is the concept of {phrase}?"
    return f'What do you know about "{phrase}"?'


def keyphrase_cards(content: str, keyphrases: Sequence[KeyPhrase], limit: int = 6) -> List[Flashcard]:
    """Cards for the top keyphrases scoring over 3, answered by the first sentence (> 20 chars) mentioning them."""
    cards = []
    sentences = split_sentences(content, min_length=20)
    for kp in [kp for kp in keyphrases if kp.score > 3][:limit]:
        needle = kp.phrase.lower()
        context = next((s for s in sentences if needle in s.lower()), None)
        if context:
            _add(cards, question_for_keyphrase(kp), context)
    return cards


def keyphrase_cards_enriched(keyphrases: Sequence[KeyPhrase], limit: int = 8) -> List[Flashcard]:
    """Cards for the top keyphrases scoring over 3 whose stored context exceeds 25 characters."""
    cards = []
    for kp in [kp for kp in keyphrases if kp.score > 3][:limit]:
        if kp.context and len(kp.context) > 25:
            _add(cards, question_for_keyphrase(kp), kp.context)
    return cards


def general_cards(content: str) -> List[Flashcard]:
    """
    Last-resort cards for notes no other extractor could use.

    The first five chunks longer than 50 characters each become a card whose
    question quotes the chunk's first sentence and whose answer is the rest.
    """
    cards = []
    for chunk in split_sections(content, min_length=51)[:5]:
        first_sentence = FIRST_SENTENCE_END.split(chunk)[0] + '.'
        if len(first_sentence) > 20 and len(chunk) > len(first_sentence) + 20:
            _add(cards, f"What does this section discuss? ({first_sentence})",
                 chunk[len(first_sentence):])
    return cards
