"""Unit tests for the pattern extractors."""
import pytest

from notecards.flashcards.extractors import (
    extract_concepts,
    extract_concepts_enriched,
    extract_definitions,
    extract_definitions_enriched,
    extract_list_items,
    extract_named_entities,
    extract_process_steps,
    extract_process_steps_enriched,
    extract_relationships,
    general_cards,
    keyphrase_cards,
    keyphrase_cards_enriched,
    make_card,
    question_for_keyphrase,
)
from notecards.models import KeyPhrase, KeyPhraseType

NEURAL_NETWORK = "Neural Network: A computational model inspired by biological neural networks."

COMMON_ALGORITHMS = """Common Algorithms
- Sorting arranges items in order
- Searching finds a target item"""


def qa(cards):
    return [(card.question, card.answer) for card in cards]


class TestMakeCard:
    """Test the card constructor guard."""

    def test_blank_sides_rejected(self):
        assert make_card('   ', 'answer') is None
        assert make_card('question?', '\n') is None

    def test_text_trimmed(self):
        card = make_card('  What is X?  ', ' An answer. ')
        assert (card.question, card.answer) == ('What is X?', 'An answer.')


class TestDefinitionExtractor:
    """Test definition extraction."""

    def test_colon_definition(self):
        """Colon-separated definition yields a What-is card keeping the full stop."""
        assert qa(extract_definitions(NEURAL_NETWORK, [])) == [
            ('What is Neural Network?', 'A computational model inspired by biological neural networks.')
        ]

    def test_verb_definition(self):
        cards = extract_definitions("Osmosis refers to the movement of water across a membrane.", [])
        assert ('What is Osmosis?', 'the movement of water across a membrane.') in qa(cards)

    def test_short_definition_rejected(self):
        assert extract_definitions("Photosynthesis: short one", []) == []

    def test_long_term_needs_keyphrase(self):
        """Terms of 50+ characters are only accepted when they match a keyphrase."""
        term = "The slow and steady accumulation of many small sediment grains"
        text = f"{term}: a process that builds sedimentary rock layers."
        assert extract_definitions(text, []) == []
        keyphrases = [KeyPhrase('sediment grains', 4.0)]
        assert qa(extract_definitions(text, keyphrases)) == [
            (f'What is {term}?', 'a process that builds sedimentary rock layers.')
        ]

    def test_enriched_colon_definition(self, fake_toolkit):
        cards = extract_definitions_enriched(NEURAL_NETWORK, [], fake_toolkit)
        assert qa(cards) == [
            ('What is Neural Network?', 'A computational model inspired by biological neural networks.')
        ]

    def test_enriched_requires_noun_term(self, fake_toolkit):
        """Enriched definitions need a noun in the term."""
        text = "quickly and slowly: the thing moves along very fast indeed."
        assert extract_definitions_enriched(text, [], fake_toolkit) == []

    def test_enriched_constitutes(self, fake_toolkit):
        text = "Chlorophyll constitutes the green pigment found in plant leaves."
        cards = extract_definitions_enriched(text, [], fake_toolkit)
        assert ('What is Chlorophyll?', 'the green pigment found in plant leaves.') in qa(cards)


class TestConceptExtractor:
    """Test connective-based and keyphrase-driven concept extraction."""

    def test_connective_split(self):
        """The clause after the connective becomes the question subject."""
        cards = extract_concepts("Increased pressure causes the boiling point to rise.")
        assert qa(cards) == [('What causes the boiling point to rise?', 'Increased pressure')]

    def test_multi_word_connective(self):
        cards = extract_concepts("A warmer ocean surface leads to stronger storms.")
        assert qa(cards) == [('What leads to stronger storms?', 'A warmer ocean surface')]

    def test_short_answer_rejected(self):
        assert extract_concepts("Heat causes the metal to expand.") == []

    def test_no_connective(self):
        assert extract_concepts("Plants grow toward the light every day.") == []

    def test_enriched_uses_stored_context(self, fake_toolkit):
        keyphrases = [
            KeyPhrase('gradient descent', 6.0, KeyPhraseType.CONCEPT,
                      context='Gradient descent minimises the loss function step by step'),
            KeyPhrase('loss', 2.0, KeyPhraseType.NOUN),
        ]
        cards = extract_concepts_enriched("Any section text here.", keyphrases, fake_toolkit)
        assert qa(cards) == [
            ('Explain the concept of "gradient descent"', 'Gradient descent minimises the loss function step by step')
        ]

    def test_enriched_searches_sentences(self, fake_toolkit):
        text = "Alan Turing proposed the imitation game in a famous paper. It was short."
        keyphrases = [KeyPhrase('Turing', 1.0, KeyPhraseType.ENTITY)]
        cards = extract_concepts_enriched(text, keyphrases, fake_toolkit)
        assert qa(cards) == [
            ('Explain the concept of "Turing"', 'Alan Turing proposed the imitation game in a famous paper.')
        ]


class TestListExtractor:
    """Test list extraction."""

    def test_aggregate_and_item_cards(self):
        """A titled list yields one aggregate card plus one card per item."""
        cards = extract_list_items(COMMON_ALGORITHMS)
        assert cards[0].question == 'List the items related to: Common Algorithms'
        assert 'Sorting arranges items in order' in cards[0].answer
        assert 'Searching finds a target item' in cards[0].answer
        assert cards[0].answer == 'Sorting arranges items in order\n• Searching finds a target item'
        assert [c.question for c in cards[1:]] == ['What is one key point about this topic?'] * 2

    def test_numbered_list(self):
        cards = extract_list_items("Phases of mitosis\n1. Prophase begins the division\n2) Metaphase lines up chromosomes")
        assert cards[0].question == 'List the items related to: Phases of mitosis'

    def test_no_title_when_first_line_is_item(self):
        cards = extract_list_items("- first item of many\n- second item of many")
        assert all(not c.question.startswith('List the items') for c in cards)
        assert len(cards) == 2

    def test_single_item_ignored(self):
        """Lists need at least two items."""
        assert extract_list_items("Shopping\n- apples and pears") == []

    def test_at_most_five_item_cards(self):
        items = '\n'.join(f"- item number {i} is described here" for i in range(8))
        cards = extract_list_items("Many items\n" + items)
        assert len([c for c in cards if c.question.startswith('What is one key point')]) == 5


class TestProcessExtractor:
    """Test process extraction."""

    def test_numbered_steps(self):
        """Numbered steps are joined in order into one process card."""
        text = "The process has these steps:\n1. Collect the data\n2. Clean the data\n3. Train the model"
        cards = extract_process_steps(text)
        assert qa(cards) == [(
            'What are the steps in this process?',
            '1. Collect the data\n2. Clean the data\n3. Train the model',
        )]

    def test_bullet_points(self):
        text = "Our workflow:\n- gather\n- build\n- ship"
        cards = extract_process_steps(text)
        assert qa(cards) == [('What are the key points of this process?', '- gather\n- build\n- ship')]

    def test_needs_process_keyword(self):
        """Steps without a process keyword are not a process."""
        assert extract_process_steps("Fruit\n1. Apples\n2. Pears") == []

    def test_single_step_ignored(self):
        assert extract_process_steps("The method:\n1. Do everything at once") == []

    def test_enriched_process_verbs(self, fake_toolkit):
        text = "To calculate the gradient you need the derivative of the loss. This method is standard."
        cards = extract_process_steps_enriched(text, [], fake_toolkit)
        assert qa(cards) == [
            ('How do you calculate?', 'To calculate the gradient you need the derivative of the loss')
        ]


class TestEnrichedOnlyExtractors:
    """Test named-entity and relationship extraction."""

    def test_named_entity(self, fake_toolkit):
        """Allowed entity labels should yield "Who or what is" cards."""
        text = "Alan Turing proposed the imitation game in 1950."
        cards = extract_named_entities(text, fake_toolkit)
        assert qa(cards) == [
            ('What do you know about Alan Turing?', 'Alan Turing proposed the imitation game in 1950')
        ]

    def test_entity_labels_filtered(self, fake_toolkit):
        fake_toolkit.entities = {'Big Ben': 'FACILITY'}
        assert extract_named_entities("Big Ben is a famous clock tower in the city.", fake_toolkit) == []

    def test_relationship(self, fake_toolkit):
        text = "Python uses indentation for blocks."
        cards = extract_relationships(text, fake_toolkit)
        assert qa(cards) == [
            ('What is the relationship described in: "Python uses indentation"?', 'Python uses indentation for blocks')
        ]

    def test_short_relationship_ignored(self, fake_toolkit):
        """Relations of ten characters or fewer are dropped."""
        assert extract_relationships("Ox is hay.", fake_toolkit) == []


class TestKeyphraseCards:
    """Test keyphrase-context cards."""

    @pytest.mark.parametrize('kp_type, expected', [
        (KeyPhraseType.ENTITY, 'What is Mars?'),
        (KeyPhraseType.TECHNICAL, 'Explain the technical concept: Mars'),
        (KeyPhraseType.PROCESS, 'How does Mars work?'),
        (KeyPhraseType.CONCEPT, 'What is the concept of Mars?'),
        (KeyPhraseType.NOUN, 'What do you know about "Mars"?'),
    ])
    def test_question_by_type(self, kp_type, expected):
        assert question_for_keyphrase(KeyPhrase('Mars', 5.0, kp_type)) == expected

    def test_baseline_searches_sentences(self):
        text = "The mitochondria produce energy for the cell. Other text here."
        keyphrases = [KeyPhrase('mitochondria', 4.5), KeyPhrase('cell', 2.0)]
        assert qa(keyphrase_cards(text, keyphrases)) == [
            ('What do you know about "mitochondria"?', 'The mitochondria produce energy for the cell')
        ]

    def test_baseline_limit(self):
        text = "alpha beta gamma delta epsilon zeta eta theta appear together in one sentence."
        names = ['alpha', 'beta', 'gamma', 'delta', 'epsilon', 'zeta', 'eta', 'theta']
        keyphrases = [KeyPhrase(name, 10.0) for name in names]
        assert len(keyphrase_cards(text, keyphrases)) == 6

    def test_enriched_uses_stored_context(self):
        keyphrases = [
            KeyPhrase('ribosome', 5.0, KeyPhraseType.ENTITY, context='The ribosome assembles proteins from amino acids'),
            KeyPhrase('cell', 5.0, KeyPhraseType.NOUN, context='Too short context'),
            KeyPhrase('nucleus', 1.0, KeyPhraseType.NOUN, context='The nucleus stores the genetic material of the cell'),
        ]
        assert qa(keyphrase_cards_enriched(keyphrases)) == [
            ('What is ribosome?', 'The ribosome assembles proteins from amino acids')
        ]


class TestGeneralCards:
    """Test the general fallback extractor."""

    def test_unstructured_paragraph(self, fallback_paragraph):
        """A plain paragraph still yields a general card."""
        cards = general_cards(fallback_paragraph)
        assert len(cards) == 1
        assert cards[0].question == 'What does this section discuss? (Rivers carry sediment from mountains toward the sea.)'
        assert cards[0].answer.startswith('Along the way')

    def test_short_chunks_ignored(self):
        assert general_cards("Too short to matter.\n\nAlso short.") == []

    def test_at_most_five_chunks(self, fallback_paragraph):
        content = '\n\n'.join([fallback_paragraph] * 7)
        assert len(general_cards(content)) == 5
