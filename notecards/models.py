"""Data model for notes, flashcards, decks and keyphrases.

Note, Flashcard and Deck are the records exchanged with callers and serialise
with camelCase keys (``fileName``, ``createdFromNote`` ...). KeyPhrase is
internal to one generation call and never leaves the core.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import PurePath
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import DeckEditError


def generate_id() -> str:
    return uuid.uuid4().hex


def extract_title_from_content(content: str) -> Optional[str]:
    """Guess a note title from its first non-blank line.

    A markdown heading wins; otherwise a short line without a period is
    taken as a title. Returns None when nothing looks like one.
    """
    lines = [line for line in content.split('\n') if line.strip()]
    if not lines:
        return None

    first_line = lines[0].strip()
    if first_line.startswith('#'):
        return re.sub(r'^#+\s*', '', first_line)

    if len(first_line) <= 100 and '.' not in first_line:
        return first_line

    return None


class Note(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    title: str
    content: str
    file_name: str = Field('', alias='fileName')
    upload_date: datetime = Field(default_factory=datetime.now, alias='uploadDate')

    @classmethod
    def from_text(cls, content: str, file_name: str, note_id: Optional[str] = None) -> 'Note':
        """Build a note the way an upload would: title from content, else file stem."""
        title = extract_title_from_content(content) or PurePath(file_name).stem
        return cls(
            id=note_id or generate_id(),
            title=title,
            content=content,
            file_name=file_name,
        )


class Flashcard(BaseModel):
    id: str = Field(default_factory=generate_id)
    question: str
    answer: str

    @field_validator('question', 'answer')
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError('flashcard text must not be blank')
        return v


class Deck(BaseModel):
    """An ordered, caller-owned collection of flashcards built from one note."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    title: str
    description: str
    cards: List[Flashcard] = Field(default_factory=list)
    created_from_note: str = Field(..., alias='createdFromNote')
    created_date: datetime = Field(default_factory=datetime.now, alias='createdDate')

    def get_card(self, card_id: str) -> Flashcard:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise DeckEditError(f"No card with id '{card_id}' in deck {self.id}")

    def add_card(self, question: str = 'New question', answer: str = 'New answer') -> Flashcard:
        card = Flashcard(question=question, answer=answer)
        self.cards.append(card)
        return card

    def update_card(self, card_id: str, question: Optional[str] = None,
                    answer: Optional[str] = None) -> Flashcard:
        """Edit a card in place; blank text is allowed here and caught by check_cards()."""
        card = self.get_card(card_id)
        updated = card.model_copy(update={
            'question': card.question if question is None else question,
            'answer': card.answer if answer is None else answer,
        })
        self.cards[self.cards.index(card)] = updated
        return updated

    def remove_card(self, card_id: str) -> None:
        card = self.get_card(card_id)
        if len(self.cards) <= 1:
            raise DeckEditError('A deck must have at least one flashcard.')
        self.cards.remove(card)

    def check_cards(self) -> None:
        """Check every card still has a question and an answer."""
        for card in self.cards:
            if not card.question.strip() or not card.answer.strip():
                raise DeckEditError(f"Card {card.id} has an empty question or answer")


class KeyPhraseType(str, Enum):
    NOUN = 'noun'
    CONCEPT = 'concept'
    DEFINITION = 'definition'
    PROCESS = 'process'
    ENTITY = 'entity'
    TECHNICAL = 'technical'


@dataclass
class KeyPhrase:
    """A scored candidate term.

    Attributes:
        phrase: The term as it should appear in questions
        score: Accumulated importance (higher is more relevant)
        type: Category driving the question template
        pos: Part-of-speech tags, when a tagger produced the phrase
        context: First sentence containing the phrase, usable as an answer
    """
    phrase: str
    score: float
    type: KeyPhraseType = KeyPhraseType.NOUN
    pos: Optional[List[str]] = None
    context: Optional[str] = None
