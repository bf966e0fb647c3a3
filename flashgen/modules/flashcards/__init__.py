"""Flashcards module: permanent cards created from accepted proposals."""

from .models import Flashcard, SourceType
from .repository import FlashcardRepository
from .schemas import FlashcardAccept, FlashcardCreate, FlashcardResponse

__all__ = [
    "Flashcard",
    "FlashcardAccept",
    "FlashcardCreate",
    "FlashcardRepository",
    "FlashcardResponse",
    "SourceType",
]
