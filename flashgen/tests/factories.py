"""Factory Boy factories for generating test data.

These factories build ORM instances without a database, with primary keys
and timestamps already populated, as they would be after a flush.

Usage:
    from flashgen.tests.factories import GenerationFactory, FlashcardFactory

    generation = GenerationFactory.build(user_id=user_id)
    cards = FlashcardFactory.build_batch(3, generation_id=generation.id)
"""

from datetime import UTC, datetime
from uuid import uuid4

import factory
from factory import LazyAttribute, LazyFunction, Sequence

from flashgen.modules.flashcards.models import Flashcard, SourceType
from flashgen.modules.generations.models import Generation, GenerationStatus


def _now() -> datetime:
    return datetime.now(UTC)


# ==================== Generation Factory ====================


class GenerationFactory(factory.Factory):
    """Factory for Generation rows."""

    class Meta:
        model = Generation

    id = Sequence(lambda n: n + 1)
    user_id = LazyFunction(uuid4)
    source_text_length = 1500
    generation_duration = None
    flashcards_count = 0
    accepted_unedited_count = None
    accepted_edited_count = None
    status = GenerationStatus.PENDING
    created_at = LazyFunction(_now)
    updated_at = LazyAttribute(lambda o: o.created_at)

    class Params:
        completed = factory.Trait(
            generation_duration=2150,
            flashcards_count=2,
        )
        accepted = factory.Trait(
            generation_duration=2150,
            flashcards_count=2,
            accepted_unedited_count=1,
            accepted_edited_count=1,
            status=GenerationStatus.ACCEPTED,
        )


# ==================== Flashcard Factory ====================


class FlashcardFactory(factory.Factory):
    """Factory for Flashcard rows."""

    class Meta:
        model = Flashcard

    id = Sequence(lambda n: n + 1)
    front_text = factory.Faker("sentence", nb_words=6)
    back_text = factory.Faker("sentence", nb_words=12)
    source_type = SourceType.AI_FULL
    generation_id = None
    user_id = LazyFunction(uuid4)
    created_at = LazyFunction(_now)
    updated_at = LazyAttribute(lambda o: o.created_at)
