"""Proposal generators producing candidate flashcards from source text."""

import asyncio
from typing import Protocol

from opentelemetry import trace

from flashgen.core.config import settings
from flashgen.core.logging import get_structured_logger
from flashgen.modules.flashcards.models import SourceType

from .schemas import FlashcardProposal

logger = get_structured_logger(__name__)
tracer = trace.get_tracer(__name__)

PLACEHOLDER_BACK_TEXT = "This would be filled with AI-generated content"
EXCERPT_LENGTH = 100


class ProposalGenerator(Protocol):
    """Anything that turns source text into flashcard proposals.

    Implementations must return a non-empty list or raise.
    """

    model: str

    async def generate(self, source_text: str) -> list[FlashcardProposal]: ...


class MockProposalGenerator:
    """Stand-in for a real AI provider.

    Sleeps for a simulated latency, then returns two ``ai_full`` proposals
    quoting the first 100 characters of the input.
    """

    def __init__(self, latency_seconds: float | None = None, model: str | None = None) -> None:
        self.latency_seconds = (
            settings.generation.mock_latency_seconds if latency_seconds is None else latency_seconds
        )
        self.model = model or settings.generation.model

    async def generate(self, source_text: str) -> list[FlashcardProposal]:
        with tracer.start_as_current_span("proposals.generate") as span:
            span.set_attribute("proposals.model", self.model)
            span.set_attribute("proposals.source_text_length", len(source_text))

            await asyncio.sleep(self.latency_seconds)

            excerpt = source_text[:EXCERPT_LENGTH]
            proposals = [
                FlashcardProposal(
                    front_text=f'What is the main topic of: "{excerpt}..."?',
                    back_text=PLACEHOLDER_BACK_TEXT,
                    source_type=SourceType.AI_FULL,
                ),
                FlashcardProposal(
                    front_text=f'Define the key concept in: "{excerpt}..."',
                    back_text=PLACEHOLDER_BACK_TEXT,
                    source_type=SourceType.AI_FULL,
                ),
            ]

            logger.debug("Mock proposals generated", count=len(proposals), model=self.model)
            return proposals


_proposal_generator: ProposalGenerator | None = None


def get_proposal_generator() -> ProposalGenerator:
    """Get or create the process-wide proposal generator."""
    global _proposal_generator
    if _proposal_generator is None:
        _proposal_generator = MockProposalGenerator()
    return _proposal_generator
