"""Generations module: the flashcard generation lifecycle."""

from .models import Generation, GenerationErrorLog, GenerationStatus
from .proposals import MockProposalGenerator, ProposalGenerator, get_proposal_generator
from .schemas import (
    AcceptGenerationFlashcardsRequest,
    AcceptGenerationFlashcardsResponse,
    FlashcardProposal,
    GenerationDetailResponse,
    RejectGenerationResponse,
    StartGenerationRequest,
    StartGenerationResponse,
)
from .service import GenerationService

__all__ = [
    "AcceptGenerationFlashcardsRequest",
    "AcceptGenerationFlashcardsResponse",
    "FlashcardProposal",
    "Generation",
    "GenerationDetailResponse",
    "GenerationErrorLog",
    "GenerationService",
    "GenerationStatus",
    "MockProposalGenerator",
    "ProposalGenerator",
    "RejectGenerationResponse",
    "StartGenerationRequest",
    "StartGenerationResponse",
    "get_proposal_generator",
]
