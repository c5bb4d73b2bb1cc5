"""Pydantic schemas used as views in the MVC architecture."""

from .catalog import (
    CardDefinitionResponse,
    DeckInfoResponse,
    SpreadPositionResponse,
    SpreadResponse,
)
from .common import ErrorResponse
from .sessions import (
    AudioSummary,
    ConfirmSpreadRequest,
    DrawnCardResponse,
    FullDeckRequest,
    PickCardRequest,
    QuestionRequest,
    SessionSnapshot,
    SpreadSelectionRequest,
)

__all__ = [
    "AudioSummary",
    "CardDefinitionResponse",
    "ConfirmSpreadRequest",
    "DeckInfoResponse",
    "DrawnCardResponse",
    "ErrorResponse",
    "FullDeckRequest",
    "PickCardRequest",
    "QuestionRequest",
    "SessionSnapshot",
    "SpreadPositionResponse",
    "SpreadResponse",
    "SpreadSelectionRequest",
]
