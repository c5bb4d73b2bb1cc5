"""Pydantic schemas for reading sessions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from arcana.session import Phase, ReadingStatus, TarotSession

from .catalog import CardDefinitionResponse, SpreadResponse


class DrawnCardResponse(BaseModel):
    """A drawn position; the card face is hidden until revealed."""

    slot: int
    position: str
    revealed: bool
    instance_id: str
    is_reversed: Optional[bool] = None
    orientation: Optional[str] = None
    meaning: Optional[str] = None
    card: Optional[CardDefinitionResponse] = None


class AudioSummary(BaseModel):
    media_type: str
    sample_rate: int
    duration_seconds: float


class SessionSnapshot(BaseModel):
    """Everything the renderer needs to draw one session."""

    id: UUID
    created_at: datetime
    phase: Phase
    selected_spread: SpreadResponse
    next_spread: Optional[SpreadResponse] = Field(
        None, description="Spread queued for the next shuffle while a hand is on the table"
    )
    full_deck: bool
    question: str
    available_count: int = Field(description="Cards left in the fan to pick from")
    drawn_hand: list[DrawnCardResponse]
    focused_index: Optional[int] = None
    reading: Optional[str] = None
    reading_status: ReadingStatus
    reading_panel_visible: bool
    reading_action_enabled: bool
    audio: Optional[AudioSummary] = None
    is_playing: bool
    voice_input_available: bool

    @classmethod
    def from_session(cls, session: TarotSession, *, voice_input_available: bool) -> "SessionSnapshot":
        state = session.state
        positions = state.selected_spread.positions
        hand: list[DrawnCardResponse] = []
        for slot, instance in enumerate(state.drawn_hand):
            revealed = state.revealed_flags[slot]
            entry = DrawnCardResponse(
                slot=slot,
                position=positions[slot].name,
                revealed=revealed,
                instance_id=instance.instance_id,
            )
            if revealed:
                entry.is_reversed = instance.is_reversed
                entry.orientation = instance.orientation_label
                entry.meaning = instance.meaning
                entry.card = CardDefinitionResponse.from_definition(instance.card)
            hand.append(entry)

        audio = None
        if state.audio_asset is not None:
            audio = AudioSummary(
                media_type=state.audio_asset.media_type,
                sample_rate=state.audio_asset.sample_rate,
                duration_seconds=round(state.audio_asset.duration_seconds, 3),
            )

        return cls(
            id=session.id,
            created_at=session.created_at,
            phase=state.phase,
            selected_spread=SpreadResponse.from_spread(state.selected_spread),
            next_spread=(
                SpreadResponse.from_spread(state.next_spread) if state.next_spread is not None else None
            ),
            full_deck=state.full_deck,
            question=state.question,
            available_count=len(state.available_deck),
            drawn_hand=hand,
            focused_index=state.focused_index,
            reading=state.reading,
            reading_status=state.reading_status,
            reading_panel_visible=state.reading_panel_visible,
            reading_action_enabled=session.reading_action_enabled,
            audio=audio,
            is_playing=state.is_playing,
            voice_input_available=voice_input_available,
        )


class SpreadSelectionRequest(BaseModel):
    spread_id: str = Field(..., min_length=1)


class FullDeckRequest(BaseModel):
    full_deck: bool


class QuestionRequest(BaseModel):
    question: str = Field("", max_length=500)


class ConfirmSpreadRequest(BaseModel):
    full_deck: Optional[bool] = None


class PickCardRequest(BaseModel):
    index: int
