"""Mutable per-session state shared by the state machine and reading workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from arcana.domain import CardInstance, Spread


class Phase(str, Enum):
    INTRO = "intro"
    SPREAD_SELECT = "spread_select"
    SHUFFLING = "shuffling"
    PICKING = "picking"
    READING = "reading"


class ReadingStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    # Never set by the reading workflow: every request resolves to displayable text.
    FAILED = "failed"


@dataclass(frozen=True)
class AudioAsset:
    """Playable speech for the current reading."""

    audio_bytes: bytes
    media_type: str
    sample_rate: int

    @property
    def duration_seconds(self) -> float:
        # 44-byte RIFF header, 16-bit mono frames
        return max(0, len(self.audio_bytes) - 44) / (2 * self.sample_rate)


@dataclass
class SessionState:
    selected_spread: Spread
    # Spread chosen while a hand is on the table; applied at the next shuffle.
    next_spread: Optional[Spread] = None
    full_deck: bool = False
    phase: Phase = Phase.INTRO
    available_deck: list[CardInstance] = field(default_factory=list)
    drawn_hand: list[CardInstance] = field(default_factory=list)
    revealed_flags: list[bool] = field(default_factory=list)
    focused_index: Optional[int] = None
    question: str = ""
    reading: Optional[str] = None
    audio_asset: Optional[AudioAsset] = None
    is_playing: bool = False
    reading_status: ReadingStatus = ReadingStatus.IDLE
    reading_panel_visible: bool = False
    round_id: int = 0

    @property
    def hand_complete(self) -> bool:
        return len(self.drawn_hand) == self.selected_spread.card_count

    @property
    def all_revealed(self) -> bool:
        return self.hand_complete and all(self.revealed_flags)

    def clear_round(self) -> None:
        """Drop everything produced by the current round and invalidate it."""

        self.available_deck = []
        self.drawn_hand = []
        self.revealed_flags = []
        self.focused_index = None
        self.reading = None
        self.audio_asset = None
        self.is_playing = False
        self.reading_status = ReadingStatus.IDLE
        self.reading_panel_visible = False
        self.round_id += 1


__all__ = ["AudioAsset", "Phase", "ReadingStatus", "SessionState"]
