"""Reading workflow: turn a fully revealed hand into a prophecy and narration.

``request_or_show_reading`` is idempotent once a reading exists: it only
re-opens the reading panel. Otherwise it runs text generation, then speech
synthesis, strictly in that order. Text failures are replaced in place by a
fixed message per error kind; narration failures only leave the audio absent.

Each request is tagged with the round it was issued for. Results arriving
after a reshuffle or reset belong to a superseded hand and are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from arcana.domain import CardInstance, Spread
from arcana.services.audio_codec import MalformedAudioError, pcm_to_wav
from arcana.services.oracle import NO_RESPONSE_TEXT, OracleClient, OracleError, OracleErrorKind
from arcana.telemetry import record_reading_request, record_speech_outcome

from .machine import SessionStateMachine
from .state import AudioAsset, Phase, ReadingStatus, SessionState

logger = logging.getLogger("arcana.services.oracle_pipeline")

FALLBACK_MESSAGES: dict[OracleErrorKind, str] = {
    OracleErrorKind.CREDENTIAL_MISSING: "⚠️ 未能读取 AI 服务凭证。请检查服务端的 Bedrock 凭证配置。",
    OracleErrorKind.CREDENTIAL_INVALID: "⚠️ AI 服务凭证无效。请检查凭证是否包含多余的引号、空格，或是否已失效。",
    OracleErrorKind.QUOTA_EXCEEDED: "宇宙能量通道拥堵（API 配额已耗尽）。请稍后再试或更换服务凭证。",
    OracleErrorKind.REGION_UNSUPPORTED: "🚫 所在的星域受到干扰（地区不支持）。当前服务区域无法使用 AI 解读，请更换区域后重试。",
    OracleErrorKind.TRANSIENT: "连接宇宙能量时遇到干扰，请稍后再试。",
    OracleErrorKind.EMPTY: NO_RESPONSE_TEXT,
}
UNEXPECTED_FAILURE_TEXT = "连接中断"

WAV_MEDIA_TYPE = "audio/wav"


@dataclass(frozen=True)
class ReadingTicket:
    """Snapshot of the inputs a reading request was issued for."""

    round_id: int
    question: str
    spread: Spread
    hand: tuple[CardInstance, ...]


def reading_action_enabled(state: SessionState) -> bool:
    """Whether the "view prophecy" action may be offered to the user.

    Every position must be revealed. While a first request is in flight the
    action is disabled; once any reading exists it stays enabled.
    """

    if state.phase is not Phase.READING or not state.all_revealed:
        return False
    if state.reading_status is ReadingStatus.IN_FLIGHT and not state.reading:
        return False
    return True


class ReadingWorkflowController:
    """Coordinates the session state with the oracle client."""

    def __init__(self, machine: SessionStateMachine, oracle: OracleClient) -> None:
        self._machine = machine
        self._oracle = oracle

    @property
    def state(self) -> SessionState:
        return self._machine.state

    async def request_or_show_reading(self) -> None:
        ticket = self.begin_request()
        if ticket is not None:
            await self.complete_request(ticket)

    def begin_request(self) -> ReadingTicket | None:
        """Synchronous half of a request; returns a ticket when work is needed."""

        state = self.state
        if not reading_action_enabled(state):
            logger.debug("Reading action not enabled in phase %s", state.phase.value)
            return None
        if state.reading_status is ReadingStatus.SUCCEEDED and state.reading:
            state.reading_panel_visible = True
            record_reading_request("shown")
            return None
        if state.reading_status is ReadingStatus.IN_FLIGHT:
            return None

        state.reading_status = ReadingStatus.IN_FLIGHT
        state.reading_panel_visible = True
        state.is_playing = False
        return ReadingTicket(
            round_id=state.round_id,
            question=state.question,
            spread=state.selected_spread,
            hand=tuple(state.drawn_hand),
        )

    async def complete_request(self, ticket: ReadingTicket) -> None:
        """Run text generation then narration for ``ticket``."""

        outcome = "generated"
        try:
            text = await self._oracle.generate_reading(ticket.question, ticket.spread, ticket.hand)
        except OracleError as exc:
            logger.warning("Reading generation failed kind=%s: %s", exc.kind.value, exc)
            text = FALLBACK_MESSAGES[exc.kind]
            outcome = "fallback"
        except Exception:
            logger.exception("Unexpected failure while generating reading")
            text = UNEXPECTED_FAILURE_TEXT
            outcome = "fallback"

        if self._superseded(ticket):
            record_reading_request("discarded")
            return

        state = self.state
        state.reading = text
        state.reading_status = ReadingStatus.SUCCEEDED
        record_reading_request(outcome)
        logger.info("Reading ready round=%s outcome=%s chars=%s", ticket.round_id, outcome, len(text))

        pcm = await self._oracle.synthesize_speech(text)
        if self._superseded(ticket):
            return
        if pcm is None:
            record_speech_outcome("unavailable")
            return

        try:
            wav_bytes = pcm_to_wav(pcm, sample_rate=self._oracle.speech_sample_rate)
        except MalformedAudioError as exc:
            logger.warning("Discarding malformed narration round=%s: %s", ticket.round_id, exc)
            record_speech_outcome("malformed")
            return

        state.audio_asset = AudioAsset(
            audio_bytes=wav_bytes,
            media_type=WAV_MEDIA_TYPE,
            sample_rate=self._oracle.speech_sample_rate,
        )
        record_speech_outcome("ok")

    def toggle_playback(self) -> bool:
        state = self.state
        if state.audio_asset is None:
            return False
        state.is_playing = not state.is_playing
        return True

    def playback_finished(self) -> None:
        self.state.is_playing = False

    def close_reading_panel(self) -> None:
        self.state.reading_panel_visible = False

    def _superseded(self, ticket: ReadingTicket) -> bool:
        if self.state.round_id != ticket.round_id:
            logger.info(
                "Dropping reading result for superseded round=%s (current=%s)",
                ticket.round_id,
                self.state.round_id,
            )
            return True
        return False


__all__ = [
    "FALLBACK_MESSAGES",
    "ReadingTicket",
    "ReadingWorkflowController",
    "UNEXPECTED_FAILURE_TEXT",
    "reading_action_enabled",
]
