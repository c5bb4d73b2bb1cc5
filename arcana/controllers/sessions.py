"""Reading session endpoints.

Every action answers with the full session snapshot. Actions that do not apply
to the current phase leave the session untouched and still answer 200 with
the unchanged snapshot; only unknown sessions (404), unknown spreads (404) and
a disabled reading action (409) are reported as errors.

Handlers are ``async`` so the phase timers are scheduled on the serving loop.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, File, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse, Response

from arcana.controllers.dependencies import RegistryDep, TarotSessionDep, TranscribeDep
from arcana.domain import get_spread
from arcana.services.transcribe import TranscriptionError
from arcana.session import TarotSession
from arcana.views import (
    ConfirmSpreadRequest,
    ErrorResponse,
    FullDeckRequest,
    PickCardRequest,
    QuestionRequest,
    SessionSnapshot,
    SpreadSelectionRequest,
)

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)

logger = logging.getLogger(__name__)

_AUDIO_FILE_UPLOAD = File(...)


def _snapshot(session: TarotSession, transcribe: TranscribeDep) -> SessionSnapshot:
    return SessionSnapshot.from_session(session, voice_input_available=transcribe.available)


@router.post("", response_model=SessionSnapshot, status_code=status.HTTP_201_CREATED)
async def create_session(registry: RegistryDep, transcribe: TranscribeDep) -> SessionSnapshot:
    session = registry.create()
    logger.info("Session created id=%s", session.id)
    return _snapshot(session, transcribe)


@router.get("/{session_id}", response_model=SessionSnapshot)
async def get_session(session: TarotSessionDep, transcribe: TranscribeDep) -> SessionSnapshot:
    return _snapshot(session, transcribe)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_session(session: TarotSessionDep, registry: RegistryDep) -> Response:
    registry.discard(session.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/begin", response_model=SessionSnapshot)
async def begin(session: TarotSessionDep, transcribe: TranscribeDep) -> SessionSnapshot:
    session.machine.begin()
    return _snapshot(session, transcribe)


@router.post("/{session_id}/spread", response_model=SessionSnapshot)
async def select_spread(
    payload: SpreadSelectionRequest,
    session: TarotSessionDep,
    transcribe: TranscribeDep,
) -> SessionSnapshot:
    try:
        spread = get_spread(payload.spread_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown spread '{payload.spread_id}'",
        ) from None
    session.machine.select_spread(spread)
    return _snapshot(session, transcribe)


@router.post("/{session_id}/deck", response_model=SessionSnapshot)
async def set_full_deck(
    payload: FullDeckRequest,
    session: TarotSessionDep,
    transcribe: TranscribeDep,
) -> SessionSnapshot:
    session.machine.set_full_deck(payload.full_deck)
    return _snapshot(session, transcribe)


@router.post("/{session_id}/question", response_model=SessionSnapshot)
async def set_question(
    payload: QuestionRequest,
    session: TarotSessionDep,
    transcribe: TranscribeDep,
) -> SessionSnapshot:
    session.machine.set_question(payload.question)
    return _snapshot(session, transcribe)


@router.post("/{session_id}/question/voice", response_model=SessionSnapshot)
async def set_question_by_voice(
    session: TarotSessionDep,
    transcribe: TranscribeDep,
    audio_file: UploadFile = _AUDIO_FILE_UPLOAD,
) -> SessionSnapshot:
    """Transcribe a recorded question and use it as the session question."""

    if not transcribe.available:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Voice input is not available",
        )

    audio_bytes = await audio_file.read()
    try:
        result = await transcribe.transcribe_question(audio_bytes)
    except TranscriptionError as exc:
        logger.warning("Voice question failed session=%s: %s", session.id, exc)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    if result.transcript:
        session.machine.set_question(result.transcript)
    return _snapshot(session, transcribe)


@router.post("/{session_id}/confirm", response_model=SessionSnapshot)
async def confirm_spread(
    session: TarotSessionDep,
    transcribe: TranscribeDep,
    payload: ConfirmSpreadRequest | None = None,
) -> SessionSnapshot:
    session.machine.confirm_spread(payload.full_deck if payload else None)
    return _snapshot(session, transcribe)


@router.post("/{session_id}/pick", response_model=SessionSnapshot)
async def pick_card(
    payload: PickCardRequest,
    session: TarotSessionDep,
    transcribe: TranscribeDep,
) -> SessionSnapshot:
    session.machine.pick_card(payload.index)
    return _snapshot(session, transcribe)


@router.post("/{session_id}/cards/{index}", response_model=SessionSnapshot)
async def interact_with_card(
    index: int,
    session: TarotSessionDep,
    transcribe: TranscribeDep,
) -> SessionSnapshot:
    session.machine.interact_with_card(index)
    return _snapshot(session, transcribe)


@router.post("/{session_id}/reshuffle", response_model=SessionSnapshot)
async def reshuffle(session: TarotSessionDep, transcribe: TranscribeDep) -> SessionSnapshot:
    session.machine.reshuffle()
    return _snapshot(session, transcribe)


@router.post("/{session_id}/reset", response_model=SessionSnapshot)
async def reset(session: TarotSessionDep, transcribe: TranscribeDep) -> SessionSnapshot:
    session.machine.reset_to_intro()
    return _snapshot(session, transcribe)


@router.post(
    "/{session_id}/reading",
    response_model=SessionSnapshot,
    responses={status.HTTP_202_ACCEPTED: {"model": SessionSnapshot}},
)
async def request_reading(
    session: TarotSessionDep,
    transcribe: TranscribeDep,
    background_tasks: BackgroundTasks,
) -> JSONResponse | SessionSnapshot:
    """Show the existing prophecy or start generating it in the background."""

    if not session.reading_action_enabled:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Reveal every card before asking for the prophecy",
        )

    ticket = session.workflow.begin_request()
    if ticket is None:
        return _snapshot(session, transcribe)

    background_tasks.add_task(session.workflow.complete_request, ticket)
    logger.info("Reading requested session=%s round=%s", session.id, ticket.round_id)
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content=_snapshot(session, transcribe).model_dump(mode="json"),
    )


@router.post("/{session_id}/reading/close", response_model=SessionSnapshot)
async def close_reading(session: TarotSessionDep, transcribe: TranscribeDep) -> SessionSnapshot:
    session.workflow.close_reading_panel()
    return _snapshot(session, transcribe)


@router.post("/{session_id}/playback", response_model=SessionSnapshot)
async def toggle_playback(session: TarotSessionDep, transcribe: TranscribeDep) -> SessionSnapshot:
    session.workflow.toggle_playback()
    return _snapshot(session, transcribe)


@router.post("/{session_id}/playback/finished", response_model=SessionSnapshot)
async def playback_finished(session: TarotSessionDep, transcribe: TranscribeDep) -> SessionSnapshot:
    session.workflow.playback_finished()
    return _snapshot(session, transcribe)


@router.get("/{session_id}/audio", response_class=Response)
async def get_audio(session: TarotSessionDep) -> Response:
    """Return the narration as a WAV file."""

    asset = session.state.audio_asset
    if asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No narration available")
    return Response(content=asset.audio_bytes, media_type=asset.media_type)
