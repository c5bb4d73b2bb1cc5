"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status

from arcana.services.transcribe import TranscribeService, get_transcribe_service
from arcana.session import SessionRegistry, TarotSession, get_session_registry

RegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]
TranscribeDep = Annotated[TranscribeService, Depends(get_transcribe_service)]


async def get_tarot_session(session_id: UUID, registry: RegistryDep) -> TarotSession:
    """Resolve the session referenced in the path or answer 404."""

    session = registry.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return session


TarotSessionDep = Annotated[TarotSession, Depends(get_tarot_session)]
