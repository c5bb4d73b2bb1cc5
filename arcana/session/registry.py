"""In-memory store of live reading sessions."""

from __future__ import annotations

import logging
import random
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID, uuid4

from arcana.config.settings import settings
from arcana.services.oracle import OracleClient

from .machine import SessionStateMachine
from .state import SessionState
from .timers import LoopScheduler, Scheduler
from .workflow import ReadingWorkflowController, reading_action_enabled

logger = logging.getLogger(__name__)


@dataclass
class TarotSession:
    """One user's table: state machine plus reading workflow."""

    id: UUID
    machine: SessionStateMachine
    workflow: ReadingWorkflowController
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def state(self) -> SessionState:
        return self.machine.state

    @property
    def reading_action_enabled(self) -> bool:
        return reading_action_enabled(self.machine.state)


class SessionRegistry:
    """Bounded session map; the oldest session is evicted past ``max_sessions``."""

    def __init__(
        self,
        *,
        oracle: OracleClient | None = None,
        scheduler: Scheduler | None = None,
        rng_factory: Callable[[], random.Random] = random.Random,
        max_sessions: int | None = None,
    ) -> None:
        self._oracle = oracle
        self._scheduler = scheduler or LoopScheduler()
        self._rng_factory = rng_factory
        self._max_sessions = max_sessions or settings.session.max_sessions
        self._sessions: OrderedDict[UUID, TarotSession] = OrderedDict()

    def _get_oracle(self) -> OracleClient:
        if self._oracle is None:
            self._oracle = OracleClient()
        return self._oracle

    def create(self) -> TarotSession:
        machine = SessionStateMachine(scheduler=self._scheduler, rng=self._rng_factory())
        session = TarotSession(
            id=uuid4(),
            machine=machine,
            workflow=ReadingWorkflowController(machine, self._get_oracle()),
        )
        self._sessions[session.id] = session
        while len(self._sessions) > self._max_sessions:
            _, evicted = self._sessions.popitem(last=False)
            evicted.machine.close()
            logger.info("Evicted session %s", evicted.id)
        return session

    def get(self, session_id: UUID) -> TarotSession | None:
        return self._sessions.get(session_id)

    def discard(self, session_id: UUID) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.machine.close()
        return True

    def close_all(self) -> None:
        for session in self._sessions.values():
            session.machine.close()
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


_DEFAULT_REGISTRY: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    """Return the process-wide registry (FastAPI dependency)."""

    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = SessionRegistry()
    return _DEFAULT_REGISTRY


__all__ = ["SessionRegistry", "TarotSession", "get_session_registry"]
