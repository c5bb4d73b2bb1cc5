"""Reading session core: phase state machine and reading workflow."""

from .machine import SessionStateMachine
from .registry import SessionRegistry, TarotSession, get_session_registry
from .state import AudioAsset, Phase, ReadingStatus, SessionState
from .timers import LoopScheduler, Scheduler, TimerHandle
from .workflow import (
    FALLBACK_MESSAGES,
    UNEXPECTED_FAILURE_TEXT,
    ReadingTicket,
    ReadingWorkflowController,
    reading_action_enabled,
)

__all__ = [
    "AudioAsset",
    "FALLBACK_MESSAGES",
    "LoopScheduler",
    "Phase",
    "ReadingStatus",
    "ReadingTicket",
    "ReadingWorkflowController",
    "Scheduler",
    "SessionRegistry",
    "SessionState",
    "SessionStateMachine",
    "TarotSession",
    "TimerHandle",
    "UNEXPECTED_FAILURE_TEXT",
    "get_session_registry",
    "reading_action_enabled",
]
