"""Shared fakes: a virtual-time scheduler and in-memory AWS clients."""

from __future__ import annotations

import io
import random
import sys
from pathlib import Path
from typing import Callable

import pytest
from botocore.exceptions import ClientError

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from arcana.services.llm_client import BedrockLlmClient  # noqa: E402
from arcana.services.oracle import OracleClient  # noqa: E402
from arcana.services.speech import SpeechSynthesisService  # noqa: E402
from arcana.session import Phase, SessionStateMachine  # noqa: E402

# Four little-endian 16-bit samples.
SAMPLE_PCM = b"\x00\x00\x10\x00\xf0\xff\x20\x00"


def client_error(code: str, message: str = "", status: int = 400, operation: str = "Converse") -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class _ManualHandle:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[_ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self.now + delay, callback)
        self._timers.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self._timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self._timers.remove(timer)
            self.now = timer.when
            timer.callback()
        self.now = target
        self._timers = [t for t in self._timers if not t.cancelled]


class FakeBedrockClient:
    """Stands in for the bedrock-runtime client; pops one outcome per call."""

    def __init__(self, *outcomes: str | BaseException) -> None:
        self.outcomes = list(outcomes) or ["星辰指引你走向新的开始。"]
        self.calls: list[dict] = []

    def converse(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        content = [{"text": outcome}] if outcome else []
        return {"output": {"message": {"role": "assistant", "content": content}}}

    @property
    def last_user_prompt(self) -> str:
        return self.calls[-1]["messages"][0]["content"][0]["text"]


class FakePollyClient:
    """Stands in for the polly client; returns raw PCM in an AudioStream."""

    def __init__(self, *outcomes: bytes | BaseException) -> None:
        self.outcomes = list(outcomes) or [SAMPLE_PCM]
        self.calls: list[dict] = []

    def synthesize_speech(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return {"AudioStream": io.BytesIO(outcome)}


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def build_oracle(
    bedrock: FakeBedrockClient,
    polly: FakePollyClient,
    sleep: RecordingSleep | None = None,
) -> OracleClient:
    return OracleClient(
        llm=BedrockLlmClient(client=bedrock, model_id="test-model"),
        speech=SpeechSynthesisService(client=polly, voice_id="Zhiyu", sample_rate=16000),
        max_retries=2,
        backoff_base=1.0,
        sleep=sleep or RecordingSleep(),
    )


def drive_to_reading(machine: SessionStateMachine, scheduler: ManualScheduler) -> None:
    """Walk a fresh machine through spread selection, shuffle and picking."""

    machine.begin()
    machine.confirm_spread()
    scheduler.advance(3.0)
    assert machine.phase is Phase.PICKING
    for _ in range(machine.state.selected_spread.card_count):
        machine.pick_card(0)
    scheduler.advance(1.0)
    assert machine.phase is Phase.READING


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def machine(scheduler: ManualScheduler) -> SessionStateMachine:
    return SessionStateMachine(
        scheduler=scheduler,
        rng=random.Random(1234),
        shuffle_delay=2.5,
        reveal_delay=0.8,
    )


@pytest.fixture
def bedrock() -> FakeBedrockClient:
    return FakeBedrockClient()


@pytest.fixture
def polly() -> FakePollyClient:
    return FakePollyClient()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def oracle(bedrock: FakeBedrockClient, polly: FakePollyClient, sleep: RecordingSleep) -> OracleClient:
    return build_oracle(bedrock, polly, sleep)
