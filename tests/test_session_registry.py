"""Bounded in-memory session registry."""

from __future__ import annotations

import random

from arcana.session import Phase, SessionRegistry

from conftest import build_oracle


def _registry(scheduler, bedrock, polly, max_sessions: int = 2) -> SessionRegistry:
    return SessionRegistry(
        oracle=build_oracle(bedrock, polly),
        scheduler=scheduler,
        rng_factory=lambda: random.Random(7),
        max_sessions=max_sessions,
    )


def test_sessions_are_independent(scheduler, bedrock, polly):
    registry = _registry(scheduler, bedrock, polly)
    first, second = registry.create(), registry.create()

    first.machine.begin()

    assert first.id != second.id
    assert registry.get(first.id).state.phase is Phase.SPREAD_SELECT
    assert registry.get(second.id).state.phase is Phase.INTRO


def test_eviction_cancels_pending_timers(scheduler, bedrock, polly):
    registry = _registry(scheduler, bedrock, polly, max_sessions=1)
    evicted = registry.create()
    evicted.machine.begin()
    evicted.machine.confirm_spread()

    survivor = registry.create()

    assert registry.get(evicted.id) is None
    assert registry.get(survivor.id) is survivor
    assert scheduler.pending == 0


def test_discard_and_close_all(scheduler, bedrock, polly):
    registry = _registry(scheduler, bedrock, polly)
    session = registry.create()
    other = registry.create()
    other.machine.begin()
    other.machine.confirm_spread()

    assert registry.discard(session.id) is True
    assert registry.discard(session.id) is False

    registry.close_all()
    scheduler.advance(5.0)

    assert len(registry) == 0
    assert other.state.phase is Phase.SHUFFLING
