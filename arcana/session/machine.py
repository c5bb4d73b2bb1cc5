"""Session state machine: intro -> spread_select -> shuffling -> picking -> reading.

User actions are the only inputs. Actions that do not apply to the current
phase (stale UI dispatches, out-of-range indexes, picks past capacity) are
ignored and reported by returning ``False``; nothing here raises for misuse.

The two delayed transitions (shuffling -> picking, picking -> reading) go
through the injected :class:`~arcana.session.timers.Scheduler`. A pending
timer is cancelled whenever the phase changes for another reason, and the
callback re-checks the round and phase it was scheduled for before firing.
"""

from __future__ import annotations

import logging
import random
import uuid
from typing import Callable, Optional

from arcana.config.settings import settings
from arcana.domain import CardInstance, Spread, get_spread, list_card_definitions

from .state import Phase, SessionState
from .timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class SessionStateMachine:
    """Owns the phase and the deck/hand/reveal data of one session."""

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        rng: random.Random | None = None,
        spread: Spread | None = None,
        full_deck: bool | None = None,
        shuffle_delay: float | None = None,
        reveal_delay: float | None = None,
        reversed_probability: float | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._shuffle_delay = (
            shuffle_delay if shuffle_delay is not None else settings.session.shuffle_delay_seconds
        )
        self._reveal_delay = (
            reveal_delay if reveal_delay is not None else settings.session.reveal_delay_seconds
        )
        # 70% reversed is kept as observed even though 50/50 is conventional.
        self._reversed_probability = (
            reversed_probability
            if reversed_probability is not None
            else settings.session.reversed_probability
        )
        self._pending: Optional[TimerHandle] = None
        self.state = SessionState(
            selected_spread=spread or get_spread(settings.session.default_spread_id),
            full_deck=settings.session.default_full_deck if full_deck is None else full_deck,
        )

    @property
    def phase(self) -> Phase:
        return self.state.phase

    # ------------------------------------------------------------------ actions

    def begin(self) -> bool:
        if self.state.phase is not Phase.INTRO:
            return False
        self._set_phase(Phase.SPREAD_SELECT)
        return True

    def select_spread(self, spread: Spread) -> None:
        """Choose the spread for the next shuffle.

        Before any card is picked the choice applies at once (a running shuffle
        is re-dealt). During picking and reading the current hand keeps its
        spread and the choice waits for the next shuffle or reset.
        """

        state = self.state
        if state.phase in (Phase.PICKING, Phase.READING):
            state.next_spread = None if spread == state.selected_spread else spread
            return
        state.next_spread = None
        if spread == state.selected_spread:
            return
        state.selected_spread = spread
        if state.phase is Phase.SHUFFLING:
            self._enter_shuffling()

    def set_full_deck(self, full_deck: bool) -> None:
        if full_deck == self.state.full_deck:
            return
        self.state.full_deck = full_deck
        if self.state.phase is Phase.SHUFFLING:
            self._enter_shuffling()

    def set_question(self, question: str) -> None:
        self.state.question = (question or "").strip()

    def confirm_spread(self, full_deck: bool | None = None) -> bool:
        if self.state.phase is not Phase.SPREAD_SELECT:
            return False
        if full_deck is not None:
            self.state.full_deck = full_deck
        self._enter_shuffling()
        return True

    def reshuffle(self) -> bool:
        """Start a new round from the reading table with the current settings."""

        if self.state.phase is not Phase.READING:
            return False
        self._enter_shuffling()
        return True

    def pick_card(self, index: int) -> bool:
        state = self.state
        if state.phase is not Phase.PICKING or state.hand_complete:
            return False
        if not 0 <= index < len(state.available_deck):
            logger.debug("Ignoring pick of out-of-range deck index %s", index)
            return False

        card = state.available_deck.pop(index)
        state.drawn_hand.append(card)
        state.revealed_flags.append(False)
        logger.info(
            "Card picked round=%s slot=%s card=%s reversed=%s",
            state.round_id,
            len(state.drawn_hand) - 1,
            card.card.id,
            card.is_reversed,
        )

        if state.hand_complete:
            self._schedule(self._reveal_delay, Phase.PICKING, self._advance_to_reading)
        return True

    def interact_with_card(self, index: int) -> bool:
        """Reveal (idempotently) and focus a drawn position."""

        state = self.state
        if state.phase is not Phase.READING:
            return False
        if not 0 <= index < len(state.drawn_hand):
            logger.debug("Ignoring interaction with out-of-range hand index %s", index)
            return False
        state.revealed_flags[index] = True
        state.focused_index = index
        return True

    def close(self) -> None:
        """Cancel any pending transition timer; the session is being discarded."""

        self._cancel_pending()

    def reset_to_intro(self) -> bool:
        if self.state.phase is Phase.INTRO:
            return False
        self._cancel_pending()
        self.state.clear_round()
        self._apply_next_spread()
        self._set_phase(Phase.INTRO)
        return True

    # ---------------------------------------------------------------- internals

    def _enter_shuffling(self) -> None:
        self._cancel_pending()
        self.state.clear_round()
        self._apply_next_spread()
        self._set_phase(Phase.SHUFFLING)
        self.state.available_deck = self._deal()
        logger.info(
            "Deck shuffled round=%s spread=%s full_deck=%s cards=%s",
            self.state.round_id,
            self.state.selected_spread.id,
            self.state.full_deck,
            len(self.state.available_deck),
        )
        self._schedule(self._shuffle_delay, Phase.SHUFFLING, self._advance_to_picking)

    def _apply_next_spread(self) -> None:
        if self.state.next_spread is not None:
            self.state.selected_spread = self.state.next_spread
            self.state.next_spread = None

    def _deal(self) -> list[CardInstance]:
        source = list(list_card_definitions(self.state.full_deck))
        self._rng.shuffle(source)
        seen: set[str] = set()
        deck: list[CardInstance] = []
        for definition in source:
            instance_id = self._new_instance_id()
            while instance_id in seen:
                instance_id = self._new_instance_id()
            seen.add(instance_id)
            deck.append(
                CardInstance(
                    instance_id=instance_id,
                    card=definition,
                    is_reversed=self._rng.random() < self._reversed_probability,
                )
            )
        return deck

    def _new_instance_id(self) -> str:
        return uuid.UUID(int=self._rng.getrandbits(128), version=4).hex

    def _schedule(self, delay: float, expected: Phase, advance: Callable[[], None]) -> None:
        self._cancel_pending()
        round_id = self.state.round_id

        def fire() -> None:
            self._pending = None
            if self.state.round_id != round_id or self.state.phase is not expected:
                logger.debug("Dropping stale %s timer for round %s", expected.value, round_id)
                return
            advance()

        self._pending = self._scheduler.call_later(delay, fire)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _advance_to_picking(self) -> None:
        self._set_phase(Phase.PICKING)

    def _advance_to_reading(self) -> None:
        self._set_phase(Phase.READING)

    def _set_phase(self, phase: Phase) -> None:
        previous = self.state.phase
        self.state.phase = phase
        logger.info("Phase %s -> %s (round=%s)", previous.value, phase.value, self.state.round_id)


__all__ = ["SessionStateMachine"]
