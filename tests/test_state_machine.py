"""Phase transitions, dealing and picking for a single session."""

from __future__ import annotations

import random

from arcana.domain import get_spread
from arcana.session import Phase, ReadingStatus, SessionStateMachine, reading_action_enabled

from conftest import ManualScheduler, drive_to_reading


def _ids(cards) -> set[str]:
    return {card.instance_id for card in cards}


def test_begin_only_applies_in_intro(machine):
    assert machine.begin() is True
    assert machine.phase is Phase.SPREAD_SELECT
    assert machine.begin() is False
    assert machine.phase is Phase.SPREAD_SELECT


def test_confirm_deals_unique_major_arcana_and_waits_for_shuffle(machine, scheduler):
    machine.begin()
    assert machine.confirm_spread() is True

    deck = machine.state.available_deck
    assert machine.phase is Phase.SHUFFLING
    assert len(deck) == 22
    assert len(_ids(deck)) == 22
    assert {card.card.id for card in deck} == set(range(22))

    scheduler.advance(2.0)
    assert machine.phase is Phase.SHUFFLING
    scheduler.advance(1.0)
    assert machine.phase is Phase.PICKING


def test_confirm_with_full_deck_deals_78_cards(machine):
    machine.begin()
    machine.confirm_spread(full_deck=True)

    assert machine.state.full_deck is True
    assert len(machine.state.available_deck) == 78
    assert len(_ids(machine.state.available_deck)) == 78


def test_confirm_outside_spread_select_is_ignored(machine):
    assert machine.confirm_spread() is False
    assert machine.phase is Phase.INTRO
    assert machine.state.available_deck == []


def test_triangle_scenario_picks_in_order_then_reveals_after_delay(machine, scheduler):
    machine.begin()
    machine.confirm_spread()
    scheduler.advance(3.0)
    deck_size = len(machine.state.available_deck)
    remaining = list(machine.state.available_deck)
    expected = [remaining.pop(i) for i in (5, 5, 0)]

    for index in (5, 5, 0):
        assert machine.pick_card(index) is True
        state = machine.state
        assert _ids(state.drawn_hand).isdisjoint(_ids(state.available_deck))
        assert len(state.drawn_hand) + len(state.available_deck) == deck_size

    assert [card.instance_id for card in machine.state.drawn_hand] == [
        card.instance_id for card in expected
    ]
    assert machine.state.revealed_flags == [False, False, False]
    assert machine.phase is Phase.PICKING

    scheduler.advance(0.5)
    assert machine.phase is Phase.PICKING
    scheduler.advance(0.5)
    assert machine.phase is Phase.READING


def test_picks_beyond_capacity_or_out_of_range_are_ignored(machine, scheduler):
    machine.begin()
    machine.confirm_spread()
    assert machine.pick_card(0) is False  # still shuffling

    scheduler.advance(3.0)
    assert machine.pick_card(-1) is False
    assert machine.pick_card(22) is False
    for _ in range(3):
        assert machine.pick_card(0) is True
    assert machine.pick_card(0) is False

    assert len(machine.state.drawn_hand) == 3
    assert len(machine.state.available_deck) == 19


def test_interact_reveals_and_focuses_idempotently(machine, scheduler):
    drive_to_reading(machine, scheduler)

    for _ in range(2):
        assert machine.interact_with_card(1) is True
        assert machine.state.revealed_flags[1] is True
        assert machine.state.focused_index == 1

    assert machine.state.revealed_flags == [False, True, False]
    assert machine.interact_with_card(3) is False
    assert machine.state.focused_index == 1


def test_interact_outside_reading_is_ignored(machine, scheduler):
    machine.begin()
    machine.confirm_spread()
    scheduler.advance(3.0)
    machine.pick_card(0)

    assert machine.interact_with_card(0) is False
    assert machine.state.revealed_flags == [False]


def test_reset_cancels_pending_shuffle_timer(machine, scheduler):
    machine.begin()
    machine.confirm_spread()
    assert scheduler.pending == 1

    assert machine.reset_to_intro() is True
    scheduler.advance(10.0)

    assert machine.phase is Phase.INTRO
    assert machine.state.available_deck == []
    assert scheduler.pending == 0


def test_reset_cancels_pending_reveal_timer(machine, scheduler):
    machine.begin()
    machine.confirm_spread()
    scheduler.advance(3.0)
    for _ in range(3):
        machine.pick_card(0)

    machine.reset_to_intro()
    scheduler.advance(10.0)

    assert machine.phase is Phase.INTRO
    assert machine.state.drawn_hand == []


def test_reset_from_intro_is_a_no_op(machine):
    assert machine.reset_to_intro() is False
    assert machine.state.round_id == 0


def test_reset_keeps_spread_deck_toggle_and_question(machine, scheduler):
    machine.select_spread(get_spread("diamond"))
    machine.set_question("  我的事业  ")
    machine.begin()
    machine.confirm_spread(full_deck=True)
    scheduler.advance(3.0)

    machine.reset_to_intro()

    state = machine.state
    assert state.selected_spread.id == "diamond"
    assert state.full_deck is True
    assert state.question == "我的事业"
    assert state.reading is None
    assert state.reading_status is ReadingStatus.IDLE


def test_changing_spread_while_shuffling_reshuffles_and_restarts_timer(machine, scheduler):
    machine.begin()
    machine.confirm_spread()
    first_round = machine.state.round_id
    first_ids = _ids(machine.state.available_deck)

    scheduler.advance(2.0)
    machine.select_spread(get_spread("single"))

    assert machine.phase is Phase.SHUFFLING
    assert machine.state.round_id == first_round + 1
    assert _ids(machine.state.available_deck).isdisjoint(first_ids)

    scheduler.advance(1.0)
    assert machine.phase is Phase.SHUFFLING
    scheduler.advance(2.0)
    assert machine.phase is Phase.PICKING
    assert scheduler.pending == 0


def test_toggling_full_deck_while_shuffling_redeals(machine):
    machine.begin()
    machine.confirm_spread()

    machine.set_full_deck(True)

    assert machine.phase is Phase.SHUFFLING
    assert len(machine.state.available_deck) == 78


def test_changing_spread_while_picking_keeps_the_current_hand_size(machine, scheduler):
    machine.begin()
    machine.confirm_spread()
    scheduler.advance(3.0)
    machine.pick_card(0)
    machine.pick_card(0)

    machine.select_spread(get_spread("single"))

    state = machine.state
    assert state.selected_spread.id == "triangle"
    assert state.next_spread.id == "single"
    assert machine.pick_card(0) is True
    assert machine.pick_card(0) is False
    assert len(state.drawn_hand) == state.selected_spread.card_count == 3

    scheduler.advance(1.0)
    assert machine.phase is Phase.READING


def test_changing_spread_during_reading_waits_for_reshuffle(machine, scheduler):
    drive_to_reading(machine, scheduler)
    for index in range(3):
        machine.interact_with_card(index)
    round_id = machine.state.round_id
    assert reading_action_enabled(machine.state) is True

    machine.select_spread(get_spread("single"))

    state = machine.state
    assert machine.phase is Phase.READING
    assert state.round_id == round_id
    assert state.selected_spread.id == "triangle"
    assert len(state.drawn_hand) == state.selected_spread.card_count
    assert reading_action_enabled(state) is True

    machine.reshuffle()
    scheduler.advance(3.0)

    assert state.selected_spread.id == "single"
    assert state.next_spread is None
    assert machine.pick_card(0) is True
    assert machine.pick_card(0) is False
    scheduler.advance(1.0)
    assert machine.phase is Phase.READING
    assert len(state.drawn_hand) == 1


def test_reselecting_current_spread_clears_queued_choice(machine, scheduler):
    drive_to_reading(machine, scheduler)

    machine.select_spread(get_spread("diamond"))
    machine.select_spread(get_spread("triangle"))
    machine.reshuffle()

    assert machine.state.next_spread is None
    assert machine.state.selected_spread.id == "triangle"


def test_reset_applies_queued_spread(machine, scheduler):
    drive_to_reading(machine, scheduler)
    machine.select_spread(get_spread("diamond"))

    machine.reset_to_intro()

    assert machine.state.selected_spread.id == "diamond"
    assert machine.state.next_spread is None



def test_reshuffle_from_reading_starts_a_new_round(machine, scheduler):
    drive_to_reading(machine, scheduler)
    round_id = machine.state.round_id

    assert machine.reshuffle() is True

    assert machine.phase is Phase.SHUFFLING
    assert machine.state.round_id == round_id + 1
    assert machine.state.drawn_hand == []
    assert len(machine.state.available_deck) == 22


def test_seeded_rng_deals_reproducibly():
    decks = []
    for _ in range(2):
        scheduler = ManualScheduler()
        machine = SessionStateMachine(scheduler=scheduler, rng=random.Random(99))
        machine.begin()
        machine.confirm_spread()
        decks.append(
            [
                (card.instance_id, card.card.id, card.is_reversed)
                for card in machine.state.available_deck
            ]
        )

    assert decks[0] == decks[1]


def test_orientation_follows_reversed_probability(scheduler):
    always = SessionStateMachine(scheduler=scheduler, rng=random.Random(5), reversed_probability=1.0)
    never = SessionStateMachine(scheduler=scheduler, rng=random.Random(5), reversed_probability=0.0)
    for machine in (always, never):
        machine.begin()
        machine.confirm_spread()

    assert all(card.is_reversed for card in always.state.available_deck)
    assert not any(card.is_reversed for card in never.state.available_deck)
