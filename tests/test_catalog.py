"""Deck and spread catalog content."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from arcana.domain import (
    Arcana,
    Icon,
    LayoutKind,
    Spread,
    SpreadPosition,
    get_spread,
    list_card_definitions,
    list_spreads,
)


def test_major_arcana_only_deck_has_22_cards():
    cards = list_card_definitions(False)

    assert len(cards) == 22
    assert [card.id for card in cards] == list(range(22))
    assert all(card.arcana is Arcana.MAJOR for card in cards)
    assert cards[0].name == "愚者 (The Fool)"
    assert cards[0].short_name == "愚者"


def test_full_deck_appends_56_minor_arcana_in_suit_order():
    cards = list_card_definitions(True)
    minors = cards[22:]

    assert len(cards) == 78
    assert len({card.id for card in cards}) == 78
    assert [card.id for card in minors] == list(range(22, 78))
    assert all(card.arcana is Arcana.MINOR for card in minors)
    assert [card.suit for card in minors[::14]] == ["Wands", "Cups", "Swords", "Pentacles"]


def test_minor_arcana_meanings_follow_rank():
    wands = [card for card in list_card_definitions(True) if card.suit == "Wands"]
    ace, five, king = wands[0], wands[4], wands[13]

    assert ace.rank == "Ace"
    assert ace.upright == "权杖的新开始，能量涌动"
    assert five.upright == "行动、创意，正向发展"
    assert five.reversed == "行动、创意，受阻或过度"
    assert king.upright == "宫廷牌：权杖领域的人物或特质"


def test_spread_catalog_is_closed_and_ordered():
    spreads = list_spreads()

    assert [spread.id for spread in spreads] == ["single", "triangle", "diamond"]
    assert [spread.card_count for spread in spreads] == [1, 3, 5]
    assert [spread.layout for spread in spreads] == [
        LayoutKind.SINGLE,
        LayoutKind.ROW,
        LayoutKind.DIAMOND,
    ]
    for spread in spreads:
        assert len(spread.positions) == spread.card_count


def test_get_spread_by_id():
    triangle = get_spread("triangle")

    assert [position.name for position in triangle.positions] == ["过去", "现在", "未来"]
    with pytest.raises(KeyError):
        get_spread("celtic-cross")


def test_spread_rejects_position_count_mismatch():
    with pytest.raises(ValidationError):
        Spread(
            id="broken",
            name="坏牌阵",
            en_name="Broken",
            icon=Icon.LAYOUT,
            description="",
            card_count=2,
            positions=(SpreadPosition(id=0, name="一", desc=""),),
            layout=LayoutKind.ROW,
        )
