"""Pydantic schemas for the read-only deck catalog."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from arcana.domain import Arcana, CardDefinition, Element, Icon, LayoutKind, Spread


class CardDefinitionResponse(BaseModel):
    """One tarot card as listed by the catalog."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    short_name: str
    icon: Icon
    element: Element
    upright: str
    reversed: str
    arcana: Arcana
    suit: Optional[str] = None
    rank: Optional[str] = None

    @classmethod
    def from_definition(cls, card: CardDefinition) -> "CardDefinitionResponse":
        return cls.model_validate(card)


class SpreadPositionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    desc: str


class SpreadResponse(BaseModel):
    """A spread with its ordered positions."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    en_name: str
    icon: Icon
    description: str
    card_count: int
    positions: list[SpreadPositionResponse]
    layout: LayoutKind

    @classmethod
    def from_spread(cls, spread: Spread) -> "SpreadResponse":
        return cls.model_validate(spread)


class DeckInfoResponse(BaseModel):
    major: str
    full: str
