"""Tarot catalog domain: card and spread definitions."""

from .catalog import DECK_INFO, get_spread, list_card_definitions, list_spreads
from .models import (
    Arcana,
    CardDefinition,
    CardInstance,
    Element,
    Icon,
    LayoutKind,
    Spread,
    SpreadPosition,
)

__all__ = [
    "Arcana",
    "CardDefinition",
    "CardInstance",
    "DECK_INFO",
    "Element",
    "Icon",
    "LayoutKind",
    "Spread",
    "SpreadPosition",
    "get_spread",
    "list_card_definitions",
    "list_spreads",
]
