"""Immutable catalog entries and per-draw card instances."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Element(str, Enum):
    AIR = "Air"
    WATER = "Water"
    EARTH = "Earth"
    FIRE = "Fire"


class Arcana(str, Enum):
    MAJOR = "major"
    MINOR = "minor"


class LayoutKind(str, Enum):
    SINGLE = "single"
    ROW = "row"
    DIAMOND = "diamond"


class Icon(str, Enum):
    """Opaque symbol tag; the renderer decides what each tag looks like."""

    GHOST = "ghost"
    SPARKLES = "sparkles"
    MOON = "moon"
    SUN = "sun"
    STAR = "star"
    HEART = "heart"
    SKULL = "skull"
    SCALE = "scale"
    SWORD = "sword"
    CROWN = "crown"
    ZAP = "zap"
    ANCHOR = "anchor"
    EYE = "eye"
    CLOUD = "cloud"
    REFRESH = "refresh"
    GLOBE = "globe"
    WAND = "wand"
    COINS = "coins"
    CIRCLE = "circle"
    LAYOUT = "layout"
    GRID = "grid"


class CardDefinition(BaseModel):
    """Domain model for a catalog card"""

    id: int
    name: str
    icon: Icon
    element: Element
    upright: str
    reversed: str
    arcana: Arcana = Arcana.MAJOR
    suit: Optional[str] = None
    rank: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def short_name(self) -> str:
        """Name without the parenthesised English gloss."""

        return self.name.split(" ")[0]


class CardInstance(BaseModel):
    """A card as dealt into one shuffled deck."""

    instance_id: str
    card: CardDefinition
    is_reversed: bool

    model_config = {"frozen": True}

    @property
    def orientation_label(self) -> str:
        return "逆位" if self.is_reversed else "正位"

    @property
    def meaning(self) -> str:
        return self.card.reversed if self.is_reversed else self.card.upright


class SpreadPosition(BaseModel):
    id: int
    name: str
    desc: str

    model_config = {"frozen": True}


class Spread(BaseModel):
    """Domain model for a spread layout"""

    id: str
    name: str
    en_name: str
    icon: Icon
    description: str
    card_count: int = Field(ge=1)
    positions: tuple[SpreadPosition, ...]
    layout: LayoutKind

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_positions(self) -> "Spread":
        if len(self.positions) != self.card_count:
            raise ValueError("spread positions must match card_count")
        return self
