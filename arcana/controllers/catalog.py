"""Read-only deck catalog endpoints."""

from fastapi import APIRouter

from arcana.domain import DECK_INFO, list_card_definitions, list_spreads
from arcana.views import CardDefinitionResponse, DeckInfoResponse, SpreadResponse

router = APIRouter(tags=["catalog"])


@router.get("/spreads", response_model=list[SpreadResponse])
async def get_spreads() -> list[SpreadResponse]:
    return [SpreadResponse.from_spread(spread) for spread in list_spreads()]


@router.get("/cards", response_model=list[CardDefinitionResponse])
async def get_cards(full_deck: bool = False) -> list[CardDefinitionResponse]:
    """List the source deck: 22 major arcana, or all 78 cards with ``full_deck``."""

    return [CardDefinitionResponse.from_definition(card) for card in list_card_definitions(full_deck)]


@router.get("/deck-info", response_model=DeckInfoResponse)
async def get_deck_info() -> DeckInfoResponse:
    return DeckInfoResponse(**DECK_INFO)
