"""
Credit card management API routes.

This module provides:
- POST /api/cartoes - Create new card
- GET /api/cartoes - List user's cards
- GET /api/cartoes/paginados - List user's cards (paginated)
- GET /api/cartoes/{card_id} - Get card by ID
- PUT /api/cartoes/{card_id} - Update card
- DELETE /api/cartoes/{card_id} - Delete card without transactions
- Query endpoints by brand, name, billing days, limits and usage
"""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import CardServiceDep, CurrentUser
from src.schemas.card import (
    CardCreate,
    CardResponse,
    CardUpdate,
    CardUsageSummary,
    NameAvailabilityResponse,
)
from src.schemas.common import (
    CountResponse,
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
    TotalResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cartoes", tags=["Cards"])


def _to_response(cards) -> list[CardResponse]:
    return [CardResponse.model_validate(card) for card in cards]


@router.post(
    "",
    response_model=CardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new card",
    description="""
    Create a new credit card for the authenticated user.

    The card name must be unique per user (case-insensitive). Closing and
    due days must be between 1 and 31.
    """,
    responses={
        400: {"description": "Card name already exists"},
        401: {"description": "Not authenticated"},
        422: {"description": "Validation error"},
    },
)
async def create_card(
    card_data: CardCreate,
    current_user: CurrentUser,
    card_service: CardServiceDep,
) -> CardResponse:
    card = await card_service.create_card(current_user.id, card_data)
    return CardResponse.model_validate(card)


@router.get("", response_model=list[CardResponse], summary="List user's cards")
async def list_cards(
    current_user: CurrentUser,
    card_service: CardServiceDep,
) -> list[CardResponse]:
    return _to_response(await card_service.list_cards(current_user.id))


@router.get(
    "/paginados",
    response_model=PaginatedResponse[CardResponse],
    summary="List user's cards (paginated)",
)
async def list_cards_paginated(
    current_user: CurrentUser,
    card_service: CardServiceDep,
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[CardResponse]:
    cards, total = await card_service.list_cards_paginated(current_user.id, pagination)
    return PaginatedResponse(
        data=_to_response(cards),
        meta=PaginationMeta.build(total, pagination),
    )


@router.get(
    "/bandeira",
    response_model=list[CardResponse],
    summary="List cards of one brand",
)
async def list_cards_by_brand(
    current_user: CurrentUser,
    card_service: CardServiceDep,
    nome: str = Query(min_length=1, max_length=50, description="Brand name"),
) -> list[CardResponse]:
    return _to_response(await card_service.find_by_brand(current_user.id, nome))


@router.get(
    "/buscar",
    response_model=list[CardResponse],
    summary="Search cards by name",
)
async def search_cards(
    current_user: CurrentUser,
    card_service: CardServiceDep,
    nome: str = Query(min_length=1, max_length=100, description="Name substring"),
) -> list[CardResponse]:
    return _to_response(await card_service.search_by_name(current_user.id, nome))


@router.get(
    "/dia-fechamento",
    response_model=list[CardResponse],
    summary="Cards closing on a given day",
)
async def list_cards_by_closing_day(
    current_user: CurrentUser,
    card_service: CardServiceDep,
    dia: int = Query(ge=1, le=31),
) -> list[CardResponse]:
    return _to_response(await card_service.find_by_closing_day(current_user.id, dia))


@router.get(
    "/dia-vencimento",
    response_model=list[CardResponse],
    summary="Cards due on a given day",
)
async def list_cards_by_due_day(
    current_user: CurrentUser,
    card_service: CardServiceDep,
    dia: int = Query(ge=1, le=31),
) -> list[CardResponse]:
    return _to_response(await card_service.find_by_due_day(current_user.id, dia))


@router.get(
    "/limite-acima",
    response_model=list[CardResponse],
    summary="Cards with a credit limit above a value",
)
async def list_cards_with_limit_above(
    current_user: CurrentUser,
    card_service: CardServiceDep,
    valor: Decimal = Query(ge=0),
) -> list[CardResponse]:
    return _to_response(
        await card_service.find_with_limit_above(current_user.id, valor)
    )


@router.get(
    "/limite-total",
    response_model=TotalResponse,
    summary="Sum of credit limits",
)
async def get_total_limit(
    current_user: CurrentUser,
    card_service: CardServiceDep,
) -> TotalResponse:
    return TotalResponse(total=await card_service.total_limit(current_user.id))


@router.get("/contar", response_model=CountResponse, summary="Count user's cards")
async def count_cards(
    current_user: CurrentUser,
    card_service: CardServiceDep,
) -> CountResponse:
    return CountResponse(count=await card_service.count_cards(current_user.id))


@router.get(
    "/verificar-nome",
    response_model=NameAvailabilityResponse,
    summary="Check whether a card name is taken",
    description="""
    Case-insensitive check among the user's cards. Pass `excluir_id` to
    ignore the card being edited.
    """,
)
async def check_card_name(
    current_user: CurrentUser,
    card_service: CardServiceDep,
    nome: str = Query(min_length=1, max_length=100),
    excluir_id: int | None = Query(default=None),
) -> NameAvailabilityResponse:
    exists = await card_service.name_exists(current_user.id, nome, excluir_id)
    return NameAvailabilityResponse(name=nome, exists=exists)


@router.get(
    "/resumo-utilizacao",
    response_model=CardUsageSummary,
    summary="Limit usage across all cards",
)
async def get_usage_summary(
    current_user: CurrentUser,
    card_service: CardServiceDep,
) -> CardUsageSummary:
    return await card_service.usage_summary(current_user.id)


@router.get(
    "/{card_id}",
    response_model=CardResponse,
    summary="Get card by ID",
    responses={404: {"description": "Card not found or owned by another user"}},
)
async def get_card(
    card_id: int,
    current_user: CurrentUser,
    card_service: CardServiceDep,
) -> CardResponse:
    card = await card_service.get_card(card_id, current_user.id)
    return CardResponse.model_validate(card)


@router.put("/{card_id}", response_model=CardResponse, summary="Update card")
async def update_card(
    card_id: int,
    update_data: CardUpdate,
    current_user: CurrentUser,
    card_service: CardServiceDep,
) -> CardResponse:
    card = await card_service.update_card(card_id, current_user.id, update_data)
    return CardResponse.model_validate(card)


@router.delete(
    "/{card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete card",
    description="Permanently delete a card. Refused with 400 while it has transactions.",
)
async def delete_card(
    card_id: int,
    current_user: CurrentUser,
    card_service: CardServiceDep,
) -> None:
    await card_service.delete_card(card_id, current_user.id)
