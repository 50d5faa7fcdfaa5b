"""
Transaction management API routes.

This module provides:
- POST /api/transacoes - Book new transaction
- GET /api/transacoes - List user's transactions
- GET /api/transacoes/paginadas - List user's transactions (paginated)
- GET /api/transacoes/filtrar - Search with filters (paginated)
- GET /api/transacoes/{transaction_id} - Get transaction by ID
- PUT /api/transacoes/{transaction_id} - Update transaction
- DELETE /api/transacoes/{transaction_id} - Delete transaction
- Query, totals and statistics endpoints
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import CurrentUser, TransactionServiceDep
from src.models.enums import TransactionType
from src.schemas.common import (
    CountResponse,
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
    TotalResponse,
)
from src.schemas.transaction import (
    FinancialSummary,
    TransactionCreate,
    TransactionFilterParams,
    TransactionResponse,
    TransactionTypeStats,
    TransactionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transacoes", tags=["Transactions"])


def _to_response(transactions) -> list[TransactionResponse]:
    return [TransactionResponse.model_validate(t) for t in transactions]


class PeriodParams:
    """Optional date range query parameters."""

    def __init__(
        self,
        data_inicio: date | None = Query(default=None, description="Start date (inclusive)"),
        data_fim: date | None = Query(default=None, description="End date (inclusive)"),
    ):
        self.date_from = data_inicio
        self.date_to = data_fim


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book new transaction",
    description="""
    Book a transaction on one of the user's accounts, optionally charged to
    one of the user's cards.

    Amounts must be at least 0.01. Income raises the account balance and
    expense lowers it.
    """,
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Account or card not found"},
        422: {"description": "Validation error"},
    },
)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> TransactionResponse:
    transaction = await transaction_service.create_transaction(
        current_user.id, transaction_data
    )
    return TransactionResponse.model_validate(transaction)


@router.get(
    "",
    response_model=list[TransactionResponse],
    summary="List user's transactions",
)
async def list_transactions(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> list[TransactionResponse]:
    return _to_response(await transaction_service.list_transactions(current_user.id))


@router.get(
    "/paginadas",
    response_model=PaginatedResponse[TransactionResponse],
    summary="List user's transactions (paginated)",
)
async def list_transactions_paginated(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[TransactionResponse]:
    transactions, total = await transaction_service.list_transactions_paginated(
        current_user.id, pagination
    )
    return PaginatedResponse(
        data=_to_response(transactions),
        meta=PaginationMeta.build(total, pagination),
    )


@router.get(
    "/filtrar",
    response_model=PaginatedResponse[TransactionResponse],
    summary="Search transactions",
    description="""
    Search the user's transactions. All filters are optional and combined
    with AND:

    - transaction_type: income or expense
    - account_id / card_id
    - date_from / date_to (inclusive)
    - description: case-insensitive substring
    - is_recurring
    """,
)
async def filter_transactions(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
    filters: TransactionFilterParams = Depends(),
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[TransactionResponse]:
    transactions, total = await transaction_service.filter_transactions(
        current_user.id, filters, pagination
    )
    return PaginatedResponse(
        data=_to_response(transactions),
        meta=PaginationMeta.build(total, pagination),
    )


@router.get(
    "/conta/{account_id}",
    response_model=list[TransactionResponse],
    summary="Transactions of an account",
)
async def list_transactions_by_account(
    account_id: int,
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> list[TransactionResponse]:
    return _to_response(
        await transaction_service.by_account(current_user.id, account_id)
    )


@router.get(
    "/cartao/{card_id}",
    response_model=list[TransactionResponse],
    summary="Transactions of a card",
)
async def list_transactions_by_card(
    card_id: int,
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> list[TransactionResponse]:
    return _to_response(await transaction_service.by_card(current_user.id, card_id))


@router.get(
    "/tipo/{transaction_type}",
    response_model=list[TransactionResponse],
    summary="Transactions of one type",
)
async def list_transactions_by_type(
    transaction_type: TransactionType,
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> list[TransactionResponse]:
    return _to_response(
        await transaction_service.by_type(current_user.id, transaction_type)
    )


@router.get(
    "/periodo",
    response_model=list[TransactionResponse],
    summary="Transactions within a period",
)
async def list_transactions_by_period(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
    data_inicio: date = Query(description="Start date (inclusive)"),
    data_fim: date = Query(description="End date (inclusive)"),
) -> list[TransactionResponse]:
    return _to_response(
        await transaction_service.by_period(current_user.id, data_inicio, data_fim)
    )


@router.get(
    "/recorrentes",
    response_model=list[TransactionResponse],
    summary="Recurring transactions",
)
async def list_recurring_transactions(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> list[TransactionResponse]:
    return _to_response(await transaction_service.recurring(current_user.id))


@router.get(
    "/buscar",
    response_model=list[TransactionResponse],
    summary="Search transactions by description",
)
async def search_transactions(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
    descricao: str = Query(min_length=1, max_length=200),
) -> list[TransactionResponse]:
    return _to_response(await transaction_service.search(current_user.id, descricao))


@router.get(
    "/ultimas",
    response_model=list[TransactionResponse],
    summary="Most recent transactions",
)
async def list_latest_transactions(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
    limite: int = Query(default=10, ge=1, le=100),
) -> list[TransactionResponse]:
    return _to_response(await transaction_service.latest(current_user.id, limite))


@router.get(
    "/total-receitas",
    response_model=TotalResponse,
    summary="Total income",
)
async def get_total_income(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
    period: PeriodParams = Depends(),
) -> TotalResponse:
    total = await transaction_service.total_income(
        current_user.id, period.date_from, period.date_to
    )
    return TotalResponse(total=total)


@router.get(
    "/total-despesas",
    response_model=TotalResponse,
    summary="Total expense",
)
async def get_total_expense(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
    period: PeriodParams = Depends(),
) -> TotalResponse:
    total = await transaction_service.total_expense(
        current_user.id, period.date_from, period.date_to
    )
    return TotalResponse(total=total)


@router.get(
    "/resumo-financeiro",
    response_model=FinancialSummary,
    summary="Income, expense and balance",
)
async def get_financial_summary(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
    period: PeriodParams = Depends(),
) -> FinancialSummary:
    return await transaction_service.financial_summary(
        current_user.id, period.date_from, period.date_to
    )


@router.get("/contar", response_model=CountResponse, summary="Count transactions")
async def count_transactions(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> CountResponse:
    return CountResponse(
        count=await transaction_service.count_transactions(current_user.id)
    )


@router.get(
    "/estatisticas-tipo",
    response_model=TransactionTypeStats,
    summary="Transaction counts per type",
)
async def get_type_stats(
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> TransactionTypeStats:
    return await transaction_service.stats_by_type(current_user.id)


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Get transaction by ID",
    responses={404: {"description": "Transaction not found or owned by another user"}},
)
async def get_transaction(
    transaction_id: int,
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> TransactionResponse:
    transaction = await transaction_service.get_transaction(
        transaction_id, current_user.id
    )
    return TransactionResponse.model_validate(transaction)


@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Update transaction",
    description="""
    Update a transaction. Only provided fields are changed. Send
    `"card_id": null` to detach the card.
    """,
)
async def update_transaction(
    transaction_id: int,
    update_data: TransactionUpdate,
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> TransactionResponse:
    transaction = await transaction_service.update_transaction(
        transaction_id, current_user.id, update_data
    )
    return TransactionResponse.model_validate(transaction)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete transaction",
)
async def delete_transaction(
    transaction_id: int,
    current_user: CurrentUser,
    transaction_service: TransactionServiceDep,
) -> None:
    await transaction_service.delete_transaction(transaction_id, current_user.id)
