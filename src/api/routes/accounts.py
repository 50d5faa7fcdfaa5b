"""
Account management API routes.

This module provides:
- POST /api/contas - Create new account
- GET /api/contas - List user's accounts
- GET /api/contas/paginado - List user's accounts (paginated)
- GET /api/contas/{account_id} - Get account by ID
- PUT /api/contas/{account_id} - Update account
- DELETE /api/contas/{account_id} - Delete account without transactions
- Query endpoints by type, institution, name, activity and total balance
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import AccountServiceDep, CurrentUser
from src.models.enums import AccountType
from src.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    TotalBalanceResponse,
)
from src.schemas.common import (
    CountResponse,
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contas", tags=["Accounts"])


def _to_response(accounts) -> list[AccountResponse]:
    return [AccountResponse.model_validate(account) for account in accounts]


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new account",
    description="""
    Create a new financial account for the authenticated user.

    The account name must be unique per user (case-insensitive).
    """,
    responses={
        201: {
            "description": "Account created successfully",
            "content": {
                "application/json": {
                    "example": {
                        "id": 1,
                        "user_id": 7,
                        "name": "Main checking",
                        "account_type": "checking",
                        "initial_balance": "1000.00",
                        "current_balance": "1000.00",
                        "institution": "Acme Bank",
                        "transaction_count": 0,
                        "created_at": "2025-11-04T00:00:00Z",
                        "updated_at": "2025-11-04T00:00:00Z",
                    }
                }
            },
        },
        400: {"description": "Account name already exists"},
        401: {"description": "Not authenticated"},
        422: {"description": "Validation error"},
    },
)
async def create_account(
    account_data: AccountCreate,
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> AccountResponse:
    account = await account_service.create_account(current_user.id, account_data)
    return AccountResponse.model_validate(account)


@router.get(
    "",
    response_model=list[AccountResponse],
    summary="List user's accounts",
)
async def list_accounts(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> list[AccountResponse]:
    return _to_response(await account_service.list_accounts(current_user.id))


@router.get(
    "/paginado",
    response_model=PaginatedResponse[AccountResponse],
    summary="List user's accounts (paginated)",
    description="""
    List the authenticated user's accounts ordered by name.

    Query parameters: `page` (default 1) and `page_size` (default 20, max 100).
    """,
)
async def list_accounts_paginated(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
    pagination: PaginationParams = Depends(),
) -> PaginatedResponse[AccountResponse]:
    accounts, total = await account_service.list_accounts_paginated(
        current_user.id, pagination
    )
    return PaginatedResponse(
        data=_to_response(accounts),
        meta=PaginationMeta.build(total, pagination),
    )


@router.get(
    "/tipo/{account_type}",
    response_model=list[AccountResponse],
    summary="List accounts of one type",
)
async def list_accounts_by_type(
    account_type: AccountType,
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> list[AccountResponse]:
    return _to_response(await account_service.find_by_type(current_user.id, account_type))


@router.get(
    "/instituicao",
    response_model=list[AccountResponse],
    summary="List accounts held at an institution",
)
async def list_accounts_by_institution(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
    nome: str = Query(min_length=1, max_length=100, description="Institution name"),
) -> list[AccountResponse]:
    return _to_response(
        await account_service.find_by_institution(current_user.id, nome)
    )


@router.get(
    "/buscar",
    response_model=list[AccountResponse],
    summary="Search accounts by name",
)
async def search_accounts(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
    nome: str = Query(min_length=1, max_length=100, description="Name substring"),
) -> list[AccountResponse]:
    return _to_response(
        await account_service.find_by_name_partial(current_user.id, nome)
    )


@router.get(
    "/saldo-total",
    response_model=TotalBalanceResponse,
    summary="Total balance across accounts",
)
async def get_total_balance(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> TotalBalanceResponse:
    total = await account_service.compute_total_balance(current_user.id)
    return TotalBalanceResponse(total_balance=total)


@router.get("/count", response_model=CountResponse, summary="Count user's accounts")
async def count_accounts(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> CountResponse:
    return CountResponse(count=await account_service.count_accounts(current_user.id))


@router.get(
    "/ativas",
    response_model=list[AccountResponse],
    summary="Accounts with at least one transaction",
)
async def list_active_accounts(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> list[AccountResponse]:
    return _to_response(await account_service.find_active(current_user.id))


@router.get(
    "/sem-transacoes",
    response_model=list[AccountResponse],
    summary="Accounts without transactions",
)
async def list_accounts_without_transactions(
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> list[AccountResponse]:
    return _to_response(
        await account_service.find_without_transactions(current_user.id)
    )


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Get account by ID",
    responses={404: {"description": "Account not found or owned by another user"}},
)
async def get_account(
    account_id: int,
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> AccountResponse:
    account = await account_service.get_account(account_id, current_user.id)
    return AccountResponse.model_validate(account)


@router.put(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Update account",
    description="""
    Update an account. Only provided fields are changed.

    A new name must stay unique among the user's accounts.
    """,
)
async def update_account(
    account_id: int,
    update_data: AccountUpdate,
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> AccountResponse:
    account = await account_service.update_account(
        account_id, current_user.id, update_data
    )
    return AccountResponse.model_validate(account)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete account",
    description="""
    Permanently delete an account.

    Refused with 400 while the account has transactions.
    """,
)
async def delete_account(
    account_id: int,
    current_user: CurrentUser,
    account_service: AccountServiceDep,
) -> None:
    await account_service.delete_account(account_id, current_user.id)
