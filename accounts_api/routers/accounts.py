"""
Accounts router — account management endpoints.

All endpoints except health require the X-Customer-ID header and are scoped
to that customer:

    GET    /accounts/health            — Liveness probe
    GET    /accounts                   — List own accounts (filter, sort, page)
    POST   /accounts                   — Open a new account
    GET    /accounts/{account_id}      — Get own account details
    PUT    /accounts/{account_id}      — Update nickname / metadata
    DELETE /accounts/{account_id}      — Close an account (balance must be 0)

Handlers are thin: they translate HTTP inputs into service calls and service
results into response schemas. Business rules live in the service layer and
errors are mapped to status codes by the handlers in exceptions.py.
"""

from fastapi import APIRouter, Depends, Query, Response, status

from accounts_api.config import settings
from accounts_api.dependencies import get_account_repository, get_customer_id
from accounts_api.models.account import AccountStatus, AccountType
from accounts_api.repositories.account_repository import AccountRepository
from accounts_api.schemas.account import (
    AccountCreateRequest,
    AccountFilters,
    AccountListResponse,
    AccountResponse,
    AccountUpdateRequest,
    HealthResponse,
)
from accounts_api.schemas.common import PageRequest, SortOrder
from accounts_api.services import account_service

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    tags=["Health"],
)
async def health_check():
    """Always 200 while the process is serving requests."""
    return HealthResponse(
        status="UP",
        message=f"{settings.APP_NAME} is running",
        version=settings.APP_VERSION,
    )


@router.get(
    "",
    response_model=AccountListResponse,
    summary="List your accounts",
)
async def list_accounts(
    account_type: AccountType | None = Query(None, alias="accountType"),
    account_status: AccountStatus | None = Query(None, alias="status"),
    currency: str | None = Query(None, pattern=r"^[A-Z]{3}$"),
    page: int = Query(0, ge=0, description="Page index (0-indexed)"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_dir: str = Query("desc", alias="sortDir", pattern=r"(?i)^(asc|desc)$"),
    customer_id: str = Depends(get_customer_id),
    repo: AccountRepository = Depends(get_account_repository),
):
    """
    List the requesting customer's accounts.

    Filters are optional and combined with AND. Results are sorted by
    `sortBy`/`sortDir` with account id as a tie-breaker. Requesting a page
    past the end returns an empty list with the real totals.
    """
    filters = AccountFilters(
        account_type=account_type,
        status=account_status,
        currency=currency,
    )
    page_request = PageRequest(
        page=page,
        size=size,
        sort_by=sort_by,
        sort_order=SortOrder(sort_dir.lower()),
    )
    result = await account_service.list_accounts(repo, customer_id, filters, page_request)
    return AccountListResponse.from_page(result)


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a new account",
)
async def create_account(
    request: AccountCreateRequest,
    customer_id: str = Depends(get_customer_id),
    repo: AccountRepository = Depends(get_account_repository),
):
    """
    Open a new account funded with `initialDeposit`.

    The account starts ACTIVE and the requesting customer becomes its owner.
    The response shows only the last 4 digits of the account number.
    """
    account = await account_service.create_account(repo, request, customer_id)
    return AccountResponse.from_account(account)


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Get account details",
)
async def get_account(
    account_id: str,
    customer_id: str = Depends(get_customer_id),
    repo: AccountRepository = Depends(get_account_repository),
):
    """
    Get details for a specific account.

    Returns 404 if the account doesn't exist, or 403 if it belongs to a
    different customer.
    """
    account = await account_service.get_account(repo, account_id, customer_id)
    return AccountResponse.from_account(account)


@router.put(
    "/{account_id}",
    response_model=AccountResponse,
    summary="Update account nickname or metadata",
)
async def update_account(
    account_id: str,
    request: AccountUpdateRequest,
    customer_id: str = Depends(get_customer_id),
    repo: AccountRepository = Depends(get_account_repository),
):
    """
    Update the nickname and/or replace the metadata of an account.

    Omitted fields are left unchanged.
    """
    account = await account_service.update_account(repo, account_id, customer_id, request)
    return AccountResponse.from_account(account)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Close an account",
)
async def close_account(
    account_id: str,
    reason: str = Query("CUSTOMER_REQUEST", max_length=100),
    customer_id: str = Depends(get_customer_id),
    repo: AccountRepository = Depends(get_account_repository),
):
    """
    Close an account. The balance must be exactly zero (409 otherwise).

    The account is kept with status CLOSED. Closing an already closed
    account is a no-op.
    """
    await account_service.close_account(repo, account_id, customer_id, reason)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
