"""
Account service — lifecycle and authorization rules for accounts.

This module handles:
  - Account creation (with unique account number generation)
  - Account retrieval (single, or a filtered/sorted/paginated listing)
  - Account updates (nickname and metadata only)
  - Account closure (zero-balance precondition, soft state change)

Ownership enforcement:
  Every single-account operation loads the account first and then compares
  its customer_id with the requesting customer. A missing account is a 404;
  an existing account owned by someone else is a 403 that reveals nothing
  about the account. Listings are scoped by the repository, which always
  filters on the requesting customer.

Timestamps:
  `_touch` is the explicit post-mutation hook: every persisted change
  (creation included) refreshes updated_at and last_activity_at through it.
  created_at is set once, at creation.
"""

import logging
import secrets
import string
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from sqlalchemy.exc import IntegrityError

from accounts_api.config import settings
from accounts_api.exceptions import (
    AccountNotFoundError,
    AccountNumberGenerationError,
    AccountStateConflictError,
    UnauthorizedAccessError,
)
from accounts_api.models.account import Account, AccountStatus
from accounts_api.models.account_metadata import AccountMetadata
from accounts_api.repositories.account_repository import AccountRepository
from accounts_api.schemas.account import (
    AccountCreateRequest,
    AccountFilters,
    AccountUpdateRequest,
)
from accounts_api.schemas.common import Page, PageRequest

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def generate_account_number(length: int | None = None) -> str:
    """
    Generate a random numeric account number.

    Digits come from the `secrets` CSPRNG so numbers are not predictable
    from previously issued ones.
    """
    if length is None:
        length = settings.ACCOUNT_NUMBER_LENGTH
    return "".join(secrets.choice(string.digits) for _ in range(length))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _touch(account: Account, now: datetime | None = None) -> None:
    """Post-mutation hook: stamp updated_at and last_activity_at."""
    now = now or _utcnow()
    account.updated_at = now
    account.last_activity_at = now


async def _unique_account_number(
    repo: AccountRepository,
    number_generator: Callable[[], str],
    max_attempts: int,
) -> str:
    for _ in range(max_attempts):
        candidate = number_generator()
        if not await repo.exists_by_account_number(candidate):
            return candidate
    raise AccountNumberGenerationError(max_attempts)


async def _get_owned_account(
    repo: AccountRepository,
    account_id: str,
    customer_id: str,
    for_update: bool = False,
) -> Account:
    """
    Load an account and verify ownership, in that order.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
        UnauthorizedAccessError: If the account belongs to someone else.
    """
    if for_update:
        account = await repo.get_for_update(account_id)
    else:
        account = await repo.get_by_id(account_id)

    if account is None:
        raise AccountNotFoundError(account_id)

    if account.customer_id != customer_id:
        logger.warning(
            "Customer %s denied access to account %s", customer_id, account_id
        )
        raise UnauthorizedAccessError()

    return account


async def create_account(
    repo: AccountRepository,
    request: AccountCreateRequest,
    customer_id: str,
    number_generator: Callable[[], str] | None = None,
    max_attempts: int | None = None,
) -> Account:
    """
    Open a new, funded account for a customer.

    The account starts ACTIVE with balance and available balance equal to
    the initial deposit. The requesting customer becomes the owner.

    Args:
        repo: Account repository bound to the request's session.
        request: Validated creation request.
        customer_id: The requesting customer.
        number_generator: Zero-argument callable producing candidate account
            numbers. Defaults to generate_account_number.
        max_attempts: How many candidates to try before giving up. Defaults
            to ACCOUNT_NUMBER_MAX_ATTEMPTS.

    Returns:
        The newly created Account instance.

    Raises:
        AccountNumberGenerationError: If no unused number was found within
            the retry bound, or a concurrent request claimed the same number.
    """
    logger.info("Creating new account for customer: %s", customer_id)

    if number_generator is None:
        number_generator = generate_account_number
    if max_attempts is None:
        max_attempts = settings.ACCOUNT_NUMBER_MAX_ATTEMPTS
    account_number = await _unique_account_number(repo, number_generator, max_attempts)

    deposit = request.initial_deposit.quantize(CENTS)
    details = request.customer_details
    now = _utcnow()

    account = Account(
        account_number=account_number,
        account_type=request.account_type,
        status=AccountStatus.ACTIVE,
        currency=request.currency,
        balance=deposit,
        available_balance=deposit,
        account_nickname=request.account_nickname,
        customer_id=customer_id,
        branch_id=request.branch_id or settings.DEFAULT_BRANCH_ID,
        first_name=details.first_name,
        last_name=details.last_name,
        email=details.email,
        phone_number=details.phone_number,
        address=details.address,
        created_at=now,
        metadata_entries=[
            AccountMetadata(key=key, value=value)
            for key, value in (request.metadata or {}).items()
        ],
    )
    _touch(account, now)

    try:
        await repo.add(account)
    except IntegrityError as exc:
        # The pre-check passed but another transaction inserted the same number
        logger.error("Account number collision on insert for customer: %s", customer_id)
        raise AccountNumberGenerationError(max_attempts) from exc

    logger.info("Account created successfully: %s", account.id)
    return account


async def get_account(
    repo: AccountRepository,
    account_id: str,
    customer_id: str,
) -> Account:
    """
    Get a single account, verifying ownership. Reads never modify timestamps.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
        UnauthorizedAccessError: If the account belongs to someone else.
    """
    logger.info("Getting account by ID: %s for customer: %s", account_id, customer_id)
    return await _get_owned_account(repo, account_id, customer_id)


async def list_accounts(
    repo: AccountRepository,
    customer_id: str,
    filters: AccountFilters,
    page_request: PageRequest,
) -> Page:
    """
    List the customer's accounts matching the filters, one page at a time.

    The customer scope is always applied; the filters only narrow it further.
    Totals and page counts describe the filtered set.

    Raises:
        InvalidRequestError: If the sort field is not sortable.
    """
    logger.info(
        "Listing accounts for customer: %s (filters=%s, page=%d, size=%d, sort=%s %s)",
        customer_id,
        filters.model_dump(exclude_none=True),
        page_request.page,
        page_request.size,
        page_request.sort_by,
        page_request.sort_order.value,
    )
    result = await repo.search(customer_id, filters, page_request)
    return Page(
        items=result.items,
        total=result.total,
        page=page_request.page,
        size=page_request.size,
    )


async def update_account(
    repo: AccountRepository,
    account_id: str,
    customer_id: str,
    request: AccountUpdateRequest,
) -> Account:
    """
    Update an account's nickname and/or metadata.

    Fields left out of the request (or sent as null) are not changed. A
    supplied metadata map replaces the previous map entirely.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
        UnauthorizedAccessError: If the account belongs to someone else.
    """
    logger.info("Updating account: %s for customer: %s", account_id, customer_id)

    account = await _get_owned_account(repo, account_id, customer_id, for_update=True)

    if request.account_nickname is not None:
        account.account_nickname = request.account_nickname

    if request.metadata is not None:
        account.replace_metadata(request.metadata)

    _touch(account)
    await repo.save(account)

    logger.info("Account updated successfully: %s", account_id)
    return account


async def close_account(
    repo: AccountRepository,
    account_id: str,
    customer_id: str,
    reason: str,
) -> None:
    """
    Close an account. Closing is a status change; the row is kept.

    The balance must be exactly zero. Closing an account that is already
    CLOSED succeeds without writing anything. `reason` is only logged.

    Raises:
        AccountNotFoundError: If the account doesn't exist.
        UnauthorizedAccessError: If the account belongs to someone else.
        AccountStateConflictError: If the balance is not zero.
    """
    logger.info(
        "Closing account: %s for customer: %s with reason: %s",
        account_id, customer_id, reason,
    )

    account = await _get_owned_account(repo, account_id, customer_id, for_update=True)

    if account.status == AccountStatus.CLOSED:
        logger.info("Account already closed: %s", account_id)
        return

    if account.balance != 0:
        raise AccountStateConflictError("Cannot close account with non-zero balance")

    account.status = AccountStatus.CLOSED
    _touch(account)
    await repo.save(account)

    logger.info("Account closed successfully: %s", account_id)


async def get_active_accounts_count(repo: AccountRepository, customer_id: str) -> int:
    """Number of the customer's accounts currently ACTIVE."""
    return await repo.count_active_by_customer(customer_id)


async def account_exists(repo: AccountRepository, account_id: str) -> bool:
    return await repo.exists(account_id)
