"""
Account repository — the data-access contract for accounts.

The service layer depends only on the methods here; nothing above this
module builds SQL. The repository does not make authorization decisions
except one: `search` takes the customer id as a required argument and
always applies it, so a listing can never be issued without customer
scoping. The remaining filters are optional and combined with AND.

Sorting:
  Callers name API fields ("createdAt", "balance", ...). They are mapped to
  columns through SORTABLE_FIELDS; unknown names are rejected. Account id is
  always appended as an ascending tie-breaker so that rows with equal sort
  keys keep a fixed order across pages.
"""

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from accounts_api.exceptions import InvalidRequestError
from accounts_api.models.account import Account, AccountStatus
from accounts_api.schemas.account import AccountFilters
from accounts_api.schemas.common import PageRequest, SearchResult, SortOrder

SORTABLE_FIELDS = {
    "accountId": Account.id,
    "accountType": Account.account_type,
    "status": Account.status,
    "currency": Account.currency,
    "balance": Account.balance,
    "accountNickname": Account.account_nickname,
    "createdAt": Account.created_at,
    "updatedAt": Account.updated_at,
    "lastActivityAt": Account.last_activity_at,
}


def resolve_sort_column(sort_by: str):
    """Map an API sort field to its column, or raise InvalidRequestError."""
    try:
        return SORTABLE_FIELDS[sort_by]
    except KeyError:
        allowed = ", ".join(SORTABLE_FIELDS)
        raise InvalidRequestError(
            f"Unsupported sort field '{sort_by}'. Allowed: {allowed}",
            violations=[{"field": "sortBy", "message": f"Must be one of: {allowed}"}],
        ) from None


class AccountRepository:
    """Async repository over the accounts table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, account: Account) -> Account:
        """Stage a new account and flush it so constraint violations surface here."""
        self.session.add(account)
        await self.session.flush()
        return account

    async def save(self, account: Account) -> Account:
        """Flush pending changes on an already-persistent account."""
        await self.session.flush()
        return account

    async def get_by_id(self, account_id: str) -> Account | None:
        result = await self.session.execute(
            select(Account).where(Account.id == account_id)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, account_id: str) -> Account | None:
        """
        Get an account with a row-level lock (SELECT ... FOR UPDATE).

        Used by read-then-write operations (update, close) so that two
        requests against the same account cannot interleave. The lock is
        held until the request's transaction ends. Dialects without row
        locks (SQLite) ignore the clause and rely on database-level locking.
        """
        result = await self.session.execute(
            select(Account).where(Account.id == account_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def exists(self, account_id: str) -> bool:
        result = await self.session.execute(
            select(func.count()).select_from(Account).where(Account.id == account_id)
        )
        return result.scalar_one() > 0

    async def exists_by_account_number(self, account_number: str) -> bool:
        result = await self.session.execute(
            select(func.count())
            .select_from(Account)
            .where(Account.account_number == account_number)
        )
        return result.scalar_one() > 0

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Account))
        return result.scalar_one()

    async def count_active_by_customer(self, customer_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Account)
            .where(Account.customer_id == customer_id)
            .where(Account.status == AccountStatus.ACTIVE)
        )
        return result.scalar_one()

    async def search(
        self,
        customer_id: str,
        filters: AccountFilters,
        page_request: PageRequest,
    ) -> SearchResult:
        """
        Find one page of a customer's accounts matching the filters.

        Args:
            customer_id: Owner to scope to. Always applied.
            filters: Optional account type / status / currency constraints.
            page_request: Page index, size, sort field and direction.

        Returns:
            SearchResult with the page's accounts and the total number of
            matching accounts. A page past the end yields no items but the
            same total.

        Raises:
            InvalidRequestError: If the sort field is not sortable.
        """
        sort_column = resolve_sort_column(page_request.sort_by)

        conditions = [Account.customer_id == customer_id]
        if filters.account_type is not None:
            conditions.append(Account.account_type == filters.account_type)
        if filters.status is not None:
            conditions.append(Account.status == filters.status)
        if filters.currency is not None:
            conditions.append(Account.currency == filters.currency)

        total_result = await self.session.execute(
            select(func.count()).select_from(Account).where(*conditions)
        )
        total = total_result.scalar_one()

        if page_request.sort_order == SortOrder.DESC:
            ordering = [sort_column.desc()]
        else:
            ordering = [sort_column.asc()]
        if sort_column is not Account.id:
            ordering.append(Account.id.asc())

        result = await self.session.execute(
            select(Account)
            .where(*conditions)
            .order_by(*ordering)
            .offset(page_request.offset)
            .limit(page_request.size)
        )
        return SearchResult(items=list(result.scalars().all()), total=total)
