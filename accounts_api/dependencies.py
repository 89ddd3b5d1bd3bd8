"""
FastAPI dependencies for customer identification and data access.

Authentication is performed upstream (API gateway). By the time a request
reaches this service, the gateway has asserted the caller's identity in the
X-Customer-ID header, and every account endpoint declares get_customer_id as
a parameter. A missing or empty header fails request validation (400) before
the route handler runs.

  get_db (session)
      └── get_account_repository (session -> AccountRepository)
  get_customer_id (X-Customer-ID header -> str)
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from accounts_api.database import get_db
from accounts_api.models.account import CUSTOMER_ID_MAX_LENGTH
from accounts_api.repositories.account_repository import AccountRepository


async def get_customer_id(
    customer_id: str = Header(
        ...,
        alias="X-Customer-ID",
        min_length=1,
        max_length=CUSTOMER_ID_MAX_LENGTH,
        description="Customer asserted by the upstream gateway",
    ),
) -> str:
    """Return the requesting customer's id from the X-Customer-ID header."""
    return customer_id


async def get_account_repository(
    db: AsyncSession = Depends(get_db),
) -> AccountRepository:
    """Provide an AccountRepository bound to the request's session."""
    return AccountRepository(db)
