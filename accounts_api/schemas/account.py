"""
Pydantic schemas for Account endpoints.

The wire format is camelCase (accountId, customerDetails, ...) while the
Python attributes stay snake_case; CamelModel bridges the two with an alias
generator. Both spellings are accepted on input.

Validation is declarative: every constraint on every field is checked and
all failures are reported together, one entry per violated constraint.

Account numbers only ever leave the service masked (see mask_account_number).
"""

import re
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from accounts_api.models.account import Account, AccountStatus, AccountType
from accounts_api.schemas.common import Page

CURRENCY_PATTERN = re.compile(r"[A-Z]{3}")
EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
PHONE_PATTERN = re.compile(r"\+?[1-9]\d{1,14}")
NICKNAME_PATTERN = re.compile(r"[a-zA-Z0-9\s_.-]+")

MASK_TOKEN = "****"

METADATA_KEY_MAX_LENGTH = 100
METADATA_VALUE_MAX_LENGTH = 500


def mask_account_number(account_number: str | None) -> str:
    """
    Keep the last 4 characters, replace the rest with a fixed token.

    Numbers shorter than 4 characters are masked entirely.

    Example:
        >>> mask_account_number("1234567890")
        '****7890'
        >>> mask_account_number("123")
        '****'
    """
    if account_number is None or len(account_number) < 4:
        return MASK_TOKEN
    return MASK_TOKEN + account_number[-4:]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _validate_nickname(value: str | None) -> str | None:
    if value is not None and not NICKNAME_PATTERN.fullmatch(value):
        raise ValueError("Account nickname contains invalid characters")
    return value


def _validate_metadata(value: dict[str, str] | None) -> dict[str, str] | None:
    if value is None:
        return value
    for key, item in value.items():
        if not key or len(key) > METADATA_KEY_MAX_LENGTH:
            raise ValueError(
                f"Metadata keys must be 1-{METADATA_KEY_MAX_LENGTH} characters"
            )
        if len(item) > METADATA_VALUE_MAX_LENGTH:
            raise ValueError(
                f"Metadata value for '{key}' must not exceed "
                f"{METADATA_VALUE_MAX_LENGTH} characters"
            )
    return value


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class CustomerDetails(CamelModel):
    """Contact snapshot captured when the account is opened."""
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str | None = None
    phone_number: str | None = None
    address: str | None = None

    @field_validator("first_name")
    @classmethod
    def first_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("First name is required")
        return value

    @field_validator("last_name")
    @classmethod
    def last_name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Last name is required")
        return value

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str | None) -> str | None:
        if value is not None and not EMAIL_PATTERN.fullmatch(value):
            raise ValueError("Invalid email format")
        return value

    @field_validator("phone_number")
    @classmethod
    def phone_format(cls, value: str | None) -> str | None:
        if value is not None and not PHONE_PATTERN.fullmatch(value):
            raise ValueError("Invalid phone number format")
        return value


class AccountCreateRequest(CamelModel):
    """Request body for POST /accounts."""
    account_type: AccountType
    currency: str
    initial_deposit: Decimal = Field(ge=0, max_digits=19, decimal_places=2)
    customer_details: CustomerDetails
    account_nickname: str | None = Field(None, max_length=50)
    branch_id: str | None = Field(None, min_length=1, max_length=10)
    metadata: dict[str, str] | None = None

    @field_validator("currency")
    @classmethod
    def currency_code(cls, value: str) -> str:
        if not CURRENCY_PATTERN.fullmatch(value):
            raise ValueError("Currency must be a valid ISO 4217 code")
        return value

    check_nickname = field_validator("account_nickname")(_validate_nickname)
    check_metadata = field_validator("metadata")(_validate_metadata)


class AccountUpdateRequest(CamelModel):
    """
    Request body for PUT /accounts/{account_id}.

    Omitted (or null) fields are left untouched. A metadata map, even an
    empty one, replaces the stored metadata entirely.
    """
    account_nickname: str | None = Field(None, max_length=50)
    metadata: dict[str, str] | None = None

    check_nickname = field_validator("account_nickname")(_validate_nickname)
    check_metadata = field_validator("metadata")(_validate_metadata)


class AccountFilters(BaseModel):
    """Optional, conjunctive list filters. None means no constraint."""
    account_type: AccountType | None = None
    status: AccountStatus | None = None
    currency: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class MonetaryAmount(CamelModel):
    amount: Decimal
    currency: str


class AccountResponse(CamelModel):
    """Public representation of an account. The account number is masked."""
    account_id: str
    account_number: str
    account_type: AccountType
    status: AccountStatus
    currency: str
    balance: MonetaryAmount
    available_balance: MonetaryAmount
    account_nickname: str | None
    customer_id: str
    branch_id: str | None
    created_at: datetime
    updated_at: datetime
    last_activity_at: datetime | None
    metadata: dict[str, str]

    @field_validator("created_at", "updated_at", "last_activity_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        """Stored timestamps are UTC; SQLite hands them back without an offset."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            account_id=account.id,
            account_number=mask_account_number(account.account_number),
            account_type=account.account_type,
            status=account.status,
            currency=account.currency,
            balance=MonetaryAmount(amount=account.balance, currency=account.currency),
            available_balance=MonetaryAmount(
                amount=account.available_balance, currency=account.currency
            ),
            account_nickname=account.account_nickname,
            customer_id=account.customer_id,
            branch_id=account.branch_id,
            created_at=account.created_at,
            updated_at=account.updated_at,
            last_activity_at=account.last_activity_at,
            metadata=account.metadata_map,
        )


class AccountListResponse(CamelModel):
    """Response for GET /accounts: one page plus navigation metadata."""
    accounts: list[AccountResponse]
    total_elements: int
    total_pages: int
    current_page: int
    size: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_page(cls, page: Page) -> "AccountListResponse":
        return cls(
            accounts=[AccountResponse.from_account(a) for a in page.items],
            total_elements=page.total,
            total_pages=page.total_pages,
            current_page=page.page,
            size=page.size,
            has_next=page.has_next,
            has_previous=page.has_previous,
        )


class HealthResponse(BaseModel):
    status: str
    message: str
    version: str
