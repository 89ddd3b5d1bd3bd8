"""
Account model — a deposit-type account owned by a customer.

Each account has:
  - An opaque UUID identifier and a unique, never-reused account number
  - A type (CHECKING, SAVINGS, ...) and a lifecycle status
  - A balance and an available balance in its currency
  - A snapshot of the customer's contact details taken at creation time
  - Free-form string metadata, stored in the account_metadata side table

Ownership:
  `customer_id` is set once at creation and is the only authorization anchor.
  Every read, update and close compares it with the requesting customer.

Balance:
  Amounts are stored as NUMERIC(19, 2). There are no holds in this service,
  so `available_balance` always mirrors `balance`. A CHECK constraint keeps
  both non-negative at the database level.

Lifecycle:
  A bare Account() starts as PENDING_APPROVAL (not yet funded). The create
  operation sets ACTIVE explicitly. Closing is a status change to CLOSED;
  rows are never deleted.
"""

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, DateTime, Numeric, Enum, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounts_api.database import Base
from accounts_api.models.account_metadata import AccountMetadata


class AccountType(str, enum.Enum):
    """Closed set of account products. Immutable after creation."""
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    MONEY_MARKET = "MONEY_MARKET"
    CERTIFICATE_DEPOSIT = "CERTIFICATE_DEPOSIT"
    LOAN = "LOAN"
    CREDIT_CARD = "CREDIT_CARD"
    INVESTMENT = "INVESTMENT"


class AccountStatus(str, enum.Enum):
    """
    Lifecycle states.

    Only ACTIVE (creation) and CLOSED (close) are entered by this service.
    The others are valid values that external systems may set directly.
    CLOSED is terminal.
    """
    PENDING_APPROVAL = "PENDING_APPROVAL"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    FROZEN = "FROZEN"
    SUSPENDED = "SUSPENDED"
    CLOSED = "CLOSED"


# Opaque id asserted by the gateway; sized for the header and the column alike
CUSTOMER_ID_MAX_LENGTH = 255


class Account(Base):
    __tablename__ = "accounts"

    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_accounts_non_negative_balance"),
        CheckConstraint(
            "available_balance >= 0",
            name="ck_accounts_non_negative_available_balance",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    account_number: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
    )

    account_type: Mapped[AccountType] = mapped_column(
        Enum(AccountType, native_enum=False, length=30),
        nullable=False,
        index=True,
    )

    status: Mapped[AccountStatus] = mapped_column(
        Enum(AccountStatus, native_enum=False, length=30),
        nullable=False,
        index=True,
        default=AccountStatus.PENDING_APPROVAL,
    )

    # ISO 4217 currency code
    currency: Mapped[str] = mapped_column(String(3), nullable=False)

    balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 2),
        nullable=False,
        default=Decimal("0.00"),
    )
    available_balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    account_nickname: Mapped[str | None] = mapped_column(String(50))

    customer_id: Mapped[str] = mapped_column(
        String(CUSTOMER_ID_MAX_LENGTH),
        nullable=False,
        index=True,
    )

    branch_id: Mapped[str | None] = mapped_column(String(10))

    # Contact snapshot, not kept in sync with any customer registry
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str | None] = mapped_column(String(100))
    phone_number: Mapped[str | None] = mapped_column(String(20))
    address: Mapped[str | None] = mapped_column(String(255))

    # Set by the service layer's touch hook, not by ORM callbacks
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_activity_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # --- Relationships ---
    # selectin: async sessions cannot lazy-load, so entries come with the account
    metadata_entries: Mapped[list[AccountMetadata]] = relationship(
        back_populates="account",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=AccountMetadata.key,
    )

    @property
    def metadata_map(self) -> dict[str, str]:
        """Metadata entries as a plain dict."""
        return {entry.key: entry.value for entry in self.metadata_entries}

    def replace_metadata(self, values: dict[str, str]) -> None:
        """
        Replace all metadata with `values`.

        Dropped keys are deleted, kept keys are updated in place and new keys
        are inserted, so the composite primary key never sees a duplicate.
        """
        existing = {entry.key: entry for entry in self.metadata_entries}
        for key, entry in existing.items():
            if key not in values:
                self.metadata_entries.remove(entry)
        for key, value in values.items():
            if key in existing:
                existing[key].value = value
            else:
                self.metadata_entries.append(AccountMetadata(key=key, value=value))
