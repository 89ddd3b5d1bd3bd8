"""
AccountMetadata model — one key/value pair attached to an account.

Metadata is a side table keyed by (account_id, metadata_key). The whole map
is replaced on update (see Account.replace_metadata), never merged.
"""

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounts_api.database import Base


class AccountMetadata(Base):
    __tablename__ = "account_metadata"

    account_id: Mapped[str] = mapped_column(
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
    )

    key: Mapped[str] = mapped_column("metadata_key", String(100), primary_key=True)

    value: Mapped[str] = mapped_column("metadata_value", String(500), nullable=False)

    account: Mapped["Account"] = relationship(back_populates="metadata_entries")
