"""
SQLAlchemy ORM models package.

All models are imported here so that:
  1. Base.metadata knows every table before create_all runs
  2. Other modules can import from accounts_api.models directly
"""

from accounts_api.models.account_metadata import AccountMetadata  # noqa: F401
from accounts_api.models.account import Account, AccountStatus, AccountType  # noqa: F401
