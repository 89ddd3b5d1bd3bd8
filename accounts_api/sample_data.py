"""
Sample data loader — demonstration accounts for local runs.

When LOAD_SAMPLE_DATA is enabled, the application lifespan calls
load_sample_accounts() at startup. If the accounts table is empty, six
accounts for five customers are opened through the normal create operation
(so they get real account numbers and timestamps). If any account already
exists, nothing is written.

    customer-001  John Smith       Checking  1,500.00  + Savings 2,500.00
    customer-002  Jane Doe         Savings   5,000.00
    customer-003  Robert Johnson   Money Market 10,000.00
    customer-004  Maria Garcia     Certificate of Deposit 15,000.00
    customer-005  David Wilson     Investment 25,000.00

!! NOT FOR PRODUCTION !!
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from accounts_api.repositories.account_repository import AccountRepository
from accounts_api.schemas.account import AccountCreateRequest
from accounts_api.services import account_service

logger = logging.getLogger(__name__)

JOHN = {
    "firstName": "John",
    "lastName": "Smith",
    "email": "john.smith@email.com",
    "phoneNumber": "+1234567890",
    "address": "123 Main Street, New York, NY 10001",
}

SAMPLE_ACCOUNTS = [
    ("customer-001", {
        "accountType": "CHECKING",
        "currency": "USD",
        "initialDeposit": "1500.00",
        "customerDetails": JOHN,
        "accountNickname": "Primary Checking",
        "branchId": "NYC-001",
        "metadata": {"preferredBranch": "NYC-001", "accountPurpose": "primary"},
    }),
    ("customer-002", {
        "accountType": "SAVINGS",
        "currency": "USD",
        "initialDeposit": "5000.00",
        "customerDetails": {
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane.doe@email.com",
            "phoneNumber": "+1987654321",
            "address": "456 Oak Avenue, Los Angeles, CA 90210",
        },
        "accountNickname": "Emergency Fund",
        "branchId": "LA-002",
        "metadata": {
            "preferredBranch": "LA-002",
            "accountPurpose": "savings",
            "interestRate": "2.5",
        },
    }),
    ("customer-003", {
        "accountType": "MONEY_MARKET",
        "currency": "USD",
        "initialDeposit": "10000.00",
        "customerDetails": {
            "firstName": "Robert",
            "lastName": "Johnson",
            "email": "bob.johnson@email.com",
            "phoneNumber": "+1555666777",
            "address": "789 Pine Street, Chicago, IL 60601",
        },
        "accountNickname": "Investment Fund",
        "branchId": "CHI-003",
        "metadata": {
            "preferredBranch": "CHI-003",
            "accountPurpose": "investment",
            "riskLevel": "moderate",
        },
    }),
    ("customer-001", {
        "accountType": "SAVINGS",
        "currency": "USD",
        "initialDeposit": "2500.00",
        "customerDetails": JOHN,
        "accountNickname": "Vacation Fund",
        "branchId": "NYC-001",
        "metadata": {
            "preferredBranch": "NYC-001",
            "accountPurpose": "vacation",
            "targetAmount": "5000",
        },
    }),
    ("customer-004", {
        "accountType": "CERTIFICATE_DEPOSIT",
        "currency": "USD",
        "initialDeposit": "15000.00",
        "customerDetails": {
            "firstName": "Maria",
            "lastName": "Garcia",
            "email": "maria.garcia@email.com",
            "phoneNumber": "+1444555666",
            "address": "321 Elm Street, Miami, FL 33101",
        },
        "accountNickname": "5-Year CD",
        "branchId": "MIA-004",
        "metadata": {
            "preferredBranch": "MIA-004",
            "accountPurpose": "long-term-savings",
            "maturityDate": "2030-12-12",
            "interestRate": "4.2",
        },
    }),
    ("customer-005", {
        "accountType": "INVESTMENT",
        "currency": "USD",
        "initialDeposit": "25000.00",
        "customerDetails": {
            "firstName": "David",
            "lastName": "Wilson",
            "email": "david.wilson@email.com",
            "phoneNumber": "+1777888999",
            "address": "555 Market Street, San Francisco, CA 94105",
        },
        "accountNickname": "Retirement Portfolio",
        "branchId": "SF-005",
        "metadata": {
            "preferredBranch": "SF-005",
            "accountPurpose": "retirement",
            "portfolioType": "aggressive",
        },
    }),
]


async def load_sample_accounts(session: AsyncSession) -> int:
    """
    Seed the sample accounts if the store is empty.

    The caller owns the transaction (commit/rollback).

    Returns:
        The number of accounts created (0 when data already exists).
    """
    repo = AccountRepository(session)
    if await repo.count() > 0:
        logger.info("Database already contains accounts; skipping sample data")
        return 0

    for customer_id, payload in SAMPLE_ACCOUNTS:
        request = AccountCreateRequest.model_validate(payload)
        await account_service.create_account(repo, request, customer_id)

    logger.info("Sample data created: %d accounts", len(SAMPLE_ACCOUNTS))
    return len(SAMPLE_ACCOUNTS)
