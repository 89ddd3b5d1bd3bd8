"""
Tests for the demonstration data loader.
"""

from accounts_api.repositories.account_repository import AccountRepository
from accounts_api.schemas.account import AccountFilters
from accounts_api.schemas.common import PageRequest
from accounts_api.sample_data import SAMPLE_ACCOUNTS, load_sample_accounts
from accounts_api.services import account_service


class TestSampleData:

    async def test_loads_into_empty_store(self, db_session):
        created = await load_sample_accounts(db_session)
        await db_session.commit()

        repo = AccountRepository(db_session)
        assert created == len(SAMPLE_ACCOUNTS) == 6
        assert await repo.count() == 6
        assert await account_service.get_active_accounts_count(repo, "customer-001") == 2
        assert await account_service.get_active_accounts_count(repo, "customer-005") == 1

    async def test_skipped_when_accounts_exist(self, db_session):
        await load_sample_accounts(db_session)
        await db_session.commit()

        assert await load_sample_accounts(db_session) == 0
        assert await AccountRepository(db_session).count() == 6

    async def test_sample_accounts_keep_branch_and_metadata(self, db_session):
        await load_sample_accounts(db_session)

        repo = AccountRepository(db_session)
        result = await repo.search(
            "customer-004",
            AccountFilters(),
            PageRequest(),
        )
        cd = result.items[0]
        assert cd.branch_id == "MIA-004"
        assert cd.metadata_map["maturityDate"] == "2030-12-12"
        assert str(cd.balance) == "15000.00"
