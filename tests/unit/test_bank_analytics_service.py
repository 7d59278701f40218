"""Unit tests for per-bank and per-account analytics"""

import asyncio
import pytest
from datetime import datetime

from conftest import FailingTransactionStore, InMemoryAccountStore, InMemoryTransactionStore
from finhub_gateway.domain.exceptions import UpstreamUnavailableError
from finhub_gateway.domain.models import Account
from finhub_gateway.services.analytics import AnalyticsService
from finhub_gateway.services.bank_analytics import BankAnalyticsService

NOW = datetime(2024, 6, 30, 12, 0, 0)


class SlowFirstAccountStore(InMemoryTransactionStore):
    """Answers queries touching acc_gt_1 last"""

    async def find(self, user_id, start, end, account_ids=None, txn_type=None):
        if account_ids and "acc_gt_1" in account_ids:
            await asyncio.sleep(0.05)
        return await super().find(user_id, start, end, account_ids=account_ids, txn_type=txn_type)


async def test_list_banks(bank_analytics_service):
    assert await bank_analytics_service.list_banks("user_1") == ["Access Bank", "GTBank"]


async def test_list_banks_unknown_user(bank_analytics_service):
    assert await bank_analytics_service.list_banks("nobody") == []


async def test_bank_comparison(bank_analytics_service):
    comparison = await bank_analytics_service.bank_comparison("user_1", 90, now=NOW)

    assert [b.bank_name for b in comparison.banks] == ["GTBank", "Access Bank"]
    gt, access = comparison.banks
    assert gt.account_count == 2
    assert gt.metrics.total_income == 900000
    assert gt.metrics.total_spending == 240000
    assert access.metrics.total_spending == 60000
    assert comparison.summary.most_active_bank == "GTBank"
    assert comparison.summary.total_balance == 200000


async def test_bank_comparison_ignores_completion_order(sample_transactions, accounts):
    service = BankAnalyticsService(
        AnalyticsService(SlowFirstAccountStore(sample_transactions), InMemoryAccountStore(accounts))
    )

    comparison = await service.bank_comparison("user_1", 90, now=NOW)

    assert [b.bank_name for b in comparison.banks] == ["GTBank", "Access Bank"]
    assert comparison.banks[0].metrics.total_spending == 240000


async def test_banks_with_overlapping_names_stay_separate(make_txn):
    accounts = [
        Account(account_id="a1", user_id="user_1", bank_name="GT", account_name="Old GT"),
        Account(account_id="a2", user_id="user_1", bank_name="GTBank", account_name="New GT"),
    ]
    transactions = [
        make_txn(1000, category="food", account_id="a1"),
        make_txn(4000, category="food", account_id="a2"),
    ]
    service = BankAnalyticsService(
        AnalyticsService(InMemoryTransactionStore(transactions), InMemoryAccountStore(accounts))
    )

    comparison = await service.bank_comparison("user_1", 30, now=NOW)

    spending = {b.bank_name: b.metrics.total_spending for b in comparison.banks}
    assert spending == {"GTBank": 4000, "GT": 1000}


async def test_bank_ranking(bank_analytics_service):
    ranking = await bank_analytics_service.bank_ranking("user_1", 90, now=NOW)

    assert [r.bank_name for r in ranking.rankings] == ["GTBank", "Access Bank"]
    assert [r.performance_score for r in ranking.rankings] == [81, 36]
    assert ranking.best_performing_bank == "GTBank"
    assert ranking.average_score == 59


async def test_spending_patterns(bank_analytics_service):
    report = await bank_analytics_service.spending_patterns("user_1", 90, now=NOW)

    assert report.highest_spending_bank == "GTBank"
    assert report.top_category == "food"
    access = report.patterns[1]
    assert access.top_spending_category == "entertainment"
    assert access.spending_percentages == {"utilities": 25, "entertainment": 75}


async def test_account_analytics(bank_analytics_service):
    analytics = await bank_analytics_service.account_analytics("user_1", 90, now=NOW)

    assert [a.account_id for a in analytics.accounts] == ["acc_gt_1", "acc_access_1", "acc_gt_2"]
    assert analytics.summary.most_active_account == "GT Savings"
    assert analytics.summary.total_transactions == 17
    assert analytics.accounts[2].metrics.transaction_count == 0


async def test_store_failure_propagates(accounts):
    service = BankAnalyticsService(AnalyticsService(FailingTransactionStore(), InMemoryAccountStore(accounts)))

    with pytest.raises(UpstreamUnavailableError):
        await service.bank_comparison("user_1", 90, now=NOW)
