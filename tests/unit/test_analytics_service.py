"""Unit tests for the analytics service over in-memory stores"""

import pytest
from datetime import date, datetime

from conftest import FailingTransactionStore, InMemoryAccountStore, InMemoryTransactionStore
from finhub_gateway.domain.classification import calculate_credit_score
from finhub_gateway.domain.exceptions import UpstreamUnavailableError, ValidationError
from finhub_gateway.domain.metrics import empty_metrics
from finhub_gateway.domain.models import PLANNER
from finhub_gateway.services.analytics import AnalyticsService

NOW = datetime(2024, 6, 30, 12, 0, 0)


async def test_compute_metrics_all_accounts(analytics_service):
    metrics = await analytics_service.compute_metrics("user_1", 90, now=NOW)

    assert metrics.total_income == 900000
    assert metrics.total_spending == 300000
    assert metrics.transaction_count == 17
    assert metrics.regular_deposits == 3
    assert metrics.consistency_score == 100


async def test_bank_filter_is_case_insensitive_substring(analytics_service):
    gt = await analytics_service.compute_metrics("user_1", 90, bank_filter="gt", now=NOW)
    access = await analytics_service.compute_metrics("user_1", 90, bank_filter="ACCESS", now=NOW)

    assert gt.total_spending == 240000
    assert gt.total_income == 900000
    assert access.total_spending == 60000
    assert access.total_income == 0


async def test_unmatched_bank_filter_gives_empty_metrics(analytics_service):
    metrics = await analytics_service.compute_metrics("user_1", 90, bank_filter="Zenith", now=NOW)

    assert metrics == empty_metrics()
    # Never reaches the transaction store
    assert analytics_service.transactions.calls == []


async def test_account_filter(analytics_service):
    metrics = await analytics_service.compute_metrics("user_1", 90, account_filter="acc_access_1", now=NOW)

    assert metrics.transaction_count == 2
    assert metrics.spending_by_category == {"utilities": 15000, "entertainment": 45000}


async def test_window_limits_transactions(analytics_service):
    metrics = await analytics_service.compute_metrics("user_1", 7, now=NOW)

    # Latest salary and one week of groceries
    assert metrics.total_income == 300000
    assert metrics.total_spending == 20000
    assert metrics.transaction_count == 2


async def test_unknown_user_gets_empty_metrics(analytics_service):
    metrics = await analytics_service.compute_metrics("nobody", 90, now=NOW)
    assert metrics == empty_metrics()


@pytest.mark.parametrize("user_id,days", [("", 90), ("   ", 90), ("user_1", 0), ("user_1", -5)])
async def test_invalid_request_rejected(analytics_service, user_id, days):
    with pytest.raises(ValidationError):
        await analytics_service.compute_metrics(user_id, days, now=NOW)


async def test_store_failure_propagates(accounts):
    service = AnalyticsService(FailingTransactionStore(), InMemoryAccountStore(accounts))

    with pytest.raises(UpstreamUnavailableError):
        await service.compute_metrics("user_1", 90, now=NOW)


async def test_financial_insights(analytics_service):
    insights = await analytics_service.financial_insights("user_1", 90, now=NOW)

    assert insights.personality == PLANNER
    assert insights.credit_score == calculate_credit_score(insights.metrics)
    assert 300 <= insights.credit_score <= 850
    assert insights.credit_score_factors.income_stability == 100


async def test_savings_goal_in_past_rejected_before_fetch(analytics_service):
    with pytest.raises(ValidationError):
        await analytics_service.savings_goal("user_1", 50000, date(2024, 1, 1), 90, now=NOW)

    assert analytics_service.transactions.calls == []


async def test_savings_goal(analytics_service):
    assessment = await analytics_service.savings_goal("user_1", 60000, date(2024, 9, 28), 90, now=NOW)

    assert assessment.days_remaining == 90
    assert assessment.monthly_required == 20000
    assert assessment.is_achievable is True


async def test_event_spending(analytics_service):
    report = await analytics_service.event_spending("user_1", 90, now=NOW)

    assert report.count == 1
    assert report.total_amount == 45000
    assert report.events[0].merchants == ["Owambe Hall"]


async def test_full_report_uses_one_fetch(analytics_service):
    report = await analytics_service.full_report("user_1", 90, now=NOW)

    assert len(analytics_service.transactions.calls) == 1
    assert report.health.level == "Excellent"
    assert report.cashflow.risk_level == "Low"
    assert report.events.count == 1
    assert report.credit_score == calculate_credit_score(report.metrics)
    assert report.savings.breakdown.fixed_expenses == {"Power Company": 5000}


async def test_cashflow_and_suggestion(analytics_service):
    risk = await analytics_service.cashflow_risk("user_1", 90, now=NOW)
    suggestion = await analytics_service.savings_suggestion("user_1", 90, now=NOW)

    assert risk.upcoming_bills[0].next_due_date == date(2024, 7, 7)
    # (300000 monthly income - 5000 utilities) / 2
    assert suggestion.monthly_savings == 147500


async def test_transactions_only_for_requested_user(make_txn, accounts):
    store = InMemoryTransactionStore(
        [make_txn(1000, category="food"), make_txn(9999, category="food", user_id="user_2")]
    )
    service = AnalyticsService(store, InMemoryAccountStore(accounts))

    metrics = await service.compute_metrics("user_1", 30, now=NOW)

    assert metrics.total_spending == 1000


async def test_window_start_is_inclusive(make_txn, accounts):
    store = InMemoryTransactionStore([make_txn(700, category="food", days_ago=14)])
    service = AnalyticsService(store, InMemoryAccountStore(accounts))

    metrics = await service.compute_metrics("user_1", 14, now=NOW)

    assert metrics.total_spending == 700
