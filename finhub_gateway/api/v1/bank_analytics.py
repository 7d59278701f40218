"""/v1/bank-analytics/* - metrics broken down by bank and by account"""

import time
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from finhub_gateway.api.dependencies import (
    get_analytics_service,
    get_bank_analytics_service,
    get_request_id,
    get_window_days,
    with_timeout,
)
from finhub_gateway.api.v1.schemas import (
    AccountAnalyticsResponse,
    BankComparisonResponse,
    BankFilters,
    BankInsightsResponse,
    BankListResponse,
    BankRankingResponse,
    MetricsSchema,
    SpendingPatternsResponse,
)
from finhub_gateway.domain.insights import spending_pattern_insights
from finhub_gateway.infrastructure.observability.logging import log_analytics
from finhub_gateway.infrastructure.observability.metrics import record_analytics
from finhub_gateway.services.analytics import AnalyticsService
from finhub_gateway.services.bank_analytics import BankAnalyticsService

router = APIRouter()


@router.get("/bank-analytics/insights/{user_id}", response_model=BankInsightsResponse)
async def get_bank_insights(
    request: Request,
    user_id: str,
    bank: Optional[str] = Query(None, description="Case-insensitive bank name fragment"),
    account: Optional[str] = Query(None, description="Exact account id"),
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Metrics restricted to one bank and/or account; unmatched filters give zeroed metrics"""
    start_time = time.time()
    metrics = await with_timeout(service.compute_metrics(user_id, days, bank_filter=bank, account_filter=account))

    record_analytics("bank_insights")
    log_analytics(
        get_request_id(request),
        user_id,
        "bank_insights",
        (time.time() - start_time) * 1000,
        bank_filter=bank,
        account_filter=account,
    )

    return BankInsightsResponse(
        metrics=MetricsSchema(**asdict(metrics)),
        filters=BankFilters(bank=bank, account=account, days=days),
    )


@router.get("/bank-analytics/comparison/{user_id}", response_model=BankComparisonResponse)
async def get_bank_comparison(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: BankAnalyticsService = Depends(get_bank_analytics_service),
):
    """Per-bank metrics, most spending first"""
    start_time = time.time()
    comparison = await with_timeout(service.bank_comparison(user_id, days))

    record_analytics("bank_comparison")
    log_analytics(
        get_request_id(request),
        user_id,
        "bank_comparison",
        (time.time() - start_time) * 1000,
        bank_count=comparison.summary.total_banks,
    )
    return BankComparisonResponse(**asdict(comparison))


@router.get("/bank-analytics/accounts/{user_id}", response_model=AccountAnalyticsResponse)
async def get_account_analytics(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: BankAnalyticsService = Depends(get_bank_analytics_service),
):
    """Per-account metrics, busiest account first"""
    start_time = time.time()
    analytics = await with_timeout(service.account_analytics(user_id, days))

    record_analytics("account_analytics")
    log_analytics(
        get_request_id(request),
        user_id,
        "account_analytics",
        (time.time() - start_time) * 1000,
        account_count=analytics.summary.total_accounts,
    )
    return AccountAnalyticsResponse(**asdict(analytics))


@router.get("/bank-analytics/performance/{user_id}", response_model=BankRankingResponse)
async def get_bank_performance(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: BankAnalyticsService = Depends(get_bank_analytics_service),
):
    """Banks ranked by performance score"""
    start_time = time.time()
    ranking = await with_timeout(service.bank_ranking(user_id, days))

    record_analytics("bank_ranking")
    log_analytics(
        get_request_id(request),
        user_id,
        "bank_ranking",
        (time.time() - start_time) * 1000,
        best_performing_bank=ranking.best_performing_bank,
    )
    return BankRankingResponse(**asdict(ranking))


@router.get("/bank-analytics/spending-patterns/{user_id}", response_model=SpendingPatternsResponse)
async def get_spending_patterns(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: BankAnalyticsService = Depends(get_bank_analytics_service),
):
    start_time = time.time()
    report = await with_timeout(service.spending_patterns(user_id, days))

    record_analytics("spending_patterns")
    log_analytics(get_request_id(request), user_id, "spending_patterns", (time.time() - start_time) * 1000)

    return SpendingPatternsResponse(
        patterns=[asdict(p) for p in report.patterns],
        highest_spending_bank=report.highest_spending_bank,
        top_category=report.top_category,
        insights=spending_pattern_insights(report),
    )


@router.get("/bank-analytics/banks/{user_id}", response_model=BankListResponse)
async def get_user_banks(
    request: Request,
    user_id: str,
    service: BankAnalyticsService = Depends(get_bank_analytics_service),
):
    """Distinct banks the user has connected"""
    start_time = time.time()
    banks = await with_timeout(service.list_banks(user_id))

    log_analytics(
        get_request_id(request), user_id, "list_banks", (time.time() - start_time) * 1000, bank_count=len(banks)
    )
    return BankListResponse(banks=banks, count=len(banks))
