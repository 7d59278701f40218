"""GET /v1/analytics/* - metrics, money personality, credit score and history"""

import time
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.orm import Session

from finhub_gateway.api.dependencies import get_analytics_service, get_request_id, get_window_days, with_timeout
from finhub_gateway.api.v1.schemas import (
    CreditScoreFactorsSchema,
    HistoryItem,
    HistoryResponse,
    InsightsResponse,
    MetricsSchema,
    SpendingResponse,
    TransactionListResponse,
    TransactionSchema,
)
from finhub_gateway.config import settings
from finhub_gateway.domain.insights import credit_story, emotional_insight
from finhub_gateway.infrastructure.database.repositories import InsightRepository
from finhub_gateway.infrastructure.database.session import get_db
from finhub_gateway.infrastructure.observability.logging import log_analytics
from finhub_gateway.infrastructure.observability.metrics import record_analytics, record_insight
from finhub_gateway.services.analytics import AnalyticsService

router = APIRouter()


@router.get("/analytics/insights/{user_id}", response_model=InsightsResponse)
async def get_insights(
    request: Request,
    user_id: str = Path(..., min_length=1),
    bank: Optional[str] = Query(None, description="Case-insensitive bank name fragment"),
    days: int = Depends(get_window_days),
    db: Session = Depends(get_db),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    Compute metrics, personality and credit score, and store a snapshot.

    Flow:
    1. Compute metrics for the window (optionally one bank)
    2. Classify personality and score credit
    3. Format the emotional insight and credit story
    4. Persist the snapshot for the history endpoint
    """
    start_time = time.time()
    request_id = get_request_id(request)

    insights = await with_timeout(service.financial_insights(user_id, days, bank_filter=bank))

    emotional = emotional_insight(insights.personality, insights.metrics)
    story = credit_story(insights.metrics, insights.personality)

    record = InsightRepository(db).create_insight(
        user_id=user_id,
        window_days=days,
        insights=insights,
        emotional_insight=emotional,
        bank_filter=bank,
    )
    db.commit()

    duration_ms = (time.time() - start_time) * 1000
    record_analytics("insights")
    record_insight(insights.personality, insights.credit_score)
    log_analytics(
        request_id,
        user_id,
        "insights",
        duration_ms,
        personality=insights.personality,
        credit_score=insights.credit_score,
    )

    return InsightsResponse(
        insight_id=str(record.id),
        metrics=MetricsSchema(**asdict(insights.metrics)),
        personality=insights.personality,
        credit_score=insights.credit_score,
        credit_score_factors=CreditScoreFactorsSchema(**asdict(insights.credit_score_factors)),
        emotional_insight=emotional,
        credit_story=story,
    )


@router.get("/analytics/history/{user_id}", response_model=HistoryResponse)
def get_insight_history(
    user_id: str,
    limit: int = Query(settings.history_limit, gt=0, le=100),
    db: Session = Depends(get_db),
):
    """Recent insight snapshots, newest first"""
    records = InsightRepository(db).get_insights_by_user(user_id, limit=limit)

    items = [
        HistoryItem(
            insight_id=str(r.id),
            window_days=r.window_days,
            bank_filter=r.bank_filter,
            personality=r.money_personality,
            credit_score=r.credit_score,
            metrics=MetricsSchema(**r.metrics),
            generated_at=r.generated_at.isoformat(),
        )
        for r in records
    ]

    return HistoryResponse(user_id=user_id, insights=items)


@router.get("/analytics/spending/{user_id}", response_model=SpendingResponse)
async def get_spending(
    request: Request,
    user_id: str,
    bank: Optional[str] = Query(None),
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Category breakdown of spending for the window"""
    start_time = time.time()
    metrics = await with_timeout(service.compute_metrics(user_id, days, bank_filter=bank))

    record_analytics("spending")
    log_analytics(get_request_id(request), user_id, "spending", (time.time() - start_time) * 1000)

    return SpendingResponse(
        spending_by_category=metrics.spending_by_category,
        total_spending=metrics.total_spending,
        total_income=metrics.total_income,
    )


@router.get("/analytics/transactions/{user_id}", response_model=TransactionListResponse)
async def get_transactions(
    user_id: str,
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Raw transactions in the window, newest first"""
    transactions = await with_timeout(service.fetch_transactions(user_id, days))
    transactions = sorted(transactions, key=lambda t: t.date, reverse=True)

    return TransactionListResponse(
        count=len(transactions),
        transactions=[TransactionSchema(**asdict(t)) for t in transactions],
    )
