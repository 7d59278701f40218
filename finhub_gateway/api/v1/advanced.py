"""/v1/advanced/* - health score, cashflow warning, savings and event spending"""

import time
from dataclasses import asdict

from fastapi import APIRouter, Depends, Request

from finhub_gateway.api.dependencies import get_analytics_service, get_request_id, get_window_days, with_timeout
from finhub_gateway.api.v1.schemas import (
    CashflowResponse,
    EventSpendingResponse,
    FullReportResponse,
    HealthScoreResponse,
    ReportSummary,
    SavingsGoalRequest,
    SavingsGoalResponse,
    SavingsSuggestionResponse,
)
from finhub_gateway.domain.insights import cashflow_warning, event_insight, goal_motivation, savings_motivation
from finhub_gateway.domain.models import CashflowRisk, EventSpendingReport, SavingsSuggestion
from finhub_gateway.infrastructure.observability.logging import log_analytics
from finhub_gateway.infrastructure.observability.metrics import record_analytics
from finhub_gateway.services.analytics import AnalyticsService

router = APIRouter()


def cashflow_response(risk: CashflowRisk) -> CashflowResponse:
    return CashflowResponse(**asdict(risk), warning=cashflow_warning(risk))


def savings_response(suggestion: SavingsSuggestion) -> SavingsSuggestionResponse:
    return SavingsSuggestionResponse(**asdict(suggestion), suggestion=savings_motivation(suggestion))


def events_response(report: EventSpendingReport, days: int) -> EventSpendingResponse:
    return EventSpendingResponse(**asdict(report), insight=event_insight(report, days))


@router.get("/advanced/health-score/{user_id}", response_model=HealthScoreResponse)
async def get_health_score(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Financial health score (0-100) with level and up to three tips"""
    start_time = time.time()
    health = await with_timeout(service.health_score(user_id, days))

    record_analytics("health_score")
    log_analytics(
        get_request_id(request), user_id, "health_score", (time.time() - start_time) * 1000, score=health.score
    )
    return HealthScoreResponse(**asdict(health))


@router.get("/advanced/cashflow-warning/{user_id}", response_model=CashflowResponse)
async def get_cashflow_warning(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """One-week balance projection and low-balance warning"""
    start_time = time.time()
    risk = await with_timeout(service.cashflow_risk(user_id, days))

    record_analytics("cashflow")
    log_analytics(
        get_request_id(request), user_id, "cashflow", (time.time() - start_time) * 1000, risk_level=risk.risk_level
    )
    return cashflow_response(risk)


@router.get("/advanced/savings-suggestion/{user_id}", response_model=SavingsSuggestionResponse)
async def get_savings_suggestion(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    start_time = time.time()
    suggestion = await with_timeout(service.savings_suggestion(user_id, days))

    record_analytics("savings_suggestion")
    log_analytics(get_request_id(request), user_id, "savings_suggestion", (time.time() - start_time) * 1000)
    return savings_response(suggestion)


@router.post("/advanced/savings-goal/{user_id}", response_model=SavingsGoalResponse)
async def post_savings_goal(
    request: Request,
    user_id: str,
    goal: SavingsGoalRequest,
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    Assess whether a savings target is reachable by its date.

    Returns 400 when the amount or date is missing, non-positive or in the past.
    """
    start_time = time.time()
    assessment = await with_timeout(service.savings_goal(user_id, goal.target_amount, goal.target_date, days))

    record_analytics("savings_goal")
    log_analytics(
        get_request_id(request),
        user_id,
        "savings_goal",
        (time.time() - start_time) * 1000,
        is_achievable=assessment.is_achievable,
    )
    return SavingsGoalResponse(**asdict(assessment), motivation=goal_motivation(assessment))


@router.get("/advanced/event-spending/{user_id}", response_model=EventSpendingResponse)
async def get_event_spending(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Days with heavy party/wedding/owambe spending"""
    start_time = time.time()
    report = await with_timeout(service.event_spending(user_id, days))

    record_analytics("event_spending")
    log_analytics(
        get_request_id(request), user_id, "event_spending", (time.time() - start_time) * 1000, event_count=report.count
    )
    return events_response(report, days)


@router.get("/advanced/full-report/{user_id}", response_model=FullReportResponse)
async def get_full_report(
    request: Request,
    user_id: str,
    days: int = Depends(get_window_days),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Health, cashflow, savings and events in one response"""
    start_time = time.time()
    report = await with_timeout(service.full_report(user_id, days))

    record_analytics("full_report")
    log_analytics(get_request_id(request), user_id, "full_report", (time.time() - start_time) * 1000)

    return FullReportResponse(
        health=HealthScoreResponse(**asdict(report.health)),
        cashflow=cashflow_response(report.cashflow),
        savings=savings_response(report.savings),
        events=events_response(report.events, days),
        summary=ReportSummary(
            total_income=report.metrics.total_income,
            total_spending=report.metrics.total_spending,
            savings_ratio=report.metrics.savings_ratio,
            average_balance=report.metrics.average_balance,
            credit_score=report.credit_score,
        ),
    )
