"""Dependency injection for FastAPI endpoints"""

import asyncio
from typing import Awaitable, TypeVar

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from finhub_gateway.config import settings
from finhub_gateway.infrastructure.database.repositories import AccountRepository, TransactionRepository
from finhub_gateway.infrastructure.database.session import get_db
from finhub_gateway.services.analytics import AnalyticsService
from finhub_gateway.services.bank_analytics import BankAnalyticsService

T = TypeVar("T")


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_window_days(
    days: int = Query(
        settings.default_window_days,
        gt=0,
        le=settings.max_window_days,
        description="Trailing window in days",
    ),
) -> int:
    return days


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Provide an analytics service bound to this request's session"""
    return AnalyticsService(TransactionRepository(db), AccountRepository(db))


def get_bank_analytics_service(
    analytics: AnalyticsService = Depends(get_analytics_service),
) -> BankAnalyticsService:
    return BankAnalyticsService(analytics)


async def with_timeout(awaitable: Awaitable[T]) -> T:
    """Bound a service call by the configured request timeout (raises TimeoutError)"""
    return await asyncio.wait_for(awaitable, timeout=settings.request_timeout_seconds)
