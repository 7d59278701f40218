"""Analytics service - fetches a user's window from the stores and runs the domain engine"""

import logging
from datetime import date, datetime
from typing import List, Optional

from finhub_gateway.domain.advanced import (
    assess_savings_goal,
    calculate_health_score,
    detect_event_spending,
    predict_cashflow_risk,
    suggest_savings,
    validate_savings_goal,
)
from finhub_gateway.domain.classification import (
    calculate_credit_score,
    credit_score_factors,
    detect_personality,
)
from finhub_gateway.domain.exceptions import ValidationError
from finhub_gateway.domain.metrics import build_metrics, empty_metrics
from finhub_gateway.domain.models import (
    DEBIT,
    CashflowRisk,
    EventSpendingReport,
    FinancialInsights,
    FinancialMetrics,
    FullReport,
    HealthScore,
    SavingsGoalAssessment,
    SavingsSuggestion,
    Transaction,
)
from finhub_gateway.domain.stores import AccountStore, TransactionStore
from finhub_gateway.utils.date_utils import get_window, utc_now


def validate_request(user_id: str, window_days: int) -> None:
    """Reject a blank user or a non-positive window before touching the stores"""
    if not user_id or not user_id.strip():
        raise ValidationError("user_id is required")
    if window_days is None or window_days <= 0:
        raise ValidationError("window_days must be a positive number of days")


class AnalyticsService:
    """Computes metrics and derived analytics for one user at a time"""

    def __init__(self, transaction_store: TransactionStore, account_store: AccountStore):
        self.transactions = transaction_store
        self.accounts = account_store

    async def resolve_account_ids(
        self,
        user_id: str,
        bank_filter: Optional[str] = None,
        account_filter: Optional[str] = None,
    ) -> List[str]:
        """Account ids matching a bank-name substring and/or an exact account id"""
        accounts = await self.accounts.find(user_id, bank_name=bank_filter, account_id=account_filter)
        return [a.account_id for a in accounts]

    async def fetch_transactions(
        self,
        user_id: str,
        window_days: int,
        bank_filter: Optional[str] = None,
        account_filter: Optional[str] = None,
        txn_type: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Transaction]:
        """Transactions in the trailing window, narrowed by bank/account when asked"""
        validate_request(user_id, window_days)
        start, end = get_window(window_days, now)

        account_ids = None
        if bank_filter or account_filter:
            account_ids = await self.resolve_account_ids(user_id, bank_filter, account_filter)
            if not account_ids:
                logging.debug(
                    "No accounts match filter",
                    extra={"user_id": user_id, "bank_filter": bank_filter, "account_filter": account_filter},
                )
                return []

        return await self.transactions.find(user_id, start, end, account_ids=account_ids, txn_type=txn_type)

    async def compute_metrics(
        self,
        user_id: str,
        window_days: int,
        bank_filter: Optional[str] = None,
        account_filter: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FinancialMetrics:
        """
        FinancialMetrics for a user's trailing window.

        A filter that matches no accounts yields empty metrics, not an error.

        Raises:
            ValidationError: blank user or non-positive window
            UpstreamUnavailableError: store query failed
        """
        transactions = await self.fetch_transactions(
            user_id, window_days, bank_filter=bank_filter, account_filter=account_filter, now=now
        )
        if not transactions:
            return empty_metrics()

        metrics = build_metrics(transactions, window_days)
        logging.debug(
            "Metrics computed",
            extra={"user_id": user_id, "window_days": window_days, "transaction_count": metrics.transaction_count},
        )
        return metrics

    async def metrics_for_accounts(
        self,
        user_id: str,
        window_days: int,
        account_ids: List[str],
        now: Optional[datetime] = None,
    ) -> FinancialMetrics:
        """FinancialMetrics over an already-resolved set of account ids"""
        validate_request(user_id, window_days)
        if not account_ids:
            return empty_metrics()

        start, end = get_window(window_days, now)
        transactions = await self.transactions.find(user_id, start, end, account_ids=account_ids)
        return build_metrics(transactions, window_days)

    async def financial_insights(
        self,
        user_id: str,
        window_days: int,
        bank_filter: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> FinancialInsights:
        metrics = await self.compute_metrics(user_id, window_days, bank_filter=bank_filter, now=now)
        return FinancialInsights(
            metrics=metrics,
            personality=detect_personality(metrics),
            credit_score=calculate_credit_score(metrics),
            credit_score_factors=credit_score_factors(metrics),
        )

    async def health_score(self, user_id: str, window_days: int, now: Optional[datetime] = None) -> HealthScore:
        metrics = await self.compute_metrics(user_id, window_days, now=now)
        return calculate_health_score(metrics)

    async def cashflow_risk(self, user_id: str, window_days: int, now: Optional[datetime] = None) -> CashflowRisk:
        now = now or utc_now()
        metrics = await self.compute_metrics(user_id, window_days, now=now)
        return predict_cashflow_risk(metrics, window_days, now)

    async def savings_suggestion(
        self, user_id: str, window_days: int, now: Optional[datetime] = None
    ) -> SavingsSuggestion:
        metrics = await self.compute_metrics(user_id, window_days, now=now)
        return suggest_savings(metrics, window_days)

    async def savings_goal(
        self,
        user_id: str,
        target_amount: Optional[float],
        target_date: Optional[date],
        window_days: int,
        now: Optional[datetime] = None,
    ) -> SavingsGoalAssessment:
        """
        Feasibility of saving target_amount by target_date.

        Raises:
            ValidationError: missing/non-positive amount or a date not in the future
        """
        now = now or utc_now()
        validate_request(user_id, window_days)
        validate_savings_goal(target_amount, target_date, now)

        metrics = await self.compute_metrics(user_id, window_days, now=now)
        return assess_savings_goal(metrics, target_amount, target_date, window_days, now)

    async def event_spending(
        self, user_id: str, window_days: int, now: Optional[datetime] = None
    ) -> EventSpendingReport:
        debits = await self.fetch_transactions(user_id, window_days, txn_type=DEBIT, now=now)
        return detect_event_spending(debits)

    async def full_report(self, user_id: str, window_days: int, now: Optional[datetime] = None) -> FullReport:
        """Health, cashflow, savings and events from a single fetch of the window"""
        now = now or utc_now()
        transactions = await self.fetch_transactions(user_id, window_days, now=now)
        metrics = build_metrics(transactions, window_days)

        return FullReport(
            health=calculate_health_score(metrics),
            cashflow=predict_cashflow_risk(metrics, window_days, now),
            savings=suggest_savings(metrics, window_days),
            events=detect_event_spending(transactions),
            metrics=metrics,
            credit_score=calculate_credit_score(metrics),
        )
