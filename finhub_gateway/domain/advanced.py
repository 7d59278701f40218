"""Health score, cashflow, savings and event-spending analytics over FinancialMetrics"""

import math
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from finhub_gateway.domain.exceptions import ValidationError
from finhub_gateway.domain.models import (
    DEBIT,
    CashflowRisk,
    EventSpending,
    EventSpendingReport,
    FinancialMetrics,
    HealthScore,
    SavingsBreakdown,
    SavingsGoalAssessment,
    SavingsSuggestion,
    Transaction,
    UpcomingBill,
)
from finhub_gateway.utils.date_utils import days_until
from finhub_gateway.utils.number_utils import monthly_factor, round_half_up

MAX_HEALTH_INSIGHTS = 3

# Utilities spend stands in for recurring fixed bills
FIXED_EXPENSE_CATEGORY = "utilities"
FIXED_EXPENSE_PAYEE = "Power Company"
BILL_LEAD_DAYS = 7

EVENT_KEYWORDS = (
    "party",
    "wedding",
    "owambe",
    "venue",
    "catering",
    "dj",
    "nightclub",
    "celebration",
    "event",
    "hall",
    "reception",
    "ceremony",
    "festive",
)
EVENT_CATEGORY = "entertainment"
EVENT_MIN_DAILY_AMOUNT = 5000


def _savings_points(savings_ratio: float) -> int:
    if savings_ratio >= 20:
        return 40
    elif savings_ratio >= 15:
        return 30
    elif savings_ratio >= 10:
        return 20
    elif savings_ratio >= 5:
        return 10
    return 0


def _balance_points(average_balance: float, total_income: float) -> int:
    if average_balance > total_income * 0.5:
        return 25
    elif average_balance > total_income * 0.3:
        return 20
    elif average_balance > total_income * 0.1:
        return 15
    elif average_balance > 0:
        return 10
    return 0


def _regularity_points(regular_deposits: int) -> int:
    if regular_deposits >= 3:
        return 10
    elif regular_deposits >= 2:
        return 7
    elif regular_deposits >= 1:
        return 5
    return 0


def health_level(score: int) -> str:
    if score >= 80:
        return "Excellent"
    elif score >= 60:
        return "Good"
    elif score >= 40:
        return "Fair"
    return "Needs Work"


def health_insights(metrics: FinancialMetrics) -> List[str]:
    """Up to three improvement tips, or one positive note when none apply"""
    insights = []

    if metrics.savings_ratio < 20:
        insights.append(
            f"Try to save at least 20% of your income. You're currently saving {metrics.savings_ratio:.1f}%."
        )

    if metrics.overdrafts > 0:
        insights.append(
            f"Avoid overdrafts by setting up balance alerts. You had {metrics.overdrafts} overdrafts recently."
        )

    if metrics.consistency_score < 70:
        insights.append("Build more consistent income patterns for better financial stability.")

    if not insights:
        insights.append("Great job! Keep maintaining your excellent financial habits.")

    return insights[:MAX_HEALTH_INSIGHTS]


def calculate_health_score(metrics: FinancialMetrics) -> HealthScore:
    """
    Financial health score from 0 to 100.

    Points:
    - Savings ratio tiers:     40/30/20/10/0 at >=20/15/10/5/<5 %
    - Consistency:             up to 25 (a quarter of the consistency score)
    - Overdrafts:              up to -20 (5 each)
    - Late fees:               up to -10 (2 each)
    - Average balance vs income: 25/20/15/10/0
    - Salary deposits:         10/7/5/0 for 3+/2/1/0
    """
    score = _savings_points(metrics.savings_ratio)
    score += min(25, metrics.consistency_score * 0.25)
    score -= min(20, metrics.overdrafts * 5)
    score -= min(10, metrics.late_fees * 2)
    score += _balance_points(metrics.average_balance, metrics.total_income)
    score += _regularity_points(metrics.regular_deposits)

    final_score = max(0, min(100, round_half_up(score)))

    return HealthScore(
        score=final_score,
        level=health_level(final_score),
        insights=health_insights(metrics),
        savings_ratio=metrics.savings_ratio,
        consistency_score=metrics.consistency_score,
        average_balance=metrics.average_balance,
        overdrafts=metrics.overdrafts,
        late_fees=metrics.late_fees,
    )


def monthly_fixed_expenses(metrics: FinancialMetrics, window_days: int) -> Dict[str, int]:
    """Utilities spend prorated to a month, keyed by payee"""
    utilities = metrics.spending_by_category.get(FIXED_EXPENSE_CATEGORY, 0)
    if utilities <= 0:
        return {}
    return {FIXED_EXPENSE_PAYEE: round_half_up(utilities * monthly_factor(window_days))}


def upcoming_bills(metrics: FinancialMetrics, window_days: int, now: datetime) -> List[UpcomingBill]:
    due = (now + timedelta(days=BILL_LEAD_DAYS)).date()
    return [
        UpcomingBill(merchant=payee, amount=amount, next_due_date=due)
        for payee, amount in monthly_fixed_expenses(metrics, window_days).items()
    ]


def predict_cashflow_risk(metrics: FinancialMetrics, window_days: int, now: datetime) -> CashflowRisk:
    """
    Project the balance one week ahead and grade the risk of running low.

    Low:    projected balance above 15% of monthly income
    Medium: above 10%
    High:   otherwise; days_until_low_balance estimates when the 10% floor is hit
    """
    monthly_income = metrics.total_income * monthly_factor(window_days)
    monthly_spending = metrics.total_spending * monthly_factor(window_days)

    weekly_spending = monthly_spending / 4
    predicted_balance = metrics.average_balance - weekly_spending

    if predicted_balance > monthly_income * 0.15:
        risk_level = "Low"
    elif predicted_balance > monthly_income * 0.10:
        risk_level = "Medium"
    else:
        risk_level = "High"

    days_until_low_balance: Optional[int] = None
    if predicted_balance < monthly_income * 0.10:
        daily_spending = monthly_spending / 30
        if daily_spending > 0:
            headroom = metrics.average_balance - monthly_income * 0.10
            days_until_low_balance = max(1, math.floor(headroom / daily_spending))
        else:
            # Already under the floor with nothing draining it further
            days_until_low_balance = 1

    return CashflowRisk(
        risk_level=risk_level,
        predicted_balance=round_half_up(predicted_balance),
        days_until_low_balance=days_until_low_balance,
        upcoming_bills=upcoming_bills(metrics, window_days, now),
    )


def suggest_savings(metrics: FinancialMetrics, window_days: int) -> SavingsSuggestion:
    """Save half of what monthly income leaves after fixed expenses"""
    monthly_income = metrics.total_income * monthly_factor(window_days)

    fixed_expenses = monthly_fixed_expenses(metrics, window_days)
    available_after_fixed = monthly_income - sum(fixed_expenses.values())

    monthly_savings = round_half_up(available_after_fixed * 0.5)
    weekly_savings = round_half_up(monthly_savings / 4)
    daily_savings = round_half_up(monthly_savings / 30)

    return SavingsSuggestion(
        daily_savings=daily_savings,
        weekly_savings=weekly_savings,
        monthly_savings=monthly_savings,
        current_savings_ratio=metrics.savings_ratio,
        breakdown=SavingsBreakdown(
            fixed_expenses=fixed_expenses,
            savings_target=monthly_savings,
            remaining_for_flexible=round_half_up(available_after_fixed - monthly_savings),
        ),
    )


def validate_savings_goal(
    target_amount: Optional[float],
    target_date: Optional[date],
    now: datetime,
) -> int:
    """Reject unusable goals; returns the days remaining until target_date"""
    if target_amount is None or target_date is None:
        raise ValidationError("target_amount and target_date are required")
    if not math.isfinite(target_amount) or target_amount <= 0:
        raise ValidationError("target_amount must be a positive finite number")

    days_remaining = days_until(target_date, now)
    if days_remaining <= 0:
        raise ValidationError("target_date must be in the future")
    return days_remaining


def assess_savings_goal(
    metrics: FinancialMetrics,
    target_amount: Optional[float],
    target_date: Optional[date],
    window_days: int,
    now: datetime,
) -> SavingsGoalAssessment:
    """
    Contributions needed to reach target_amount by target_date.

    A goal is achievable when the monthly contribution fits within 80% of the
    current monthly surplus (income minus spending).

    Raises:
        ValidationError: missing or non-positive amount, missing or past date
    """
    days_remaining = validate_savings_goal(target_amount, target_date, now)

    monthly_income = metrics.total_income * monthly_factor(window_days)
    monthly_spending = metrics.total_spending * monthly_factor(window_days)
    available_for_savings = monthly_income - monthly_spending

    daily_required = target_amount / days_remaining
    weekly_required = daily_required * 7
    monthly_required = daily_required * 30

    return SavingsGoalAssessment(
        target_amount=target_amount,
        target_date=target_date,
        days_remaining=days_remaining,
        daily_required=round_half_up(daily_required),
        weekly_required=round_half_up(weekly_required),
        monthly_required=round_half_up(monthly_required),
        available_for_savings=available_for_savings,
        is_achievable=monthly_required <= available_for_savings * 0.8,
    )


def is_event_transaction(txn: Transaction) -> bool:
    """Entertainment debits, or any debit whose merchant/description names an event"""
    if txn.category == EVENT_CATEGORY:
        return True
    text = f"{txn.description or ''} {txn.merchant or ''}".lower()
    return any(keyword in text for keyword in EVENT_KEYWORDS)


def detect_event_spending(transactions: List[Transaction]) -> EventSpendingReport:
    """
    Find days with heavy event spending (parties, weddings, owambes...).

    Flagged debits are grouped by calendar date, newest first; a day counts as
    an event only when its flagged total exceeds 5000.
    """
    flagged = sorted(
        (t for t in transactions if t.type == DEBIT and is_event_transaction(t)),
        key=lambda t: t.date,
        reverse=True,
    )

    grouped: Dict[date, EventSpending] = {}
    for txn in flagged:
        day = txn.date.date()
        if day not in grouped:
            grouped[day] = EventSpending(date=txn.date, amount=0, transaction_count=0, merchants=[])
        event = grouped[day]
        event.amount += txn.amount
        event.transaction_count += 1
        if txn.merchant and txn.merchant not in event.merchants:
            event.merchants.append(txn.merchant)

    events = [e for e in grouped.values() if e.amount > EVENT_MIN_DAILY_AMOUNT]

    return EventSpendingReport(
        events=events,
        total_amount=sum(e.amount for e in events),
        count=len(events),
    )
