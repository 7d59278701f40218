"""Financial metrics engine - reduces a transaction window to FinancialMetrics"""

from statistics import pvariance
from typing import Dict, Iterable, List, Sequence

from finhub_gateway.domain.models import (
    CREDIT,
    DEBIT,
    BalanceStats,
    FinancialMetrics,
    Transaction,
)

SALARY = "salary"
OVERDRAFT = "overdraft"
FEES = "fees"

DAYS_PER_PAY_PERIOD = 30  # One salary deposit expected per 30 days


def sum_by_type(transactions: Iterable[Transaction], txn_type: str) -> float:
    """Sum of amounts for transactions of the given type (single currency)"""
    return sum(t.amount for t in transactions if t.type == txn_type)


def group_spending_by_category(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Debit totals per category; categories with no debits are left out"""
    spending: Dict[str, float] = {}
    for txn in transactions:
        if txn.type == DEBIT:
            spending[txn.category] = spending.get(txn.category, 0) + txn.amount
    return spending


def balance_stats(transactions: Iterable[Transaction]) -> BalanceStats:
    """Average/min/max over transactions carrying a balance snapshot"""
    balances = [t.balance for t in transactions if t.balance is not None]
    if not balances:
        return BalanceStats(average=0, minimum=0, maximum=0)

    return BalanceStats(
        average=sum(balances) / len(balances),
        minimum=min(balances),
        maximum=max(balances),
    )


def count_by_category(transactions: Iterable[Transaction], category: str) -> int:
    return sum(1 for t in transactions if t.category == category)


def calculate_consistency_score(salary_deposits: Sequence[Transaction], window_days: int) -> float:
    """
    Score 0-100 for how regular salary deposits are.

    Blends two halves:
    - timing: 100 minus the population variance of the deposits' day-of-month
    - frequency: actual deposits vs one expected per 30 days, capped at 100

    Deposits spread over the month easily push variance past 100; timing then
    floors at 0. The heuristic is intentionally crude.
    """
    if not salary_deposits:
        return 0

    expected_deposits = window_days // DAYS_PER_PAY_PERIOD
    actual_deposits = len(salary_deposits)

    days_of_month = [t.date.day for t in salary_deposits]
    timing_score = max(0, 100 - pvariance(days_of_month))

    frequency_score = min(100, actual_deposits / max(1, expected_deposits) * 100)

    return (timing_score + frequency_score) / 2


def empty_metrics() -> FinancialMetrics:
    """Canonical result for a window with no data (or no matching accounts)"""
    return FinancialMetrics(
        total_income=0,
        total_spending=0,
        savings_amount=0,
        savings_ratio=0,
        spending_by_category={},
        average_balance=0,
        min_balance=0,
        max_balance=0,
        overdrafts=0,
        late_fees=0,
        regular_deposits=0,
        irregular_deposits=0,
        consistency_score=0,
        transaction_count=0,
    )


def build_metrics(transactions: List[Transaction], window_days: int) -> FinancialMetrics:
    """
    Derive every FinancialMetrics field from an already-filtered window.

    Requirements:
    - Income/spending are credit/debit sums; savings ratio is 0 without income
    - Category map covers debits only, so its values sum to total spending
    - Overdrafts and late fees count the "overdraft" and "fees" categories
    - Regular deposits are salary credits; every other credit is irregular
    """
    if not transactions:
        return empty_metrics()

    income = sum_by_type(transactions, CREDIT)
    spending = sum_by_type(transactions, DEBIT)
    savings = income - spending
    savings_ratio = savings / income * 100 if income > 0 else 0

    stats = balance_stats(transactions)

    salary_deposits = [t for t in transactions if t.type == CREDIT and t.category == SALARY]
    irregular_deposits = sum(1 for t in transactions if t.type == CREDIT and t.category != SALARY)

    return FinancialMetrics(
        total_income=income,
        total_spending=spending,
        savings_amount=savings,
        savings_ratio=savings_ratio,
        spending_by_category=group_spending_by_category(transactions),
        average_balance=stats.average,
        min_balance=stats.minimum,
        max_balance=stats.maximum,
        overdrafts=count_by_category(transactions, OVERDRAFT),
        late_fees=count_by_category(transactions, FEES),
        regular_deposits=len(salary_deposits),
        irregular_deposits=irregular_deposits,
        consistency_score=calculate_consistency_score(salary_deposits, window_days),
        transaction_count=len(transactions),
    )
