"""Bank-vs-bank comparison, ranking and spending-pattern reports"""

from typing import Dict, List, Optional, Tuple

from finhub_gateway.domain.models import (
    Account,
    AccountAnalytics,
    AccountAnalyticsSummary,
    AccountMetrics,
    BankComparison,
    BankComparisonSummary,
    BankMetrics,
    BankPerformance,
    BankRanking,
    BankSpendingPattern,
    FinancialMetrics,
    SpendingPatternReport,
)
from finhub_gateway.utils.number_utils import round_half_up, safe_ratio


def group_accounts_by_bank(accounts: List[Account]) -> Dict[str, List[Account]]:
    """Accounts keyed by exact bank name, in first-seen order"""
    groups: Dict[str, List[Account]] = {}
    for account in accounts:
        groups.setdefault(account.bank_name, []).append(account)
    return groups


def top_category(spending_by_category: Dict[str, float]) -> Optional[Tuple[str, float]]:
    """Highest-spend category; equal amounts resolve to the lexically first name"""
    if not spending_by_category:
        return None
    category = min(spending_by_category, key=lambda c: (-spending_by_category[c], c))
    return category, spending_by_category[category]


def compare_banks(
    bank_groups: Dict[str, List[Account]],
    metrics_by_bank: Dict[str, FinancialMetrics],
) -> BankComparison:
    """Per-bank metrics, most spending first (ties by bank name)"""
    banks = [
        BankMetrics(
            bank_name=bank_name,
            account_count=len(accounts),
            accounts=accounts,
            metrics=metrics_by_bank[bank_name],
        )
        for bank_name, accounts in bank_groups.items()
    ]
    banks.sort(key=lambda b: (-b.metrics.total_spending, b.bank_name))

    all_accounts = [a for accounts in bank_groups.values() for a in accounts]

    return BankComparison(
        banks=banks,
        summary=BankComparisonSummary(
            total_banks=len(banks),
            total_accounts=len(all_accounts),
            most_active_bank=banks[0].bank_name if banks else None,
            total_balance=sum(a.balance for a in all_accounts),
        ),
    )


def summarize_accounts(accounts: List[Account], metrics_by_account: Dict[str, FinancialMetrics]) -> AccountAnalytics:
    """Per-account metrics, busiest account first (ties by account id)"""
    rows = [
        AccountMetrics(
            account_id=account.account_id,
            account_name=account.account_name,
            bank_name=account.bank_name,
            account_type=account.account_type,
            current_balance=account.balance,
            metrics=metrics_by_account[account.account_id],
        )
        for account in accounts
    ]
    rows.sort(key=lambda r: (-r.metrics.transaction_count, r.account_id))

    return AccountAnalytics(
        accounts=rows,
        summary=AccountAnalyticsSummary(
            total_accounts=len(rows),
            most_active_account=rows[0].account_name if rows else None,
            total_transactions=sum(r.metrics.transaction_count for r in rows),
        ),
    )


def calculate_performance_score(metrics: FinancialMetrics) -> int:
    """
    Bank performance score from 0 to 100.

    - Savings ratio:      up to 40 (one point per percent)
    - Activity:           up to 20 (one point per 10 transactions)
    - Balance stability:  up to 20 (min balance as a share of the average)
    - Low fees:           20 minus 2 per late fee, floored at 0
    """
    score = min(40, metrics.savings_ratio)
    score += min(20, metrics.transaction_count / 10)

    if metrics.average_balance > 0:
        score += min(20, metrics.min_balance / metrics.average_balance * 20)

    score += max(0, 20 - metrics.late_fees * 2)

    return round_half_up(score)


def rank_banks(comparison: BankComparison) -> BankRanking:
    rankings = [
        BankPerformance(
            bank_name=bank.bank_name,
            performance_score=calculate_performance_score(bank.metrics),
            savings_ratio=bank.metrics.savings_ratio,
            transaction_count=bank.metrics.transaction_count,
            average_balance=bank.metrics.average_balance,
            fees=bank.metrics.late_fees,
            account_count=bank.account_count,
        )
        for bank in comparison.banks
    ]
    rankings.sort(key=lambda r: (-r.performance_score, r.bank_name))

    average_score = (
        round_half_up(sum(r.performance_score for r in rankings) / len(rankings)) if rankings else 0
    )

    return BankRanking(
        rankings=rankings,
        best_performing_bank=rankings[0].bank_name if rankings else None,
        average_score=average_score,
    )


def spending_pattern(bank: BankMetrics) -> BankSpendingPattern:
    spending = bank.metrics.spending_by_category
    total = bank.metrics.total_spending

    percentages = {category: round_half_up(safe_ratio(amount, total) * 100) for category, amount in spending.items()}

    top = top_category(spending)
    top_name, top_amount = top if top else ("none", 0)

    return BankSpendingPattern(
        bank_name=bank.bank_name,
        total_spending=total,
        spending_by_category=spending,
        spending_percentages=percentages,
        top_spending_category=top_name,
        top_spending_amount=top_amount,
    )


def build_spending_patterns(comparison: BankComparison) -> SpendingPatternReport:
    """
    Category mix per bank plus two cross-bank facts.

    - highest_spending_bank: first bank (in comparison order) with the largest total
    - top_category: category with the largest spend summed across all banks
    """
    patterns = [spending_pattern(bank) for bank in comparison.banks]

    highest: Optional[BankSpendingPattern] = None
    for pattern in patterns:
        if highest is None or pattern.total_spending > highest.total_spending:
            highest = pattern

    combined: Dict[str, float] = {}
    for pattern in patterns:
        for category, amount in pattern.spending_by_category.items():
            combined[category] = combined.get(category, 0) + amount
    overall = top_category(combined)

    return SpendingPatternReport(
        patterns=patterns,
        highest_spending_bank=highest.bank_name if highest else None,
        highest_spending_amount=highest.total_spending if highest else 0,
        top_category=overall[0] if overall else None,
        top_category_amount=overall[1] if overall else 0,
    )
