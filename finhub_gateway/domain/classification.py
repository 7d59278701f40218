"""Money personality and credit score - pure functions of FinancialMetrics"""

from finhub_gateway.domain.models import (
    BALANCER,
    MINIMALIST,
    PLANNER,
    SPENDER,
    CreditScoreFactors,
    FinancialMetrics,
)
from finhub_gateway.utils.number_utils import round_half_up, safe_ratio

CREDIT_SCORE_MIN = 300
CREDIT_SCORE_MAX = 850


def entertainment_share(metrics: FinancialMetrics) -> float:
    """Entertainment spend as a percent of total spending (0 with no spending)"""
    entertainment = metrics.spending_by_category.get("entertainment", 0)
    return safe_ratio(entertainment, metrics.total_spending) * 100


def detect_personality(metrics: FinancialMetrics) -> str:
    """
    Classify spending behaviour; first matching rule wins.

    1. Planner:    saves > 20% of income with consistency > 70
    2. Spender:    entertainment > 20% of spending, or more than 2 overdrafts
    3. Minimalist: spends under 60% of income
    4. Balancer:   everyone else
    """
    if metrics.savings_ratio > 20 and metrics.consistency_score > 70:
        return PLANNER
    elif entertainment_share(metrics) > 20 or metrics.overdrafts > 2:
        return SPENDER
    elif metrics.total_spending < metrics.total_income * 0.6:
        return MINIMALIST
    else:
        return BALANCER


def calculate_credit_score(metrics: FinancialMetrics) -> int:
    """
    Rule-based credit score in [300, 850].

    Components (added to a 300 base):
    - Savings behaviour:   up to +200 (4 points per savings-ratio percent)
    - Consistency:         up to +150 (1.5 x consistency score)
    - Overdrafts:          up to -100 (25 per overdraft)
    - Late fees:           up to -50  (10 per fee)
    - Balance stability:   up to +100 (average balance vs a month of income)
    - Income stability:    up to +100 (consistency score again)
    """
    score = CREDIT_SCORE_MIN

    score += min(200, metrics.savings_ratio * 4)
    score += min(150, metrics.consistency_score * 1.5)
    score -= min(100, metrics.overdrafts * 25)
    score -= min(50, metrics.late_fees * 10)

    if metrics.total_income > 0:
        balance_ratio = metrics.average_balance / (metrics.total_income / 12)
        score += min(100, balance_ratio * 50)

    score += min(100, metrics.consistency_score)

    return min(CREDIT_SCORE_MAX, max(CREDIT_SCORE_MIN, round_half_up(score)))


def credit_score_factors(metrics: FinancialMetrics) -> CreditScoreFactors:
    deposits = metrics.regular_deposits + metrics.irregular_deposits
    return CreditScoreFactors(
        savings_behavior=metrics.savings_ratio,
        spending_consistency=metrics.consistency_score,
        overdraft_risk=max(0, 100 - metrics.overdrafts * 20),
        income_stability=safe_ratio(metrics.regular_deposits, deposits) * 100,
    )
