"""Template-based user-facing text for analytics results.

Kept apart from the numeric engine: every function here takes finished
results and only formats them.
"""

from typing import List, Optional

from finhub_gateway.domain.models import (
    BALANCER,
    MINIMALIST,
    PLANNER,
    SPENDER,
    CashflowRisk,
    EventSpendingReport,
    FinancialMetrics,
    SavingsGoalAssessment,
    SavingsSuggestion,
    SpendingPatternReport,
)

CURRENCY_SYMBOL = "₦"


def _money(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{amount:,.0f}"


def emotional_insight(personality: str, metrics: FinancialMetrics, user_name: str = "Friend") -> str:
    ratio = f"{metrics.savings_ratio:.1f}%"
    templates = {
        PLANNER: (
            f"Great job, {user_name}! Your disciplined approach to saving {ratio} of your income "
            "shows excellent financial planning. Keep up the consistent habits!"
        ),
        SPENDER: (
            f"Hey {user_name}, I notice you enjoy life's pleasures! While spending can bring joy, "
            "consider setting aside a small amount each month for future goals. Even 5% can make a difference."
        ),
        MINIMALIST: (
            f"{user_name}, your mindful spending approach is admirable! You're living below your means, "
            "which gives you great financial flexibility. Consider investing some of your surplus for long-term growth."
        ),
        BALANCER: (
            f"{user_name}, you've found a nice balance between enjoying today and planning for tomorrow. "
            f"Your {ratio} savings rate shows you're on a solid path!"
        ),
    }
    return templates.get(
        personality,
        f"{user_name}, you're developing your unique financial style. "
        "Keep tracking your progress and celebrating small wins along the way!",
    )


_CREDIT_STORIES = {
    PLANNER: (
        "Your consistent saving habits and regular income patterns demonstrate strong financial discipline. "
        "Lenders see you as a reliable borrower who manages money responsibly."
    ),
    SPENDER: (
        "While you enjoy spending, working on building a more consistent savings pattern could significantly "
        "improve your creditworthiness. Small changes can lead to big improvements."
    ),
    MINIMALIST: (
        "Your low spending relative to income shows excellent self-control. This conservative approach to "
        "money management is viewed very favorably by credit agencies."
    ),
    BALANCER: (
        "You've struck a good balance between spending and saving. This measured approach to finances "
        "demonstrates the kind of stability that builds strong credit over time."
    ),
}


def credit_story(metrics: FinancialMetrics, personality: str) -> str:
    story = _CREDIT_STORIES.get(personality, "You're building your financial story one transaction at a time.")

    if metrics.overdrafts > 0:
        story += " Focus on avoiding overdrafts to strengthen your credit profile."
    if metrics.consistency_score > 80:
        story += " Your consistent income pattern is a strong positive factor."

    return story


def cashflow_warning(risk: CashflowRisk) -> Optional[str]:
    if risk.risk_level == "High":
        days = risk.days_until_low_balance or 7
        return f"Your balance might run low in {days} days. Consider reducing spending or increasing income."
    elif risk.risk_level == "Medium":
        return "Your balance is getting low. Keep an eye on your spending this week."
    return None


def savings_motivation(suggestion: SavingsSuggestion) -> str:
    amount = _money(suggestion.monthly_savings)
    ratio = suggestion.current_savings_ratio

    if ratio < 0:
        return f"Challenge yourself: Save {amount} monthly. Your future self will thank you!"
    elif ratio < 10:
        return f"Your target: {amount} per month. You're currently saving {ratio:.1f}% - let's improve!"
    elif ratio < 20:
        return f"Consistency is key! {amount} monthly savings will secure your future."
    return f"Save {amount} monthly and watch your money grow! Small steps, big results."


def goal_motivation(assessment: SavingsGoalAssessment) -> str:
    amount = _money(assessment.target_amount)
    days = assessment.days_remaining
    if assessment.is_achievable:
        return f"Your {amount} goal is achievable in {days} days! Stay focused and consistent."
    return (
        f"Your {amount} goal in {days} days is ambitious. "
        "Consider extending the timeline or reducing expenses."
    )


def event_insight(report: EventSpendingReport, window_days: int) -> str:
    if report.count == 0:
        return "You've been staying home lately! Your wallet appreciates the break from owambes."

    total = _money(report.total_amount)
    average = _money(report.total_amount / report.count)

    if report.count == 1:
        return f"You attended 1 event and spent {total}. Remember to budget for fun!"
    elif report.count <= 3:
        return f"Your social calendar is busy! {total} on {report.count} events. That's {average} per owambe!"
    return (
        f"{report.count} parties in {window_days} days? You're definitely the life of the party! "
        f"Total damage: {total}."
    )


def spending_pattern_insights(report: SpendingPatternReport) -> List[str]:
    insights: List[str] = []

    if report.highest_spending_bank is None:
        return insights

    insights.append(
        f"{report.highest_spending_bank} accounts show the highest spending activity "
        f"with {_money(report.highest_spending_amount)}."
    )

    if report.top_category is not None:
        insights.append(
            f"Across all banks, you spend most on {report.top_category} ({_money(report.top_category_amount)})."
        )

    return insights
