"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

CREDIT = "credit"
DEBIT = "debit"

CATEGORIES = frozenset(
    {
        "salary",
        "transfer_in",
        "transfer_out",
        "food",
        "transport",
        "utilities",
        "entertainment",
        "shopping",
        "healthcare",
        "education",
        "savings",
        "investment",
        "fees",
        "overdraft",
        "other",
    }
)

ACCOUNT_TYPES = frozenset({"savings", "current", "fixed_deposit", "credit"})

PLANNER = "Planner"
SPENDER = "Spender"
MINIMALIST = "Minimalist"
BALANCER = "Balancer"


@dataclass(frozen=True)
class Transaction:
    """Single account transaction as stored after sync"""

    user_id: str
    account_id: str
    amount: float
    type: str  # "credit" or "debit"
    category: str
    date: datetime
    balance: Optional[float] = None  # Account balance snapshot after the transaction
    merchant: Optional[str] = None
    description: Optional[str] = None
    transaction_id: Optional[str] = None


@dataclass(frozen=True)
class Account:
    """Connected bank account"""

    account_id: str
    user_id: str
    bank_name: str
    account_name: str
    account_type: str = "savings"
    balance: float = 0.0
    currency: str = "NGN"


@dataclass
class BalanceStats:
    """Average/min/max over balance snapshots"""

    average: float
    minimum: float
    maximum: float


@dataclass
class FinancialMetrics:
    """Metrics derived from a user's transactions in one window"""

    total_income: float
    total_spending: float
    savings_amount: float
    savings_ratio: float  # Percent of income kept; 0 when there is no income
    spending_by_category: Dict[str, float]
    average_balance: float
    min_balance: float
    max_balance: float
    overdrafts: int
    late_fees: int
    regular_deposits: int
    irregular_deposits: int
    consistency_score: float
    transaction_count: int


@dataclass
class CreditScoreFactors:
    """Per-factor view of the credit score inputs, stored with insight snapshots"""

    savings_behavior: float
    spending_consistency: float
    overdraft_risk: float
    income_stability: float


@dataclass
class FinancialInsights:
    """Metrics plus their classification"""

    metrics: FinancialMetrics
    personality: str
    credit_score: int
    credit_score_factors: CreditScoreFactors


@dataclass
class HealthScore:
    """0-100 financial health score with the inputs that drove it"""

    score: int
    level: str
    insights: List[str]
    savings_ratio: float
    consistency_score: float
    average_balance: float
    overdrafts: int
    late_fees: int


@dataclass
class UpcomingBill:
    merchant: str
    amount: int
    next_due_date: date


@dataclass
class CashflowRisk:
    """Short-term balance projection"""

    risk_level: str  # "Low", "Medium" or "High"
    predicted_balance: int
    days_until_low_balance: Optional[int]
    upcoming_bills: List[UpcomingBill] = field(default_factory=list)


@dataclass
class SavingsBreakdown:
    fixed_expenses: Dict[str, int]
    savings_target: int
    remaining_for_flexible: int


@dataclass
class SavingsSuggestion:
    daily_savings: int
    weekly_savings: int
    monthly_savings: int
    current_savings_ratio: float
    breakdown: SavingsBreakdown


@dataclass
class SavingsGoalAssessment:
    """Required contributions for a savings target and whether income covers them"""

    target_amount: float
    target_date: date
    days_remaining: int
    daily_required: int
    weekly_required: int
    monthly_required: int
    available_for_savings: float
    is_achievable: bool


@dataclass
class EventSpending:
    """Event-related debits on a single calendar day"""

    date: datetime
    amount: float
    transaction_count: int
    merchants: List[str]


@dataclass
class EventSpendingReport:
    events: List[EventSpending]
    total_amount: float
    count: int


@dataclass
class BankMetrics:
    bank_name: str
    account_count: int
    accounts: List[Account]
    metrics: FinancialMetrics


@dataclass
class BankComparisonSummary:
    total_banks: int
    total_accounts: int
    most_active_bank: Optional[str]
    total_balance: float


@dataclass
class BankComparison:
    banks: List[BankMetrics]
    summary: BankComparisonSummary


@dataclass
class AccountMetrics:
    account_id: str
    account_name: str
    bank_name: str
    account_type: str
    current_balance: float
    metrics: FinancialMetrics


@dataclass
class AccountAnalyticsSummary:
    total_accounts: int
    most_active_account: Optional[str]
    total_transactions: int


@dataclass
class AccountAnalytics:
    accounts: List[AccountMetrics]
    summary: AccountAnalyticsSummary


@dataclass
class BankPerformance:
    """One bank's 0-100 performance score"""

    bank_name: str
    performance_score: int
    savings_ratio: float
    transaction_count: int
    average_balance: float
    fees: int
    account_count: int


@dataclass
class BankRanking:
    rankings: List[BankPerformance]
    best_performing_bank: Optional[str]
    average_score: int


@dataclass
class BankSpendingPattern:
    bank_name: str
    total_spending: float
    spending_by_category: Dict[str, float]
    spending_percentages: Dict[str, int]
    top_spending_category: str  # "none" when the bank has no spending
    top_spending_amount: float


@dataclass
class SpendingPatternReport:
    """Per-bank category mix plus the two cross-bank facts"""

    patterns: List[BankSpendingPattern]
    highest_spending_bank: Optional[str]
    highest_spending_amount: float
    top_category: Optional[str]
    top_category_amount: float


@dataclass
class FullReport:
    health: HealthScore
    cashflow: CashflowRisk
    savings: SavingsSuggestion
    events: EventSpendingReport
    metrics: FinancialMetrics
    credit_score: int
