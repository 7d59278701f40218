"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Dict, List, Literal, Optional

TransactionType = Literal["credit", "debit"]
Category = Literal[
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
]
AccountType = Literal["savings", "current", "fixed_deposit", "credit"]


# Ingestion


class AccountCreate(BaseModel):
    """Request body for POST /v1/accounts"""

    account_id: str = Field(..., min_length=1, max_length=64)
    user_id: str = Field(..., min_length=1)
    bank_name: str = Field(..., min_length=1)
    account_name: str = Field(..., min_length=1)
    account_type: AccountType = "savings"
    balance: float = 0.0
    currency: str = Field("NGN", min_length=3, max_length=3)


class AccountSchema(BaseModel):
    account_id: str
    user_id: str
    bank_name: str
    account_name: str
    account_type: str
    balance: float
    currency: str


class TransactionCreate(BaseModel):
    """Single transaction in a POST /v1/transactions batch"""

    user_id: str = Field(..., min_length=1)
    account_id: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, description="Non-negative amount; direction comes from type")
    type: TransactionType
    category: Category = "other"
    date: datetime
    balance: Optional[float] = None
    merchant: Optional[str] = None
    description: Optional[str] = None


class TransactionBatch(BaseModel):
    transactions: List[TransactionCreate] = Field(..., min_length=1)


class TransactionBatchResponse(BaseModel):
    created: int


class TransactionSchema(BaseModel):
    transaction_id: Optional[str] = None
    user_id: str
    account_id: str
    amount: float
    type: str
    category: str
    date: datetime
    balance: Optional[float] = None
    merchant: Optional[str] = None
    description: Optional[str] = None


class TransactionListResponse(BaseModel):
    count: int
    transactions: List[TransactionSchema]


# Metrics and classification


class MetricsSchema(BaseModel):
    """Financial metrics for one window"""

    total_income: float
    total_spending: float
    savings_amount: float
    savings_ratio: float
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


class CreditScoreFactorsSchema(BaseModel):
    savings_behavior: float
    spending_consistency: float
    overdraft_risk: float
    income_stability: float


class InsightsResponse(BaseModel):
    """Response for GET /v1/analytics/insights/{user_id}"""

    insight_id: str
    metrics: MetricsSchema
    personality: str
    credit_score: int
    credit_score_factors: CreditScoreFactorsSchema
    emotional_insight: str
    credit_story: str


class HistoryItem(BaseModel):
    """Single stored insight snapshot"""

    insight_id: str
    window_days: int
    bank_filter: Optional[str] = None
    personality: str
    credit_score: int
    metrics: MetricsSchema
    generated_at: str


class HistoryResponse(BaseModel):
    user_id: str
    insights: List[HistoryItem]


class SpendingResponse(BaseModel):
    spending_by_category: Dict[str, float]
    total_spending: float
    total_income: float


# Advanced analytics


class HealthScoreResponse(BaseModel):
    score: int = Field(..., ge=0, le=100)
    level: str
    insights: List[str]
    savings_ratio: float
    consistency_score: float
    average_balance: float
    overdrafts: int
    late_fees: int


class UpcomingBillSchema(BaseModel):
    merchant: str
    amount: int
    next_due_date: date


class CashflowResponse(BaseModel):
    risk_level: str
    predicted_balance: int
    days_until_low_balance: Optional[int] = None
    upcoming_bills: List[UpcomingBillSchema]
    warning: Optional[str] = None


class SavingsBreakdownSchema(BaseModel):
    fixed_expenses: Dict[str, int]
    savings_target: int
    remaining_for_flexible: int


class SavingsSuggestionResponse(BaseModel):
    daily_savings: int
    weekly_savings: int
    monthly_savings: int
    current_savings_ratio: float
    breakdown: SavingsBreakdownSchema
    suggestion: str


class SavingsGoalRequest(BaseModel):
    """Request body for POST /v1/advanced/savings-goal/{user_id}

    Fields are optional here so that missing values reach the domain
    validation and come back as a 400 with a uniform message.
    """

    target_amount: Optional[float] = None
    target_date: Optional[date] = None


class SavingsGoalResponse(BaseModel):
    target_amount: float
    target_date: date
    days_remaining: int
    daily_required: int
    weekly_required: int
    monthly_required: int
    available_for_savings: float
    is_achievable: bool
    motivation: str


class EventSchema(BaseModel):
    date: datetime
    amount: float
    transaction_count: int
    merchants: List[str]


class EventSpendingResponse(BaseModel):
    events: List[EventSchema]
    total_amount: float
    count: int
    insight: str


class ReportSummary(BaseModel):
    total_income: float
    total_spending: float
    savings_ratio: float
    average_balance: float
    credit_score: int


class FullReportResponse(BaseModel):
    health: HealthScoreResponse
    cashflow: CashflowResponse
    savings: SavingsSuggestionResponse
    events: EventSpendingResponse
    summary: ReportSummary


# Bank analytics


class BankFilters(BaseModel):
    bank: Optional[str] = None
    account: Optional[str] = None
    days: int


class BankInsightsResponse(BaseModel):
    metrics: MetricsSchema
    filters: BankFilters


class BankMetricsSchema(BaseModel):
    bank_name: str
    account_count: int
    accounts: List[AccountSchema]
    metrics: MetricsSchema


class BankComparisonSummarySchema(BaseModel):
    total_banks: int
    total_accounts: int
    most_active_bank: Optional[str] = None
    total_balance: float


class BankComparisonResponse(BaseModel):
    banks: List[BankMetricsSchema]
    summary: BankComparisonSummarySchema


class AccountMetricsSchema(BaseModel):
    account_id: str
    account_name: str
    bank_name: str
    account_type: str
    current_balance: float
    metrics: MetricsSchema


class AccountAnalyticsSummarySchema(BaseModel):
    total_accounts: int
    most_active_account: Optional[str] = None
    total_transactions: int


class AccountAnalyticsResponse(BaseModel):
    accounts: List[AccountMetricsSchema]
    summary: AccountAnalyticsSummarySchema


class BankPerformanceSchema(BaseModel):
    bank_name: str
    performance_score: int
    savings_ratio: float
    transaction_count: int
    average_balance: float
    fees: int
    account_count: int


class BankRankingResponse(BaseModel):
    rankings: List[BankPerformanceSchema]
    best_performing_bank: Optional[str] = None
    average_score: int


class BankSpendingPatternSchema(BaseModel):
    bank_name: str
    total_spending: float
    spending_by_category: Dict[str, float]
    spending_percentages: Dict[str, int]
    top_spending_category: str
    top_spending_amount: float


class SpendingPatternsResponse(BaseModel):
    patterns: List[BankSpendingPatternSchema]
    highest_spending_bank: Optional[str] = None
    top_category: Optional[str] = None
    insights: List[str]


class BankListResponse(BaseModel):
    banks: List[str]
    count: int
