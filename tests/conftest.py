"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta
from typing import Callable, Collection, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from finhub_gateway.api.main import create_app
from finhub_gateway.domain.exceptions import UpstreamUnavailableError
from finhub_gateway.domain.models import Account, Transaction
from finhub_gateway.domain.stores import AccountStore, TransactionStore
from finhub_gateway.infrastructure.database.models import Base
from finhub_gateway.infrastructure.database.session import get_db
from finhub_gateway.services.analytics import AnalyticsService
from finhub_gateway.services.bank_analytics import BankAnalyticsService


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed clock for deterministic windows
NOW = datetime(2024, 6, 30, 12, 0, 0)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


class InMemoryTransactionStore(TransactionStore):
    """Transaction store over a plain list, filtering like the SQL repository"""

    def __init__(self, transactions: Optional[List[Transaction]] = None):
        self.items = list(transactions or [])
        self.calls = []

    async def find(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
        account_ids: Optional[Collection[str]] = None,
        txn_type: Optional[str] = None,
    ) -> List[Transaction]:
        self.calls.append({"user_id": user_id, "start": start, "end": end, "account_ids": account_ids})
        return [
            t
            for t in self.items
            if t.user_id == user_id
            and start <= t.date <= end
            and (account_ids is None or t.account_id in account_ids)
            and (txn_type is None or t.type == txn_type)
        ]


class InMemoryAccountStore(AccountStore):
    def __init__(self, accounts: Optional[List[Account]] = None):
        self.items = list(accounts or [])

    async def find(
        self,
        user_id: str,
        bank_name: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> List[Account]:
        return [
            a
            for a in self.items
            if a.user_id == user_id
            and (not bank_name or bank_name.lower() in a.bank_name.lower())
            and (not account_id or a.account_id == account_id)
        ]


class FailingTransactionStore(TransactionStore):
    """Store whose backend is down"""

    async def find(self, user_id, start, end, account_ids=None, txn_type=None):
        raise UpstreamUnavailableError("connection refused")


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    """Build a transaction dated days_ago before NOW"""

    def _make(
        amount: float,
        type: str = "debit",
        category: str = "other",
        days_ago: int = 1,
        account_id: str = "acc_gt_1",
        user_id: str = "user_1",
        date: Optional[datetime] = None,
        **kwargs,
    ) -> Transaction:
        return Transaction(
            user_id=user_id,
            account_id=account_id,
            amount=amount,
            type=type,
            category=category,
            date=date or NOW - timedelta(days=days_ago),
            **kwargs,
        )

    return _make


@pytest.fixture
def accounts() -> List[Account]:
    """One user with two GTBank accounts and one Access Bank account"""
    return [
        Account(
            account_id="acc_gt_1",
            user_id="user_1",
            bank_name="GTBank",
            account_name="GT Savings",
            balance=120000,
        ),
        Account(
            account_id="acc_gt_2",
            user_id="user_1",
            bank_name="GTBank",
            account_name="GT Current",
            account_type="current",
            balance=30000,
        ),
        Account(
            account_id="acc_access_1",
            user_id="user_1",
            bank_name="Access Bank",
            account_name="Access Savings",
            balance=50000,
        ),
    ]


@pytest.fixture
def sample_transactions(make_txn) -> List[Transaction]:
    """Three months of salary plus spending across both banks"""
    transactions = []

    # Salary on the 25th of each month into GTBank
    for month in (4, 5, 6):
        transactions.append(
            make_txn(
                300000,
                type="credit",
                category="salary",
                date=datetime(2024, month, 25, 9, 0),
                balance=350000,
                merchant="Employer Ltd",
            )
        )

    # Weekly groceries from GTBank
    for week in range(12):
        transactions.append(
            make_txn(20000, category="food", days_ago=week * 7 + 2, balance=280000, merchant="Shoprite")
        )

    # Utilities and entertainment from Access Bank
    transactions.append(
        make_txn(15000, category="utilities", days_ago=10, account_id="acc_access_1", balance=40000)
    )
    transactions.append(
        make_txn(
            45000,
            category="entertainment",
            days_ago=20,
            account_id="acc_access_1",
            balance=25000,
            merchant="Owambe Hall",
        )
    )
    return transactions


@pytest.fixture
def analytics_service(sample_transactions, accounts) -> AnalyticsService:
    return AnalyticsService(InMemoryTransactionStore(sample_transactions), InMemoryAccountStore(accounts))


@pytest.fixture
def bank_analytics_service(analytics_service) -> BankAnalyticsService:
    return BankAnalyticsService(analytics_service)
