"""Data access layer - SQLAlchemy-backed stores for accounts, transactions and insights"""

import asyncio
import threading
from dataclasses import asdict
from datetime import datetime
from typing import Collection, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from finhub_gateway.domain.exceptions import UpstreamUnavailableError, ValidationError
from finhub_gateway.domain.models import Account, FinancialInsights, Transaction
from finhub_gateway.domain.stores import AccountStore, TransactionStore
from finhub_gateway.infrastructure.database.models import (
    AccountRecord,
    FinancialInsightRecord,
    TransactionRecord,
)


async def fetch_all(query: Query) -> list:
    """
    Run a blocking ORM query in a worker thread so request timeouts can fire.

    A Session is not thread-safe, so queries sharing one are serialized
    through a lock kept in Session.info.
    """
    lock = query.session.info.setdefault("query_lock", threading.Lock())

    def run():
        with lock:
            return query.all()

    return await asyncio.to_thread(run)


def account_to_domain(record: AccountRecord) -> Account:
    return Account(
        account_id=record.account_id,
        user_id=record.user_id,
        bank_name=record.bank_name,
        account_name=record.account_name,
        account_type=record.account_type,
        balance=record.balance,
        currency=record.currency,
    )


def transaction_to_domain(record: TransactionRecord) -> Transaction:
    return Transaction(
        user_id=record.user_id,
        account_id=record.account_id,
        amount=record.amount,
        type=record.type,
        category=record.category,
        date=record.date,
        balance=record.balance,
        merchant=record.merchant,
        description=record.description,
        transaction_id=str(record.id),
    )


class TransactionRepository(TransactionStore):
    """Repository for synced transactions"""

    def __init__(self, db: Session):
        self.db = db

    async def find(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
        account_ids: Optional[Collection[str]] = None,
        txn_type: Optional[str] = None,
    ) -> List[Transaction]:
        """Fetch a user's transactions between start and end (inclusive)"""
        query = self.db.query(TransactionRecord).filter(
            TransactionRecord.user_id == user_id,
            TransactionRecord.date >= start,
            TransactionRecord.date <= end,
        )
        if account_ids is not None:
            query = query.filter(TransactionRecord.account_id.in_(list(account_ids)))
        if txn_type is not None:
            query = query.filter(TransactionRecord.type == txn_type)

        try:
            records = await fetch_all(query.order_by(TransactionRecord.date.desc()))
        except SQLAlchemyError as e:
            raise UpstreamUnavailableError(f"Transaction store query failed: {e}") from e

        return [transaction_to_domain(r) for r in records]

    def create_transactions(self, transactions: List[Transaction]) -> int:
        """Stage transactions for insert; caller commits"""
        for txn in transactions:
            self.db.add(
                TransactionRecord(
                    user_id=txn.user_id,
                    account_id=txn.account_id,
                    amount=txn.amount,
                    type=txn.type,
                    category=txn.category,
                    date=txn.date,
                    balance=txn.balance,
                    merchant=txn.merchant,
                    description=txn.description,
                )
            )
        self.db.flush()
        return len(transactions)


class AccountRepository(AccountStore):
    """Repository for connected accounts"""

    def __init__(self, db: Session):
        self.db = db

    async def find(
        self,
        user_id: str,
        bank_name: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> List[Account]:
        """Fetch a user's accounts, optionally by bank-name substring or exact account id"""
        query = self.db.query(AccountRecord).filter(AccountRecord.user_id == user_id)
        if bank_name:
            query = query.filter(func.lower(AccountRecord.bank_name).contains(bank_name.lower(), autoescape=True))
        if account_id:
            query = query.filter(AccountRecord.account_id == account_id)

        try:
            records = await fetch_all(query.order_by(AccountRecord.connected_at, AccountRecord.account_id))
        except SQLAlchemyError as e:
            raise UpstreamUnavailableError(f"Account store query failed: {e}") from e

        return [account_to_domain(r) for r in records]

    def create_account(self, account: Account) -> Account:
        """Stage a new account; caller commits"""
        record = AccountRecord(
            account_id=account.account_id,
            user_id=account.user_id,
            bank_name=account.bank_name,
            account_name=account.account_name,
            account_type=account.account_type,
            balance=account.balance,
            currency=account.currency,
        )
        self.db.add(record)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationError(f"Account {account.account_id} already exists") from e
        return account


class InsightRepository:
    """Repository for financial insight snapshots"""

    def __init__(self, db: Session):
        self.db = db

    def create_insight(
        self,
        user_id: str,
        window_days: int,
        insights: FinancialInsights,
        emotional_insight: Optional[str] = None,
        bank_filter: Optional[str] = None,
    ) -> FinancialInsightRecord:
        """Persist a snapshot of computed insights"""
        record = FinancialInsightRecord(
            user_id=user_id,
            window_days=window_days,
            bank_filter=bank_filter,
            metrics=asdict(insights.metrics),
            money_personality=insights.personality,
            credit_score=insights.credit_score,
            credit_score_factors=asdict(insights.credit_score_factors),
            emotional_insight=emotional_insight,
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get_insights_by_user(self, user_id: str, limit: int = 10) -> List[FinancialInsightRecord]:
        """Fetch recent snapshots for a user, newest first"""
        return (
            self.db.query(FinancialInsightRecord)
            .filter(FinancialInsightRecord.user_id == user_id)
            .order_by(FinancialInsightRecord.generated_at.desc())
            .limit(limit)
            .all()
        )
