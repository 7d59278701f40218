"""SQLAlchemy ORM models for accounts, transactions and insight snapshots"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Integer, Text, JSON, Uuid, Index
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class AccountRecord(Base):
    """Bank account connected by a user"""

    __tablename__ = "account"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    account_id = Column(String(64), nullable=False, unique=True)
    user_id = Column(Text, nullable=False, index=True)
    bank_name = Column(Text, nullable=False)
    account_name = Column(Text, nullable=False)
    account_type = Column(String(32), nullable=False, default="savings")
    balance = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default="NGN")
    is_active = Column(Boolean, nullable=False, default=True)
    connected_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TransactionRecord(Base):
    """Synced account transaction"""

    __tablename__ = "bank_transaction"
    __table_args__ = (
        Index("ix_bank_transaction_user_date", "user_id", "date"),
        Index("ix_bank_transaction_user_category", "user_id", "category"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False)
    account_id = Column(String(64), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    type = Column(String(8), nullable=False)  # credit | debit
    category = Column(String(32), nullable=False, default="other")
    date = Column(DateTime, nullable=False)
    balance = Column(Float, nullable=True)
    merchant = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    synced_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FinancialInsightRecord(Base):
    """Snapshot of metrics and classification produced by an insights request"""

    __tablename__ = "financial_insight"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    window_days = Column(Integer, nullable=False)
    bank_filter = Column(Text, nullable=True)
    metrics = Column(JSON, nullable=False)
    money_personality = Column(String(16), nullable=False)
    credit_score = Column(Integer, nullable=False)
    credit_score_factors = Column(JSON, nullable=False)
    emotional_insight = Column(Text, nullable=True)
    generated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
