"""POST /v1/accounts and /v1/transactions - load connected accounts and synced transactions"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from finhub_gateway.api.dependencies import get_request_id
from finhub_gateway.api.v1.schemas import (
    AccountCreate,
    AccountSchema,
    TransactionBatch,
    TransactionBatchResponse,
)
from finhub_gateway.domain.models import Account, Transaction
from finhub_gateway.infrastructure.database.repositories import AccountRepository, TransactionRepository
from finhub_gateway.infrastructure.database.session import get_db
from finhub_gateway.utils.date_utils import to_naive_utc

router = APIRouter()


@router.post("/accounts", response_model=AccountSchema, status_code=status.HTTP_201_CREATED)
def create_account(body: AccountCreate, request: Request, db: Session = Depends(get_db)):
    """Register a connected bank account; 400 if the account id is taken"""
    account = AccountRepository(db).create_account(Account(**body.model_dump()))
    db.commit()

    logging.info(
        "Account connected",
        extra={
            "request_id": get_request_id(request),
            "user_id": account.user_id,
            "account_id": account.account_id,
            "bank_name": account.bank_name,
        },
    )
    return AccountSchema(**body.model_dump())


@router.post("/transactions", response_model=TransactionBatchResponse, status_code=status.HTTP_201_CREATED)
def create_transactions(body: TransactionBatch, request: Request, db: Session = Depends(get_db)):
    """Store a batch of synced transactions in one commit"""
    # Stored dates are naive UTC, matching the analytics window
    transactions = [
        Transaction(**{**t.model_dump(), "date": to_naive_utc(t.date)}) for t in body.transactions
    ]
    created = TransactionRepository(db).create_transactions(transactions)
    db.commit()

    logging.info(
        "Transactions synced",
        extra={"request_id": get_request_id(request), "count": created},
    )
    return TransactionBatchResponse(created=created)
