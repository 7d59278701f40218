"""Abstract store interfaces the analytics services read from."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Collection, List, Optional

from finhub_gateway.domain.models import Account, Transaction


class TransactionStore(ABC):
    """Read access to synced transactions."""

    @abstractmethod
    async def find(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
        account_ids: Optional[Collection[str]] = None,
        txn_type: Optional[str] = None,
    ) -> List[Transaction]:
        """Transactions dated within [start, end] inclusive.

        Args:
            user_id: Owner of the transactions
            start: Window start (inclusive)
            end: Window end (inclusive)
            account_ids: Restrict to these accounts when given
            txn_type: Restrict to "credit" or "debit" when given

        Raises:
            UpstreamUnavailableError: The store could not be queried
        """


class AccountStore(ABC):
    """Read access to connected accounts."""

    @abstractmethod
    async def find(
        self,
        user_id: str,
        bank_name: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> List[Account]:
        """A user's accounts.

        Args:
            user_id: Owner of the accounts
            bank_name: Case-insensitive substring of the bank name
            account_id: Exact account identifier

        Raises:
            UpstreamUnavailableError: The store could not be queried
        """
