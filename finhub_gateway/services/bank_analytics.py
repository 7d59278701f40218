"""Bank analytics service - per-bank and per-account metrics for one user"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from finhub_gateway.domain.bank_comparison import (
    build_spending_patterns,
    compare_banks,
    group_accounts_by_bank,
    rank_banks,
    summarize_accounts,
)
from finhub_gateway.domain.models import (
    AccountAnalytics,
    BankComparison,
    BankRanking,
    SpendingPatternReport,
)
from finhub_gateway.services.analytics import AnalyticsService, validate_request
from finhub_gateway.utils.date_utils import utc_now


class BankAnalyticsService:
    """Breaks a user's metrics down by bank and by account"""

    def __init__(self, analytics: AnalyticsService):
        self.analytics = analytics

    async def list_banks(self, user_id: str) -> List[str]:
        """Distinct bank names, sorted"""
        accounts = await self.analytics.accounts.find(user_id)
        return sorted({a.bank_name for a in accounts})

    async def bank_comparison(self, user_id: str, window_days: int, now: Optional[datetime] = None) -> BankComparison:
        """
        Metrics per bank, most spending first.

        Each bank is queried concurrently by its own account ids; results are
        joined by bank name so completion order cannot change the output.
        """
        validate_request(user_id, window_days)
        now = now or utc_now()

        accounts = await self.analytics.accounts.find(user_id)
        bank_groups = group_accounts_by_bank(accounts)
        bank_names = list(bank_groups)

        results = await asyncio.gather(
            *(
                self.analytics.metrics_for_accounts(
                    user_id, window_days, [a.account_id for a in bank_groups[name]], now=now
                )
                for name in bank_names
            )
        )
        metrics_by_bank = dict(zip(bank_names, results))

        logging.debug("Bank comparison computed", extra={"user_id": user_id, "bank_count": len(bank_names)})
        return compare_banks(bank_groups, metrics_by_bank)

    async def bank_ranking(self, user_id: str, window_days: int, now: Optional[datetime] = None) -> BankRanking:
        comparison = await self.bank_comparison(user_id, window_days, now=now)
        return rank_banks(comparison)

    async def spending_patterns(
        self, user_id: str, window_days: int, now: Optional[datetime] = None
    ) -> SpendingPatternReport:
        comparison = await self.bank_comparison(user_id, window_days, now=now)
        return build_spending_patterns(comparison)

    async def account_analytics(
        self, user_id: str, window_days: int, now: Optional[datetime] = None
    ) -> AccountAnalytics:
        validate_request(user_id, window_days)
        now = now or utc_now()

        accounts = await self.analytics.accounts.find(user_id)
        results = await asyncio.gather(
            *(
                self.analytics.compute_metrics(user_id, window_days, account_filter=a.account_id, now=now)
                for a in accounts
            )
        )
        metrics_by_account = {a.account_id: m for a, m in zip(accounts, results)}

        return summarize_accounts(accounts, metrics_by_account)
