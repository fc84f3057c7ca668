from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from core.domain.enums import PeriodMode, StepDirection
from core.domain.gig import ConsolidatedGig
from core.interfaces import ExpenseRepository, GigRepository, UserProfileRepository
from core.services.consolidation import DEFAULT_WINDOW_DAYS, GreedyChainGrouper
from core.services.finance.aggregator import aggregate
from core.services.finance.analytics import build_category_analytics
from core.services.finance.cashflow import build_period_cashflow
from core.services.finance.models import FinanceAnalyticsRow, FinancePeriodRow, PeriodNavigation, PeriodStats
from core.services.finance.policy import TaxPolicy
from core.services.period import resolve, step

logger = logging.getLogger(__name__)


class FinanceService:
    """Period statistics read models over the stored gigs and expenses of one user."""

    def __init__(
        self,
        *,
        gig_repo: GigRepository,
        expense_repo: ExpenseRepository,
        profile_repo: UserProfileRepository,
        policy: Optional[TaxPolicy] = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        self._gig_repo: GigRepository = gig_repo
        self._expense_repo: ExpenseRepository = expense_repo
        self._profile_repo: UserProfileRepository = profile_repo
        self._policy: TaxPolicy = policy or TaxPolicy()
        self._grouper = GreedyChainGrouper(window_days=window_days)

    @property
    def policy(self) -> TaxPolicy:
        return self._policy

    def list_consolidated_gigs(self, user_id: int) -> list[ConsolidatedGig]:
        return self._grouper.group(self._gig_repo.list_by_user(user_id))

    def get_period_stats(
        self,
        user_id: int,
        mode: PeriodMode | str = PeriodMode.MONTHLY,
        anchor: date | None = None,
    ) -> PeriodStats:
        anchor = anchor or date.today()
        period = resolve(mode, anchor)
        profile = self._profile_repo.get(user_id)
        default_tax_rate = profile.default_tax_percentage if profile is not None else None
        stats = aggregate(
            self.list_consolidated_gigs(user_id),
            self._expense_repo.list_by_user(user_id),
            period,
            default_tax_rate,
            policy=self._policy,
        )
        logger.info(
            "Period stats for user %s (%s): %s completed, earnings=%s, expenses=%s",
            user_id,
            period.label,
            stats.completed_gigs,
            stats.actual_earnings,
            stats.total_expenses,
        )
        return stats

    def get_period_navigation(self, mode: PeriodMode | str, anchor: date) -> PeriodNavigation:
        previous_anchor = step(mode, anchor, StepDirection.PREV)
        next_anchor = step(mode, anchor, StepDirection.NEXT)
        return PeriodNavigation(
            current=resolve(mode, anchor),
            previous=resolve(mode, previous_anchor),
            next=resolve(mode, next_anchor),
            previous_anchor=previous_anchor,
            next_anchor=next_anchor,
        )

    def get_expense_analytics(
        self,
        user_id: int,
        mode: PeriodMode | str = PeriodMode.MONTHLY,
        anchor: date | None = None,
    ) -> list[FinanceAnalyticsRow]:
        return build_category_analytics(self.get_period_stats(user_id, mode, anchor))

    def get_cashflow_by_month(
        self,
        user_id: int,
        mode: PeriodMode | str = PeriodMode.ANNUAL,
        anchor: date | None = None,
    ) -> list[FinancePeriodRow]:
        return build_period_cashflow(self.get_period_stats(user_id, mode, anchor))


__all__ = ["FinanceService"]
