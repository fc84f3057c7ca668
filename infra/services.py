from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError
from core.services.consolidation import find_chain_for
from core.services.finance import FinanceService, TaxPolicy
from core.services.payment_capture import PaymentCaptureWorkflow
from infra.db.repositories import (
    SqlAlchemyExpenseRepository,
    SqlAlchemyGigRepository,
    SqlAlchemyUserProfileRepository,
)
from infra.distance import HttpDistanceCalculator
from infra.operational_support import OperationalSupport, get_operational_support
from infra.settings import EngineSettings, load_settings

logger = logging.getLogger(__name__)


class PaymentCaptureRecorder:
    """Writes a support event for every captured payment."""

    def __init__(self, support: Optional[OperationalSupport] = None) -> None:
        self._support = support

    def __call__(self, gig_id: int) -> None:
        support = self._support or get_operational_support()
        support.record_gig_event("payment_captured", gig_id, f"Payment captured for gig {gig_id}")

    def attach(self) -> None:
        domain_events.payment_captured.connect(self)

    def detach(self) -> None:
        domain_events.payment_captured.disconnect(self)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    settings: EngineSettings
    policy: TaxPolicy
    gig_repo: SqlAlchemyGigRepository
    expense_repo: SqlAlchemyExpenseRepository
    profile_repo: SqlAlchemyUserProfileRepository
    distance_calculator: HttpDistanceCalculator
    finance_service: FinanceService
    capture_recorder: PaymentCaptureRecorder

    def start_payment_capture(self, user_id: int, gig_id: int) -> PaymentCaptureWorkflow:
        """Open the capture wizard for the booking that contains ``gig_id``."""
        chain = find_chain_for(gig_id, self.finance_service.list_consolidated_gigs(user_id))
        if chain is None:
            raise NotFoundError("Gig not found.", code="GIG_NOT_FOUND")
        return PaymentCaptureWorkflow(
            chain,
            self.distance_calculator,
            self.gig_repo,
            profile=self.profile_repo.get(user_id),
            policy=self.policy,
        )

    def close(self) -> None:
        self.capture_recorder.detach()
        self.session.close()

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "settings": self.settings,
            "policy": self.policy,
            "gig_repo": self.gig_repo,
            "expense_repo": self.expense_repo,
            "profile_repo": self.profile_repo,
            "distance_calculator": self.distance_calculator,
            "finance_service": self.finance_service,
            "service_graph": self,
        }


def build_service_graph(
    session: Session,
    *,
    settings: Optional[EngineSettings] = None,
    support: Optional[OperationalSupport] = None,
) -> ServiceGraph:
    settings = settings or load_settings()
    policy = settings.tax_policy()
    gig_repo = SqlAlchemyGigRepository(session)
    expense_repo = SqlAlchemyExpenseRepository(session)
    profile_repo = SqlAlchemyUserProfileRepository(session)
    distance_calculator = HttpDistanceCalculator(
        settings.google_maps_api_key,
        timeout=settings.distance_timeout_seconds,
    )
    finance_service = FinanceService(
        gig_repo=gig_repo,
        expense_repo=expense_repo,
        profile_repo=profile_repo,
        policy=policy,
        window_days=settings.multi_day_window_days,
    )
    recorder = PaymentCaptureRecorder(support)
    recorder.attach()
    logger.debug("Service graph built (window=%s days)", settings.multi_day_window_days)

    return ServiceGraph(
        session=session,
        settings=settings,
        policy=policy,
        gig_repo=gig_repo,
        expense_repo=expense_repo,
        profile_repo=profile_repo,
        distance_calculator=distance_calculator,
        finance_service=finance_service,
        capture_recorder=recorder,
    )


__all__ = ["PaymentCaptureRecorder", "ServiceGraph", "build_service_graph"]
