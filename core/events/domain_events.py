"""Change notifications for gigs and expenses; statistics views recompute on these."""
from __future__ import annotations

from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.gigs_changed: Signal[int] = Signal()      # user_id
        self.expenses_changed: Signal[int] = Signal()  # user_id
        self.payment_captured: Signal[int] = Signal()  # gig_id


# SINGLE global instance
domain_events = DomainEvents()
