from .consolidation import GreedyChainGrouper, consolidate
from .finance import FinanceService, TaxPolicy, aggregate
from .payment_capture import PaymentCaptureWorkflow
from .period import resolve, step

__all__ = [
    "GreedyChainGrouper",
    "consolidate",
    "resolve",
    "step",
    "aggregate",
    "TaxPolicy",
    "FinanceService",
    "PaymentCaptureWorkflow",
]
