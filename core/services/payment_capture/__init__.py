from .models import CapturePreview, OtherExpenseLine, PaymentCaptureState
from .workflow import PaymentCaptureWorkflow

__all__ = [
    "PaymentCaptureWorkflow",
    "PaymentCaptureState",
    "OtherExpenseLine",
    "CapturePreview",
]
