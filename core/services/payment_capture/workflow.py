from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal
from typing import Any, Optional, Union

from core.domain.distance import DistanceRequest
from core.domain.enums import CaptureStep, GigStatus
from core.domain.expense import DEFAULT_EXPENSE_CATEGORY
from core.domain.gig import ConsolidatedGig, GigRecord
from core.domain.money import ZERO, money_str, parse_amount, parse_rate, quantize_money
from core.domain.payment import NetAmount
from core.domain.user import UserProfile
from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, ExternalServiceError, PersistenceError, ValidationError
from core.interfaces import DistanceCalculator, GigRepository
from core.services.finance.policy import TaxPolicy, clamp_miles, clamp_rate, tax_on
from core.services.payment_capture.models import CapturePreview, OtherExpenseLine, PaymentCaptureState

logger = logging.getLogger(__name__)


class PaymentCaptureWorkflow:
    """
    Six-step "got paid" wizard for one booking.

    Steps move one at a time with ``next``/``back``; the review step only
    commits after ``confirm``. Finalize sends a single patch for the first
    record of the booking and leaves the state untouched if that write fails.
    """

    def __init__(
        self,
        gig: Union[ConsolidatedGig, GigRecord],
        distance_calculator: DistanceCalculator,
        gig_repo: GigRepository,
        *,
        profile: Optional[UserProfile] = None,
        policy: Optional[TaxPolicy] = None,
    ) -> None:
        self._gig: ConsolidatedGig = _as_consolidated(gig)
        self._distance: DistanceCalculator = distance_calculator
        self._gig_repo: GigRepository = gig_repo
        self._profile = profile
        self._policy: TaxPolicy = policy or TaxPolicy()
        self._state = self._seed_state()
        self._preview = self._compute_preview()
        self._result: Optional[GigRecord] = None

    @property
    def gig(self) -> ConsolidatedGig:
        return self._gig

    @property
    def state(self) -> PaymentCaptureState:
        return self._state

    @property
    def step(self) -> CaptureStep:
        return self._state.step

    @property
    def preview(self) -> CapturePreview:
        return self._preview

    @property
    def result(self) -> Optional[GigRecord]:
        return self._result

    # ---------------- navigation ----------------

    def next(self) -> CaptureStep:
        self._ensure_open()
        self._state.step = CaptureStep(min(int(self._state.step) + 1, int(CaptureStep.REVIEW)))
        return self._state.step

    def back(self) -> CaptureStep:
        self._ensure_open()
        self._state.step = CaptureStep(max(int(self._state.step) - 1, int(CaptureStep.TOTAL_PAYMENT)))
        self._state.confirmed = False
        return self._state.step

    def go_to(self, step: CaptureStep | int) -> CaptureStep:
        target = CaptureStep(int(step))
        if target == self._state.step:
            return target
        raise BusinessRuleError(
            f"Steps cannot be skipped; use next/back from {self._state.step.name}.",
            code="CAPTURE_STEP_SKIP",
        )

    # ---------------- step inputs ----------------

    def set_total_received(self, value: object) -> None:
        self._ensure_open()
        self._state.total_received = parse_amount(value)
        self._changed()

    def set_mileage(self, miles: object) -> None:
        """Manual mileage entry; always available, also after a failed lookup."""
        self._ensure_open()
        self._state.mileage = _parse_miles(miles)
        self._state.mileage_error = None
        self._changed()

    def set_addresses(self, start_address: str | None, end_address: str | None) -> None:
        self._ensure_open()
        self._state.start_address = (start_address or "").strip()
        self._state.end_address = (end_address or "").strip()
        self._changed()

    def set_round_trip(self, round_trip: bool) -> None:
        self._ensure_open()
        self._state.round_trip = bool(round_trip)
        self._changed()

    def set_per_day(self, per_day: bool) -> None:
        self._ensure_open()
        self._state.per_day = bool(per_day)
        self._changed()

    def set_parking(self, spent: object, reimbursed: object = None) -> None:
        self._ensure_open()
        spent_amount = parse_amount(spent)
        self._state.parking_spent = spent_amount
        self._state.parking_reimbursed = _clamp_reimbursed(spent_amount, parse_amount(reimbursed), "parking")
        self._changed()

    def add_other_expense(
        self,
        spent: object,
        reimbursed: object = None,
        *,
        category: str | None = None,
        description: str | None = None,
    ) -> OtherExpenseLine:
        self._ensure_open()
        spent_amount = parse_amount(spent)
        line = OtherExpenseLine(
            spent=spent_amount,
            reimbursed=_clamp_reimbursed(spent_amount, parse_amount(reimbursed), "other expense"),
            category=(category or "").strip() or DEFAULT_EXPENSE_CATEGORY,
            description=(description or "").strip(),
        )
        self._state.other_expenses.append(line)
        self._changed()
        return line

    def remove_other_expense(self, index: int) -> OtherExpenseLine:
        self._ensure_open()
        if index < 0 or index >= len(self._state.other_expenses):
            raise ValidationError(f"No other expense at position {index}.", code="CAPTURE_LINE_NOT_FOUND")
        line = self._state.other_expenses.pop(index)
        self._changed()
        return line

    def set_tax_rate(self, rate: object) -> None:
        self._ensure_open()
        parsed = parse_rate(rate)
        if parsed is None:
            raise ValidationError("Tax rate must be a number.", code="CAPTURE_TAX_RATE_INVALID")
        self._state.tax_rate = int(clamp_rate(parsed).to_integral_value(rounding=ROUND_HALF_UP))
        self._changed()

    def set_payment_method(self, method: str | None) -> None:
        self._ensure_open()
        self._state.payment_method = (method or "").strip() or None
        self._changed()

    # ---------------- distance lookup ----------------

    def calculate_mileage(self) -> Optional[int]:
        """
        Ask the distance collaborator for the drive and store whole miles.

        Returns the mileage on success. On failure ``state.mileage_error`` is
        set and the previous (or manually entered) mileage is kept.
        """
        self._ensure_open()
        state = self._state
        if not state.start_address or not state.end_address:
            state.mileage_error = "Both a starting address and a gig address are required."
            return None

        request = DistanceRequest(
            start_address=state.start_address,
            end_address=state.end_address,
            round_trip=state.round_trip,
        )
        state.calculating = True
        state.mileage_error = None
        try:
            result = self._distance.distance(request)
        except ExternalServiceError as exc:
            logger.warning("Distance lookup failed for gig %s: %s", self._gig.id, exc)
            state.mileage_error = str(exc) or "Distance lookup failed."
            return None
        finally:
            state.calculating = False

        if not result.ok:
            logger.info("Distance lookup returned no route for gig %s: %s", self._gig.id, result.error)
            state.mileage_error = result.error or "Could not calculate distance."
            return None

        miles = math.ceil(float(result.distance_miles or 0.0))
        if state.per_day:
            # calendar days covered, including gaps inside the booking
            miles *= self._gig.span_days
        state.mileage = max(0, miles)
        self._changed()
        return state.mileage

    # ---------------- review / commit ----------------

    def confirm(self) -> CapturePreview:
        self._ensure_open()
        if self._state.step != CaptureStep.REVIEW:
            raise BusinessRuleError("Payment can only be confirmed from the review step.", code="CAPTURE_NOT_AT_REVIEW")
        self._state.confirmed = True
        return self._preview

    def build_patch(self, *, paid_at: datetime | None = None) -> dict[str, Any]:
        state = self._state
        preview = self._preview
        return {
            "total_received": money_str(state.total_received),
            "reimbursed_parking": money_str(state.parking_reimbursed),
            "reimbursed_other": money_str(state.other_reimbursed),
            "unreimbursed_parking": money_str(state.unreimbursed_parking),
            "unreimbursed_other": money_str(state.unreimbursed_other),
            "mileage": state.mileage,
            "tax_percentage": state.tax_rate,
            "payment_method": state.payment_method,
            "gig_address": state.end_address or None,
            "starting_address": state.start_address or None,
            # legacy fields kept in step for readers of the single-amount shape
            "status": GigStatus.COMPLETED,
            "actual_pay": money_str(preview.net_received),
            "parking_expense": money_str(state.parking_spent),
            "other_expenses": money_str(state.other_spent),
            "got_paid_date": paid_at or datetime.now(timezone.utc),
        }

    def finalize(self, *, paid_at: datetime | None = None) -> GigRecord:
        self._ensure_open()
        if self._state.step != CaptureStep.REVIEW:
            raise BusinessRuleError("Finalize is only available on the review step.", code="CAPTURE_NOT_AT_REVIEW")
        if not self._state.confirmed:
            raise BusinessRuleError("Review must be confirmed before finalizing.", code="CAPTURE_NOT_CONFIRMED")

        patch = self.build_patch(paid_at=paid_at)
        try:
            updated = self._gig_repo.patch(self._gig.id, patch)
        except PersistenceError:
            logger.error("Saving captured payment for gig %s failed; wizard state kept for retry", self._gig.id)
            raise

        self._state.finalized = True
        self._result = updated
        logger.info(
            "Captured payment for gig %s: received=%s taxable=%s deductions=%s",
            self._gig.id,
            patch["total_received"],
            self._preview.taxable_income,
            self._preview.business_deductions,
        )
        domain_events.payment_captured.emit(self._gig.id)
        domain_events.gigs_changed.emit(updated.user_id or self._gig.user_id or 0)
        return updated

    # ---------------- internals ----------------

    def _seed_state(self) -> PaymentCaptureState:
        record = self._gig.primary
        captured = parse_amount(record.total_received)
        total = captured if captured > ZERO else parse_amount(record.expected_pay)
        home = self._profile.home_address if self._profile is not None else None
        return PaymentCaptureState(
            total_received=total,
            mileage=clamp_miles(record.mileage),
            start_address=(record.starting_address or home or "").strip(),
            end_address=(record.gig_address or "").strip(),
            parking_spent=parse_amount(record.parking_expense),
            parking_reimbursed=min(parse_amount(record.reimbursed_parking), parse_amount(record.parking_expense)),
            tax_rate=self._seed_tax_rate(record),
            payment_method=record.payment_method,
        )

    def _seed_tax_rate(self, record: GigRecord) -> int:
        override = parse_rate(record.tax_percentage)
        if override is not None:
            return int(clamp_rate(override).to_integral_value(rounding=ROUND_HALF_UP))
        if self._profile is not None:
            return self._profile.effective_tax_rate(self._policy.fallback_tax_rate)
        return self._policy.fallback_tax_rate

    def _compute_preview(self) -> CapturePreview:
        state = self._state
        tips = parse_amount(self._gig.primary.tips)
        reimbursed = state.parking_reimbursed + state.other_reimbursed
        net = NetAmount.of(state.total_received, reimbursed)
        taxable = net.value + tips
        mileage_deduction = self._policy.mileage_deduction(state.mileage)
        deductions = state.unreimbursed_parking + state.unreimbursed_other + mileage_deduction
        return CapturePreview(
            total_received=quantize_money(state.total_received),
            tips=quantize_money(tips),
            reimbursed_total=quantize_money(reimbursed),
            net_received=quantize_money(net.value),
            taxable_income=quantize_money(taxable),
            over_reimbursed=net.over_reimbursed,
            unreimbursed_parking=quantize_money(state.unreimbursed_parking),
            unreimbursed_other=quantize_money(state.unreimbursed_other),
            mileage=state.mileage,
            mileage_deduction=quantize_money(mileage_deduction),
            business_deductions=quantize_money(deductions),
            tax_rate=state.tax_rate,
            estimated_tax=quantize_money(tax_on(taxable, Decimal(state.tax_rate))),
        )

    def _changed(self) -> None:
        self._state.confirmed = False
        self._preview = self._compute_preview()

    def _ensure_open(self) -> None:
        if self._state.finalized:
            raise BusinessRuleError("Payment for this gig was already captured.", code="CAPTURE_FINALIZED")


def _as_consolidated(gig: Union[ConsolidatedGig, GigRecord]) -> ConsolidatedGig:
    if isinstance(gig, ConsolidatedGig):
        return gig
    day = gig.parsed_date()
    if day is None:
        raise ValidationError(f"Gig {gig.id} has no valid date.", code="GIG_DATE_INVALID")
    return ConsolidatedGig.single(gig, day)


def _parse_miles(value: object) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0
    try:
        miles = Decimal(str(value).strip())
    except ArithmeticError:
        raise ValidationError(f"Mileage must be a number, got {value!r}.", code="CAPTURE_MILEAGE_INVALID") from None
    if not miles.is_finite() or miles < ZERO:
        raise ValidationError(f"Mileage must be a non-negative number, got {value!r}.", code="CAPTURE_MILEAGE_INVALID")
    return int(miles.to_integral_value(rounding=ROUND_CEILING))


def _clamp_reimbursed(spent: Decimal, reimbursed: Decimal, label: str) -> Decimal:
    if reimbursed > spent:
        logger.info("Reimbursed %s %s clamped to spent amount %s", label, reimbursed, spent)
        return spent
    return reimbursed


__all__ = ["PaymentCaptureWorkflow"]
