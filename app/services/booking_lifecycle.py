# app/services/booking_lifecycle.py
import logging
from datetime import datetime
from typing import Optional

from app.core.enums import BookingStatus, CancelledBy
from app.core.exceptions import BusinessRuleError
from app.db.models.booking import Booking
from app.services.booking_pricing import compute_end_time, compute_total_price, ends_next_day

logger = logging.getLogger(__name__)

NOT_CANCELLABLE = "Cette réservation ne peut pas être annulée."


def apply_slot(booking: Booking, slot, hourly_rate: Optional[float]):
    """Write the slot fields of a create/update body and the values derived from them."""
    booking.subject_id = slot.subject_id
    booking.level_id = slot.level_id
    booking.date = slot.date
    booking.start_time = slot.start_time
    booking.duration = slot.duration
    booking.end_time = compute_end_time(slot.date, slot.start_time, slot.duration)
    booking.total_price = compute_total_price(hourly_rate, slot.duration)

    if ends_next_day(slot.date, slot.start_time, slot.duration):
        logger.warning(
            "Booking slot wraps past midnight; end_time is stored without a date",
            extra={"date": str(slot.date), "start_time": str(slot.start_time), "duration": slot.duration},
        )


def cancel(booking: Booking, by: CancelledBy, reason: Optional[str] = None):
    status = BookingStatus(booking.status)
    if not status.is_cancellable:
        raise BusinessRuleError(NOT_CANCELLABLE, {"status": status.value})

    booking.status = BookingStatus.CANCELLED
    booking.cancelled_by = by
    booking.cancelled_at = datetime.utcnow()
    if reason is not None:
        booking.cancellation_reason = reason
