"""Booking lifecycle.

    PENDING ──► CONFIRMED ──► ATTENDED
       │            │
       └──► CANCELLED ◄──┘

CANCELLED and ATTENDED are terminal. Every method here assumes the caller
already holds the booking's course admission scope.
"""

import logging
from datetime import datetime

from bookings.domain import Booking, BookingId, BookingStatus, CourseId, MemberId
from bookings.domain.errors import (
    AlreadyCancelledError,
    CourseFullError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
)
from bookings.domain.results import Err, Ok, Result
from bookings.services.capacity import CapacityTracker
from bookings.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)

TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.ATTENDED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.ATTENDED: frozenset(),
}


def transition_error(current: BookingStatus, target: BookingStatus) -> DomainError | None:
    """Return why ``current -> target`` is illegal, or None if it is allowed."""
    if target in TRANSITIONS[current]:
        return None
    if current is BookingStatus.CANCELLED and target is BookingStatus.CANCELLED:
        return AlreadyCancelledError()
    return InvalidTransitionError(current, target)


class BookingStateMachine:
    """Owns the status of booking records and the rules for changing it."""

    def __init__(self, bookings: BookingStore, capacity: CapacityTracker) -> None:
        self._bookings = bookings
        self._capacity = capacity

    def create(self, member_id: MemberId, course_id: CourseId, created_at: datetime) -> Booking:
        """Persist a new Pending booking.

        Eligibility and capacity must already have passed in the same scope.
        """
        booking = self._bookings.create_booking(member_id, course_id, created_at)
        logger.info(
            "Booking %s created for member %s in course %s",
            booking.id,
            member_id,
            course_id,
        )
        return booking

    def confirm(self, booking_id: BookingId) -> Result[Booking]:
        """Pending -> Confirmed, re-validating that the course is not over capacity."""
        return self._transition(booking_id, BookingStatus.CONFIRMED)

    def cancel(self, booking_id: BookingId) -> Result[Booking]:
        """Pending/Confirmed -> Cancelled. The seat is free as soon as this returns."""
        return self._transition(booking_id, BookingStatus.CANCELLED)

    def mark_attended(self, booking_id: BookingId) -> Result[Booking]:
        """Confirmed -> Attended."""
        return self._transition(booking_id, BookingStatus.ATTENDED)

    def _transition(self, booking_id: BookingId, target: BookingStatus) -> Result[Booking]:
        booking = self._bookings.get_booking(booking_id)
        if booking is None:
            return Err(NotFoundError("Booking", booking_id))

        error = transition_error(booking.status, target)
        if error is not None:
            logger.info(
                "Rejected %s -> %s for booking %s: %s",
                booking.status.value,
                target.value,
                booking_id,
                error.code.value,
            )
            return Err(error)

        if target is BookingStatus.CONFIRMED:
            availability = self._capacity.availability(booking.course_id)
            if not availability.is_ok:
                return availability
            # The booking being confirmed already holds one of the counted seats.
            if availability.value.active_bookings > availability.value.max_capacity:
                logger.warning(
                    "Course %s is over capacity (%d/%d); booking %s not confirmed",
                    booking.course_id,
                    availability.value.active_bookings,
                    availability.value.max_capacity,
                    booking_id,
                )
                return Err(CourseFullError(booking.course_id))

        updated = self._bookings.update_status(booking_id, target)
        logger.info(
            "Booking %s moved %s -> %s", booking_id, booking.status.value, target.value
        )
        return Ok(updated)
