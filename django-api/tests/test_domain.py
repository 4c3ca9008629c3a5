"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

import uuid
from datetime import date, datetime, timezone

import pytest

from bookings.domain import (
    Booking,
    BookingDetail,
    BookingId,
    BookingStats,
    BookingStatus,
    Capacity,
    CardStatus,
    CourseAvailability,
    CourseId,
    MemberId,
    MembershipCard,
)
from bookings.domain.errors import (
    CourseFullError,
    ErrorCode,
    InfrastructureError,
    InvalidTransitionError,
    NotFoundError,
)
from bookings.domain.results import Err, Ok


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        """Capacity can be created with a positive value."""
        assert Capacity(1).value == 1

    def test_capacity_rejects_zero(self):
        """Capacity raises ValueError for zero."""
        with pytest.raises(ValueError):
            Capacity(0)

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for a negative value."""
        with pytest.raises(ValueError):
            Capacity(-3)


class TestBookingId:
    """Tests for BookingId value object."""

    def test_from_string_valid_uuid(self):
        """BookingId.from_string parses a valid UUID."""
        raw = "6f1c2a52-6a41-4d0e-9a43-4bd1e7b1c0de"
        booking_id = BookingId.from_string(raw)
        assert booking_id.value == uuid.UUID(raw)
        assert str(booking_id) == raw

    def test_from_string_invalid_uuid(self):
        """BookingId.from_string raises ValueError for an invalid UUID."""
        with pytest.raises(ValueError):
            BookingId.from_string("not-a-uuid")

    def test_ids_compare_by_value(self):
        """IDs with the same UUID are equal and hash alike."""
        value = uuid.uuid4()
        assert MemberId(value) == MemberId(value)
        assert hash(CourseId(value)) == hash(CourseId(value))


class TestBookingStatus:
    """Tests for BookingStatus."""

    @pytest.mark.parametrize(
        "status, active",
        [
            (BookingStatus.PENDING, True),
            (BookingStatus.CONFIRMED, True),
            (BookingStatus.CANCELLED, False),
            (BookingStatus.ATTENDED, False),
        ],
    )
    def test_only_pending_and_confirmed_hold_a_seat(self, status, active):
        """Only Pending and Confirmed are active."""
        assert status.is_active is active

    def test_cancelled_and_attended_are_terminal(self):
        """Cancelled and Attended are terminal."""
        terminal = {s for s in BookingStatus if s.is_terminal}
        assert terminal == {BookingStatus.CANCELLED, BookingStatus.ATTENDED}

    def test_with_status_keeps_identity(self):
        """with_status returns a copy that keeps id and creation time."""
        booking = Booking(
            id=BookingId(uuid.uuid4()),
            member_id=MemberId(uuid.uuid4()),
            course_id=CourseId(uuid.uuid4()),
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
            status=BookingStatus.PENDING,
        )
        confirmed = booking.with_status(BookingStatus.CONFIRMED)
        assert confirmed.id == booking.id
        assert confirmed.created_at == booking.created_at
        assert booking.status is BookingStatus.PENDING


class TestMembershipCard:
    """Tests for MembershipCard.is_valid_on."""

    def _card(self, status=CardStatus.ACTIVE, end=date(2026, 3, 10)):
        return MembershipCard(
            member_id=MemberId(uuid.uuid4()),
            status=status,
            start_date=date(2026, 1, 1),
            end_date=end,
        )

    def test_active_card_valid_before_end_date(self):
        """An active card is valid before its end date."""
        assert self._card().is_valid_on(date(2026, 3, 1))

    def test_card_valid_on_its_end_date(self):
        """A card is still valid on its end date."""
        assert self._card().is_valid_on(date(2026, 3, 10))

    def test_card_invalid_after_end_date(self):
        """A card is invalid the day after its end date."""
        assert not self._card().is_valid_on(date(2026, 3, 11))

    @pytest.mark.parametrize("status", [CardStatus.INACTIVE, CardStatus.EXPIRED])
    def test_non_active_card_never_valid(self, status):
        """Inactive and expired cards are never valid."""
        assert not self._card(status=status).is_valid_on(date(2026, 3, 1))


class TestCourseAvailability:
    """Tests for CourseAvailability."""

    def test_slots_left(self):
        """Free slots are capacity minus active bookings."""
        availability = CourseAvailability(CourseId(uuid.uuid4()), max_capacity=5, active_bookings=3)
        assert availability.available_slots == 2
        assert not availability.is_full

    def test_full_when_no_slots_left(self):
        """A course with no free slots is full."""
        availability = CourseAvailability(CourseId(uuid.uuid4()), max_capacity=2, active_bookings=2)
        assert availability.available_slots == 0
        assert availability.is_full


class TestBookingStats:
    """Tests for BookingStats."""

    def test_from_counts_fills_missing_statuses_with_zero(self):
        """Statuses missing from the counts are zero."""
        stats = BookingStats.from_counts({BookingStatus.PENDING: 2, BookingStatus.CANCELLED: 1})
        assert stats == BookingStats(pending=2, confirmed=0, cancelled=1, attended=0)
        assert stats.total == 3
        assert stats.active == 2

    def test_rates_are_percentages_of_total(self):
        """Confirm rate counts Confirmed and Attended; cancel rate counts Cancelled."""
        stats = BookingStats(pending=1, confirmed=1, cancelled=1, attended=1)
        assert stats.confirm_rate == pytest.approx(50.0)
        assert stats.cancel_rate == pytest.approx(25.0)

    def test_rates_without_bookings_are_zero(self):
        """Given no bookings, both rates are zero rather than a division error."""
        assert BookingStats().confirm_rate == 0.0
        assert BookingStats().cancel_rate == 0.0


class TestBookingDetail:
    """Tests for BookingDetail display fields."""

    def test_missing_member_and_course_show_unknown(self):
        """Given neither member nor course, names fall back to Unknown."""
        booking = Booking(
            id=BookingId(uuid.uuid4()),
            member_id=MemberId(uuid.uuid4()),
            course_id=CourseId(uuid.uuid4()),
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
            status=BookingStatus.PENDING,
        )
        detail = BookingDetail(booking=booking, member=None, course=None)
        assert detail.member_name == "Unknown"
        assert detail.course_name == "Unknown"
        assert detail.instructor_id is None


class TestErrors:
    """Tests for domain errors."""

    def test_not_found_message_is_user_safe(self):
        """NotFoundError names the resource but not the identifier."""
        error = NotFoundError("Booking", "abc")
        assert error.code is ErrorCode.NOT_FOUND
        assert error.message == "Booking not found"
        assert str(error) == "NOT_FOUND: Booking not found"

    def test_invalid_transition_names_both_states(self):
        """InvalidTransitionError names both states."""
        error = InvalidTransitionError(BookingStatus.CANCELLED, BookingStatus.CONFIRMED)
        assert "cancelled" in error.message
        assert "confirmed" in error.message

    def test_only_infrastructure_errors_are_retryable(self):
        """Only InfrastructureError is retryable."""
        assert InfrastructureError().retryable
        assert not CourseFullError("c1").retryable


class TestResult:
    """Tests for Ok and Err."""

    def test_ok_unwraps_value(self):
        """Ok.unwrap returns the value."""
        result = Ok(3)
        assert result.is_ok
        assert result.unwrap() == 3

    def test_err_unwrap_raises_domain_error(self):
        """Err.unwrap raises the wrapped error."""
        result = Err(CourseFullError("c1"))
        assert not result.is_ok
        with pytest.raises(CourseFullError):
            result.unwrap()
