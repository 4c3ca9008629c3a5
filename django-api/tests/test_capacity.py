"""Unit tests for CapacityTracker.

Run with: pytest tests/test_capacity.py -v
"""

import uuid
from dataclasses import replace

import pytest

from bookings.domain import BookingStatus, Capacity, CourseId, MemberId
from bookings.domain.errors import ErrorCode
from bookings.services import CapacityTracker


@pytest.fixture
def tracker(courses, bookings) -> CapacityTracker:
    return CapacityTracker(courses, bookings)


def _book(bookings, course, clock, status=BookingStatus.PENDING):
    booking = bookings.create_booking(MemberId(uuid.uuid4()), course.id, clock())
    if status is not BookingStatus.PENDING:
        booking = bookings.update_status(booking.id, status)
    return booking


class TestCapacityTracker:
    """Tests for CapacityTracker."""

    def test_empty_course_has_all_slots(self, tracker, make_course):
        """Given no bookings, every seat is free."""
        course = make_course(capacity=4)
        assert tracker.available_slots(course.id).unwrap() == 4
        assert tracker.has_room(course.id).unwrap() is True

    def test_pending_and_confirmed_consume_seats(self, tracker, bookings, make_course, clock):
        """Pending and Confirmed bookings each take a seat."""
        course = make_course(capacity=4)
        _book(bookings, course, clock)
        _book(bookings, course, clock, BookingStatus.CONFIRMED)
        assert tracker.available_slots(course.id).unwrap() == 2

    def test_cancelled_and_attended_do_not_consume_seats(self, tracker, bookings, make_course, clock):
        """Cancelled and Attended bookings take no seat."""
        course = make_course(capacity=2)
        _book(bookings, course, clock, BookingStatus.CANCELLED)
        _book(bookings, course, clock, BookingStatus.ATTENDED)
        assert tracker.available_slots(course.id).unwrap() == 2

    def test_full_course_has_no_room(self, tracker, bookings, make_course, clock):
        """Given every seat taken, the course has no room."""
        course = make_course(capacity=1)
        _book(bookings, course, clock)
        assert tracker.available_slots(course.id).unwrap() == 0
        assert tracker.has_room(course.id).unwrap() is False
        assert tracker.availability(course.id).unwrap().is_full

    def test_unknown_course_is_not_found_rather_than_full(self, tracker):
        """Given an unknown course, returns NOT_FOUND rather than zero slots."""
        missing = CourseId(uuid.uuid4())
        assert tracker.available_slots(missing).error.code is ErrorCode.NOT_FOUND
        assert tracker.has_room(missing).error.code is ErrorCode.NOT_FOUND

    def test_capacity_is_read_fresh(self, tracker, courses, bookings, make_course, clock):
        """A capacity change is seen by the next check."""
        course = make_course(capacity=1)
        _book(bookings, course, clock)
        assert tracker.has_room(course.id).unwrap() is False

        courses.add_course(replace(course, max_capacity=Capacity(3)))
        assert tracker.available_slots(course.id).unwrap() == 2

    def test_courses_with_room_skips_full_courses(self, tracker, bookings, make_course, clock):
        """Full courses are left out."""
        full = make_course(capacity=1)
        open_course = make_course(capacity=1)
        _book(bookings, full, clock)
        assert tracker.courses_with_room() == [open_course]
