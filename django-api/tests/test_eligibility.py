"""Unit tests for EligibilityChecker.

Run with: pytest tests/test_eligibility.py -v
"""

import uuid
from datetime import timedelta

import pytest

from bookings.domain import (
    BookingStatus,
    CardStatus,
    CourseId,
    MemberId,
    MembershipCard,
    MemberStatus,
)
from bookings.domain.errors import ErrorCode
from bookings.services import EligibilityChecker


@pytest.fixture
def checker(members, bookings) -> EligibilityChecker:
    return EligibilityChecker(members, bookings)


class TestEligibilityChecker:
    """Tests for EligibilityChecker.can_book."""

    def test_active_member_with_valid_card_may_book(self, checker, make_member, make_course, clock):
        """An active member with a valid card may book."""
        member = make_member()
        course = make_course()
        assert checker.can_book(member.id, course.id, clock().date()).is_ok

    def test_unknown_member_is_not_found(self, checker, make_course, clock):
        """Given an unknown member, returns NOT_FOUND."""
        result = checker.can_book(MemberId(uuid.uuid4()), make_course().id, clock().date())
        assert result.error.code is ErrorCode.NOT_FOUND

    @pytest.mark.parametrize("status", [MemberStatus.FROZEN, MemberStatus.INACTIVE])
    def test_frozen_or_inactive_member_is_refused(self, checker, make_member, make_course, clock, status):
        """Frozen and inactive members are refused, naming the status."""
        member = make_member(status=status)
        result = checker.can_book(member.id, make_course().id, clock().date())
        assert result.error.code is ErrorCode.MEMBERSHIP_INVALID
        assert status.value in result.error.message

    def test_member_without_card_is_refused(self, checker, make_member, make_course, clock):
        """Given no card, returns MEMBERSHIP_INVALID."""
        member = make_member(card_status=None)
        result = checker.can_book(member.id, make_course().id, clock().date())
        assert result.error.code is ErrorCode.MEMBERSHIP_INVALID

    def test_expired_card_is_refused(self, checker, make_member, make_course, clock):
        """Given a card that ended yesterday, returns MEMBERSHIP_INVALID."""
        member = make_member(card_end=clock().date() - timedelta(days=1))
        result = checker.can_book(member.id, make_course().id, clock().date())
        assert result.error.code is ErrorCode.MEMBERSHIP_INVALID

    def test_card_ending_today_is_accepted(self, checker, make_member, make_course, clock):
        """A card ending today is still valid."""
        member = make_member(card_end=clock().date())
        assert checker.can_book(member.id, make_course().id, clock().date()).is_ok

    def test_inactive_card_is_refused(self, checker, make_member, make_course, clock):
        """Given an inactive card, returns MEMBERSHIP_INVALID."""
        member = make_member(card_status=CardStatus.INACTIVE)
        result = checker.can_book(member.id, make_course().id, clock().date())
        assert result.error.code is ErrorCode.MEMBERSHIP_INVALID

    def test_active_booking_for_same_course_is_duplicate(
        self, checker, bookings, make_member, make_course, clock
    ):
        """Given an active booking for the course, returns DUPLICATE_BOOKING."""
        member = make_member()
        course = make_course()
        bookings.create_booking(member.id, course.id, clock())
        result = checker.can_book(member.id, course.id, clock().date())
        assert result.error.code is ErrorCode.DUPLICATE_BOOKING

    def test_cancelled_booking_does_not_block(self, checker, bookings, make_member, make_course, clock):
        """A cancelled booking does not block rebooking."""
        member = make_member()
        course = make_course()
        booking = bookings.create_booking(member.id, course.id, clock())
        bookings.update_status(booking.id, BookingStatus.CANCELLED)
        assert checker.can_book(member.id, course.id, clock().date()).is_ok

    def test_booking_for_other_course_does_not_block(
        self, checker, bookings, make_member, make_course, clock
    ):
        """A booking for another course does not block."""
        member = make_member()
        bookings.create_booking(member.id, make_course().id, clock())
        assert checker.can_book(member.id, CourseId(uuid.uuid4()), clock().date()).is_ok

    def test_membership_is_evaluated_on_every_call(self, checker, members, make_member, make_course, clock):
        """A card added after a refusal is seen by the next check."""
        member = make_member(card_status=None)
        course = make_course()
        today = clock().date()
        assert not checker.can_book(member.id, course.id, today).is_ok

        members.add_card(
            MembershipCard(
                member_id=member.id,
                status=CardStatus.ACTIVE,
                start_date=today,
                end_date=today + timedelta(days=90),
            )
        )
        assert checker.can_book(member.id, course.id, today).is_ok
