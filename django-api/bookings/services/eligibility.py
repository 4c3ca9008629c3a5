"""Eligibility checks for creating a new booking."""

import logging
from datetime import date

from bookings.domain import CourseId, MemberId, MemberStatus
from bookings.domain.errors import DuplicateBookingError, MembershipInvalidError, NotFoundError
from bookings.domain.results import Err, Ok, Result
from bookings.stores.interfaces import BookingStore, MemberStore

logger = logging.getLogger(__name__)


class EligibilityChecker:
    """Decides whether a member may open a new booking for a course.

    Read-only. Membership state and existing bookings change between calls,
    so callers must run this inside the course's admission scope together
    with the capacity check.
    """

    def __init__(self, members: MemberStore, bookings: BookingStore) -> None:
        self._members = members
        self._bookings = bookings

    def can_book(self, member_id: MemberId, course_id: CourseId, today: date) -> Result[None]:
        """Return Ok(None) when the member may book the course.

        Failures:
            NotFoundError: The member does not exist.
            MembershipInvalidError: The member is frozen or inactive, or has no
                active card ending on or after ``today``.
            DuplicateBookingError: A Pending or Confirmed booking already exists.
        """
        member = self._members.get_member(member_id)
        if member is None:
            return Err(NotFoundError("Member", member_id))

        if member.status is not MemberStatus.ACTIVE:
            return Err(MembershipInvalidError(f"Membership is {member.status.value}"))

        if not self._members.has_valid_membership_card(member_id, today):
            return Err(MembershipInvalidError())

        if self._bookings.has_active_booking(member_id, course_id):
            return Err(DuplicateBookingError())

        return Ok(None)
