"""Booking admission service - all booking business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors, wrapped in Ok / Err

Every public method returns a Result. Store and lock failures become
Err(InfrastructureError) and are logged; they never propagate to callers.
"""

import functools
import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime, timezone

from bookings.domain import (
    BatchOutcome,
    Booking,
    BookingDetail,
    BookingId,
    BookingOverview,
    BookingStats,
    BookingStatus,
    Course,
    CourseAvailability,
    CourseId,
    InstructorId,
    MemberId,
)
from bookings.domain.errors import (
    CourseFullError,
    InfrastructureError,
    InvalidTransitionError,
    NotFoundError,
    NotOwnerError,
)
from bookings.domain.results import Err, Ok, Result
from bookings.services.capacity import CapacityTracker
from bookings.services.eligibility import EligibilityChecker
from bookings.services.state_machine import BookingStateMachine
from bookings.stores.interfaces import (
    AdmissionScope,
    BookingStore,
    CourseStore,
    MemberStore,
    StoreError,
)

logger = logging.getLogger(__name__)

MEMBER_CANCEL_REASON = "cancelled by member"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _fail_closed(method):
    """Turn store and scope failures into Err(InfrastructureError)."""

    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except StoreError:
            logger.exception("%s aborted by an infrastructure failure", method.__name__)
            return Err(InfrastructureError())

    return wrapper


class BookingAdmissionService:
    """Books, confirms, cancels and checks in course bookings.

    Every mutation runs inside the course's admission scope, so the capacity
    read, the comparison against max_capacity and the write are atomic with
    respect to other mutations on the same course. Read projections skip the
    scope and may return a slightly stale snapshot.
    """

    def __init__(
        self,
        bookings: BookingStore,
        courses: CourseStore,
        members: MemberStore,
        scope: AdmissionScope,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._bookings = bookings
        self._courses = courses
        self._members = members
        self._scope = scope
        self._clock = clock
        self._eligibility = EligibilityChecker(members, bookings)
        self._capacity = CapacityTracker(courses, bookings)
        self._machine = BookingStateMachine(bookings, self._capacity)

    def _today(self) -> date:
        return self._clock().date()

    # Admission and transitions

    @_fail_closed
    def book_course(self, member_id: MemberId, course_id: CourseId) -> Result[Booking]:
        """Create a Pending booking if the member is eligible and a seat is free.

        Nothing is written when any check fails.
        """
        with self._scope.course_scope(course_id):
            eligible = self._eligibility.can_book(member_id, course_id, self._today())
            if not eligible.is_ok:
                logger.info(
                    "Member %s refused for course %s: %s",
                    member_id,
                    course_id,
                    eligible.error.code.value,
                )
                return eligible

            availability = self._capacity.availability(course_id)
            if not availability.is_ok:
                return availability
            if availability.value.is_full:
                logger.info(
                    "Member %s refused for course %s: full (%d/%d)",
                    member_id,
                    course_id,
                    availability.value.active_bookings,
                    availability.value.max_capacity,
                )
                return Err(CourseFullError(course_id))

            booking = self._machine.create(member_id, course_id, self._clock())
        return Ok(booking)

    def book_and_confirm(self, member_id: MemberId, course_id: CourseId) -> Result[Booking]:
        """Book a seat and confirm it straight away.

        A booking whose confirmation fails stays Pending and is still returned
        as a success.
        """
        booked = self.book_course(member_id, course_id)
        if not booked.is_ok:
            return booked

        confirmed = self.confirm_booking(booked.value.id)
        if not confirmed.is_ok:
            logger.warning(
                "Booking %s created but left pending: %s",
                booked.value.id,
                confirmed.error.code.value,
            )
            return booked
        return confirmed

    @_fail_closed
    def confirm_booking(self, booking_id: BookingId) -> Result[Booking]:
        booking = self._bookings.get_booking(booking_id)
        if booking is None:
            return Err(NotFoundError("Booking", booking_id))
        with self._scope.course_scope(booking.course_id):
            return self._machine.confirm(booking_id)

    def member_cancel_booking(self, member_id: MemberId, booking_id: BookingId) -> Result[Booking]:
        """Cancel a booking on behalf of the member who owns it."""
        return self._cancel(booking_id, MEMBER_CANCEL_REASON, owner=member_id)

    def staff_cancel_booking(
        self, booking_id: BookingId, reason: str | None = None
    ) -> Result[Booking]:
        """Cancel any booking, without the ownership check."""
        return self._cancel(booking_id, reason)

    @_fail_closed
    def _cancel(
        self,
        booking_id: BookingId,
        reason: str | None,
        owner: MemberId | None = None,
    ) -> Result[Booking]:
        booking = self._bookings.get_booking(booking_id)
        if booking is None:
            return Err(NotFoundError("Booking", booking_id))

        if owner is not None and booking.member_id != owner:
            logger.warning(
                "Member %s tried to cancel booking %s owned by %s",
                owner,
                booking_id,
                booking.member_id,
            )
            return Err(NotOwnerError())

        with self._scope.course_scope(booking.course_id):
            result = self._machine.cancel(booking_id)

        if result.is_ok and reason and reason.strip():
            logger.info("Booking %s cancelled: %s", booking_id, reason.strip())
        return result

    @_fail_closed
    def mark_attendance(self, booking_id: BookingId) -> Result[Booking]:
        booking = self._bookings.get_booking(booking_id)
        if booking is None:
            return Err(NotFoundError("Booking", booking_id))
        with self._scope.course_scope(booking.course_id):
            return self._machine.mark_attended(booking_id)

    @_fail_closed
    def cancel_active_bookings_for_course(
        self, course_id: CourseId, reason: str | None = None
    ) -> Result[int]:
        """Cancel every Pending and Confirmed booking of a course that is called off."""
        if self._courses.get_course(course_id) is None:
            return Err(NotFoundError("Course", course_id))

        cancelled = 0
        with self._scope.course_scope(course_id):
            for booking in self._bookings.list_for_course(course_id):
                if booking.is_active and self._machine.cancel(booking.id).is_ok:
                    cancelled += 1

        logger.info(
            "Cancelled %d active bookings for course %s%s",
            cancelled,
            course_id,
            f": {reason}" if reason else "",
        )
        return Ok(cancelled)

    def batch_confirm(self, booking_ids: Iterable[BookingId]) -> Result[BatchOutcome]:
        return Ok(self._batch(booking_ids, self.confirm_booking))

    def batch_cancel(
        self, booking_ids: Iterable[BookingId], reason: str | None = None
    ) -> Result[BatchOutcome]:
        return Ok(
            self._batch(booking_ids, lambda booking_id: self.staff_cancel_booking(booking_id, reason))
        )

    def _batch(
        self,
        booking_ids: Iterable[BookingId],
        operation: Callable[[BookingId], Result[Booking]],
    ) -> BatchOutcome:
        succeeded: list[BookingId] = []
        failed: list[tuple[BookingId, str]] = []
        for booking_id in booking_ids:
            result = operation(booking_id)
            if result.is_ok:
                succeeded.append(booking_id)
            else:
                failed.append((booking_id, result.error.code.value))
        logger.info("Batch finished: %d succeeded, %d failed", len(succeeded), len(failed))
        return BatchOutcome(succeeded=tuple(succeeded), failed=tuple(failed))

    @_fail_closed
    def delete_booking(self, booking_id: BookingId) -> Result[None]:
        """Administrative hard delete; only cancelled bookings may be removed."""
        booking = self._bookings.get_booking(booking_id)
        if booking is None:
            return Err(NotFoundError("Booking", booking_id))
        if booking.status is not BookingStatus.CANCELLED:
            return Err(
                InvalidTransitionError(
                    booking.status,
                    BookingStatus.CANCELLED,
                    message="Only cancelled bookings can be deleted",
                )
            )

        with self._scope.course_scope(booking.course_id):
            self._bookings.delete_booking(booking_id)
        logger.info("Booking %s deleted", booking_id)
        return Ok(None)

    # Read projections

    @_fail_closed
    def get_booking(self, booking_id: BookingId) -> Result[Booking]:
        booking = self._bookings.get_booking(booking_id)
        if booking is None:
            return Err(NotFoundError("Booking", booking_id))
        return Ok(booking)

    @_fail_closed
    def get_booking_detail(self, booking_id: BookingId) -> Result[BookingDetail]:
        """The booking together with its member and course."""
        booking = self._bookings.get_booking(booking_id)
        if booking is None:
            return Err(NotFoundError("Booking", booking_id))
        return Ok(
            BookingDetail(
                booking=booking,
                member=self._members.get_member(booking.member_id),
                course=self._courses.get_course(booking.course_id),
            )
        )

    @_fail_closed
    def list_bookings_for_member(self, member_id: MemberId) -> Result[list[Booking]]:
        return Ok(self._bookings.list_for_member(member_id))

    @_fail_closed
    def list_active_bookings_for_member(self, member_id: MemberId) -> Result[list[Booking]]:
        return Ok([b for b in self._bookings.list_for_member(member_id) if b.is_active])

    @_fail_closed
    def list_bookings_for_course(self, course_id: CourseId) -> Result[list[Booking]]:
        return Ok(self._bookings.list_for_course(course_id))

    @_fail_closed
    def list_bookings_by_status(self, status: BookingStatus) -> Result[list[Booking]]:
        return Ok(self._bookings.list_by_status(status))

    def list_pending(self) -> Result[list[Booking]]:
        return self.list_bookings_by_status(BookingStatus.PENDING)

    @_fail_closed
    def list_bookings_for_instructor(self, instructor_id: InstructorId) -> Result[list[Booking]]:
        bookings: list[Booking] = []
        for course in self._courses.list_courses(instructor_id=instructor_id):
            bookings.extend(self._bookings.list_for_course(course.id))
        bookings.sort(key=lambda b: b.created_at, reverse=True)
        return Ok(bookings)

    @_fail_closed
    def list_todays_bookings(
        self, instructor_id: InstructorId | None = None
    ) -> Result[list[Booking]]:
        """Bookings created today, oldest first.

        Narrowed to an instructor, only the Pending and Confirmed bookings of
        that instructor's courses are listed.
        """
        bookings = self._bookings.list_created_on(self._today())
        if instructor_id is not None:
            course_ids = {c.id for c in self._courses.list_courses(instructor_id=instructor_id)}
            bookings = [b for b in bookings if b.course_id in course_ids and b.is_active]
        return Ok(sorted(bookings, key=lambda b: b.created_at))

    @_fail_closed
    def member_booking_history(
        self,
        member_id: MemberId,
        start: date | None = None,
        end: date | None = None,
    ) -> Result[list[Booking]]:
        """Bookings created between ``start`` and ``end`` inclusive; either bound may be omitted."""
        return Ok(
            [
                b
                for b in self._bookings.list_for_member(member_id)
                if (start is None or b.created_at.date() >= start)
                and (end is None or b.created_at.date() <= end)
            ]
        )

    # Capacity reporting

    @_fail_closed
    def available_slots(self, course_id: CourseId) -> Result[int]:
        return self._capacity.available_slots(course_id)

    @_fail_closed
    def course_availability(self, course_id: CourseId) -> Result[CourseAvailability]:
        return self._capacity.availability(course_id)

    @_fail_closed
    def available_courses(self) -> Result[list[Course]]:
        return Ok(self._capacity.courses_with_room())

    # Statistics

    @_fail_closed
    def course_booking_stats(self, course_id: CourseId) -> Result[BookingStats]:
        if self._courses.get_course(course_id) is None:
            return Err(NotFoundError("Course", course_id))
        return Ok(BookingStats.from_counts(self._bookings.count_by_status(course_id=course_id)))

    @_fail_closed
    def member_booking_stats(self, member_id: MemberId) -> Result[BookingStats]:
        return Ok(BookingStats.from_counts(self._bookings.count_by_status(member_id=member_id)))

    @_fail_closed
    def booking_statistics(self) -> Result[BookingOverview]:
        return Ok(
            BookingOverview(
                totals=BookingStats.from_counts(self._bookings.count_by_status()),
                created_today=self._bookings.count_created_on(self._today()),
            )
        )
