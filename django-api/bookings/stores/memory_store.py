"""In-memory store implementations.

Used by the unit tests and by embedders that do not need a database. Each
store guards its own data with a lock so it can be shared between threads;
admission atomicity still comes from an AdmissionScope.
"""

import threading
import uuid
from collections import Counter
from datetime import date, datetime

from bookings.domain import (
    Booking,
    BookingId,
    BookingStatus,
    Course,
    CourseId,
    InstructorId,
    Member,
    MemberId,
    MembershipCard,
)
from bookings.stores.interfaces import BookingStore, CourseStore, MemberStore


def _newest_first(bookings: list[Booking]) -> list[Booking]:
    return sorted(bookings, key=lambda b: b.created_at, reverse=True)


class InMemoryMemberStore(MemberStore):
    def __init__(self) -> None:
        self._members: dict[MemberId, Member] = {}
        self._cards: list[MembershipCard] = []
        self._lock = threading.Lock()

    def add_member(self, member: Member) -> Member:
        with self._lock:
            self._members[member.id] = member
        return member

    def add_card(self, card: MembershipCard) -> MembershipCard:
        with self._lock:
            self._cards.append(card)
        return card

    def get_member(self, member_id: MemberId) -> Member | None:
        with self._lock:
            return self._members.get(member_id)

    def has_valid_membership_card(self, member_id: MemberId, today: date) -> bool:
        with self._lock:
            return any(
                card.member_id == member_id and card.is_valid_on(today)
                for card in self._cards
            )


class InMemoryCourseStore(CourseStore):
    def __init__(self) -> None:
        self._courses: dict[CourseId, Course] = {}
        self._lock = threading.Lock()

    def add_course(self, course: Course) -> Course:
        """Insert or replace a course definition."""
        with self._lock:
            self._courses[course.id] = course
        return course

    def get_course(self, course_id: CourseId) -> Course | None:
        with self._lock:
            return self._courses.get(course_id)

    def list_courses(self, instructor_id: InstructorId | None = None) -> list[Course]:
        with self._lock:
            courses = [
                c
                for c in self._courses.values()
                if instructor_id is None or c.instructor_id == instructor_id
            ]
        return sorted(courses, key=lambda c: c.starts_at)


class InMemoryBookingStore(BookingStore):
    def __init__(self) -> None:
        self._bookings: dict[BookingId, Booking] = {}
        self._lock = threading.Lock()

    def _select(self, predicate) -> list[Booking]:
        with self._lock:
            return _newest_first([b for b in self._bookings.values() if predicate(b)])

    def create_booking(
        self, member_id: MemberId, course_id: CourseId, created_at: datetime
    ) -> Booking:
        booking = Booking(
            id=BookingId(uuid.uuid4()),
            member_id=member_id,
            course_id=course_id,
            created_at=created_at,
            status=BookingStatus.PENDING,
        )
        with self._lock:
            self._bookings[booking.id] = booking
        return booking

    def get_booking(self, booking_id: BookingId) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def update_status(self, booking_id: BookingId, status: BookingStatus) -> Booking:
        with self._lock:
            booking = self._bookings[booking_id].with_status(status)
            self._bookings[booking_id] = booking
        return booking

    def delete_booking(self, booking_id: BookingId) -> None:
        with self._lock:
            self._bookings.pop(booking_id, None)

    def count_active_for_course(self, course_id: CourseId) -> int:
        return len(self._select(lambda b: b.course_id == course_id and b.is_active))

    def has_active_booking(self, member_id: MemberId, course_id: CourseId) -> bool:
        return bool(
            self._select(
                lambda b: b.member_id == member_id
                and b.course_id == course_id
                and b.is_active
            )
        )

    def list_for_member(self, member_id: MemberId) -> list[Booking]:
        return self._select(lambda b: b.member_id == member_id)

    def list_for_course(self, course_id: CourseId) -> list[Booking]:
        return self._select(lambda b: b.course_id == course_id)

    def list_by_status(self, status: BookingStatus) -> list[Booking]:
        return self._select(lambda b: b.status is status)

    def count_by_status(
        self,
        course_id: CourseId | None = None,
        member_id: MemberId | None = None,
    ) -> dict[BookingStatus, int]:
        selected = self._select(
            lambda b: (course_id is None or b.course_id == course_id)
            and (member_id is None or b.member_id == member_id)
        )
        return dict(Counter(b.status for b in selected))

    def list_created_on(self, day: date) -> list[Booking]:
        return self._select(lambda b: b.created_at.date() == day)

    def count_created_on(self, day: date) -> int:
        return len(self._select(lambda b: b.created_at.date() == day))
