"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Infrastructure faults are
raised as StoreError; "not found" is reported with None, never an exception.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
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
)


class StoreError(Exception):
    """The backing store is unreachable or a transaction was aborted."""


class ScopeTimeoutError(StoreError):
    """A per-course admission scope could not be acquired in time."""


class MemberStore(ABC):
    """Read access to member management data."""

    @abstractmethod
    def get_member(self, member_id: MemberId) -> Member | None:
        """Return a member by ID, or None if not found."""
        ...

    @abstractmethod
    def has_valid_membership_card(self, member_id: MemberId, today: date) -> bool:
        """Check for a card with status active and end_date >= today."""
        ...


class CourseStore(ABC):
    """Read access to course definitions."""

    @abstractmethod
    def get_course(self, course_id: CourseId) -> Course | None:
        """Return a course by ID with its current max_capacity, or None."""
        ...

    @abstractmethod
    def list_courses(self, instructor_id: InstructorId | None = None) -> list[Course]:
        """Return courses ordered by starts_at ascending, optionally for one instructor."""
        ...


class BookingStore(ABC):
    """Interface for booking persistence operations.

    All list methods return bookings ordered by created_at descending.
    """

    @abstractmethod
    def create_booking(
        self, member_id: MemberId, course_id: CourseId, created_at: datetime
    ) -> Booking:
        """Persist a new Pending booking and return it with its assigned ID."""
        ...

    @abstractmethod
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def update_status(self, booking_id: BookingId, status: BookingStatus) -> Booking:
        """Set the status of an existing booking and return the updated booking."""
        ...

    @abstractmethod
    def delete_booking(self, booking_id: BookingId) -> None:
        ...

    @abstractmethod
    def count_active_for_course(self, course_id: CourseId) -> int:
        """Count Pending and Confirmed bookings for a course."""
        ...

    @abstractmethod
    def has_active_booking(self, member_id: MemberId, course_id: CourseId) -> bool:
        """Check for a Pending or Confirmed booking for the pair."""
        ...

    @abstractmethod
    def list_for_member(self, member_id: MemberId) -> list[Booking]:
        ...

    @abstractmethod
    def list_for_course(self, course_id: CourseId) -> list[Booking]:
        ...

    @abstractmethod
    def list_by_status(self, status: BookingStatus) -> list[Booking]:
        ...

    @abstractmethod
    def count_by_status(
        self,
        course_id: CourseId | None = None,
        member_id: MemberId | None = None,
    ) -> dict[BookingStatus, int]:
        """Count bookings per status, optionally narrowed to a course or member."""
        ...

    @abstractmethod
    def list_created_on(self, day: date) -> list[Booking]:
        """Bookings created on the given calendar day, newest first."""
        ...

    @abstractmethod
    def count_created_on(self, day: date) -> int:
        """Count bookings created on the given calendar day."""
        ...


class AdmissionScope(ABC):
    """Per-course mutual exclusion for admission decisions.

    Everything executed inside ``course_scope(course_id)`` is atomic with
    respect to any other scope on the same course, and either commits as a
    whole or has no effect. Scopes on different courses never block each other.
    """

    @abstractmethod
    def course_scope(self, course_id: CourseId) -> AbstractContextManager[None]:
        """Enter the exclusive scope for a course.

        Raises:
            ScopeTimeoutError: If the scope cannot be acquired in time.
            StoreError: If the underlying transaction cannot be opened or committed.
        """
        ...
