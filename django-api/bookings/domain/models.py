"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in bookings/models.py (persistence layer).
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Mapping, Self

from bookings.domain.value_objects import (
    BookingId,
    Capacity,
    CourseId,
    InstructorId,
    MemberId,
)


UNKNOWN_NAME = "Unknown"


class BookingStatus(Enum):
    """Lifecycle states of a booking."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    ATTENDED = "attended"

    @property
    def is_active(self) -> bool:
        """Active bookings hold a seat in the course."""
        return self in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.CANCELLED, BookingStatus.ATTENDED)


ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


class MemberStatus(Enum):
    ACTIVE = "active"
    FROZEN = "frozen"
    INACTIVE = "inactive"


class CardStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Member:
    """Domain representation of a gym member (owned by member management)."""

    id: MemberId
    name: str
    status: MemberStatus


@dataclass(frozen=True)
class MembershipCard:
    """A membership card; valid while active and not past its end date."""

    member_id: MemberId
    status: CardStatus
    start_date: date
    end_date: date

    def is_valid_on(self, day: date) -> bool:
        return self.status is CardStatus.ACTIVE and self.end_date >= day


@dataclass(frozen=True)
class Course:
    """Domain representation of a scheduled course."""

    id: CourseId
    name: str
    starts_at: datetime
    max_capacity: Capacity
    instructor_id: InstructorId


@dataclass(frozen=True)
class Booking:
    """Domain representation of a seat reservation in a course."""

    id: BookingId
    member_id: MemberId
    course_id: CourseId
    created_at: datetime
    status: BookingStatus

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def with_status(self, status: BookingStatus) -> Self:
        return replace(self, status=status)


@dataclass(frozen=True)
class BookingDetail:
    """A booking joined with its member and course, for display.

    Member or course may be missing if they were removed after booking.
    """

    booking: Booking
    member: Member | None
    course: Course | None

    @property
    def member_name(self) -> str:
        return self.member.name if self.member else UNKNOWN_NAME

    @property
    def course_name(self) -> str:
        return self.course.name if self.course else UNKNOWN_NAME

    @property
    def instructor_id(self) -> InstructorId | None:
        return self.course.instructor_id if self.course else None


@dataclass(frozen=True)
class CourseAvailability:
    """Point-in-time seat usage for a course."""

    course_id: CourseId
    max_capacity: int
    active_bookings: int

    @property
    def available_slots(self) -> int:
        return self.max_capacity - self.active_bookings

    @property
    def is_full(self) -> bool:
        return self.available_slots <= 0


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


@dataclass(frozen=True)
class BookingStats:
    """Booking counts broken down by status."""

    pending: int = 0
    confirmed: int = 0
    cancelled: int = 0
    attended: int = 0

    @classmethod
    def from_counts(cls, counts: Mapping[BookingStatus, int]) -> Self:
        return cls(**{status.value: counts.get(status, 0) for status in BookingStatus})

    @property
    def total(self) -> int:
        return self.pending + self.confirmed + self.cancelled + self.attended

    @property
    def active(self) -> int:
        return self.pending + self.confirmed

    @property
    def confirm_rate(self) -> float:
        """Percentage of bookings that reached Confirmed (attended ones included)."""
        return _percent(self.confirmed + self.attended, self.total)

    @property
    def cancel_rate(self) -> float:
        return _percent(self.cancelled, self.total)


@dataclass(frozen=True)
class BookingOverview:
    """Gym-wide booking figures."""

    totals: BookingStats
    created_today: int

    @property
    def confirm_rate(self) -> float:
        return self.totals.confirm_rate

    @property
    def cancel_rate(self) -> float:
        return self.totals.cancel_rate


@dataclass(frozen=True)
class BatchOutcome:
    """Per-id results of a batch operation."""

    succeeded: tuple[BookingId, ...] = ()
    failed: tuple[tuple[BookingId, str], ...] = ()

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)
