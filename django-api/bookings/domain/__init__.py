from bookings.domain.errors import DomainError, ErrorCode
from bookings.domain.models import (
    ACTIVE_STATUSES,
    BatchOutcome,
    Booking,
    BookingDetail,
    BookingOverview,
    BookingStats,
    BookingStatus,
    CardStatus,
    Course,
    CourseAvailability,
    Member,
    MembershipCard,
    MemberStatus,
)
from bookings.domain.results import Err, Ok, Result
from bookings.domain.value_objects import BookingId, Capacity, CourseId, InstructorId, MemberId

__all__ = [
    "ACTIVE_STATUSES",
    "BatchOutcome",
    "Booking",
    "BookingDetail",
    "BookingOverview",
    "BookingStats",
    "BookingStatus",
    "CardStatus",
    "Course",
    "CourseAvailability",
    "Member",
    "MembershipCard",
    "MemberStatus",
    "BookingId",
    "CourseId",
    "InstructorId",
    "MemberId",
    "Capacity",
    "DomainError",
    "ErrorCode",
    "Ok",
    "Err",
    "Result",
]
