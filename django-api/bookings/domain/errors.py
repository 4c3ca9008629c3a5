"""Domain error codes for the bookings module."""

from dataclasses import dataclass
from enum import Enum

from bookings.domain.models import BookingStatus


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    MEMBERSHIP_INVALID = "MEMBERSHIP_INVALID"
    DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
    COURSE_FULL = "COURSE_FULL"
    NOT_OWNER = "NOT_OWNER"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    INFRASTRUCTURE_ERROR = "INFRASTRUCTURE_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    @property
    def retryable(self) -> bool:
        return False


class NotFoundError(DomainError):
    """A member, course or booking does not exist."""

    def __init__(self, resource: str, identifier: object) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{resource} not found",
        )
        self.resource = resource
        self.identifier = str(identifier)


class InvalidIdError(DomainError):
    """Raised when an identifier is malformed."""

    def __init__(self, resource: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {resource} ID format",
        )


class MembershipInvalidError(DomainError):
    """The member is not allowed to book (status or card)."""

    def __init__(self, message: str = "No valid membership card") -> None:
        super().__init__(code=ErrorCode.MEMBERSHIP_INVALID, message=message)


class DuplicateBookingError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_BOOKING,
            message="Member already has an active booking for this course",
        )


class CourseFullError(DomainError):
    def __init__(self, course_id: object) -> None:
        super().__init__(code=ErrorCode.COURSE_FULL, message="Course is full")
        self.course_id = str(course_id)


class NotOwnerError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_OWNER,
            message="Members can only cancel their own bookings",
        )


class InvalidTransitionError(DomainError):
    """The booking's current status does not allow the requested change."""

    def __init__(
        self,
        current: BookingStatus,
        target: BookingStatus,
        message: str | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=message or f"Cannot move booking from {current.value} to {target.value}",
        )
        self.current = current
        self.target = target


class AlreadyCancelledError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_CANCELLED,
            message="Booking is already cancelled",
        )


class InfrastructureError(DomainError):
    """The store or lock could not complete the operation; safe to retry."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INFRASTRUCTURE_ERROR,
            message="Booking service temporarily unavailable",
        )

    @property
    def retryable(self) -> bool:
        return True
