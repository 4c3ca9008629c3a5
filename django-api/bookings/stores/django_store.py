"""Django ORM implementations of the stores.

Every database fault is re-raised as StoreError so services never see
driver-specific exceptions.
"""

import functools
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime

from django.db import DatabaseError, transaction
from django.db.models import Count

from bookings import models
from bookings.domain import (
    ACTIVE_STATUSES,
    Booking,
    BookingId,
    BookingStatus,
    CardStatus,
    Capacity,
    Course,
    CourseId,
    InstructorId,
    Member,
    MemberId,
    MemberStatus,
)
from bookings.stores.interfaces import (
    AdmissionScope,
    BookingStore,
    CourseStore,
    MemberStore,
    StoreError,
)
from bookings.stores.locking import InProcessAdmissionScope

logger = logging.getLogger(__name__)

_ACTIVE_VALUES = [s.value for s in ACTIVE_STATUSES]


def _wrap_db_errors(method):
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except DatabaseError as exc:
            raise StoreError(f"{method.__qualname__} failed") from exc

    return wrapper


def _member_to_domain(row: models.Member) -> Member:
    return Member(id=MemberId(row.id), name=row.name, status=MemberStatus(row.status))


def _course_to_domain(row: models.Course) -> Course:
    return Course(
        id=CourseId(row.id),
        name=row.name,
        starts_at=row.starts_at,
        max_capacity=Capacity(row.max_capacity),
        instructor_id=InstructorId(row.instructor_id),
    )


def _booking_to_domain(row: models.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        member_id=MemberId(row.member_id),
        course_id=CourseId(row.course_id),
        created_at=row.created_at,
        status=BookingStatus(row.status),
    )


class DjangoMemberStore(MemberStore):
    """Member lookups backed by the ORM."""

    @_wrap_db_errors
    def get_member(self, member_id: MemberId) -> Member | None:
        row = models.Member.objects.filter(pk=member_id.value).first()
        return _member_to_domain(row) if row else None

    @_wrap_db_errors
    def has_valid_membership_card(self, member_id: MemberId, today: date) -> bool:
        return models.MembershipCard.objects.filter(
            member_id=member_id.value,
            status=CardStatus.ACTIVE.value,
            end_date__gte=today,
        ).exists()


class DjangoCourseStore(CourseStore):
    """Course lookups backed by the ORM; capacity is always read fresh."""

    @_wrap_db_errors
    def get_course(self, course_id: CourseId) -> Course | None:
        row = models.Course.objects.filter(pk=course_id.value).first()
        return _course_to_domain(row) if row else None

    @_wrap_db_errors
    def list_courses(self, instructor_id: InstructorId | None = None) -> list[Course]:
        queryset = models.Course.objects.order_by("starts_at")
        if instructor_id is not None:
            queryset = queryset.filter(instructor_id=instructor_id.value)
        return [_course_to_domain(row) for row in queryset]


class DjangoBookingStore(BookingStore):
    """PostgreSQL-backed booking store using Django ORM."""

    def _list(self, **filters) -> list[Booking]:
        queryset = models.Booking.objects.filter(**filters).order_by("-created_at")
        return [_booking_to_domain(row) for row in queryset]

    @_wrap_db_errors
    def create_booking(
        self, member_id: MemberId, course_id: CourseId, created_at: datetime
    ) -> Booking:
        row = models.Booking.objects.create(
            member_id=member_id.value,
            course_id=course_id.value,
            created_at=created_at,
            status=BookingStatus.PENDING.value,
        )
        return _booking_to_domain(row)

    @_wrap_db_errors
    def get_booking(self, booking_id: BookingId) -> Booking | None:
        row = models.Booking.objects.filter(pk=booking_id.value).first()
        return _booking_to_domain(row) if row else None

    @_wrap_db_errors
    def update_status(self, booking_id: BookingId, status: BookingStatus) -> Booking:
        models.Booking.objects.filter(pk=booking_id.value).update(status=status.value)
        return _booking_to_domain(models.Booking.objects.get(pk=booking_id.value))

    @_wrap_db_errors
    def delete_booking(self, booking_id: BookingId) -> None:
        models.Booking.objects.filter(pk=booking_id.value).delete()

    @_wrap_db_errors
    def count_active_for_course(self, course_id: CourseId) -> int:
        return models.Booking.objects.filter(
            course_id=course_id.value, status__in=_ACTIVE_VALUES
        ).count()

    @_wrap_db_errors
    def has_active_booking(self, member_id: MemberId, course_id: CourseId) -> bool:
        return models.Booking.objects.filter(
            member_id=member_id.value,
            course_id=course_id.value,
            status__in=_ACTIVE_VALUES,
        ).exists()

    @_wrap_db_errors
    def list_for_member(self, member_id: MemberId) -> list[Booking]:
        return self._list(member_id=member_id.value)

    @_wrap_db_errors
    def list_for_course(self, course_id: CourseId) -> list[Booking]:
        return self._list(course_id=course_id.value)

    @_wrap_db_errors
    def list_by_status(self, status: BookingStatus) -> list[Booking]:
        return self._list(status=status.value)

    @_wrap_db_errors
    def count_by_status(
        self,
        course_id: CourseId | None = None,
        member_id: MemberId | None = None,
    ) -> dict[BookingStatus, int]:
        queryset = models.Booking.objects.all()
        if course_id is not None:
            queryset = queryset.filter(course_id=course_id.value)
        if member_id is not None:
            queryset = queryset.filter(member_id=member_id.value)
        rows = queryset.order_by().values("status").annotate(count=Count("id"))
        return {BookingStatus(row["status"]): row["count"] for row in rows}

    @_wrap_db_errors
    def list_created_on(self, day: date) -> list[Booking]:
        return self._list(created_at__date=day)

    @_wrap_db_errors
    def count_created_on(self, day: date) -> int:
        return models.Booking.objects.filter(created_at__date=day).count()


_process_scope: InProcessAdmissionScope | None = None
_process_scope_lock = threading.Lock()


class DjangoAdmissionScope(AdmissionScope):
    """Per-course scope: in-process lock, then a transaction holding the course row.

    The process-local lock keeps threads of one worker from queueing on the
    database; ``SELECT ... FOR UPDATE`` on the course row serializes workers
    in other processes (a no-op on SQLite, which serializes writers itself).
    """

    def __init__(
        self,
        locks: InProcessAdmissionScope,
        using: str = "default",
        timeout: float | None = None,
    ) -> None:
        self._locks = locks
        self._using = using
        self._timeout = timeout

    @classmethod
    def shared(cls, timeout: float) -> "DjangoAdmissionScope":
        """Return a scope backed by the process-wide lock registry.

        Every caller shares the same per-course locks; ``timeout`` applies to
        this scope only, so a changed setting takes effect on the next request.
        """
        global _process_scope
        with _process_scope_lock:
            if _process_scope is None:
                _process_scope = InProcessAdmissionScope(timeout=timeout)
        return cls(_process_scope, timeout=timeout)

    @contextmanager
    def course_scope(self, course_id: CourseId) -> Iterator[None]:
        with self._locks.course_scope(course_id, timeout=self._timeout):
            try:
                with transaction.atomic(using=self._using):
                    list(
                        models.Course.objects.using(self._using)
                        .select_for_update()
                        .filter(pk=course_id.value)
                        .values_list("pk", flat=True)
                    )
                    yield
            except DatabaseError as exc:
                logger.error("Admission transaction for course %s aborted", course_id)
                raise StoreError(f"admission transaction for course {course_id} aborted") from exc
