"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Member, MembershipCard and Course belong to other parts of the gym system;
they are kept minimal here so bookings can reference them.
"""

import uuid

from django.db import models

from bookings.domain import ACTIVE_STATUSES, BookingStatus, CardStatus, MemberStatus


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(item.value, item.name.title()) for item in enum_cls]


class Member(models.Model):
    """Persistence model for gym members."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    status = models.CharField(
        max_length=16,
        choices=_choices(MemberStatus),
        default=MemberStatus.ACTIVE.value,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class MembershipCard(models.Model):
    """Persistence model for membership cards."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    member = models.ForeignKey(Member, on_delete=models.CASCADE, related_name="cards")
    status = models.CharField(
        max_length=16,
        choices=_choices(CardStatus),
        default=CardStatus.ACTIVE.value,
    )
    start_date = models.DateField()
    end_date = models.DateField()

    class Meta:
        indexes = [
            models.Index(fields=["member", "status", "end_date"], name="card_member_validity_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.member.name} ({self.start_date} - {self.end_date})"


class Course(models.Model):
    """Persistence model for scheduled courses."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    starts_at = models.DateTimeField()
    max_capacity = models.PositiveIntegerField()
    instructor_id = models.UUIDField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["instructor_id", "starts_at"], name="course_instructor_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_capacity__gt=0),
                name="course_max_capacity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.starts_at}"


class Booking(models.Model):
    """Persistence model for course bookings."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    member = models.ForeignKey(Member, on_delete=models.PROTECT, related_name="bookings")
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name="bookings")
    created_at = models.DateTimeField()
    status = models.CharField(
        max_length=16,
        choices=_choices(BookingStatus),
        default=BookingStatus.PENDING.value,
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["course", "status"], name="booking_course_status_idx"),
            models.Index(
                fields=["member", "course", "status"], name="booking_member_course_st_idx"
            ),
            models.Index(fields=["member", "-created_at"], name="booking_member_created_idx"),
            models.Index(fields=["status", "-created_at"], name="booking_status_created_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["member", "course"],
                condition=models.Q(status__in=sorted(s.value for s in ACTIVE_STATUSES)),
                name="unique_active_booking_per_member_course",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.member_id} -> {self.course_id} ({self.status})"
