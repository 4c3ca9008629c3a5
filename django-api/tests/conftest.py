"""Pytest configuration and shared fixtures."""

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from bookings.domain import (
    Capacity,
    CardStatus,
    Course,
    CourseId,
    InstructorId,
    Member,
    MemberId,
    MembershipCard,
    MemberStatus,
)
from bookings.services import BookingAdmissionService
from bookings.stores import (
    InMemoryBookingStore,
    InMemoryCourseStore,
    InMemoryMemberStore,
    InProcessAdmissionScope,
)


class FakeClock:
    """Deterministic clock; each call returns the current instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def members() -> InMemoryMemberStore:
    return InMemoryMemberStore()


@pytest.fixture
def courses() -> InMemoryCourseStore:
    return InMemoryCourseStore()


@pytest.fixture
def bookings() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def scope() -> InProcessAdmissionScope:
    return InProcessAdmissionScope(timeout=2.0)


@pytest.fixture
def service(bookings, courses, members, scope, clock) -> BookingAdmissionService:
    return BookingAdmissionService(
        bookings=bookings,
        courses=courses,
        members=members,
        scope=scope,
        clock=clock,
    )


@pytest.fixture
def make_member(members, clock):
    """Create a member; by default active with a card valid for 30 more days."""

    def factory(
        status: MemberStatus = MemberStatus.ACTIVE,
        card_status: CardStatus | None = CardStatus.ACTIVE,
        card_end: date | None = None,
    ) -> Member:
        member = members.add_member(
            Member(id=MemberId(uuid.uuid4()), name="Member", status=status)
        )
        if card_status is not None:
            today = clock().date()
            members.add_card(
                MembershipCard(
                    member_id=member.id,
                    status=card_status,
                    start_date=today - timedelta(days=30),
                    end_date=card_end or today + timedelta(days=30),
                )
            )
        return member

    return factory


@pytest.fixture
def make_course(courses, clock):
    def factory(capacity: int = 10, instructor_id: InstructorId | None = None) -> Course:
        return courses.add_course(
            Course(
                id=CourseId(uuid.uuid4()),
                name="Spinning",
                starts_at=clock() + timedelta(days=1),
                max_capacity=Capacity(capacity),
                instructor_id=instructor_id or InstructorId(uuid.uuid4()),
            )
        )

    return factory
