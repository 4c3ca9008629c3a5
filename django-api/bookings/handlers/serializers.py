"""Serializers for transforming domain models to API responses and parsing input."""

from rest_framework import serializers

from bookings.domain import BookingStatus


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.UUIDField(source="id.value")
    member_id = serializers.UUIDField(source="member_id.value")
    course_id = serializers.UUIDField(source="course_id.value")
    created_at = serializers.DateTimeField()
    status = serializers.CharField(source="status.value")


class BookingDetailSerializer(serializers.Serializer):
    """Serializer for BookingDetail: the booking plus display names."""

    booking = BookingSerializer()
    member_name = serializers.CharField()
    course_name = serializers.CharField()
    instructor_id = serializers.SerializerMethodField()

    def get_instructor_id(self, detail) -> str | None:
        return str(detail.instructor_id) if detail.instructor_id else None


class CourseAvailabilitySerializer(serializers.Serializer):
    """Serializer for CourseAvailability domain model."""

    course_id = serializers.UUIDField(source="course_id.value")
    max_capacity = serializers.IntegerField()
    active_bookings = serializers.IntegerField()
    available_slots = serializers.IntegerField()
    is_full = serializers.BooleanField()


class BookCourseSerializer(serializers.Serializer):
    """Input for POST /api/bookings."""

    member_id = serializers.UUIDField()
    course_id = serializers.UUIDField()
    confirm = serializers.BooleanField(default=False)


class CancelBookingSerializer(serializers.Serializer):
    """Input for POST /api/bookings/{id}/cancel.

    With member_id the ownership check applies; without it the cancel is a
    staff override.
    """

    member_id = serializers.UUIDField(required=False)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


class BookingStatusQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[s.value for s in BookingStatus],
        default=BookingStatus.PENDING.value,
    )


class TodaysBookingsQuerySerializer(serializers.Serializer):
    instructor_id = serializers.UUIDField(required=False)
