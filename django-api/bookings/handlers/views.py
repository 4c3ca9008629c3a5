"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.utils import timezone
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.conf import get_setting
from bookings.domain import BookingId, BookingStatus, CourseId, ErrorCode, InstructorId, MemberId
from bookings.domain.errors import DomainError, InvalidIdError
from bookings.domain.results import Result
from bookings.handlers.serializers import (
    BookCourseSerializer,
    BookingDetailSerializer,
    BookingSerializer,
    BookingStatusQuerySerializer,
    CancelBookingSerializer,
    CourseAvailabilitySerializer,
    TodaysBookingsQuerySerializer,
)
from bookings.services import BookingAdmissionService
from bookings.stores.django_store import (
    DjangoAdmissionScope,
    DjangoBookingStore,
    DjangoCourseStore,
    DjangoMemberStore,
)

ERROR_STATUS = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCode.MEMBERSHIP_INVALID: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_BOOKING: status.HTTP_409_CONFLICT,
    ErrorCode.COURSE_FULL: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_CANCELLED: status.HTTP_409_CONFLICT,
    ErrorCode.INFRASTRUCTURE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_admission_service() -> BookingAdmissionService:
    return BookingAdmissionService(
        bookings=DjangoBookingStore(),
        courses=DjangoCourseStore(),
        members=DjangoMemberStore(),
        scope=DjangoAdmissionScope.shared(timeout=get_setting("LOCK_TIMEOUT_SECONDS")),
        clock=timezone.localtime,
    )


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=ERROR_STATUS[error.code],
    )


def invalid_request_response() -> Response:
    return Response(
        {"code": "INVALID_REQUEST", "message": "Invalid request body"},
        status=status.HTTP_400_BAD_REQUEST,
    )


def render(
    result: Result,
    serializer_class,
    *,
    many: bool = False,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    if not result.is_ok:
        return error_response(result.error)
    return Response(serializer_class(result.value, many=many).data, status=status_code)


def parse_id(id_class, value: str, resource: str):
    """Parse a path parameter, raising InvalidIdError for malformed UUIDs."""
    try:
        return id_class.from_string(value)
    except ValueError:
        raise InvalidIdError(resource) from None


class BookingAPIView(APIView):
    """Base view: builds the service and maps malformed IDs to 400."""

    def handle_exception(self, exc):
        if isinstance(exc, InvalidIdError):
            return error_response(exc)
        return super().handle_exception(exc)

    @property
    def service(self) -> BookingAdmissionService:
        return get_admission_service()


class BookingListView(BookingAPIView):
    """Handler for GET/POST /api/bookings"""

    def get(self, request: Request) -> Response:
        query = BookingStatusQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_request_response()
        booking_status = BookingStatus(query.validated_data["status"])
        return render(self.service.list_bookings_by_status(booking_status), BookingSerializer, many=True)

    def post(self, request: Request) -> Response:
        payload = BookCourseSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_request_response()
        member_id = MemberId(payload.validated_data["member_id"])
        course_id = CourseId(payload.validated_data["course_id"])
        if payload.validated_data["confirm"]:
            result = self.service.book_and_confirm(member_id, course_id)
        else:
            result = self.service.book_course(member_id, course_id)
        return render(result, BookingSerializer, status_code=status.HTTP_201_CREATED)


class BookingDetailView(BookingAPIView):
    """Handler for GET/DELETE /api/bookings/{booking_id}"""

    def get(self, request: Request, booking_id: str) -> Response:
        result = self.service.get_booking(parse_id(BookingId, booking_id, "booking"))
        return render(result, BookingSerializer)

    def delete(self, request: Request, booking_id: str) -> Response:
        result = self.service.delete_booking(parse_id(BookingId, booking_id, "booking"))
        if not result.is_ok:
            return error_response(result.error)
        return Response(status=status.HTTP_204_NO_CONTENT)


class TodaysBookingListView(BookingAPIView):
    """Handler for GET /api/bookings/today"""

    def get(self, request: Request) -> Response:
        query = TodaysBookingsQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_request_response()
        instructor_id = query.validated_data.get("instructor_id")
        result = self.service.list_todays_bookings(
            InstructorId(instructor_id) if instructor_id is not None else None
        )
        return render(result, BookingSerializer, many=True)


class BookingDetailInfoView(BookingAPIView):
    """Handler for GET /api/bookings/{booking_id}/detail"""

    def get(self, request: Request, booking_id: str) -> Response:
        result = self.service.get_booking_detail(parse_id(BookingId, booking_id, "booking"))
        return render(result, BookingDetailSerializer)


class BookingConfirmView(BookingAPIView):
    """Handler for POST /api/bookings/{booking_id}/confirm"""

    def post(self, request: Request, booking_id: str) -> Response:
        result = self.service.confirm_booking(parse_id(BookingId, booking_id, "booking"))
        return render(result, BookingSerializer)


class BookingCancelView(BookingAPIView):
    """Handler for POST /api/bookings/{booking_id}/cancel"""

    def post(self, request: Request, booking_id: str) -> Response:
        parsed_id = parse_id(BookingId, booking_id, "booking")
        payload = CancelBookingSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_request_response()

        member_id = payload.validated_data.get("member_id")
        if member_id is not None:
            result = self.service.member_cancel_booking(MemberId(member_id), parsed_id)
        else:
            result = self.service.staff_cancel_booking(parsed_id, payload.validated_data.get("reason"))
        return render(result, BookingSerializer)


class BookingAttendView(BookingAPIView):
    """Handler for POST /api/bookings/{booking_id}/attend"""

    def post(self, request: Request, booking_id: str) -> Response:
        result = self.service.mark_attendance(parse_id(BookingId, booking_id, "booking"))
        return render(result, BookingSerializer)


class MemberBookingListView(BookingAPIView):
    """Handler for GET /api/members/{member_id}/bookings"""

    def get(self, request: Request, member_id: str) -> Response:
        result = self.service.list_bookings_for_member(parse_id(MemberId, member_id, "member"))
        return render(result, BookingSerializer, many=True)


class CourseBookingListView(BookingAPIView):
    """Handler for GET /api/courses/{course_id}/bookings"""

    def get(self, request: Request, course_id: str) -> Response:
        result = self.service.list_bookings_for_course(parse_id(CourseId, course_id, "course"))
        return render(result, BookingSerializer, many=True)


class CourseAvailabilityView(BookingAPIView):
    """Handler for GET /api/courses/{course_id}/availability"""

    def get(self, request: Request, course_id: str) -> Response:
        result = self.service.course_availability(parse_id(CourseId, course_id, "course"))
        return render(result, CourseAvailabilitySerializer)
