from bookings.handlers.views import (
    BookingAttendView,
    BookingCancelView,
    BookingConfirmView,
    BookingDetailInfoView,
    BookingDetailView,
    BookingListView,
    CourseAvailabilityView,
    CourseBookingListView,
    MemberBookingListView,
    TodaysBookingListView,
)

__all__ = [
    "BookingAttendView",
    "BookingCancelView",
    "BookingConfirmView",
    "BookingDetailInfoView",
    "BookingDetailView",
    "BookingListView",
    "CourseAvailabilityView",
    "CourseBookingListView",
    "MemberBookingListView",
    "TodaysBookingListView",
]
