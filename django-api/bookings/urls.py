from django.urls import path

from bookings.handlers import (
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

urlpatterns = [
    path("bookings", BookingListView.as_view(), name="booking-list"),
    path("bookings/today", TodaysBookingListView.as_view(), name="booking-today"),
    path("bookings/<str:booking_id>", BookingDetailView.as_view(), name="booking-detail"),
    path(
        "bookings/<str:booking_id>/detail",
        BookingDetailInfoView.as_view(),
        name="booking-detail-info",
    ),
    path(
        "bookings/<str:booking_id>/confirm",
        BookingConfirmView.as_view(),
        name="booking-confirm",
    ),
    path(
        "bookings/<str:booking_id>/cancel",
        BookingCancelView.as_view(),
        name="booking-cancel",
    ),
    path(
        "bookings/<str:booking_id>/attend",
        BookingAttendView.as_view(),
        name="booking-attend",
    ),
    path(
        "members/<str:member_id>/bookings",
        MemberBookingListView.as_view(),
        name="member-booking-list",
    ),
    path(
        "courses/<str:course_id>/bookings",
        CourseBookingListView.as_view(),
        name="course-booking-list",
    ),
    path(
        "courses/<str:course_id>/availability",
        CourseAvailabilityView.as_view(),
        name="course-availability",
    ),
]
