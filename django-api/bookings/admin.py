from django.contrib import admin

from bookings.models import Booking, Course, Member, MembershipCard


class MembershipCardInline(admin.TabularInline):
    model = MembershipCard
    extra = 0


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    fields = ["member", "created_at", "status"]
    readonly_fields = ["member", "created_at", "status"]
    can_delete = False


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ["name", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["name"]
    inlines = [MembershipCardInline]


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ["name", "starts_at", "max_capacity", "instructor_id"]
    search_fields = ["name"]
    inlines = [BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["member", "course", "status", "created_at"]
    list_filter = ["status", "course"]
    readonly_fields = ["member", "course", "created_at", "status"]

    def has_add_permission(self, request) -> bool:
        # Bookings are only created through the admission service.
        return False
