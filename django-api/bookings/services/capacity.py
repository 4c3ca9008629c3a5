"""Seat accounting for courses."""

from bookings.domain import Course, CourseAvailability, CourseId
from bookings.domain.errors import NotFoundError
from bookings.domain.results import Err, Ok, Result
from bookings.stores.interfaces import BookingStore, CourseStore


class CapacityTracker:
    """Computes seat usage from the store on every call.

    Pending and Confirmed bookings both hold a seat. Nothing is cached:
    max_capacity and the active count are read fresh each time.
    """

    def __init__(self, courses: CourseStore, bookings: BookingStore) -> None:
        self._courses = courses
        self._bookings = bookings

    def _availability_for(self, course: Course) -> CourseAvailability:
        return CourseAvailability(
            course_id=course.id,
            max_capacity=course.max_capacity.value,
            active_bookings=self._bookings.count_active_for_course(course.id),
        )

    def availability(self, course_id: CourseId) -> Result[CourseAvailability]:
        course = self._courses.get_course(course_id)
        if course is None:
            return Err(NotFoundError("Course", course_id))
        return Ok(self._availability_for(course))

    def available_slots(self, course_id: CourseId) -> Result[int]:
        """Seats left; NotFound for an unknown course, never a sentinel."""
        result = self.availability(course_id)
        if not result.is_ok:
            return result
        return Ok(result.value.available_slots)

    def has_room(self, course_id: CourseId) -> Result[bool]:
        result = self.available_slots(course_id)
        if not result.is_ok:
            return result
        return Ok(result.value > 0)

    def courses_with_room(self) -> list[Course]:
        return [
            course
            for course in self._courses.list_courses()
            if not self._availability_for(course).is_full
        ]
