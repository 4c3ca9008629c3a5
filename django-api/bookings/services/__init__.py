from bookings.services.admission_service import BookingAdmissionService
from bookings.services.capacity import CapacityTracker
from bookings.services.eligibility import EligibilityChecker
from bookings.services.state_machine import TRANSITIONS, BookingStateMachine

__all__ = [
    "BookingAdmissionService",
    "BookingStateMachine",
    "CapacityTracker",
    "EligibilityChecker",
    "TRANSITIONS",
]
