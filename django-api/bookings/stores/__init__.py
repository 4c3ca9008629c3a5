from bookings.stores.interfaces import (
    AdmissionScope,
    BookingStore,
    CourseStore,
    MemberStore,
    ScopeTimeoutError,
    StoreError,
)
from bookings.stores.locking import InProcessAdmissionScope
from bookings.stores.memory_store import (
    InMemoryBookingStore,
    InMemoryCourseStore,
    InMemoryMemberStore,
)

__all__ = [
    "AdmissionScope",
    "BookingStore",
    "CourseStore",
    "MemberStore",
    "StoreError",
    "ScopeTimeoutError",
    "InProcessAdmissionScope",
    "InMemoryBookingStore",
    "InMemoryCourseStore",
    "InMemoryMemberStore",
]
