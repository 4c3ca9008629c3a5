"""In-process per-course locks."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from bookings.domain import CourseId
from bookings.stores.interfaces import AdmissionScope, ScopeTimeoutError

logger = logging.getLogger(__name__)


@dataclass
class _CourseLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class InProcessAdmissionScope(AdmissionScope):
    """Serializes admission per course with one threading.Lock per course ID.

    A course's lock lives in the registry only while some thread holds it or
    waits for it; the last one out removes the entry. Lock acquisition gives
    up after ``timeout`` seconds and fails closed.
    """

    def __init__(self, timeout: float = 5.0) -> None:
        self._timeout = timeout
        self._locks: dict[CourseId, _CourseLock] = {}
        self._registry_lock = threading.Lock()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

    def _checkout(self, course_id: CourseId) -> threading.Lock:
        with self._registry_lock:
            entry = self._locks.get(course_id)
            if entry is None:
                entry = self._locks[course_id] = _CourseLock()
            entry.users += 1
            return entry.lock

    def _checkin(self, course_id: CourseId) -> None:
        with self._registry_lock:
            entry = self._locks[course_id]
            entry.users -= 1
            if entry.users == 0:
                del self._locks[course_id]

    @contextmanager
    def course_scope(self, course_id: CourseId, timeout: float | None = None) -> Iterator[None]:
        if timeout is None:
            timeout = self._timeout
        lock = self._checkout(course_id)
        try:
            if not lock.acquire(timeout=timeout):
                logger.error(
                    "Timed out after %.1fs waiting for course %s admission lock",
                    timeout,
                    course_id,
                )
                raise ScopeTimeoutError(f"course {course_id} is busy")
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(course_id)
