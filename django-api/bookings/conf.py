"""App settings, read from ``settings.BOOKINGS`` with defaults."""

from django.conf import settings

DEFAULTS = {
    "LOCK_TIMEOUT_SECONDS": 5.0,
}


def get_setting(name: str):
    return getattr(settings, "BOOKINGS", {}).get(name, DEFAULTS[name])
