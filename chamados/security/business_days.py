from __future__ import annotations

from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

BUSINESS_DAYS = frozenset(range(0, 5))  # Monday..Friday as returned by datetime.weekday()


class OutsideBusinessHoursError(RuntimeError):
    """Raised when a protected resource is requested on a weekend."""


def is_business_day(moment: datetime, tz: tzinfo | None = None) -> bool:
    """Return ``True`` when ``moment`` falls on Monday to Friday in ``tz``.

    Naive datetimes are interpreted as already being in the target timezone.
    """

    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.weekday() in BUSINESS_DAYS


class BusinessDayGate:
    """Reject access outside Monday to Friday in a configured timezone."""

    message = "Acesso permitido apenas de segunda a sexta-feira."

    def __init__(self, timezone_name: str = "UTC") -> None:
        self._tz = ZoneInfo(timezone_name)

    @property
    def timezone(self) -> tzinfo:
        return self._tz

    def check(self, moment: datetime) -> None:
        if not is_business_day(moment, self._tz):
            raise OutsideBusinessHoursError(self.message)
