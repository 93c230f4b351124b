"""Calendar and clock helpers for the extraction engine.

Value types returned to callers (``CivilDate``, ``Hms``), the fill policy that
decides what happens to missing fields, and the timezone/clock plumbing.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, tzinfo
from enum import Enum
from typing import Callable, Optional

from dateutil import tz

from ..core.error_handler import InvalidDateError, InvalidTimezoneError, MalformedNumeralError

# Largest numeral a digit group may hold (signed 16-bit)
MAX_NUMERAL = 32767

Clock = Callable[[tzinfo], datetime]


class FillPolicy(Enum):
    """What to do with a date/time field that was not captured.

    ``ERROR_ON_MISSING`` does not apply to the seconds of an 'HH:MM' time,
    which read as 0.
    """
    FILL_FROM_NOW = "fill_from_now"        # Take the field from the current moment
    ZERO_ON_MISSING = "zero_on_missing"    # Leave the field at 0
    ERROR_ON_MISSING = "error_on_missing"  # Raise MalformedNumeralError

    @classmethod
    def from_flag(cls, fill: bool) -> "FillPolicy":
        return cls.FILL_FROM_NOW if fill else cls.ZERO_ON_MISSING


@dataclass(frozen=True)
class CivilDate:
    """A calendar date bound to a timezone.

    Fields hold the interpreted numbers as-is. A field that was neither
    captured nor filled is 0, and conversion to a ``datetime`` reports it.
    """
    year: int
    month: int
    day: int
    location: str = "Asia/Seoul"
    tzinfo: Optional[tzinfo] = field(default=None, compare=False, repr=False)

    @property
    def is_complete(self) -> bool:
        return self.year > 0 and self.month > 0 and self.day > 0

    def to_date(self) -> date:
        try:
            return date(self.year, self.month, self.day)
        except ValueError as e:
            raise InvalidDateError(f"Cannot build a date from {self}: {e}") from e

    def to_datetime(self) -> datetime:
        """Midnight of this date in the bound timezone."""
        d = self.to_date()
        return datetime(d.year, d.month, d.day, tzinfo=self.tzinfo)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class Hms:
    """Clock time extracted from text.

    ``days_changed`` is the number of calendar days a relative offset moved
    away from today. ``ambiguous`` is set when an hour below 12 was given
    without an AM/PM marker.
    """
    hours: int
    minutes: int
    seconds: int
    days_changed: int = 0
    ambiguous: bool = False

    def to_time(self, tzinfo: Optional[tzinfo] = None) -> time:
        try:
            return time(self.hours, self.minutes, self.seconds, tzinfo=tzinfo)
        except ValueError as e:
            raise InvalidDateError(f"Cannot build a time from {self}: {e}") from e

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


def resolve_location(name: str) -> tzinfo:
    """Look up a timezone identifier in the tz database.

    Raises:
        InvalidTimezoneError: If the identifier is empty or unknown
    """
    if not name or not name.strip():
        raise InvalidTimezoneError(name)

    zone = tz.gettz(name)
    if zone is None:
        raise InvalidTimezoneError(name)
    return zone


def system_clock(zone: tzinfo) -> datetime:
    return datetime.now(zone)


def parse_numeral(
    raw: Optional[str],
    field_name: str,
    policy: FillPolicy,
    fallback: int = 0,
    required: bool = False
) -> int:
    """Parse a captured digit group.

    Absent groups and values above ``MAX_NUMERAL`` count as missing. Missing
    required fields always raise; other fields follow ``policy``, using
    ``fallback`` for ``FILL_FROM_NOW``.
    """
    value: Optional[int] = None
    reason = "not captured"
    if raw:
        try:
            value = int(raw, 10)
        except ValueError:
            reason = "not a base-10 integer"
        else:
            if value > MAX_NUMERAL:
                value = None
                reason = f"exceeds {MAX_NUMERAL}"

    if value is not None:
        return value

    if required or policy is FillPolicy.ERROR_ON_MISSING:
        raise MalformedNumeralError(field_name, raw, reason)
    if policy is FillPolicy.FILL_FROM_NOW:
        return fallback
    return 0


def fill_empty_year_month_day(value: CivilDate, today: date) -> CivilDate:
    """Replace every field <= 0 with today's field."""
    return replace(
        value,
        year=value.year if value.year > 0 else today.year,
        month=value.month if value.month > 0 else today.month,
        day=value.day if value.day > 0 else today.day,
    )
