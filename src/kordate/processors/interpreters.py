"""Semantic interpreters, one per pattern class.

Each interpreter turns the named groups of a match into a ``CivilDate`` or an
``Hms``. Interpreters are pure: the current moment and the fill policy are
passed in by the extractor.
"""

from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple, Union

from dateutil import relativedelta, tz

from ..core.error_handler import MalformedNumeralError
from .calendar_utils import CivilDate, FillPolicy, Hms, parse_numeral
from .patterns import (
    AM_MARKERS,
    DATE_UNITS,
    DIRECTIONS,
    NAMED_DAY_OFFSETS,
    PM_MARKERS,
    TIME_UNITS,
    PatternClass
)

Groups = Dict[str, Optional[str]]
Value = Union[CivilDate, Hms]
Interpreter = Callable[[Groups, datetime, FillPolicy, str], Value]


def _civil_date(year: int, month: int, day: int, now: datetime, location: str) -> CivilDate:
    return CivilDate(year=year, month=month, day=day, location=location, tzinfo=now.tzinfo)


def interpret_relative_numeric_date(
    groups: Groups, now: datetime, policy: FillPolicy, location: str
) -> CivilDate:
    """'3일 전', '10개월 뒤', '1년 후'.

    Months and years are added on the calendar, so 1월 31일 + 1개월 lands on
    the last day of February.
    """
    count = parse_numeral(groups.get("count"), "count", policy, required=True)
    sign = DIRECTIONS[groups["direction"]]
    unit = DATE_UNITS[groups["unit"]]

    try:
        result = now.date() + relativedelta.relativedelta(**{unit: sign * count})
    except (ValueError, OverflowError) as e:
        raise MalformedNumeralError("count", groups.get("count"), f"date out of range: {e}") from e

    return _civil_date(result.year, result.month, result.day, now, location)


def interpret_relative_named_date(
    groups: Groups, now: datetime, policy: FillPolicy, location: str
) -> CivilDate:
    offset = NAMED_DAY_OFFSETS[groups["lexeme"]]
    result = now.date() + relativedelta.relativedelta(days=offset)
    return _civil_date(result.year, result.month, result.day, now, location)


def interpret_exact_date(
    groups: Groups, now: datetime, policy: FillPolicy, location: str
) -> CivilDate:
    """Digits taken verbatim. Two-digit years stay two-digit."""
    year = parse_numeral(groups.get("year"), "year", policy)
    month = parse_numeral(groups.get("month"), "month", policy)
    day = parse_numeral(groups.get("day"), "day", policy, required=True)
    return _civil_date(year, month, day, now, location)


def interpret_relative_time(
    groups: Groups, now: datetime, policy: FillPolicy, location: str
) -> Hms:
    """'1시간 전', '30분 후'.

    The offset is applied to the absolute instant, then read back on the
    local clock. ``days_changed`` counts calendar days between now and the
    result.
    """
    count = parse_numeral(groups.get("count"), "count", policy, required=True)
    sign = DIRECTIONS[groups["direction"]]
    unit = TIME_UNITS[groups["unit"]]

    try:
        delta = timedelta(**{unit: sign * count})
        when = (now.astimezone(tz.UTC) + delta).astimezone(now.tzinfo)
    except (ValueError, OverflowError) as e:
        raise MalformedNumeralError("count", groups.get("count"), f"time out of range: {e}") from e

    return Hms(
        hours=when.hour,
        minutes=when.minute,
        seconds=when.second,
        days_changed=(when.date() - now.date()).days,
        ambiguous=False,
    )


def normalize_meridiem(hour: int, marker: Optional[str]) -> Tuple[int, bool]:
    """Apply an AM/PM marker to an hour.

    PM shifts every hour up to and including 12, so 오후 12시 reads as 24.

    Returns:
        Tuple of (hour value, ambiguous flag)
    """
    if marker:
        if marker.lower() in PM_MARKERS:
            return (hour + 12 if hour <= 12 else hour), False
        if marker.lower() in AM_MARKERS:
            return hour, False

    # No marker: 13시 and later already read as 24-hour time
    return hour, hour < 12


def interpret_half_past_time(
    groups: Groups, now: datetime, policy: FillPolicy, location: str
) -> Hms:
    hour = parse_numeral(groups.get("hour"), "hour", policy, fallback=now.hour)
    hour, ambiguous = normalize_meridiem(hour, groups.get("ampm"))
    return Hms(hours=hour, minutes=30, seconds=0, days_changed=0, ambiguous=ambiguous)


def interpret_hms_time(
    groups: Groups, now: datetime, policy: FillPolicy, location: str
) -> Hms:
    """'05시 01분', 'PM 03:30', '23:00:00'.

    'HH:MM' is a complete reading, so strict mode does not ask it for seconds.
    """
    hour = parse_numeral(groups.get("hour"), "hour", policy, fallback=now.hour)
    minute = parse_numeral(groups.get("minute"), "minute", policy, fallback=now.minute)

    second_policy = policy
    colon_form = groups.get("hour_mark") == ":" and groups.get("minute")
    if policy is FillPolicy.ERROR_ON_MISSING and colon_form:
        second_policy = FillPolicy.ZERO_ON_MISSING
    second = parse_numeral(
        groups.get("second") or groups.get("colon_second"),
        "second",
        second_policy,
        fallback=now.second
    )

    hour, ambiguous = normalize_meridiem(hour, groups.get("ampm"))
    return Hms(hours=hour, minutes=minute, seconds=second, days_changed=0, ambiguous=ambiguous)


INTERPRETERS: Dict[PatternClass, Interpreter] = {
    PatternClass.DATE_RELATIVE_NUMERIC: interpret_relative_numeric_date,
    PatternClass.DATE_RELATIVE_NAMED: interpret_relative_named_date,
    PatternClass.DATE_EXACT_YMD: interpret_exact_date,
    PatternClass.DATE_EXACT_DOTTED: interpret_exact_date,
    PatternClass.TIME_RELATIVE: interpret_relative_time,
    PatternClass.TIME_EXACT_AMPM_HALF: interpret_half_past_time,
    PatternClass.TIME_EXACT_HMS: interpret_hms_time,
}


def interpret(
    pattern_class: PatternClass,
    groups: Groups,
    now: datetime,
    policy: FillPolicy,
    location: str
) -> Value:
    """Dispatch a match to the interpreter of its pattern class."""
    return INTERPRETERS[pattern_class](groups, now, policy, location)
