"""Temporal Extractor for Korean Date/Time Expressions

Scans free-form text with the pattern registry, interprets every match into a
``CivilDate`` or ``Hms`` and reconciles overlapping matches by rule priority
and text position.
"""

import threading
from dataclasses import dataclass
from datetime import tzinfo
from typing import Dict, List, Optional, Set, Tuple, Union

from ..core.config_manager import DEFAULT_LOCATION
from ..core.error_handler import NoMatchError
from ..core.logging_manager import LoggingManager
from .calendar_utils import (
    CivilDate,
    Clock,
    FillPolicy,
    Hms,
    fill_empty_year_month_day,
    resolve_location,
    system_clock
)
from .interpreters import interpret
from .patterns import DATE, TIME, PatternClass, find_matches, patterns_for

Value = Union[CivilDate, Hms]


@dataclass(frozen=True)
class TemporalMatch:
    """One interpreted match, keyed by its position in the source text."""
    text: str
    start: int
    end: int
    pattern: PatternClass
    value: Value


def select_leftmost(matches: List[TemporalMatch]) -> TemporalMatch:
    """Pick the match that starts first in the text.

    Start offsets are unique within one extraction, so there are no ties.
    """
    return min(matches, key=lambda match: match.start)


def to_result_map(matches: List[TemporalMatch]) -> Dict[str, Value]:
    """Key interpreted values by matched text.

    Matches are inserted by offset, so when the same text occurs twice the
    later occurrence is the one kept.
    """
    results: Dict[str, Value] = {}
    for match in sorted(matches, key=lambda m: m.start):
        results[match.text] = match.value
    return results


class TemporalExtractor:
    """Korean date and time expression extractor."""

    def __init__(
        self,
        location: str = DEFAULT_LOCATION,
        clock: Optional[Clock] = None,
        verbose: bool = False,
        date_policy: FillPolicy = FillPolicy.ZERO_ON_MISSING,
        time_policy: FillPolicy = FillPolicy.ZERO_ON_MISSING
    ):
        """Initialize the extractor.

        Args:
            location: Timezone identifier used for dates and "now"
            clock: Supplier of the current moment for a timezone
            verbose: Log every match and interpretation step at DEBUG
            date_policy: Fill policy when a date call gives no fill flag
            time_policy: Fill policy when a time call gives no fill flag
        """
        self.logger = LoggingManager.get_logger(__name__)
        self._lock = threading.RLock()
        self._location = location
        self._tzinfo = resolve_location(location)
        self._clock = clock or system_clock
        self.verbose = verbose
        self._date_policy = date_policy
        self._time_policy = time_policy

    @property
    def location(self) -> str:
        with self._lock:
            return self._location

    @property
    def tzinfo(self) -> tzinfo:
        with self._lock:
            return self._tzinfo

    @property
    def date_policy(self) -> FillPolicy:
        with self._lock:
            return self._date_policy

    @date_policy.setter
    def date_policy(self, policy: FillPolicy):
        with self._lock:
            self._date_policy = policy

    @property
    def time_policy(self) -> FillPolicy:
        with self._lock:
            return self._time_policy

    @time_policy.setter
    def time_policy(self, policy: FillPolicy):
        with self._lock:
            self._time_policy = policy

    def set_location(self, name: str):
        """Switch the timezone used by later extractions.

        Raises:
            InvalidTimezoneError: If ``name`` is unknown. The previous
                timezone stays in place.
        """
        zone = resolve_location(name)
        with self._lock:
            previous = self._location
            self._location = name
            self._tzinfo = zone
        self.logger.info(f"Location changed from {previous} to {name}")

    def apply_settings(self, location: str, date_policy: FillPolicy, time_policy: FillPolicy):
        """Replace the timezone and both default policies in one step.

        Extractions running concurrently see either all old or all new
        settings.

        Raises:
            InvalidTimezoneError: If ``location`` is unknown. Nothing changes.
        """
        zone = resolve_location(location)
        with self._lock:
            self._location = location
            self._tzinfo = zone
            self._date_policy = date_policy
            self._time_policy = time_policy
        self.logger.info(
            f"Settings applied: location={location}, date_policy={date_policy.value}, "
            f"time_policy={time_policy.value}"
        )

    def find_all(
        self, text: str, kind: str, policy: Optional[FillPolicy] = None
    ) -> List[TemporalMatch]:
        """Interpret every match of one kind, ordered by start offset.

        Rules run in priority order. A match starting at an offset already
        claimed by an earlier rule is skipped. Without an explicit ``policy``
        the configured default for ``kind`` is used, read together with the
        timezone.

        Raises:
            NoMatchError: If no rule of this kind matches
        """
        with self._lock:
            location, zone = self._location, self._tzinfo
            if policy is None:
                policy = self._date_policy if kind == DATE else self._time_policy

        claimed: Set[int] = set()
        matches: List[TemporalMatch] = []

        for rule in patterns_for(kind):
            for found in find_matches(rule, text):
                start = found.start()
                if start in claimed:
                    self._trace(f"{rule.name}: skipped '{found.group(0)}' at {start} (already claimed)")
                    continue
                claimed.add(start)

                groups = found.groupdict()
                self._trace(f"{rule.name}: matched '{found.group(0)}' at {start}, groups = {groups}")

                now = self._clock(zone)
                value = interpret(rule.pattern_class, groups, now, policy, location)
                if kind == DATE and policy is FillPolicy.FILL_FROM_NOW:
                    value = fill_empty_year_month_day(value, now.date())

                self._trace(f"{rule.name}: extracted {kind} = {value}")
                matches.append(TemporalMatch(
                    text=found.group(0),
                    start=start,
                    end=found.end(),
                    pattern=rule.pattern_class,
                    value=value
                ))

        if not matches:
            raise NoMatchError(text, kind)

        matches.sort(key=lambda m: m.start)
        return matches

    def extract_all(
        self, text: str, kind: str, policy: Optional[FillPolicy] = None
    ) -> Dict[str, Value]:
        return to_result_map(self.find_all(text, kind, policy))

    def extract_first(self, text: str, kind: str, policy: Optional[FillPolicy] = None) -> Value:
        return select_leftmost(self.find_all(text, kind, policy)).value

    # Date/time entry points

    def extract_date(
        self, text: str, fill_as_today: Optional[bool] = None, policy: Optional[FillPolicy] = None
    ) -> CivilDate:
        """Extract the leftmost date expression.

        Args:
            text: Free-form Korean text
            fill_as_today: Fill missing year/month/day from today
            policy: Explicit fill policy, overrides ``fill_as_today``

        Returns:
            The date found first in the text
        """
        return self.extract_first(text, DATE, self._resolve_policy(fill_as_today, policy))

    def extract_dates(
        self, text: str, fill_as_today: Optional[bool] = None, policy: Optional[FillPolicy] = None
    ) -> Dict[str, CivilDate]:
        """Extract all date expressions keyed by matched text."""
        return self.extract_all(text, DATE, self._resolve_policy(fill_as_today, policy))

    def find_dates(
        self, text: str, fill_as_today: Optional[bool] = None, policy: Optional[FillPolicy] = None
    ) -> List[TemporalMatch]:
        return self.find_all(text, DATE, self._resolve_policy(fill_as_today, policy))

    def extract_time(
        self, text: str, fill_as_now: Optional[bool] = None, policy: Optional[FillPolicy] = None
    ) -> Hms:
        """Extract the leftmost time expression.

        Args:
            text: Free-form Korean text
            fill_as_now: Fill missing hour/minute/second from the current time
            policy: Explicit fill policy, overrides ``fill_as_now``

        Returns:
            The time found first in the text
        """
        return self.extract_first(text, TIME, self._resolve_policy(fill_as_now, policy))

    def extract_times(
        self, text: str, fill_as_now: Optional[bool] = None, policy: Optional[FillPolicy] = None
    ) -> Dict[str, Hms]:
        """Extract all time expressions keyed by matched text."""
        return self.extract_all(text, TIME, self._resolve_policy(fill_as_now, policy))

    def find_times(
        self, text: str, fill_as_now: Optional[bool] = None, policy: Optional[FillPolicy] = None
    ) -> List[TemporalMatch]:
        return self.find_all(text, TIME, self._resolve_policy(fill_as_now, policy))

    @staticmethod
    def _resolve_policy(fill: Optional[bool], policy: Optional[FillPolicy]) -> Optional[FillPolicy]:
        if policy is not None:
            return policy
        if fill is not None:
            return FillPolicy.from_flag(fill)
        return None

    def _trace(self, message: str):
        if self.verbose or LoggingManager().verbose:
            self.logger.debug(message)
