"""Pattern registry for Korean date and time expressions.

Each rule recognizes one surface form and exposes its fragments through named
groups. Rules are listed in priority order per kind; the extractor walks them
in that order and lets the first rule that claims a start offset keep it.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Tuple

DATE = "date"
TIME = "time"

# Named days relative to today
NAMED_DAY_OFFSETS: Dict[str, int] = {
    "그저께": -2,
    "그제": -2,
    "어제": -1,
    "작일": -1,
    "오늘": 0,
    "금일": 0,
    "내일": 1,
    "명일": 1,
    "모레": 2,
    "글피": 3,
}

DATE_UNITS: Dict[str, str] = {
    "년": "years",
    "年": "years",
    "개월": "months",
    "월": "months",
    "月": "months",
    "일": "days",
    "日": "days",
}

TIME_UNITS: Dict[str, str] = {
    "시간": "hours",
    "분": "minutes",
    "초": "seconds",
}

DIRECTIONS: Dict[str, int] = {
    "전": -1,  # before
    "후": 1,   # after
    "뒤": 1,   # after
}

AM_MARKERS = ("오전", "am")
PM_MARKERS = ("오후", "pm")

MINUTE_HALF = "반"  # "9시 반" = 9:30


def _alternation(words) -> str:
    # Longest first so 그저께 wins over 그제
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


_COUNT = r"(?P<count>[0-9]+)"
_DIRECTION = rf"(?P<direction>{_alternation(DIRECTIONS)})"
_AMPM = r"(?:(?P<ampm>오전|AM|오후|PM)\s*)?"
# 시 followed by 간 is the duration word 시간, not an hour marker
_HOUR_MARK = r"(?P<hour_mark>시(?!간)|時|:)"
_DATE_SEPARATOR = r"[-./]"


class PatternClass(Enum):
    """Surface forms recognized by the registry."""
    DATE_RELATIVE_NUMERIC = "date_relative_numeric"   # 3일 전, 10개월 뒤
    DATE_RELATIVE_NAMED = "date_relative_named"       # 어제, 모레
    DATE_EXACT_YMD = "date_exact_ymd"                 # 2019년 3월 1일
    DATE_EXACT_DOTTED = "date_exact_dotted"           # 1919.03.01
    TIME_RELATIVE = "time_relative"                   # 1시간 전
    TIME_EXACT_AMPM_HALF = "time_exact_ampm_half"     # 오후 9시 반
    TIME_EXACT_HMS = "time_exact_hms"                 # 오후 01시 01분, PM 03:30


@dataclass(frozen=True)
class PatternRule:
    """A compiled lexical rule."""
    pattern_class: PatternClass
    kind: str
    regex: re.Pattern
    description: str

    @property
    def name(self) -> str:
        return self.pattern_class.value


def _build_date_patterns() -> Tuple[PatternRule, ...]:
    """Build date rules, highest priority first."""
    return (
        PatternRule(
            PatternClass.DATE_RELATIVE_NUMERIC,
            DATE,
            re.compile(
                rf"{_COUNT}\s*(?P<unit>{_alternation(DATE_UNITS)})\s*{_DIRECTION}"
            ),
            "N years/months/days before or after today",
        ),
        PatternRule(
            PatternClass.DATE_RELATIVE_NAMED,
            DATE,
            re.compile(rf"(?P<lexeme>{_alternation(NAMED_DAY_OFFSETS)})"),
            "named day relative to today",
        ),
        PatternRule(
            PatternClass.DATE_EXACT_YMD,
            DATE,
            re.compile(
                r"(?:(?P<year>[0-9]{2,})\s*[년年]\s*)?"
                r"(?:(?P<month>[0-9]{1,2})\s*[월月]\s*)?"
                r"(?P<day>[0-9]{1,2})\s*[일日]"
            ),
            "year/month/day with Korean or Sino-Korean units",
        ),
        PatternRule(
            PatternClass.DATE_EXACT_DOTTED,
            DATE,
            re.compile(
                rf"(?:(?P<year>[0-9]{{2,}})\s*{_DATE_SEPARATOR}\s*)?"
                rf"(?P<month>[0-9]{{1,2}})\s*{_DATE_SEPARATOR}\s*"
                r"(?P<day>[0-9]{1,2})(?:\s*[.일日])?"
            ),
            "numeric date separated by '-', '.' or '/'",
        ),
    )


def _build_time_patterns() -> Tuple[PatternRule, ...]:
    """Build time rules, highest priority first."""
    return (
        PatternRule(
            PatternClass.TIME_RELATIVE,
            TIME,
            re.compile(
                rf"{_COUNT}\s*(?P<unit>{_alternation(TIME_UNITS)})\s*{_DIRECTION}"
            ),
            "N hours/minutes/seconds before or after now",
        ),
        PatternRule(
            PatternClass.TIME_EXACT_AMPM_HALF,
            TIME,
            re.compile(
                rf"{_AMPM}(?P<hour>[0-9]{{1,2}})\s*{_HOUR_MARK}\s*{MINUTE_HALF}",
                re.IGNORECASE,
            ),
            "half past an hour",
        ),
        PatternRule(
            PatternClass.TIME_EXACT_HMS,
            TIME,
            re.compile(
                rf"{_AMPM}(?P<hour>[0-9]{{1,2}})\s*{_HOUR_MARK}"
                r"(?:\s*(?P<minute>[0-9]{1,2})"
                r"(?:\s*[분分](?:\s*(?P<second>[0-9]{1,2})\s*[초秒])?"
                r"|:(?P<colon_second>[0-9]{1,2})(?:\s*[초秒])?)?)?",
                re.IGNORECASE,
            ),
            "hour with optional minutes and seconds",
        ),
    )


DATE_PATTERNS = _build_date_patterns()
TIME_PATTERNS = _build_time_patterns()


def patterns_for(kind: str) -> Tuple[PatternRule, ...]:
    """Return the rules of one kind in priority order."""
    if kind == DATE:
        return DATE_PATTERNS
    if kind == TIME:
        return TIME_PATTERNS
    raise ValueError(f"Unknown expression kind: {kind}")


def find_matches(rule: PatternRule, text: str) -> Iterator[re.Match]:
    """Yield every non-overlapping match of a single rule, leftmost first."""
    return rule.regex.finditer(text)
