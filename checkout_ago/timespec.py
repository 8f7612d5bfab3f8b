"""Parse relative time phrases like "3 months" or "2d".

A phrase is a sequence of `(quantity, unit)` pairs, which are added
together and subtracted from the current time:

    >>> parse_time_spec("1 month and 2 weeks ago")
    TimeSpec(pairs=((1, <Unit.MONTH: 'month'>), (2, <Unit.WEEK: 'week'>)))

Fixed-length units (seconds through weeks) are plain `timedelta`s. Months and
years depend on the calendar: one month before March 31 is the last day of
February, not March 3rd.
"""
import calendar
import datetime
import enum
import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple


class ParseError(ValueError):
    """Raised when a time phrase can't be understood."""


class Unit(enum.Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


UNIT_NAMES = {
    "s": Unit.SECOND,
    "sec": Unit.SECOND,
    "secs": Unit.SECOND,
    "second": Unit.SECOND,
    "seconds": Unit.SECOND,
    "m": Unit.MINUTE,
    "min": Unit.MINUTE,
    "mins": Unit.MINUTE,
    "minute": Unit.MINUTE,
    "minutes": Unit.MINUTE,
    "h": Unit.HOUR,
    "hr": Unit.HOUR,
    "hrs": Unit.HOUR,
    "hour": Unit.HOUR,
    "hours": Unit.HOUR,
    "d": Unit.DAY,
    "day": Unit.DAY,
    "days": Unit.DAY,
    "w": Unit.WEEK,
    "wk": Unit.WEEK,
    "wks": Unit.WEEK,
    "week": Unit.WEEK,
    "weeks": Unit.WEEK,
    "mo": Unit.MONTH,
    "mon": Unit.MONTH,
    "mons": Unit.MONTH,
    "month": Unit.MONTH,
    "months": Unit.MONTH,
    "y": Unit.YEAR,
    "yr": Unit.YEAR,
    "yrs": Unit.YEAR,
    "year": Unit.YEAR,
    "years": Unit.YEAR,
}
"""Accepted spellings for each unit, including the shorthand forms."""

FIXED_UNITS = {
    Unit.SECOND: datetime.timedelta(seconds=1),
    Unit.MINUTE: datetime.timedelta(minutes=1),
    Unit.HOUR: datetime.timedelta(hours=1),
    Unit.DAY: datetime.timedelta(days=1),
    Unit.WEEK: datetime.timedelta(weeks=1),
}

CALENDAR_UNITS = {
    Unit.MONTH: 1,
    Unit.YEAR: 12,
}
"""Number of months in each calendar unit."""

CONNECTIVES = {"and"}

TOKEN_SEPARATOR_RE = re.compile(r"[\s,]+")

# "2.weeks.ago" is how Git spells "2 weeks ago" on the command line. Only
# dots next to a letter are separators, so that "1.5" stays one token.
DOT_SEPARATOR_RE = re.compile(r"(?<=[0-9a-z])\.(?=[a-z])|(?<=[a-z])\.(?=[0-9a-z])")

NUMERIC_RE = re.compile(r"^[-+]?[0-9]*\.?[0-9]+$")

QUANTITY_RE = re.compile(r"^\+?[0-9]+$")

SHORTHAND_RE = re.compile(r"^(?P<quantity>[-+]?[0-9]+)(?P<unit>[a-z]+)$")


@dataclass(frozen=True)
class TimeSpec:
    """A parsed relative time phrase."""

    pairs: Tuple[Tuple[int, Unit], ...]
    """The `(quantity, unit)` pairs, in the order they were written."""

    def fixed_delta(self) -> datetime.timedelta:
        """The sum of the fixed-length parts of the phrase."""
        total = datetime.timedelta()
        for quantity, unit in self.pairs:
            if unit in FIXED_UNITS:
                total += quantity * FIXED_UNITS[unit]
        return total

    def calendar_months(self) -> int:
        """The sum of the month and year parts of the phrase, in months."""
        return sum(
            quantity * CALENDAR_UNITS[unit]
            for quantity, unit in self.pairs
            if unit in CALENDAR_UNITS
        )


def _tokenize(phrase: str) -> Iterator[str]:
    phrase = DOT_SEPARATOR_RE.sub(" ", phrase.strip().lower())
    for token in TOKEN_SEPARATOR_RE.split(phrase):
        if not token:
            continue
        match = SHORTHAND_RE.match(token)
        if match is not None:
            yield match.group("quantity")
            yield match.group("unit")
        else:
            yield token


def parse_time_spec(phrase: str) -> TimeSpec:
    """Parse a relative time phrase into its `(quantity, unit)` pairs.

    Anything following the last pair which doesn't look like a number, such
    as a trailing "ago", is ignored.

    Args:
      phrase: The phrase to parse, e.g. "2 days" or "1w".

    Returns:
      The parsed phrase.

    Raises:
      ParseError: If the phrase has no pairs at all, or if a quantity is
        negative, fractional or missing its unit.
    """
    pairs: List[Tuple[int, Unit]] = []
    tokens = list(_tokenize(phrase))
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in CONNECTIVES:
            i += 1
            continue

        if not NUMERIC_RE.match(token):
            if not pairs:
                raise ParseError(f"expected a quantity, got {token!r} in {phrase!r}")
            break
        if not QUANTITY_RE.match(token):
            raise ParseError(
                f"quantity must be a non-negative integer, got {token!r} in {phrase!r}"
            )

        if i + 1 >= len(tokens):
            raise ParseError(f"missing unit after {token!r} in {phrase!r}")
        unit_name = tokens[i + 1]
        unit = UNIT_NAMES.get(unit_name)
        if unit is None:
            raise ParseError(f"unknown time unit {unit_name!r} in {phrase!r}")

        pairs.append((int(token), unit))
        i += 2

    if not pairs:
        raise ParseError(f"no time given in {phrase!r}")
    return TimeSpec(pairs=tuple(pairs))


def shift_months(year: int, month: int, day: int, delta: int) -> Tuple[int, int, int]:
    """Move a date by a number of calendar months.

    If the target month is too short for the day, the day is clamped to the
    end of that month.

    Args:
      year: The year of the date.
      month: The month of the date (1-12).
      day: The day of the month.
      delta: The number of months to move by. Negative values move backwards.

    Returns:
      The resulting `(year, month, day)`.

    Raises:
      ValueError: If the resulting year is out of range.
    """
    month_index = year * 12 + (month - 1) + delta
    new_year, new_month_index = divmod(month_index, 12)
    new_month = new_month_index + 1
    if not datetime.MINYEAR <= new_year <= datetime.MAXYEAR:
        raise ValueError(f"year {new_year} is out of range")
    (_first_weekday, days_in_month) = calendar.monthrange(new_year, new_month)
    return (new_year, new_month, min(day, days_in_month))


def _subtract_months(instant: datetime.datetime, months: int) -> datetime.datetime:
    (year, month, day) = shift_months(instant.year, instant.month, instant.day, -months)
    return instant.replace(year=year, month=month, day=day)


def resolve_time_spec(
    spec: TimeSpec, now: datetime.datetime, calendar_units_first: bool = False
) -> datetime.datetime:
    """Compute the instant which lies `spec` before `now`.

    The arithmetic happens in the timezone of `now`.

    Args:
      spec: The parsed phrase.
      now: The reference instant.
      calendar_units_first: If set, subtract months and years before the
        fixed-length units. This only matters near month boundaries, e.g.
        "1 month 1 day" before March 31.

    Returns:
      The resolved instant.

    Raises:
      ParseError: If the result is out of the representable range.
    """
    months = spec.calendar_months()
    try:
        fixed_delta = spec.fixed_delta()
        if calendar_units_first:
            return _subtract_months(now, months) - fixed_delta
        else:
            return _subtract_months(now - fixed_delta, months)
    except (OverflowError, ValueError) as e:
        raise ParseError(f"time is too far in the past: {e}") from e


def resolve_time_phrase(
    phrase: str, now: datetime.datetime, calendar_units_first: bool = False
) -> datetime.datetime:
    """Parse `phrase` and resolve it against `now`.

    See `parse_time_spec` and `resolve_time_spec`.
    """
    return resolve_time_spec(
        parse_time_spec(phrase), now=now, calendar_units_first=calendar_units_first
    )
