from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Tuple


class Weekday(int, Enum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    def short_name(self) -> str:
        return self.name[:3].lower()

    def long_name(self) -> str:
        return self.name.lower()

    def next_weekday(self) -> "Weekday":
        return Weekday((self.value + 1) % 7)

    def prev_weekday(self) -> "Weekday":
        return Weekday((self.value - 1) % 7)

    def num_days_from_monday(self) -> int:
        return self.value

    def num_days_from_sunday(self) -> int:
        return (self.value + 1) % 7

    def number_from_monday(self) -> int:
        return self.num_days_from_monday() + 1

    def number_from_sunday(self) -> int:
        return self.num_days_from_sunday() + 1

    def days_since(self, other: "Weekday") -> int:
        return (self.value - other.value) % 7

    def __str__(self) -> str:
        return self.long_name()


@dataclass(frozen=True, order=True)
class Date:
    """Calendar date exposed to scripts; out-of-range arithmetic yields None."""

    value: dt.date

    @classmethod
    def from_ymd(cls, year: int, month: int, day: int) -> Optional["Date"]:
        try:
            return cls(dt.date(year, month, day))
        except ValueError:
            return None

    @classmethod
    def parse(cls, text: str) -> "Date":
        try:
            return cls(dt.date.fromisoformat(text.strip()))
        except ValueError as exc:
            raise ValueError(f"Invalid date (expected YYYY-MM-DD): {text!r}") from exc

    @classmethod
    def from_value(cls, value: Any) -> "Date":
        if isinstance(value, Date):
            return value
        if isinstance(value, dt.datetime):
            return cls(value.date())
        if isinstance(value, dt.date):
            return cls(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise TypeError(f"Invalid date: {value!r}")

    @classmethod
    def today(cls) -> "Date":
        return cls(dt.date.today())

    @classmethod
    def beginning_of_year_for(cls, year: int) -> Optional["Date"]:
        return cls.from_ymd(year, 1, 1)

    @classmethod
    def end_of_year_for(cls, year: int) -> Optional["Date"]:
        return cls.from_ymd(year, 12, 31)

    @classmethod
    def beginning_of_month_for(cls, year: int, month: int) -> Optional["Date"]:
        return cls.from_ymd(year, month, 1)

    @property
    def year(self) -> int:
        return self.value.year

    @property
    def month(self) -> int:
        return self.value.month

    @property
    def day(self) -> int:
        return self.value.day

    @property
    def ordinal(self) -> int:
        return self.value.timetuple().tm_yday

    @property
    def week(self) -> int:
        return self.value.isocalendar()[1]

    @property
    def iso_year(self) -> int:
        return self.value.isocalendar()[0]

    @property
    def weekday(self) -> Weekday:
        return Weekday(self.value.weekday())

    def format(self, fmt: str) -> str:
        return self.value.strftime(fmt)

    def add_days(self, days: int) -> Optional["Date"]:
        try:
            return Date(self.value + dt.timedelta(days=days))
        except OverflowError:
            return None

    def add_weeks(self, weeks: int) -> Optional["Date"]:
        return self.add_days(weeks * 7)

    def add_months(self, months: int) -> Optional["Date"]:
        index = self.value.year * 12 + (self.value.month - 1) + months
        year, month0 = divmod(index, 12)
        if not dt.MINYEAR <= year <= dt.MAXYEAR:
            return None
        day = min(self.value.day, calendar.monthrange(year, month0 + 1)[1])
        return Date.from_ymd(year, month0 + 1, day)

    def tomorrow(self) -> Optional["Date"]:
        return self.add_days(1)

    def yesterday(self) -> Optional["Date"]:
        return self.add_days(-1)

    def next_week(self) -> Optional["Date"]:
        return self.add_weeks(1)

    def last_week(self) -> Optional["Date"]:
        return self.add_weeks(-1)

    def next_month(self) -> Optional["Date"]:
        return self.add_months(1)

    def last_month(self) -> Optional["Date"]:
        return self.add_months(-1)

    def beginning_of_year(self) -> Optional["Date"]:
        return Date.from_ymd(self.year, 1, 1)

    def end_of_year(self) -> Optional["Date"]:
        return Date.from_ymd(self.year, 12, 31)

    def beginning_of_month(self) -> Optional["Date"]:
        return Date.from_ymd(self.year, self.month, 1)

    def end_of_month(self) -> Optional["Date"]:
        return Date.from_ymd(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def beginning_of_week_sunday(self) -> Optional["Date"]:
        return self.add_days(-self.weekday.num_days_from_sunday())

    def end_of_week_sunday(self) -> Optional["Date"]:
        return self.add_days(6 - self.weekday.num_days_from_sunday())

    def beginning_of_week_monday(self) -> Optional["Date"]:
        return self.add_days(-self.weekday.num_days_from_monday())

    def end_of_week_monday(self) -> Optional["Date"]:
        return self.add_days(6 - self.weekday.num_days_from_monday())

    def weeks_in_month_sunday(self) -> int:
        return _weeks_in_month(self, self.weekday_offset_sunday())

    def weeks_in_month_monday(self) -> int:
        return _weeks_in_month(self, self.weekday_offset_monday())

    def weekday_offset_sunday(self) -> int:
        first = self.beginning_of_month()
        return first.weekday.num_days_from_sunday() if first else 0

    def weekday_offset_monday(self) -> int:
        first = self.beginning_of_month()
        return first.weekday.num_days_from_monday() if first else 0

    def iter_days(self) -> Iterator["Date"]:
        current: Optional[Date] = self
        while current is not None:
            yield current
            current = current.tomorrow()

    def __str__(self) -> str:
        return self.value.isoformat()


def _weeks_in_month(date: Date, first_offset: int) -> int:
    days = calendar.monthrange(date.year, date.month)[1]
    return (first_offset + days + 6) // 7


def iso_weeks_in_year(year: int) -> int:
    # Dec 28 always falls in the final ISO week of its year.
    return dt.date(year, 12, 28).isocalendar()[1]


def iso_week_start(year: int, week: int) -> Date:
    return Date(dt.date.fromisocalendar(year, week, 1))


def start_end_week(date: Date) -> Tuple[Date, Date]:
    """Monday-based week containing ``date``, clipped to the date's year."""
    start = date.beginning_of_week_monday() or date
    end = date.end_of_week_monday() or date
    if start.year != date.year:
        start = date.beginning_of_year() or start
    if end.year != date.year:
        end = date.end_of_year() or end
    return start, end
