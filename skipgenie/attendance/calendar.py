"""
Working-day arithmetic.

A working day is any Monday to Friday. Declared holidays and planned
absences are not consulted here; callers layer those on top.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, List, Tuple

from ..models.attendance import ScheduleEntry


ONE_DAY = timedelta(days=1)
SCHEDULE_WINDOW_DAYS = 6


def is_working_day(day: date) -> bool:
    return day.weekday() < 5


def count_working_days(from_exclusive: date, to_inclusive: date) -> int:
    """
    Count Mon-Fri days in (from_exclusive, to_inclusive].

    Args:
        from_exclusive: Day before the first day counted (usually today)
        to_inclusive: Last day counted

    Returns:
        Number of working days, 0 for an empty range

    Examples:
        >>> count_working_days(date(2025, 10, 17), date(2025, 10, 24))  # Fri -> Fri
        5
    """
    span = (to_inclusive - from_exclusive).days
    if span <= 0:
        return 0

    full_weeks, remainder = divmod(span, 7)
    count = full_weeks * 5
    day = from_exclusive + timedelta(days=full_weeks * 7)
    for _ in range(remainder):
        day += ONE_DAY
        if is_working_day(day):
            count += 1
    return count


@dataclass(frozen=True)
class WorkingDayRange:
    """
    Restartable sequence of working days in (start_exclusive, end_inclusive].

    Iterating twice yields the same days; len() uses count_working_days().

    Examples:
        >>> days = WorkingDayRange(date(2025, 10, 17), date(2025, 10, 21))
        >>> [d.isoformat() for d in days]
        ['2025-10-20', '2025-10-21']
    """

    start_exclusive: date
    end_inclusive: date

    def __iter__(self) -> Iterator[date]:
        day = self.start_exclusive + ONE_DAY
        while day <= self.end_inclusive:
            if is_working_day(day):
                yield day
            day += ONE_DAY

    def __len__(self) -> int:
        return count_working_days(self.start_exclusive, self.end_inclusive)

    def __contains__(self, day: object) -> bool:
        return (
            isinstance(day, date)
            and self.start_exclusive < day <= self.end_inclusive
            and is_working_day(day)
        )


def iter_working_days(from_exclusive: date, to_inclusive: date) -> WorkingDayRange:
    """Enumerate Mon-Fri days in (from_exclusive, to_inclusive]."""
    return WorkingDayRange(from_exclusive, to_inclusive)


def week_bounds(reference: date, offset: int = 0) -> Tuple[date, date]:
    """
    Get the Monday and Sunday of the week containing reference.

    Args:
        reference: Any day of the base week
        offset: Weeks to move forward (positive) or back (negative)

    Returns:
        Tuple of (monday, sunday)
    """
    shifted = reference + timedelta(weeks=offset)
    monday = shifted - timedelta(days=shifted.weekday())
    return monday, monday + timedelta(days=6)


def default_schedule_window(today: date) -> Tuple[date, date]:
    """Default timetable query window: today through six days ahead."""
    return today, today + timedelta(days=SCHEDULE_WINDOW_DAYS)


def group_by_day(
    schedule: Iterable[ScheduleEntry],
    monday: date
) -> Dict[date, List[ScheduleEntry]]:
    """
    Bucket timetable entries into the seven days starting at monday.

    Entries without a start time or outside the week are dropped. Each
    day's entries are sorted by start time.
    """
    days: Dict[date, List[ScheduleEntry]] = {
        monday + timedelta(days=i): [] for i in range(7)
    }
    for entry in schedule:
        if entry.start is None:
            continue
        bucket = days.get(entry.start.date())
        if bucket is not None:
            bucket.append(entry)

    for entries in days.values():
        entries.sort(key=lambda e: e.start)
    return days
