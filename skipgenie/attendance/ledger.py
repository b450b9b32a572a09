"""
Ledger of planned future absences.

Exclusions only feed the projection engine; they are not attendance
records. Entries are kept in insertion order and live for the lifetime
of the owning session.
"""

import logging
from datetime import date
from typing import Any, Callable, FrozenSet, Iterator, List, Optional, Tuple

from .dates import to_date
from ..exceptions import NotFoundError, ValidationError
from ..models.attendance import ExclusionEntry


logger = logging.getLogger(__name__)

FULL_DAY_LABEL = "Full Day"


class ExclusionLedger:
    """
    Validated, ordered collection of planned absences.

    An entry either covers one course on a date or the whole day. Both
    scopes may exist for the same date; exact (date, course) duplicates
    are rejected.

    Examples:
        >>> ledger = ExclusionLedger()
        >>> full_day = ledger.add("2099-01-05")
        >>> maths = ledger.add("2099-01-05", course_id=42, label="Maths")
        >>> ledger.is_excluded(date(2099, 1, 5), 7)
        True
    """

    def __init__(self, clock: Callable[[], date] = date.today):
        """
        Initialize an empty ledger.

        Args:
            clock: Returns "today"; entries must be strictly after it
        """
        self._clock = clock
        self._entries: List[ExclusionEntry] = []

    def add(
        self,
        day: Any,
        course_id: Optional[int] = None,
        label: Optional[str] = None
    ) -> ExclusionEntry:
        """
        Add a planned absence.

        Args:
            day: date, datetime or date text
            course_id: Course the absence applies to (None for full day)
            label: Display label, defaults to "Full Day" or "Course <id>"

        Returns:
            The stored ExclusionEntry

        Raises:
            ValidationError: If the date is missing, unparseable, not in
                the future, or the same (date, course) is already present
        """
        if day is None or (isinstance(day, str) and not day.strip()):
            raise ValidationError("Please pick a date")

        parsed = to_date(day)
        if parsed is None:
            raise ValidationError(f"Invalid exclusion date: {day}")

        today = self._clock()
        if parsed <= today:
            raise ValidationError(
                f"Exclusion date must be in the future, got {parsed.isoformat()}"
            )

        for entry in self._entries:
            if entry.date == parsed and entry.course_id == course_id:
                raise ValidationError(
                    f"Exclusion already added for {parsed.isoformat()}"
                )

        if label is None:
            label = FULL_DAY_LABEL if course_id is None else f"Course {course_id}"

        entry = ExclusionEntry(date=parsed, course_id=course_id, label=label)
        self._entries.append(entry)
        logger.debug(f"Exclusion added: {parsed.isoformat()} ({label})")
        return entry

    def remove(self, index: int) -> ExclusionEntry:
        """
        Remove the entry at a list position.

        Raises:
            NotFoundError: If index is outside the current list
        """
        if not 0 <= index < len(self._entries):
            raise NotFoundError(
                f"No exclusion at index {index} (have {len(self._entries)})"
            )
        entry = self._entries.pop(index)
        logger.debug(f"Exclusion removed: {entry.date.isoformat()} ({entry.label})")
        return entry

    def list(self) -> Tuple[ExclusionEntry, ...]:
        """Snapshot of entries in insertion order."""
        return tuple(self._entries)

    def clear(self):
        self._entries.clear()

    def full_day_dates(self) -> FrozenSet[date]:
        return frozenset(e.date for e in self._entries if e.is_full_day)

    def course_dates(self, course_id: int) -> FrozenSet[date]:
        return frozenset(e.date for e in self._entries if e.course_id == course_id)

    def is_excluded(self, day: date, course_id: int) -> bool:
        """Whether a course's lecture on day is skipped (full-day or course-scoped)."""
        return day in self.full_day_dates() or day in self.course_dates(course_id)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ExclusionEntry]:
        return iter(self.list())
