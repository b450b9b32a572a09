"""
Mapping of raw portal JSON to models.

Payload entries that fail validation are logged and skipped so one bad
course does not take down the whole roster. Dates go through
parse_flex_date(); unparseable values become None.
"""

import logging
from typing import Any, Dict, List, Optional

from ..attendance.dates import parse_flex_date
from ..exceptions import UpstreamError
from ..models.attendance import (
    AttendanceMark,
    CourseAttendance,
    CourseComponent,
    LectureHistory,
    LectureRecord,
    ScheduleEntry,
    ScheduleKind,
)
from ..validation.course_validator import CourseComponentValidator, CourseValidator


logger = logging.getLogger(__name__)

_course_validator = CourseValidator()
_component_validator = CourseComponentValidator()


def unwrap_envelope(payload: Any) -> Any:
    """Return payload["data"] when the reply is wrapped, else the payload."""
    if isinstance(payload, dict) and payload.get("data") is not None:
        return payload["data"]
    return payload


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _parse_component(raw: Dict[str, Any], course_id: Any) -> Optional[CourseComponent]:
    data = dict(raw) if isinstance(raw, dict) else raw
    if isinstance(data, dict):
        # The portal sends null counts for components with no lectures yet
        for name in ("presentLecture", "totalLecture"):
            if data.get(name) is None and "courseCompId" in data:
                data[name] = 0

    validation = _component_validator.validate(data)
    if not validation.is_valid:
        logger.warning(
            f"Skipping invalid component of course {course_id}: "
            f"{validation.get_summary()}"
        )
        return None

    return CourseComponent(
        course_comp_id=data["courseCompId"],
        present_count=data["presentLecture"],
        total_count=data["totalLecture"],
    )


def parse_roster(payload: Any) -> List[CourseAttendance]:
    """
    Build courses from the registered-courses reply.

    Args:
        payload: Decoded JSON (list of course objects)

    Returns:
        Valid courses in portal order

    Raises:
        UpstreamError: If the reply is not a list
    """
    if not isinstance(payload, list):
        raise UpstreamError(
            f"Unexpected roster payload: {type(payload).__name__}"
        )

    courses = []
    for index, raw in enumerate(payload):
        validation = _course_validator.validate(raw)
        if not validation.is_valid:
            logger.warning(f"Skipping invalid course #{index}: {validation.get_summary()}")
            continue
        for warning in validation.warnings:
            logger.debug(warning)

        components = []
        for raw_component in raw.get("studentCourseCompDetails") or []:
            # Position matters: only the first component is the recognized one
            components.append(_parse_component(raw_component, raw["courseId"]))

        if components and components[0] is None:
            logger.warning(
                f"Course {raw['courseId']} has an invalid first component; "
                f"it has no recognized attendance counts"
            )

        courses.append(CourseAttendance(
            student_id=raw["studentId"],
            course_id=raw["courseId"],
            course_code=_text(raw.get("courseCode")),
            course_name=_text(raw.get("courseName")),
            components=tuple(components),
        ))

    logger.info(f"Parsed {len(courses)} of {len(payload)} registered courses")
    return courses


def parse_schedule(payload: Any) -> List[ScheduleEntry]:
    """
    Build timetable entries from the weekly schedule reply.

    Raises:
        UpstreamError: If the reply is not a list
    """
    if not isinstance(payload, list):
        raise UpstreamError(
            f"Unexpected schedule payload: {type(payload).__name__}"
        )

    entries = []
    for raw in payload:
        if not isinstance(raw, dict):
            logger.debug(f"Skipping non-object schedule entry: {raw!r}")
            continue

        kind = (
            ScheduleKind.HOLIDAY
            if _text(raw.get("type")).upper() == ScheduleKind.HOLIDAY.value
            else ScheduleKind.CLASS
        )
        entries.append(ScheduleEntry(
            course_code=_text(raw.get("courseCode")),
            start=parse_flex_date(raw.get("start")),
            end=parse_flex_date(raw.get("end")),
            kind=kind,
            course_name=_text(raw.get("courseName")),
            venue=_text(raw.get("classRoom")),
            faculty=_text(raw.get("facultyName")),
            title=_text(raw.get("title")),
        ))

    return entries


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def parse_lecture_history(payload: Any) -> LectureHistory:
    """
    Build a LectureHistory from the lecture-wise attendance reply.

    The portal answers with a list whose first element carries the
    history; an empty list means no lectures yet.
    """
    if isinstance(payload, list):
        payload = payload[0] if payload else None

    if not isinstance(payload, dict):
        return LectureHistory()

    lectures = []
    for raw in payload.get("lectureList") or []:
        if not isinstance(raw, dict):
            continue
        lectures.append(LectureRecord(
            date=parse_flex_date(raw.get("planLecDate")),
            time_slot=_text(raw.get("timeSlot")),
            mark=AttendanceMark.from_raw(raw.get("attendance")),
        ))

    return LectureHistory(
        present_count=_to_int(payload.get("presentCount")),
        lecture_count=_to_int(payload.get("lectureCount")),
        percent=_to_float(payload.get("percent")),
        lectures=tuple(lectures),
    )
