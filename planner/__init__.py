"""Stundenplan-Kern: Wochenparität, Tagesauflösung, Status und Änderungen."""

from .kernel import ScheduleKernel
from .lesson_status import LessonState, LessonStatus, classify_lesson_status
from .lessons import LessonLocation, LessonManager, LessonRef, SubjectLessons
from .resolver import ResolvedDay, ScheduleResolver
from .subjects import SubjectManager
from .time_targets import TimeTargetManager
from .week import WeekInfo, week_info_for_date

__all__ = [
    "ScheduleKernel",
    "LessonState",
    "LessonStatus",
    "classify_lesson_status",
    "LessonLocation",
    "LessonManager",
    "LessonRef",
    "SubjectLessons",
    "ResolvedDay",
    "ScheduleResolver",
    "SubjectManager",
    "TimeTargetManager",
    "WeekInfo",
    "week_info_for_date",
]
