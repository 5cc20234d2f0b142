from models.base import Parity
from models.subject import Subject, SubjectExtra, SubjectKind
from models.lesson import Lesson
from models.schedule import Schedule, TemporarySchedule
from models.time_target import TimeTarget, TimeTargetGroup
from models.timetable_config import TimetableConfig

__all__ = [
    "Parity",
    "Subject",
    "SubjectExtra",
    "SubjectKind",
    "Lesson",
    "Schedule",
    "TemporarySchedule",
    "TimeTarget",
    "TimeTargetGroup",
    "TimetableConfig",
]
