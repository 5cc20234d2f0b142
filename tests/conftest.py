"""Gemeinsame Testdaten: kleiner Stundenplan mit Zwei-Wochen-Rhythmus.

Rhythmus-Start: Montag, 02.09.2024 (ungerade Woche).

  Mo ungerade:  Mathe(t1)  Deutsch(t2)  Englisch(t3)
  Mo gerade:    Deutsch(t1) Mathe(t2)
  Di (jede Woche): Englisch(t1) Mathe(t2)
  Mi 04.09.2024 (Datumsmodus): Deutsch(t1)
"""

from datetime import date

import pytest

from models import (
    Lesson,
    Parity,
    Schedule,
    Subject,
    SubjectKind,
    TimeTarget,
    TimeTargetGroup,
    TimetableConfig,
)
from planner.kernel import ScheduleKernel

START = date(2024, 9, 2)

MA, DE, EN, PA = "s-ma", "s-de", "s-en", "s-pa"


def make_config() -> TimetableConfig:
    return TimetableConfig(
        group_name="7b",
        start_date=START,
        subjects=[
            Subject(uuid=MA, name="Mathe", short_name="Ma", teacher_name="Müller"),
            Subject(uuid=DE, name="Deutsch", short_name="De", teacher_name="Schmidt"),
            Subject(uuid=EN, name="Englisch", short_name="En", teacher_name="Müller"),
            Subject(uuid=PA, name="Pause", kind=SubjectKind.ACTIVITY),
        ],
        time_groups=[
            TimeTargetGroup(uuid="g1", name="default", targets=[
                TimeTarget(uuid="t1", start_time="08:00:00", end_time="08:45:00"),
                TimeTarget(uuid="t2", start_time="08:55:00", end_time="09:40:00"),
                TimeTarget(uuid="t3", start_time="10:00:00", end_time="10:45:00"),
            ]),
        ],
        schedules=[
            Schedule(active_day=1, active_week=Parity.ODD, lessons=[
                Lesson(subject_uuid=MA, time_uuid="t1"),
                Lesson(subject_uuid=DE, time_uuid="t2"),
                Lesson(subject_uuid=EN, time_uuid="t3"),
            ]),
            Schedule(active_day=1, active_week=Parity.EVEN, lessons=[
                Lesson(subject_uuid=DE, time_uuid="t1"),
                Lesson(subject_uuid=MA, time_uuid="t2"),
            ]),
            Schedule(active_day=2, lessons=[
                Lesson(subject_uuid=EN, time_uuid="t1"),
                Lesson(subject_uuid=MA, time_uuid="t2"),
            ]),
            Schedule(date_mode=True, active_date=date(2024, 9, 4), lessons=[
                Lesson(subject_uuid=DE, time_uuid="t1"),
            ]),
        ],
    )


def subjects_of(lessons) -> list[str]:
    return [l.subject_uuid for l in lessons]


@pytest.fixture
def config() -> TimetableConfig:
    return make_config()


@pytest.fixture
def kernel(config) -> ScheduleKernel:
    return ScheduleKernel(config)
