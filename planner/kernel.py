"""ScheduleKernel – zentrale Schnittstelle für Abfragen und Änderungen.

Der Kernel besitzt die Konfiguration; alle Manager arbeiten auf derselben
Instanz. Die Wochenparität wird bei jedem Aufruf aus einem expliziten Datum
berechnet (Standard: heute) und nie zwischengespeichert.
"""

from datetime import date, datetime
from typing import Optional

from models.base import Parity, as_date
from models.lesson import Lesson
from models.subject import SubjectKind
from models.timetable_config import TimetableConfig
from planner.lesson_status import LessonStatus, classify_lesson_status
from planner.lessons import LessonManager, LessonRef
from planner.resolver import ResolvedDay, ScheduleResolver
from planner.subjects import SubjectManager
from planner.time_targets import TimeTargetManager
from planner.week import WeekInfo


class ScheduleKernel:
    """Stundenplan-Kern über einer geladenen ``TimetableConfig``."""

    def __init__(self, config: TimetableConfig) -> None:
        self.config = config
        self.resolver = ScheduleResolver(config)
        self.lessons = LessonManager(config, self.resolver)
        self.subjects = SubjectManager(config)
        self.time_targets = TimeTargetManager(config)

    # ─── Lesen ───

    def week_info(self, on: Optional[date | datetime] = None) -> WeekInfo:
        """Wochentag und Parität für ``on`` (Standard: heute)."""
        return self.resolver.week_info(on or date.today())

    def get_lessons_for_date(self, on: date | datetime) -> ResolvedDay:
        return self.resolver.resolve(on)

    def get_today_lessons(self, today: Optional[date | datetime] = None) -> list[Lesson]:
        """Stunden des Tages (temporärer Plan hat Vorrang)."""
        return self.resolver.resolve(today or date.today()).lessons

    def get_current_lesson_status(self, now: Optional[datetime] = None) -> LessonStatus:
        """Status des aktuellen Zeitpunkts (vor/in Stunde, Pause, Ende)."""
        now = now or datetime.now()
        resolved = self.resolver.resolve(now.date())
        group = self.config.time_group(resolved.time_group_uuid) or self.config.time_group()
        targets = group.targets if group is not None else []
        return classify_lesson_status(now, targets, resolved.lessons)

    def get_teacher_lessons(self, teacher_name: str):
        return self.lessons.get_teacher_lessons(teacher_name)

    def get_subject_lessons(self, subject_uuid: str):
        return self.lessons.get_subject_lessons(subject_uuid)

    # ─── Stunden ───

    def edit_lesson(
        self,
        day: int,
        lesson_index: int,
        subject_uuid: str,
        week: Optional[Parity] = None,
        today: Optional[date | datetime] = None,
    ) -> bool:
        """Ohne ``week`` gilt die Parität von ``today``."""
        return self.lessons.edit_lesson(
            day, lesson_index, subject_uuid, week=week,
            default_week=self.week_info(today).parity,
        )

    def create_lesson(self, day: int, subject_uuid: str, week: Optional[Parity] = None,
                      time_uuid: Optional[str] = None) -> int:
        return self.lessons.create_lesson(day, subject_uuid, week, time_uuid)

    def insert_lesson_after(self, day: int, after_index: int, subject_uuid: str,
                            week: Optional[Parity] = None,
                            time_uuid: Optional[str] = None) -> bool:
        return self.lessons.insert_lesson_after(day, after_index, subject_uuid, week, time_uuid)

    def delete_lesson(self, day: int, lesson_index: int, week: Optional[Parity] = None) -> bool:
        return self.lessons.delete_lesson(day, lesson_index, week)

    def assign_lesson_time(self, day: int, lesson_index: int, time_uuid: Optional[str],
                           week: Optional[Parity] = None) -> bool:
        return self.lessons.assign_lesson_time(day, lesson_index, time_uuid, week)

    def swap_lessons(self, source: LessonRef, target: LessonRef,
                     on: Optional[date | datetime] = None, is_temporary: bool = False) -> bool:
        return self.lessons.swap_lessons(source, target, on, is_temporary)

    def get_temporary_schedule(self, on: date | datetime):
        return self.lessons.get_temporary_schedule(on)

    def delete_temporary_schedule(self, on: date | datetime) -> bool:
        return self.lessons.delete_temporary_schedule(as_date(on))

    def refresh_cached_names(self) -> int:
        return self.lessons.refresh_cached_names()

    # ─── Fächer ───

    def get_all_subjects(self, include_activities: bool = True):
        return self.subjects.get_all_subjects(include_activities)

    def get_subject(self, subject_uuid: str):
        return self.subjects.get_subject(subject_uuid)

    def get_subject_uuid_by_name(self, name: str) -> Optional[str]:
        return self.subjects.get_subject_uuid_by_name(name)

    def get_subject_name_by_uuid(self, subject_uuid: str) -> Optional[str]:
        return self.subjects.get_subject_name_by_uuid(subject_uuid)

    def create_subject(self, name: str, kind: SubjectKind = SubjectKind.SUBJECT,
                       short_name: Optional[str] = None, teacher_name: Optional[str] = None,
                       outdoor: bool = False) -> Optional[str]:
        return self.subjects.create_subject(name, kind, short_name, teacher_name, outdoor)

    def edit_subject(self, subject_uuid: str, **changes) -> bool:
        return self.subjects.edit_subject(subject_uuid, **changes)

    def delete_subject(self, subject_uuid: str) -> bool:
        return self.subjects.delete_subject(subject_uuid)

    # ─── Zeitfenster ───

    def create_time_target(self, group_name: str, start_time: str, end_time: str) -> Optional[str]:
        return self.time_targets.create_time_target(group_name, start_time, end_time)

    def insert_time_target_after(self, after_uuid: str, start_time: str, end_time: str) -> Optional[str]:
        return self.time_targets.insert_time_target_after(after_uuid, start_time, end_time)

    def edit_time_target(self, target_uuid: str, start_time: str, end_time: str) -> bool:
        return self.time_targets.edit_time_target(target_uuid, start_time, end_time)

    def delete_time_target(self, target_uuid: str) -> bool:
        return self.time_targets.delete_time_target(target_uuid)

    # ─── Analyse ───

    def check_consistency(self):
        """Strukturprüfung der Konfiguration (siehe analysis.consistency)."""
        from analysis.consistency import ConsistencyChecker
        return ConsistencyChecker().check(self.config)
