"""LessonManager – Bearbeiten, Einfügen, Löschen und Tauschen von Stunden.

Alle Operationen prüfen zuerst und schreiben danach: bei Misserfolg
(Rückgabe False/-1) bleibt die Konfiguration unverändert.

Temporäre Tagespläne sind Kopien eines Tages. Ein regulärer Tausch wird in
bestehende temporäre Pläne desselben Ursprungs übernommen, ein temporärer
Tausch verändert nur die Kopie und tauscht nur Stunden dieses einen Tages.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from models.base import Parity, as_date
from models.lesson import Lesson
from models.schedule import Schedule, TemporarySchedule
from models.subject import Subject
from models.timetable_config import TimetableConfig
from planner.resolver import ScheduleResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LessonRef:
    """Position einer Stunde: Wochentag, Index, optional Wochenparität."""

    day: int
    lesson_index: int
    week: Optional[Parity] = None


@dataclass
class LessonLocation:
    """Fundstelle einer Stunde in einem Tagesplan."""

    day: int
    week: Optional[Parity]
    lesson_index: int
    schedule: Schedule
    lesson: Lesson


@dataclass
class SubjectLessons:
    """Alle Fundstellen eines Fachs (für die Lehrer-Ansicht)."""

    subject: Subject
    lessons: list[LessonLocation]


def _in_range(lessons: list[Lesson], index: int) -> bool:
    return 0 <= index < len(lessons)


class LessonManager:
    """Verändert wiederkehrende und temporäre Tagespläne in-place."""

    def __init__(self, config: TimetableConfig, resolver: Optional[ScheduleResolver] = None) -> None:
        self.config = config
        self.resolver = resolver or ScheduleResolver(config)

    # ─── Abfragen ───

    def get_subject_lessons(self, subject_uuid: str) -> list[LessonLocation]:
        """Alle Stunden eines Fachs über alle Tagespläne."""
        found = []
        for schedule in self.config.schedules:
            day = schedule.active_day
            if day is None and schedule.active_date is not None:
                day = schedule.active_date.isoweekday()
            for index, lesson in enumerate(schedule.lessons):
                if lesson.subject_uuid == subject_uuid:
                    found.append(LessonLocation(
                        day=day or 0,
                        week=schedule.active_week,
                        lesson_index=index,
                        schedule=schedule,
                        lesson=lesson,
                    ))
        return found

    def get_teacher_lessons(self, teacher_name: str) -> list[SubjectLessons]:
        """Alle Stunden einer Lehrkraft, gruppiert nach Fach."""
        return [
            SubjectLessons(subject=subject, lessons=self.get_subject_lessons(subject.uuid))
            for subject in self.config.subjects
            if subject.teacher_name == teacher_name
        ]

    def get_temporary_schedule(self, on: date | datetime) -> Optional[TemporarySchedule]:
        return self.config.temporary_for(as_date(on).isoformat())

    # ─── Einzelne Stunden ───

    def edit_lesson(
        self,
        day: int,
        lesson_index: int,
        subject_uuid: str,
        week: Optional[Parity] = None,
        default_week: Optional[Parity] = None,
    ) -> bool:
        """Setzt das Fach an Position ``lesson_index``.

        ``week`` hat Vorrang vor ``default_week``. Temporäre Pläne bleiben unberührt.
        """
        effective = week if week is not None else default_week
        schedule = self.resolver.find_recurring(day, effective)
        if schedule is None or not _in_range(schedule.lessons, lesson_index):
            logger.info(f"edit_lesson abgelehnt: Tag {day}, Stunde {lesson_index} nicht gefunden")
            return False
        self._set_subject(schedule.lessons[lesson_index], subject_uuid)
        logger.debug(f"edit_lesson: Tag {day}, Stunde {lesson_index} → {subject_uuid}")
        return True

    def create_lesson(
        self,
        day: int,
        subject_uuid: str,
        week: Optional[Parity] = None,
        time_uuid: Optional[str] = None,
    ) -> int:
        """Hängt eine Stunde an und gibt ihre Position zurück.

        Existiert kein Plan für (Tag, Woche), wird einer angelegt; ohne
        ``week`` gilt er jede Woche. Ohne ``time_uuid`` wird das freie
        Zeitfenster an derselben Position verknüpft.
        """
        if not 1 <= day <= 7:
            logger.info(f"create_lesson abgelehnt: ungültiger Wochentag {day}")
            return -1
        schedule = self.resolver.find_recurring(day, week)
        if schedule is None:
            schedule = Schedule(date_mode=False, active_day=day, active_week=week)
            self.config.schedules.append(schedule)
            logger.debug(f"create_lesson: neuer Tagesplan für Tag {day} ({week})")
        if time_uuid is None:
            time_uuid = self._free_target_at(schedule, len(schedule.lessons))
        schedule.lessons.append(self._new_lesson(subject_uuid, time_uuid))
        return len(schedule.lessons) - 1

    def insert_lesson_after(
        self,
        day: int,
        after_index: int,
        subject_uuid: str,
        week: Optional[Parity] = None,
        time_uuid: Optional[str] = None,
    ) -> bool:
        """Fügt direkt nach ``after_index`` eine Stunde ein."""
        schedule = self.resolver.find_recurring(day, week)
        if schedule is None or not _in_range(schedule.lessons, after_index):
            logger.info(f"insert_lesson_after abgelehnt: Tag {day}, Position {after_index}")
            return False
        if time_uuid is None:
            time_uuid = self._free_target_at(schedule, after_index + 1)
        schedule.lessons.insert(after_index + 1, self._new_lesson(subject_uuid, time_uuid))
        return True

    def delete_lesson(self, day: int, lesson_index: int, week: Optional[Parity] = None) -> bool:
        """Entfernt eine Stunde; nachfolgende Positionen rücken auf."""
        schedule = self.resolver.find_recurring(day, week)
        if schedule is None or not _in_range(schedule.lessons, lesson_index):
            logger.info(f"delete_lesson abgelehnt: Tag {day}, Stunde {lesson_index}")
            return False
        del schedule.lessons[lesson_index]
        return True

    def assign_lesson_time(
        self,
        day: int,
        lesson_index: int,
        time_uuid: Optional[str],
        week: Optional[Parity] = None,
    ) -> bool:
        """Verknüpft eine Stunde mit einem Zeitfenster (None löst die Verknüpfung)."""
        schedule = self.resolver.find_recurring(day, week)
        if schedule is None or not _in_range(schedule.lessons, lesson_index):
            return False
        known = {t.uuid for t in self.config.all_time_targets()}
        if time_uuid is not None and time_uuid not in known:
            logger.info(f"assign_lesson_time abgelehnt: Zeitfenster {time_uuid} unbekannt")
            return False
        schedule.lessons[lesson_index].time_uuid = time_uuid
        return True

    # ─── Tauschen ───

    def swap_lessons(
        self,
        source: LessonRef,
        target: LessonRef,
        on: Optional[date | datetime] = None,
        is_temporary: bool = False,
    ) -> bool:
        """Tauscht die Fächer zweier Stunden (regulär oder nur für ein Datum)."""
        if on is not None and is_temporary:
            return self._swap_temporary(source, target, as_date(on))
        return self._swap_regular(source, target)

    def _endpoint(self, ref: LessonRef, default_week: Optional[Parity] = None) -> Optional[Schedule]:
        week = ref.week if ref.week is not None else default_week
        schedule = self.resolver.find_recurring(ref.day, week)
        if schedule is None or not _in_range(schedule.lessons, ref.lesson_index):
            return None
        return schedule

    def _swap_regular(self, source: LessonRef, target: LessonRef) -> bool:
        src_schedule = self._endpoint(source)
        tgt_schedule = self._endpoint(target)
        if src_schedule is None or tgt_schedule is None:
            logger.info(f"swap_lessons abgelehnt: {source} / {target} nicht auflösbar")
            return False

        src_lesson = src_schedule.lessons[source.lesson_index]
        tgt_lesson = tgt_schedule.lessons[target.lesson_index]
        old_src, old_tgt = src_lesson.subject_uuid, tgt_lesson.subject_uuid
        self._set_subject(src_lesson, old_tgt)
        self._set_subject(tgt_lesson, old_src)

        for temporary in self.config.temporary_schedules:
            src_hit = self._derived_from(temporary, source.day, src_schedule)
            tgt_hit = self._derived_from(temporary, target.day, tgt_schedule)
            if src_hit and tgt_hit and src_schedule is tgt_schedule:
                # Tausch innerhalb desselben Tages: gespiegelt übernehmen
                lessons = temporary.lessons
                if _in_range(lessons, source.lesson_index) and _in_range(lessons, target.lesson_index):
                    a = lessons[source.lesson_index]
                    b = lessons[target.lesson_index]
                    a_uuid, b_uuid = a.subject_uuid, b.subject_uuid
                    self._set_subject(a, b_uuid)
                    self._set_subject(b, a_uuid)
                continue
            # Tagesübergreifend: nur Positionen ohne eigene temporäre Änderung
            if src_hit:
                self._replace_if_unchanged(temporary, source.lesson_index, old_src, old_tgt)
            if tgt_hit:
                self._replace_if_unchanged(temporary, target.lesson_index, old_tgt, old_src)

        logger.debug(f"swap_lessons: {source} ↔ {target}")
        return True

    def _swap_temporary(self, source: LessonRef, target: LessonRef, on: date) -> bool:
        info = self.resolver.week_info(on)
        src_schedule = self._endpoint(source, info.parity)
        tgt_schedule = self._endpoint(target, info.parity)
        if src_schedule is None or tgt_schedule is None:
            logger.info(f"Temporärer Tausch am {on} abgelehnt: Stunde nicht auflösbar")
            return False

        # Nur Positionen des betroffenen Wochentags liegen in der Kopie;
        # ein Tausch mit einem anderen Tag wäre nicht umkehrbar
        if source.day != info.day_index or target.day != info.day_index:
            logger.info(
                f"Temporärer Tausch am {on} abgelehnt: beide Stunden müssen an Tag {info.day_index} liegen"
            )
            return False

        temporary = self.config.temporary_for(on.isoformat())
        if temporary is not None:
            lessons = temporary.lessons
            time_group_uuid = temporary.time_group_uuid
        else:
            resolved = self.resolver.resolve(on)
            lessons = [lesson.model_copy(deep=True) for lesson in resolved.lessons]
            time_group_uuid = resolved.time_group_uuid

        if not (_in_range(lessons, source.lesson_index) and _in_range(lessons, target.lesson_index)):
            logger.info(f"Temporärer Tausch am {on} abgelehnt: Position außerhalb des Tagesplans")
            return False

        if temporary is None:
            temporary = TemporarySchedule(
                date=on.isoformat(),
                lessons=lessons,
                original_day_index=info.day_index,
                original_week=info.parity,
                time_group_uuid=time_group_uuid,
            )
            self.config.temporary_schedules.append(temporary)
            logger.debug(f"Temporärer Tagesplan für {on} angelegt")

        a = lessons[source.lesson_index]
        b = lessons[target.lesson_index]
        a_uuid, b_uuid = a.subject_uuid, b.subject_uuid
        self._set_subject(a, b_uuid)
        self._set_subject(b, a_uuid)
        return True

    def _derived_from(self, temporary: TemporarySchedule, day: int, schedule: Schedule) -> bool:
        """Stammt der temporäre Plan aus dem wiederkehrenden Plan ``schedule``?"""
        if temporary.original_day_index != day:
            return False
        return schedule.active_week is None or schedule.active_week == temporary.original_week

    def _replace_if_unchanged(
        self, temporary: TemporarySchedule, index: int, old_uuid: str, new_uuid: str
    ) -> None:
        if _in_range(temporary.lessons, index) and temporary.lessons[index].subject_uuid == old_uuid:
            self._set_subject(temporary.lessons[index], new_uuid)

    # ─── Temporäre Pläne ───

    def delete_temporary_schedule(self, on: date | datetime) -> bool:
        """Entfernt den temporären Plan eines Datums (es gibt keinen Ablauf)."""
        date_str = as_date(on).isoformat()
        before = len(self.config.temporary_schedules)
        self.config.temporary_schedules[:] = [
            ts for ts in self.config.temporary_schedules if ts.date != date_str
        ]
        return len(self.config.temporary_schedules) < before

    # ─── Anzeigenamen ───

    def refresh_cached_names(self) -> int:
        """Aktualisiert die zwischengespeicherten Fachnamen aller Stunden.

        Gibt die Anzahl geänderter Stunden zurück.
        """
        changed = 0
        all_lessons = [l for s in self.config.schedules for l in s.lessons]
        all_lessons += [l for ts in self.config.temporary_schedules for l in ts.lessons]
        for lesson in all_lessons:
            before = (lesson.cached_name, lesson.cached_short_name)
            self._set_subject(lesson, lesson.subject_uuid)
            if (lesson.cached_name, lesson.cached_short_name) != before:
                changed += 1
        return changed

    # ── Hilfsfunktionen ──────────────────────────────────────────────────────

    def _free_target_at(self, schedule: Schedule, index: int) -> Optional[str]:
        """Zeitfenster an Position ``index`` der Gruppe des Plans, sofern unbelegt."""
        group = self.config.time_group(schedule.time_group_uuid) or self.config.time_group()
        if group is None:
            return None
        targets = group.sorted_targets()
        if not 0 <= index < len(targets):
            return None
        target_uuid = targets[index].uuid
        if any(l.time_uuid == target_uuid for l in schedule.lessons):
            return None
        return target_uuid

    def _new_lesson(self, subject_uuid: str, time_uuid: Optional[str]) -> Lesson:
        lesson = Lesson(subject_uuid=subject_uuid, time_uuid=time_uuid)
        self._set_subject(lesson, subject_uuid)
        return lesson

    def _set_subject(self, lesson: Lesson, subject_uuid: str) -> None:
        lesson.subject_uuid = subject_uuid
        subject = self.config.subject_by_uuid(subject_uuid)
        lesson.cached_name = subject.name if subject else None
        lesson.cached_short_name = subject.short_name if subject else None
