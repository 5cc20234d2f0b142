"""Import/Export im CSES-Format (YAML-Stundenplan-Dialekt, Version 1).

CSES kennt nur Fächer und Tagespläne mit Klassen (Fach + Beginn/Ende).
Zwischengespeicherte Anzeigenamen, Datumspläne und temporäre Tagespläne
gehen beim Export verloren.

Nutzt ruamel.yaml (YAML 1.2: "08:00:00" bleibt ein String).
"""

from io import StringIO
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

from models.base import Parity
from models.lesson import Lesson
from models.schedule import Schedule
from models.subject import Subject, SubjectKind
from models.time_target import TimeTarget, TimeTargetGroup
from models.timetable_config import TimetableConfig, new_uuid

yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120

DAY_NAMES = ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"]
_WEEK_LABELS = {"all": None, "odd": Parity.ODD, "even": Parity.EVEN}


class CsesError(ValueError):
    """CSES-Datei ungültig oder Konfiguration nicht exportierbar."""


def _time_str(value) -> str:
    """Normalisiert eine Zeitangabe auf HH:MM:SS.

    YAML-1.1-Leser machen aus 08:00:00 eine Sexagesimalzahl (Sekunden).
    """
    if isinstance(value, int):
        return f"{value // 3600:02d}:{value % 3600 // 60:02d}:{value % 60:02d}"
    text = str(value)
    return f"{text}:00" if len(text) == 5 else text


class CsesTransformer:
    """Wandelt zwischen CSES-YAML und ``TimetableConfig``."""

    @staticmethod
    def from_cses(content: str) -> TimetableConfig:
        """Liest CSES-Inhalt und erzeugt eine neue Konfiguration.

        Jeder Strukturfehler der Datei wird als ``CsesError`` gemeldet.
        """
        try:
            data = yaml.load(content)
        except YAMLError as e:
            raise CsesError(f"CSES-Datei ist kein gültiges YAML: {e}") from e
        if not isinstance(data, dict) or data.get("version") != 1:
            raise CsesError("Nicht unterstützte CSES-Version (erwartet: 1).")
        try:
            return CsesTransformer._build_config(data)
        except CsesError:
            raise
        except KeyError as e:
            raise CsesError(f"CSES-Datei unvollständig: Schlüssel {e} fehlt") from e
        except (AttributeError, TypeError, ValueError) as e:
            raise CsesError(f"CSES-Datei ungültig: {e}") from e

    @staticmethod
    def _build_config(data: dict) -> TimetableConfig:
        subjects = [
            Subject(
                uuid=new_uuid(),
                name=str(s["name"]),
                kind=SubjectKind.SUBJECT,
                short_name=s.get("simplified_name"),
                teacher_name=s.get("teacher"),
            )
            for s in data.get("subjects") or []
        ]
        by_name = {s.name: s for s in subjects}

        # Ein Zeitraster pro unterschiedlicher Folge von Zeitfenstern
        groups: dict[tuple, TimeTargetGroup] = {}
        schedules: list[Schedule] = []
        for entry in data.get("schedules") or []:
            weeks = entry.get("weeks", "all")
            if weeks not in _WEEK_LABELS:
                raise CsesError(f"Ungültiger Wochenmodus: {weeks!r}")
            classes = entry.get("classes") or []
            slots = tuple((_time_str(c["start_time"]), _time_str(c["end_time"])) for c in classes)
            group = groups.get(slots)
            if group is None:
                name = "default" if not groups else f"Zeitraster {len(groups) + 1}"
                group = TimeTargetGroup(uuid=new_uuid(), name=name, targets=[
                    TimeTarget(uuid=new_uuid(), start_time=start, end_time=end)
                    for start, end in dict.fromkeys(slots)
                ])
                group.sort()
                groups[slots] = group
            target_for = {(t.start_time, t.end_time): t.uuid for t in group.targets}

            lessons = []
            for cls, slot in zip(classes, slots):
                subject = by_name.get(cls["subject"])
                if subject is None:
                    raise CsesError(f"Fach nicht gefunden: {cls['subject']}")
                lessons.append(Lesson(
                    subject_uuid=subject.uuid,
                    time_uuid=target_for[slot],
                    cached_name=subject.name,
                    cached_short_name=subject.short_name,
                ))
            schedules.append(Schedule(
                date_mode=False,
                active_day=int(entry["enable_day"]),
                active_week=_WEEK_LABELS[weeks],
                time_group_uuid=group.uuid,
                lessons=lessons,
            ))

        return TimetableConfig(
            version="1.0.0",
            subjects=subjects,
            schedules=schedules,
            time_groups=list(groups.values()),
        )

    @staticmethod
    def to_cses(config: TimetableConfig) -> str:
        """Erzeugt CSES-YAML aus der Konfiguration."""
        targets = {t.uuid: t for t in config.all_time_targets()}

        by_key: dict[tuple[int, Optional[Parity]], list[dict]] = {}
        for schedule in config.schedules:
            key = (schedule.active_day, schedule.active_week)
            # Doppelte Tagespläne: wie bei der Auflösung zählt nur der erste
            if schedule.date_mode or key in by_key:
                continue
            classes = []
            for lesson in schedule.lessons:
                subject = config.subject_by_uuid(lesson.subject_uuid)
                if subject is None:
                    raise CsesError(f"Fach nicht gefunden: {lesson.subject_uuid}")
                target = targets.get(lesson.time_uuid) if lesson.time_uuid else None
                if target is None:
                    raise CsesError(
                        f"Stunde '{subject.name}' an Tag {schedule.active_day} "
                        f"hat kein Zeitfenster: {lesson.time_uuid}"
                    )
                classes.append({
                    "subject": subject.name,
                    "start_time": DoubleQuotedScalarString(target.start_time),
                    "end_time": DoubleQuotedScalarString(target.end_time),
                })
            by_key[key] = classes

        entries = []
        for day in sorted({day for day, _ in by_key}):
            odd = by_key.get((day, Parity.ODD))
            even = by_key.get((day, Parity.EVEN))
            every = by_key.get((day, None))
            if every is not None:
                entries.append(_entry(day, "all", every))
            if odd is not None and even is not None and odd == even:
                entries.append(_entry(day, "all", odd))
                continue
            if odd is not None:
                entries.append(_entry(day, "odd", odd))
            if even is not None:
                entries.append(_entry(day, "even", even))

        subjects = []
        for s in config.subjects:
            item = {"name": s.name}
            if s.short_name:
                item["simplified_name"] = s.short_name
            if s.teacher_name:
                item["teacher"] = s.teacher_name
            subjects.append(item)

        stream = StringIO()
        yaml.dump({"version": 1, "subjects": subjects, "schedules": entries}, stream)
        return stream.getvalue()


def _entry(day: int, weeks: str, classes: list[dict]) -> dict:
    suffix = {"all": "", "odd": " (ungerade)", "even": " (gerade)"}[weeks]
    return {
        "name": f"{DAY_NAMES[day - 1]}{suffix}",
        "enable_day": day,
        "weeks": weeks,
        "classes": classes,
    }
