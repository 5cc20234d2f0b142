"""Einordnung eines Zeitpunkts in die Zeitfenster eines Tages.

Zeiten werden als HH:MM:SS-Strings verglichen. Der lexikalische Vergleich
ist nur korrekt, weil das Format feste Breite hat (24h, mit führenden Nullen).
"""

from datetime import datetime, time
from enum import Enum
from typing import Optional, Sequence, Union

from pydantic import BaseModel

from models.lesson import Lesson
from models.time_target import TimeTarget


class LessonState(str, Enum):
    NO_INTERVALS = "no_intervals"
    NOT_STARTED = "not_started"
    IN_CLASS = "in_class"
    BREAK = "break"
    ENDED = "ended"


class LessonStatus(BaseModel):
    """Ergebnis der Einordnung.

    Indizes beziehen sich auf die nach Beginn sortierten Zeitfenster.
    ``time_target`` ist das laufende Fenster bzw. das nächste (vor
    Unterrichtsbeginn und in Pausen).
    """

    status: LessonState
    current_index: Optional[int] = None
    next_index: Optional[int] = None
    current_lesson: Optional[Lesson] = None
    next_lesson: Optional[Lesson] = None
    time_target: Optional[TimeTarget] = None


def format_now(now: Union[str, time, datetime]) -> str:
    """Normalisiert ``now`` auf HH:MM:SS."""
    if isinstance(now, datetime):
        now = now.time()
    if isinstance(now, time):
        return now.strftime("%H:%M:%S")
    return now


def lessons_by_time(lessons: Sequence[Lesson]) -> dict[str, Lesson]:
    """Ordnet Stunden ihrem Zeitfenster zu (erste Stunde pro Fenster gewinnt)."""
    mapping: dict[str, Lesson] = {}
    for lesson in lessons:
        if lesson.time_uuid is not None and lesson.time_uuid not in mapping:
            mapping[lesson.time_uuid] = lesson
    return mapping


def classify_lesson_status(
    now: Union[str, time, datetime],
    targets: Sequence[TimeTarget],
    lessons: Sequence[Lesson],
) -> LessonStatus:
    """Ordnet ``now`` in die Zeitfenster ein und liefert aktuelle/nächste Stunde.

    Reihenfolge der Prüfungen:
    1. Keine Zeitfenster → ``no_intervals``
    2. Vor dem ersten Fenster → ``not_started`` (nächste = Fenster 0)
    3. Innerhalb [Beginn, Ende] → ``in_class``; echt zwischen zwei Fenstern → ``break``
    4. Sonst → ``ended`` (aktuelle = letztes Fenster)
    """
    now_str = format_now(now)
    # sorted() ist stabil: gleiche Startzeiten behalten ihre Reihenfolge
    ordered = sorted(targets, key=lambda t: t.start_time)
    if not ordered:
        return LessonStatus(status=LessonState.NO_INTERVALS)

    by_time = lessons_by_time(lessons)

    def lesson_at(index: int) -> Optional[Lesson]:
        if 0 <= index < len(ordered):
            return by_time.get(ordered[index].uuid)
        return None

    if now_str < ordered[0].start_time:
        return LessonStatus(
            status=LessonState.NOT_STARTED,
            next_index=0,
            next_lesson=lesson_at(0),
            time_target=ordered[0],
        )

    for i, current in enumerate(ordered):
        following = ordered[i + 1] if i + 1 < len(ordered) else None
        next_index = i + 1 if following is not None else None

        if current.contains(now_str):
            return LessonStatus(
                status=LessonState.IN_CLASS,
                current_index=i,
                next_index=next_index,
                current_lesson=lesson_at(i),
                next_lesson=lesson_at(i + 1),
                time_target=current,
            )

        if following is not None and current.end_time < now_str < following.start_time:
            return LessonStatus(
                status=LessonState.BREAK,
                current_index=i,
                next_index=next_index,
                current_lesson=lesson_at(i),
                next_lesson=lesson_at(i + 1),
                time_target=following,
            )

    last = len(ordered) - 1
    return LessonStatus(
        status=LessonState.ENDED,
        current_index=last,
        current_lesson=lesson_at(last),
    )
