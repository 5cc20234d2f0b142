"""Ermittelt den gültigen Tagesplan für ein Datum.

Vorrang: temporärer Tagesplan > Datumsmodus > wiederkehrender Plan > leer.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Optional

from models.base import Parity, as_date
from models.lesson import Lesson
from models.schedule import Schedule
from models.timetable_config import TimetableConfig
from planner.week import WeekInfo, week_info_for_date

ScheduleSource = Literal["temporary", "date", "recurring", "none"]


@dataclass
class ResolvedDay:
    """Ergebnis der Auflösung eines Datums."""

    week_info: WeekInfo
    source: ScheduleSource
    # Referenz auf die Liste im Aggregat (keine Kopie)
    lessons: list[Lesson] = field(default_factory=list)
    time_group_uuid: Optional[str] = None


class ScheduleResolver:
    """Löst Datum → Stundenliste auf, ohne die Konfiguration zu verändern."""

    def __init__(self, config: TimetableConfig) -> None:
        self.config = config

    def week_info(self, on: date | datetime) -> WeekInfo:
        return week_info_for_date(self.config.start_date, on)

    def find_recurring(self, day: int, week: Optional[Parity] = None) -> Optional[Schedule]:
        """Erster wiederkehrender Plan für (Tag, Woche); ``week=None`` = beliebig.

        Bei doppelten Einträgen gewinnt der zuerst eingefügte.
        """
        return next((s for s in self.config.schedules if s.matches(day, week)), None)

    def find_date_schedule(self, on: date) -> Optional[Schedule]:
        return next(
            (s for s in self.config.schedules if s.date_mode and s.active_date == on),
            None,
        )

    def resolve(self, on: date | datetime) -> ResolvedDay:
        """Gibt den gültigen Tagesplan für ``on`` zurück."""
        day = as_date(on)
        info = self.week_info(day)

        temporary = self.config.temporary_for(day.isoformat())
        if temporary is not None:
            return ResolvedDay(
                week_info=info,
                source="temporary",
                lessons=temporary.lessons,
                time_group_uuid=temporary.time_group_uuid,
            )

        dated = self.find_date_schedule(day)
        if dated is not None:
            return ResolvedDay(
                week_info=info, source="date",
                lessons=dated.lessons, time_group_uuid=dated.time_group_uuid,
            )

        recurring = self.find_recurring(info.day_index, info.parity)
        if recurring is not None:
            return ResolvedDay(
                week_info=info, source="recurring",
                lessons=recurring.lessons, time_group_uuid=recurring.time_group_uuid,
            )

        return ResolvedDay(week_info=info, source="none")
