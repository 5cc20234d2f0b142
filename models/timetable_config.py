"""TimetableConfig: vollständige Stundenplan-Konfiguration (Pydantic v2).

Aggregat-Wurzel: Tagespläne, Fächer, Zeitfenster-Gruppen und temporäre
Tagespläne. Alle Manager arbeiten auf derselben Instanz (keine Kopien).
"""

import uuid as uuid_lib
from datetime import date
from typing import Optional

from pydantic import Field, field_validator

from models.base import CamelModel, coerce_date
from models.schedule import Schedule, TemporarySchedule
from models.subject import Subject
from models.time_target import TimeTarget, TimeTargetGroup


def new_uuid() -> str:
    """Erzeugt eine neue UUID4 als String."""
    return str(uuid_lib.uuid4())


class TimetableConfig(CamelModel):
    """Vollständiger Stundenplan einer Lerngruppe."""

    version: str = "1.0.0"
    group_name: Optional[str] = None
    group_uuid: str = Field(default_factory=new_uuid)
    start_date: date = Field(default_factory=date.today)
    schedules: list[Schedule] = Field(default_factory=list)
    subjects: list[Subject] = Field(default_factory=list)
    time_groups: list[TimeTargetGroup] = Field(default_factory=list)
    temporary_schedules: list[TemporarySchedule] = Field(default_factory=list)

    @field_validator("start_date", mode="before")
    @classmethod
    def _strip_time(cls, v):
        return coerce_date(v)

    # ─── Nachschlagen ───

    def subject_by_uuid(self, subject_uuid: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.uuid == subject_uuid), None)

    def subject_by_name(self, name: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.name == name), None)

    def temporary_for(self, date_str: str) -> Optional[TemporarySchedule]:
        """Temporärer Tagesplan für ein Datum ("YYYY-MM-DD") oder None."""
        return next(
            (ts for ts in self.temporary_schedules if ts.date == date_str), None
        )

    def time_group(self, group_uuid: Optional[str] = None) -> Optional[TimeTargetGroup]:
        """Zeitfenster-Gruppe per UUID; ohne UUID die erste (Standard-)Gruppe."""
        if group_uuid is None:
            return self.time_groups[0] if self.time_groups else None
        return next((g for g in self.time_groups if g.uuid == group_uuid), None)

    def all_time_targets(self) -> list[TimeTarget]:
        return [t for g in self.time_groups for t in g.targets]

    def summary(self) -> str:
        """Kurze Übersicht über die Konfiguration."""
        recurring = [s for s in self.schedules if not s.date_mode]
        lines = [
            f"Gruppe: {self.group_name}" if self.group_name else "",
            f"Rhythmus-Start: {self.start_date.isoformat()}",
            f"Tagespläne: {len(recurring)} wiederkehrend, "
            f"{len(self.schedules) - len(recurring)} datumsbezogen",
            f"Fächer: {len(self.subjects)}",
            f"Zeitfenster: {len(self.all_time_targets())} "
            f"in {len(self.time_groups)} Gruppe(n)",
            f"Temporäre Tagespläne: {len(self.temporary_schedules)}",
        ]
        return "\n".join(l for l in lines if l)
