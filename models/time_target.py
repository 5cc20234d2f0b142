"""Datenmodell für Zeitfenster und Zeitfenster-Gruppen (Pydantic v2)."""

import re

from pydantic import Field

from models.base import CamelModel

# Feste Breite (HH:MM:SS, 24h) → lexikalischer Vergleich entspricht dem zeitlichen
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d:[0-5]\d$")


def is_valid_time(value: str) -> bool:
    """True wenn ``value`` ein gültiger HH:MM:SS-String ist."""
    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


class TimeTarget(CamelModel):
    """Ein Zeitfenster (Unterrichtsstunde) mit Beginn und Ende."""

    uuid: str
    start_time: str   # "08:00:00"
    end_time: str     # "08:45:00"

    def overlaps(self, start_time: str, end_time: str) -> bool:
        """True bei echter Überschneidung (Berührung zählt nicht)."""
        return max(self.start_time, start_time) < min(self.end_time, end_time)

    def contains(self, now: str) -> bool:
        return self.start_time <= now <= self.end_time

    def __str__(self) -> str:
        return f"{self.start_time}–{self.end_time}"


class TimeTargetGroup(CamelModel):
    """Benannte Gruppe von Zeitfenstern (z.B. "default", "Kurztag")."""

    uuid: str
    name: str
    targets: list[TimeTarget] = Field(default_factory=list)

    def sorted_targets(self) -> list[TimeTarget]:
        """Zeitfenster aufsteigend nach Beginn (stabil)."""
        return sorted(self.targets, key=lambda t: t.start_time)

    def sort(self) -> None:
        self.targets.sort(key=lambda t: t.start_time)
