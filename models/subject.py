"""Datenmodell für ein Unterrichtsfach (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import CamelModel


class SubjectKind(str, Enum):
    SUBJECT = "subject"
    # Aktivitäten erscheinen nicht in Fachlisten, aber im aktuellen Status
    ACTIVITY = "activity"


class SubjectExtra(CamelModel):
    """Zusätzliche Kennzeichen eines Fachs."""

    outdoor: bool = False


class Subject(CamelModel):
    """Repräsentiert ein Unterrichtsfach oder eine Aktivität."""

    uuid: str
    name: str                                   # eindeutig
    kind: SubjectKind = Field(SubjectKind.SUBJECT, alias="type")
    short_name: Optional[str] = None            # "Ma", "De"
    teacher_name: Optional[str] = None
    extra: SubjectExtra = Field(default_factory=SubjectExtra)

    @property
    def is_activity(self) -> bool:
        """True für Aktivitäten (Pause, AG, ...)."""
        return self.kind == SubjectKind.ACTIVITY

    @property
    def display_short_name(self) -> str:
        return self.short_name or self.name
