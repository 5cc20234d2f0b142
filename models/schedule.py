"""Datenmodelle für Tagespläne und temporäre Tagespläne (Pydantic v2)."""

from datetime import date
from typing import Optional

from pydantic import Field, field_validator, model_validator

from models.base import CamelModel, Parity, coerce_date
from models.lesson import Lesson


class Schedule(CamelModel):
    """Ein Tagesplan.

    Wiederkehrend: ``active_day`` (1=Mo .. 7=So) und optional ``active_week``
    (fehlt = jede Woche). Datumsmodus: ``date_mode`` mit ``active_date``.
    """

    date_mode: bool = False
    active_date: Optional[date] = None
    active_day: Optional[int] = Field(None, ge=1, le=7)
    active_week: Optional[Parity] = None
    time_group_uuid: Optional[str] = None
    lessons: list[Lesson] = Field(default_factory=list)

    @field_validator("active_date", mode="before")
    @classmethod
    def _strip_time(cls, v):
        return coerce_date(v)

    @model_validator(mode="after")
    def _check_mode(self):
        if self.date_mode and self.active_date is None:
            raise ValueError("Tagesplan im Datumsmodus ohne activeDate")
        if not self.date_mode and self.active_day is None:
            raise ValueError("Wiederkehrender Tagesplan ohne activeDay")
        return self

    def matches(self, day: int, week: Optional[Parity] = None) -> bool:
        """Passt dieser wiederkehrende Plan auf (Tag, Woche)?

        ``week=None`` passt auf jede Woche, ebenso ein Plan ohne ``active_week``.
        """
        if self.date_mode or self.active_day != day:
            return False
        if week is None or self.active_week is None:
            return True
        return self.active_week == week


class TemporarySchedule(CamelModel):
    """Temporärer Tagesplan für genau ein Datum (Momentaufnahme, kein Diff).

    ``original_day_index``/``original_week`` merken, aus welchem
    wiederkehrenden Plan die Kopie entstanden ist.
    """

    date: str                          # "YYYY-MM-DD"
    lessons: list[Lesson] = Field(default_factory=list)
    original_day_index: int = Field(ge=1, le=7)
    original_week: Parity
    time_group_uuid: Optional[str] = None
