"""Gemeinsame Basis für alle persistierten Modelle (Pydantic v2).

Die Konfigurationsdatei verwendet camelCase-Schlüssel (``startDate``,
``activeDay``, ``subjectUuid``), im Python-Code gelten snake_case-Namen.
"""

from datetime import date, datetime
from enum import IntEnum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Parity(IntEnum):
    """Wochenparität im Zwei-Wochen-Rhythmus (1 = ungerade, 2 = gerade)."""

    ODD = 1
    EVEN = 2

    @property
    def label(self) -> str:
        return "odd" if self is Parity.ODD else "even"

    @classmethod
    def from_label(cls, value: str) -> "Parity":
        """Wandelt "odd"/"even" in eine Parität um."""
        try:
            return {"odd": cls.ODD, "even": cls.EVEN}[value.lower()]
        except KeyError:
            raise ValueError(f"Unbekannte Wochenparität: {value!r}") from None


class CamelModel(BaseModel):
    """BaseModel mit camelCase-Aliasen für die JSON-Persistenz."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def coerce_date(value):
    """Reduziert Datums-/Zeitstempel-Eingaben auf ein reines Datum.

    Ältere Dateien enthalten ISO-Zeitstempel ("2024-09-02T00:00:00.000Z").
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
        return value[:10]
    return value


def as_date(value: date | datetime) -> date:
    """Gibt den Datumsanteil zurück (datetime ist eine Unterklasse von date)."""
    return value.date() if isinstance(value, datetime) else value
