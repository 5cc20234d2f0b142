"""Datenmodell für eine einzelne Unterrichtsstunde (Pydantic v2)."""

from typing import Optional

from models.base import CamelModel


class Lesson(CamelModel):
    """Eine Stunde innerhalb eines Tagesplans.

    Die Zuordnung zum Zeitfenster erfolgt explizit über ``time_uuid``,
    nicht über die Position in der Liste.
    """

    subject_uuid: str
    time_uuid: Optional[str] = None
    # Zwischengespeicherte Anzeigenamen, nicht garantiert aktuell
    cached_name: Optional[str] = None
    cached_short_name: Optional[str] = None
