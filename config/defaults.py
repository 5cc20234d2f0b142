from datetime import date

from models.timetable_config import TimetableConfig, new_uuid


def default_config() -> TimetableConfig:
    """Leere Standard-Konfiguration.

    Rhythmus-Start ist heute (ungerade Woche), alle Listen sind leer.
    """
    return TimetableConfig(
        version="1.0.0",
        group_name="",
        group_uuid=new_uuid(),
        start_date=date.today(),
        schedules=[],
        subjects=[],
        time_groups=[],
        temporary_schedules=[],
    )
