"""Wochenparität: ungerade/gerade Woche im Zwei-Wochen-Rhythmus.

Gezählt werden die tatsächlich vergangenen Kalendertage seit dem
Rhythmus-Start, nicht die Differenz der Monatstage.
"""

from dataclasses import dataclass
from datetime import date, datetime

from models.base import Parity, as_date


@dataclass(frozen=True)
class WeekInfo:
    """Wochentag und Wochenparität eines Datums."""

    # Wochentag (1=Montag, ..., 7=Sonntag)
    day_index: int
    parity: Parity
    # Wochen seit Rhythmus-Start (negativ vor dem Start)
    week_number: int

    @property
    def is_odd(self) -> bool:
        return self.parity is Parity.ODD


def week_info_for_date(start_date: date | datetime, target: date | datetime) -> WeekInfo:
    """Berechnet Wochentag und Parität von ``target`` relativ zu ``start_date``.

    Floor-Division (``//``) rundet Richtung minus unendlich: Tage 1-7 vor dem
    Start liegen in Woche -1 (gerade), Tage 8-14 davor in Woche -2 (ungerade).
    """
    start = as_date(start_date)
    day = as_date(target)
    days_diff = (day - start).days
    week_number = days_diff // 7
    parity = Parity.ODD if week_number % 2 == 0 else Parity.EVEN
    return WeekInfo(day_index=day.isoweekday(), parity=parity, week_number=week_number)
