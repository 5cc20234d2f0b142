"""TimeTargetManager – Zeitfenster in benannten Gruppen verwalten.

Regeln für jedes neue oder geänderte Zeitfenster:
- Beginn und Ende im Format HH:MM:SS (24h), Beginn < Ende
- keine Überschneidung mit anderen Fenstern derselben Gruppe
  (Berührung, also Ende == nächster Beginn, ist erlaubt)
- kein identischer Beginn bzw. identisches Ende
Nach jeder Änderung sind die Fenster einer Gruppe nach Beginn sortiert.
"""

import logging
from typing import Optional

from models.time_target import TimeTarget, TimeTargetGroup, is_valid_time
from models.timetable_config import TimetableConfig, new_uuid

logger = logging.getLogger(__name__)


class TimeTargetManager:
    """Verwaltet Zeitfenster-Gruppen der Konfiguration."""

    def __init__(self, config: TimetableConfig) -> None:
        self.config = config

    # ─── Abfragen ───

    def get_groups(self) -> list[TimeTargetGroup]:
        return list(self.config.time_groups)

    def get_group(self, group_uuid: str) -> Optional[TimeTargetGroup]:
        return next((g for g in self.config.time_groups if g.uuid == group_uuid), None)

    def get_group_by_name(self, name: str) -> Optional[TimeTargetGroup]:
        return next((g for g in self.config.time_groups if g.name == name), None)

    def get_time_target(self, target_uuid: str) -> Optional[TimeTarget]:
        found = self._locate(target_uuid)
        return found[1] if found else None

    # ─── Gruppen ───

    def create_group(self, name: str) -> Optional[str]:
        """Legt eine leere Gruppe an; None wenn der Name vergeben ist."""
        if not name or self.get_group_by_name(name) is not None:
            logger.info(f"create_group abgelehnt: '{name}'")
            return None
        group = TimeTargetGroup(uuid=new_uuid(), name=name)
        self.config.time_groups.append(group)
        return group.uuid

    def rename_group(self, group_uuid: str, name: str) -> bool:
        group = self.get_group(group_uuid)
        if group is None or not name:
            return False
        other = self.get_group_by_name(name)
        if other is not None and other is not group:
            logger.info(f"rename_group abgelehnt: Name '{name}' bereits vergeben")
            return False
        group.name = name
        return True

    def delete_group(self, group_uuid: str) -> bool:
        """Löscht eine Gruppe samt Fenstern und löst Verknüpfungen darauf."""
        group = self.get_group(group_uuid)
        if group is None:
            return False
        for target in group.targets:
            self._unlink_lessons(target.uuid)
        self._remove_group(group)
        return True

    # ─── Zeitfenster ───

    def create_time_target(self, group_name: str, start_time: str, end_time: str) -> Optional[str]:
        """Fügt ein Zeitfenster in die Gruppe ``group_name`` ein (legt sie ggf. an)."""
        group = self.get_group_by_name(group_name)
        existing = group.targets if group is not None else []
        if not self._is_acceptable(existing, start_time, end_time):
            return None
        if group is None:
            group = TimeTargetGroup(uuid=new_uuid(), name=group_name)
            self.config.time_groups.append(group)
        target = TimeTarget(uuid=new_uuid(), start_time=start_time, end_time=end_time)
        group.targets.append(target)
        group.sort()
        logger.debug(f"create_time_target: {target} in '{group_name}'")
        return target.uuid

    def insert_time_target_after(self, after_uuid: str, start_time: str, end_time: str) -> Optional[str]:
        """Fügt ein Zeitfenster hinter ``after_uuid`` in dessen Gruppe ein.

        Das neue Fenster darf frühestens am Ende des Bezugsfensters beginnen.
        """
        found = self._locate(after_uuid)
        if found is None:
            logger.info(f"insert_time_target_after abgelehnt: {after_uuid} unbekannt")
            return None
        group, after = found
        if not is_valid_time(start_time) or start_time < after.end_time:
            logger.info(
                f"insert_time_target_after abgelehnt: {start_time} liegt vor Ende {after.end_time}"
            )
            return None
        if not self._is_acceptable(group.targets, start_time, end_time):
            return None
        target = TimeTarget(uuid=new_uuid(), start_time=start_time, end_time=end_time)
        group.targets.append(target)
        group.sort()
        return target.uuid

    def edit_time_target(self, target_uuid: str, start_time: str, end_time: str) -> bool:
        """Ändert Beginn und Ende eines bestehenden Zeitfensters."""
        found = self._locate(target_uuid)
        if found is None:
            return False
        group, target = found
        others = [t for t in group.targets if t.uuid != target_uuid]
        if not self._is_acceptable(others, start_time, end_time):
            return False
        target.start_time = start_time
        target.end_time = end_time
        group.sort()
        return True

    def delete_time_target(self, target_uuid: str) -> bool:
        """Löscht ein Zeitfenster; eine dadurch leere Gruppe wird entfernt."""
        found = self._locate(target_uuid)
        if found is None:
            return False
        group, target = found
        group.targets.remove(target)
        self._unlink_lessons(target_uuid)
        if not group.targets:
            self._remove_group(group)
            logger.debug(f"Gruppe '{group.name}' nach Löschen des letzten Fensters entfernt")
        return True

    # ── Hilfsfunktionen ──────────────────────────────────────────────────────

    def _locate(self, target_uuid: str) -> Optional[tuple[TimeTargetGroup, TimeTarget]]:
        for group in self.config.time_groups:
            for target in group.targets:
                if target.uuid == target_uuid:
                    return group, target
        return None

    def _is_acceptable(self, existing: list[TimeTarget], start_time: str, end_time: str) -> bool:
        if not is_valid_time(start_time) or not is_valid_time(end_time):
            logger.info(f"Zeitfenster abgelehnt: ungültiges Format {start_time!r}/{end_time!r}")
            return False
        if start_time >= end_time:
            logger.info(f"Zeitfenster abgelehnt: Beginn {start_time} nicht vor Ende {end_time}")
            return False
        for other in existing:
            if other.start_time == start_time or other.end_time == end_time:
                logger.info(f"Zeitfenster abgelehnt: gleiche Zeit wie {other}")
                return False
            if other.overlaps(start_time, end_time):
                logger.info(f"Zeitfenster abgelehnt: überschneidet {other}")
                return False
        return True

    def _remove_group(self, group: TimeTargetGroup) -> None:
        self.config.time_groups[:] = [g for g in self.config.time_groups if g is not group]
        for schedule in self.config.schedules:
            if schedule.time_group_uuid == group.uuid:
                schedule.time_group_uuid = None
        for temporary in self.config.temporary_schedules:
            if temporary.time_group_uuid == group.uuid:
                temporary.time_group_uuid = None

    def _unlink_lessons(self, target_uuid: str) -> None:
        lessons = [l for s in self.config.schedules for l in s.lessons]
        lessons += [l for ts in self.config.temporary_schedules for l in ts.lessons]
        for lesson in lessons:
            if lesson.time_uuid == target_uuid:
                lesson.time_uuid = None
