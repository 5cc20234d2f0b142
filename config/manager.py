"""Konfigurationsmanager: Laden, Migrieren und Speichern der Stundenplan-Datei.

Die Datei ist JSON mit camelCase-Schlüsseln. Ältere Dateiformate werden beim
Laden auf das aktuelle Schema gehoben:
- flache ``timeTargets``-Liste → Gruppe "default"
- Fach-Verweis per Name (``subject``) → ``subjectUuid``
- Stunden ohne ``timeUuid`` → Zeitfenster gleicher Position der Standardgruppe
- fehlende/ungültige ``groupUuid`` → neu erzeugt
"""

import json
import re
from pathlib import Path
from typing import Optional

from rich.console import Console

from config.defaults import default_config
from models.timetable_config import TimetableConfig, new_uuid
from planner.lessons import LessonManager

console = Console()

UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
DEFAULT_GROUP_NAME = "default"


# ─── MIGRATION ────────────────────────────────────────────────────────────────

def migrate_raw(raw: dict) -> dict:
    """Hebt ein geladenes Roh-Dict auf das aktuelle Schema (in-place)."""
    if not isinstance(raw, dict):
        raise ValueError("Konfiguration muss ein JSON-Objekt sein.")

    group_uuid = raw.get("groupUuid")
    if not isinstance(group_uuid, str) or not UUID_PATTERN.match(group_uuid):
        raw["groupUuid"] = new_uuid()

    for key in ("schedules", "subjects", "temporarySchedules"):
        if not isinstance(raw.get(key), list):
            raw[key] = []

    for subject in raw["subjects"]:
        subject.setdefault("uuid", new_uuid())

    flat_targets = raw.pop("timeTargets", None)
    if not isinstance(raw.get("timeGroups"), list):
        raw["timeGroups"] = []
    if flat_targets and not raw["timeGroups"]:
        raw["timeGroups"] = [{
            "uuid": new_uuid(),
            "name": DEFAULT_GROUP_NAME,
            "targets": [_migrate_target(t) for t in flat_targets],
        }]
    for group in raw["timeGroups"]:
        group.setdefault("uuid", new_uuid())
        group["targets"] = [_migrate_target(t) for t in group.get("targets", [])]

    day_plans = raw["schedules"] + raw["temporarySchedules"]
    names = {s.get("name"): s["uuid"] for s in raw["subjects"]}
    for plan in day_plans:
        week = plan.get("activeWeek", plan.get("originalWeek"))
        if isinstance(week, str):
            key = "activeWeek" if "activeWeek" in plan else "originalWeek"
            plan[key] = {"odd": 1, "even": 2}.get(week.lower(), week)
        for lesson in plan.get("lessons", []):
            if "subjectUuid" not in lesson and "subject" in lesson:
                name = lesson.pop("subject")
                if name not in names:
                    raise ValueError(f"Stunde verweist auf unbekanntes Fach '{name}'.")
                lesson["subjectUuid"] = names[name]

    # Positionale Zuordnung nur für Dateien mit flacher Zeitfenster-Liste
    has_links = any("timeUuid" in l for plan in day_plans for l in plan.get("lessons", []))
    if flat_targets and not has_links:
        ordered = sorted(raw["timeGroups"][0]["targets"], key=lambda t: t["startTime"])
        for plan in day_plans:
            for target, lesson in zip(ordered, plan.get("lessons", [])):
                lesson["timeUuid"] = target["uuid"]

    return raw


def _migrate_target(target: dict) -> dict:
    target = dict(target)
    legacy_uuid = target.pop("UUID", None)
    target.setdefault("uuid", legacy_uuid or new_uuid())
    return target


# ─── MANAGER ──────────────────────────────────────────────────────────────────

class ConfigManager:
    DEFAULT_CONFIG = Path("timetable.json")

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Konfiguration existiert."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> TimetableConfig:
        """Lade Konfiguration aus JSON. Migriert und validiert via Pydantic."""
        target = Path(path or self.DEFAULT_CONFIG)
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py init' aus, um sie anzulegen."
            )
        with open(target, "r", encoding="utf-8") as f:
            text = f.read()
        try:
            raw = migrate_raw(json.loads(text))
            return TimetableConfig.model_validate(raw)
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Fehler: {e}"
            ) from e

    def load_or_create(self, path: Optional[Path] = None) -> TimetableConfig:
        """Wie ``load``, legt aber bei fehlender Datei die Standard-Konfiguration an."""
        target = Path(path or self.DEFAULT_CONFIG)
        if not target.exists():
            config = default_config()
            self.save(config, target)
            return config
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: TimetableConfig, path: Optional[Path] = None) -> None:
        """Speichert die Konfiguration als JSON (Anzeigenamen werden aufgefrischt)."""
        target = Path(path or self.DEFAULT_CONFIG)
        target.parent.mkdir(parents=True, exist_ok=True)
        LessonManager(config).refresh_cached_names()
        with open(target, "w", encoding="utf-8") as f:
            f.write(config.model_dump_json(by_alias=True, indent=2))
        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")
