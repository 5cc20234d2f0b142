"""Tests für Konfigurationsdatei, Migration älterer Formate und Datenmodelle."""

import json
from datetime import date, datetime
from pathlib import Path

import pytest

from conftest import DE, MA, make_config
from config.defaults import default_config
from config.manager import ConfigManager, migrate_raw
from models import Lesson, Parity, Schedule, Subject, SubjectKind, TimetableConfig


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_config_is_empty(self):
        """Standard-Konfiguration: keine Pläne, Rhythmus beginnt heute."""
        config = default_config()
        assert config.version == "1.0.0"
        assert config.schedules == []
        assert config.subjects == []
        assert config.time_groups == []
        assert config.temporary_schedules == []
        assert config.start_date == date.today()

    def test_group_uuid_is_generated(self):
        assert default_config().group_uuid != default_config().group_uuid


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_recurring_schedule_needs_day(self):
        with pytest.raises(Exception):
            Schedule(active_week=Parity.ODD)

    def test_date_mode_needs_date(self):
        with pytest.raises(Exception):
            Schedule(date_mode=True)

    def test_day_range(self):
        with pytest.raises(Exception):
            Schedule(active_day=8)
        with pytest.raises(Exception):
            Schedule(active_day=0)

    def test_schedule_matches(self):
        every_week = Schedule(active_day=2)
        odd = Schedule(active_day=2, active_week=Parity.ODD)
        assert every_week.matches(2, Parity.EVEN)
        assert odd.matches(2)
        assert not odd.matches(2, Parity.EVEN)
        assert not Schedule(date_mode=True, active_date=date(2024, 9, 3)).matches(2)

    def test_timestamp_is_reduced_to_date(self):
        config = TimetableConfig(start_date="2024-09-02T00:00:00.000Z")
        assert config.start_date == date(2024, 9, 2)
        assert TimetableConfig(start_date=datetime(2024, 9, 2, 7, 30)).start_date == date(2024, 9, 2)

    def test_camel_case_keys(self):
        config = TimetableConfig.model_validate({
            "startDate": "2024-09-02",
            "subjects": [{"uuid": "a", "name": "Sport", "type": "activity", "shortName": "Sp"}],
            "schedules": [{"activeDay": 3, "activeWeek": 2, "lessons": [{"subjectUuid": "a"}]}],
        })
        assert config.subjects[0].kind == SubjectKind.ACTIVITY
        assert config.subjects[0].display_short_name == "Sp"
        assert config.schedules[0].active_week == Parity.EVEN

    def test_subject_defaults(self):
        subject = Subject(uuid="x", name="Kunst")
        assert subject.kind == SubjectKind.SUBJECT
        assert subject.extra.outdoor is False
        assert subject.display_short_name == "Kunst"

    def test_summary(self):
        text = make_config().summary()
        assert "Gruppe: 7b" in text
        assert "3 wiederkehrend, 1 datumsbezogen" in text


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Speichern und Laden ergibt dieselbe Konfiguration."""
        path = tmp_path / "timetable.json"
        config = make_config()
        mgr = ConfigManager()
        mgr.save(config, path)
        loaded = mgr.load(path)
        assert loaded == config
        assert loaded.schedules[0].lessons[0].cached_name == "Mathe"

    def test_file_uses_camel_case(self, tmp_path: Path):
        path = tmp_path / "timetable.json"
        ConfigManager().save(make_config(), path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["startDate"] == "2024-09-02"
        assert "timeGroups" in data
        assert data["subjects"][3]["type"] == "activity"
        lesson = data["schedules"][0]["lessons"][0]
        assert lesson["subjectUuid"] == MA
        assert lesson["timeUuid"] == "t1"

    def test_load_nonexistent_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "not_there.json")

    def test_load_invalid_json_raises(self, tmp_path: Path):
        path = tmp_path / "kaputt.json"
        path.write_text("{ kein json", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(path)

    def test_load_invalid_structure_raises(self, tmp_path: Path):
        path = tmp_path / "falsch.json"
        path.write_text(json.dumps({"schedules": [{"activeDay": 9}]}), encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(path)

    def test_load_or_create(self, tmp_path: Path):
        path = tmp_path / "neu" / "timetable.json"
        config = ConfigManager().load_or_create(path)
        assert path.exists()
        assert config.schedules == []
        assert ConfigManager().load_or_create(path).group_uuid == config.group_uuid

    def test_first_run_check(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "timetable.json"
        assert mgr.first_run_check() is True
        mgr.save(default_config())
        assert mgr.first_run_check() is False


# ─── MIGRATION ────────────────────────────────────────────────────────────────

LEGACY = {
    "startDate": "2024-09-02T00:00:00.000Z",
    "groupUuid": "",
    "subjects": [
        {"name": "Mathe", "shortName": "Ma"},
        {"uuid": DE, "name": "Deutsch"},
    ],
    "timeTargets": [
        {"UUID": "x2", "startTime": "08:55:00", "endTime": "09:40:00"},
        {"UUID": "x1", "startTime": "08:00:00", "endTime": "08:45:00"},
    ],
    "schedules": [
        {"activeDay": 1, "activeWeek": "even",
         "lessons": [{"subject": "Deutsch"}, {"subject": "Mathe"}]},
    ],
}


def _legacy():
    return json.loads(json.dumps(LEGACY))


class TestMigration:
    def test_legacy_file_is_loaded(self, tmp_path: Path):
        path = tmp_path / "alt.json"
        path.write_text(json.dumps(LEGACY), encoding="utf-8")
        config = ConfigManager().load(path)

        assert config.start_date == date(2024, 9, 2)
        assert len(config.group_uuid) == 36
        assert [g.name for g in config.time_groups] == ["default"]
        assert {t.uuid for t in config.time_groups[0].targets} == {"x1", "x2"}

        schedule = config.schedules[0]
        assert schedule.active_week == Parity.EVEN
        mathe = config.subject_by_name("Mathe")
        assert [l.subject_uuid for l in schedule.lessons] == [DE, mathe.uuid]

    def test_legacy_lessons_linked_by_position(self):
        raw = migrate_raw(_legacy())
        lessons = raw["schedules"][0]["lessons"]
        # Zuordnung nach Beginn sortiert, nicht nach Listenreihenfolge
        assert [l["timeUuid"] for l in lessons] == ["x1", "x2"]

    def test_existing_links_are_kept(self):
        raw = _legacy()
        raw["schedules"][0]["lessons"][0]["timeUuid"] = "x2"
        migrated = migrate_raw(raw)
        lessons = migrated["schedules"][0]["lessons"]
        assert lessons[0]["timeUuid"] == "x2"
        assert "timeUuid" not in lessons[1]

    def test_unknown_subject_name(self):
        raw = _legacy()
        raw["schedules"][0]["lessons"].append({"subject": "Latein"})
        with pytest.raises(ValueError):
            migrate_raw(raw)

    def test_valid_group_uuid_is_kept(self):
        raw = _legacy()
        raw["groupUuid"] = "123e4567-e89b-12d3-a456-426614174000"
        assert migrate_raw(raw)["groupUuid"] == "123e4567-e89b-12d3-a456-426614174000"

    def test_current_format_is_unchanged(self):
        config = make_config()
        raw = json.loads(config.model_dump_json(by_alias=True))
        raw["groupUuid"] = "123e4567-e89b-12d3-a456-426614174000"
        config.group_uuid = raw["groupUuid"]
        assert TimetableConfig.model_validate(migrate_raw(raw)) == config

    def test_non_object_rejected(self):
        with pytest.raises(ValueError):
            migrate_raw([1, 2, 3])


class TestLessonModel:
    def test_lesson_optional_fields(self):
        lesson = Lesson(subject_uuid=MA)
        assert lesson.time_uuid is None
        assert lesson.cached_name is None
