"""Tests für den ScheduleKernel und die Kommandozeile."""

import json
from datetime import date, datetime

from click.testing import CliRunner

from conftest import DE, EN, MA, make_config, subjects_of
from config.manager import ConfigManager
from main import cli
from models import Parity, TimetableConfig
from planner.kernel import ScheduleKernel
from planner.lesson_status import LessonState
from planner.lessons import LessonRef

MON_ODD = date(2024, 9, 2)
MON_EVEN = date(2024, 9, 9)


# ─── KERNEL ───────────────────────────────────────────────────────────────────

class TestKernelQueries:
    def test_week_info(self, kernel):
        info = kernel.week_info(MON_EVEN)
        assert info.day_index == 1
        assert info.parity == Parity.EVEN

    def test_today_lessons(self, kernel):
        assert subjects_of(kernel.get_today_lessons(date(2024, 9, 3))) == [EN, MA]
        assert kernel.get_today_lessons(date(2024, 9, 7)) == []

    def test_lessons_for_date(self, kernel):
        resolved = kernel.get_lessons_for_date(date(2024, 9, 4))
        assert resolved.source == "date"

    def test_teacher_and_subject_lessons(self, kernel):
        groups = kernel.get_teacher_lessons("Müller")
        assert {g.subject.name: len(g.lessons) for g in groups} == {"Mathe": 3, "Englisch": 2}
        assert len(kernel.get_subject_lessons(DE)) == 3

    def test_managers_share_config(self, kernel):
        uuid = kernel.create_subject("Kunst")
        assert kernel.create_lesson(5, uuid) == 0
        assert kernel.subjects.is_in_use(uuid)
        assert kernel.delete_subject(uuid) is False


class TestKernelStatus:
    def test_status_during_break(self, kernel):
        status = kernel.get_current_lesson_status(datetime(2024, 9, 2, 8, 50))
        assert status.status == LessonState.BREAK
        assert status.current_lesson.subject_uuid == MA
        assert status.next_lesson.subject_uuid == DE

    def test_status_follows_parity(self, kernel):
        status = kernel.get_current_lesson_status(datetime(2024, 9, 9, 8, 20))
        assert status.status == LessonState.IN_CLASS
        assert status.current_lesson.subject_uuid == DE

    def test_status_uses_temporary_schedule(self, kernel):
        kernel.swap_lessons(LessonRef(1, 0), LessonRef(1, 1), on=MON_ODD, is_temporary=True)
        status = kernel.get_current_lesson_status(datetime(2024, 9, 2, 8, 20))
        assert status.current_lesson.subject_uuid == DE
        assert status.next_lesson.subject_uuid == MA

    def test_status_for_plan_built_through_kernel(self):
        """Nur über die öffentliche Schnittstelle aufgebauter Plan."""
        kernel = ScheduleKernel(TimetableConfig(start_date=MON_ODD))
        kernel.create_time_target("default", "08:00:00", "08:45:00")
        kernel.create_time_target("default", "08:55:00", "09:40:00")
        ma = kernel.create_subject("Mathe")
        de = kernel.create_subject("Deutsch")
        kernel.create_lesson(1, ma)
        kernel.create_lesson(1, de)

        status = kernel.get_current_lesson_status(datetime(2024, 9, 2, 8, 10))
        assert status.status == LessonState.IN_CLASS
        assert status.current_index == 0
        assert status.current_lesson.subject_uuid == ma
        assert status.next_lesson.subject_uuid == de

        status = kernel.get_current_lesson_status(datetime(2024, 9, 2, 8, 50))
        assert status.status == LessonState.BREAK
        assert status.next_lesson.subject_uuid == de

    def test_status_without_time_groups(self, kernel):
        kernel.config.time_groups.clear()
        status = kernel.get_current_lesson_status(datetime(2024, 9, 2, 8, 20))
        assert status.status == LessonState.NO_INTERVALS


class TestKernelChanges:
    def test_edit_lesson_uses_parity_of_today(self, kernel):
        assert kernel.edit_lesson(1, 0, EN, today=MON_EVEN) is True
        assert subjects_of(kernel.config.schedules[1].lessons) == [EN, MA]
        assert subjects_of(kernel.config.schedules[0].lessons) == [MA, DE, EN]

    def test_edit_lesson_explicit_week(self, kernel):
        assert kernel.edit_lesson(1, 0, EN, week=Parity.ODD, today=MON_EVEN) is True
        assert subjects_of(kernel.config.schedules[0].lessons) == [EN, DE, EN]

    def test_temporary_schedule_lifecycle(self, kernel):
        kernel.swap_lessons(LessonRef(1, 0), LessonRef(1, 1), on=MON_ODD, is_temporary=True)
        assert kernel.get_temporary_schedule(MON_ODD) is not None
        assert kernel.delete_temporary_schedule(datetime(2024, 9, 2, 12, 0)) is True
        assert kernel.get_lessons_for_date(MON_ODD).source == "recurring"

    def test_time_target_roundtrip_through_kernel(self, kernel):
        uuid = kernel.insert_time_target_after("t3", "10:50:00", "11:35:00")
        assert uuid is not None
        assert kernel.assign_lesson_time(2, 1, uuid) is True
        assert kernel.delete_time_target(uuid) is True
        assert kernel.config.schedules[2].lessons[1].time_uuid is None

    def test_check_consistency(self, kernel):
        assert kernel.check_consistency().is_consistent


# ─── KOMMANDOZEILE ────────────────────────────────────────────────────────────

def _invoke(path, *args):
    return CliRunner().invoke(cli, ["--config", str(path), *args], obj={})


class TestCli:
    def test_init_creates_config(self, tmp_path):
        path = tmp_path / "timetable.json"
        result = _invoke(path, "init", "--start-date", "2024-09-02")
        assert result.exit_code == 0
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["startDate"] == "2024-09-02"

    def test_today_lists_lessons(self, tmp_path):
        path = tmp_path / "timetable.json"
        ConfigManager().save(make_config(), path)
        result = _invoke(path, "today", "--date", "2024-09-02")
        assert result.exit_code == 0
        assert "Mathe" in result.output
        assert "Englisch" in result.output

    def test_swap_is_saved(self, tmp_path):
        path = tmp_path / "timetable.json"
        ConfigManager().save(make_config(), path)
        result = _invoke(path, "swap", "1", "0", "1", "1",
                         "--source-week", "odd", "--target-week", "odd")
        assert result.exit_code == 0
        config = ConfigManager().load(path)
        assert subjects_of(config.schedules[0].lessons) == [DE, MA, EN]

    def test_swap_failure_exits_nonzero(self, tmp_path):
        path = tmp_path / "timetable.json"
        ConfigManager().save(make_config(), path)
        result = _invoke(path, "swap", "1", "9", "1", "1", "--source-week", "odd")
        assert result.exit_code == 1

    def test_missing_config_exits_nonzero(self, tmp_path):
        result = _invoke(tmp_path / "fehlt.json", "subjects")
        assert result.exit_code == 1
        assert "nicht gefunden" in result.output

    def test_import_malformed_cses_exits_nonzero(self, tmp_path):
        path = tmp_path / "timetable.json"
        datei = tmp_path / "plan.yaml"
        datei.write_text("version: 1\nschedules:\n  - Di\n", encoding="utf-8")
        result = _invoke(path, "import-cses", str(datei))
        assert result.exit_code == 1
        assert "Import fehlgeschlagen" in result.output
        assert not path.exists()
