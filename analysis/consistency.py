"""Strukturprüfung einer geladenen Stundenplan-Konfiguration.

Meldet Probleme, die der Kern toleriert, aber nicht sinnvoll auflösen kann
(z.B. doppelte Tagespläne, verwaiste Verweise). Verändert nichts.
"""

from collections import defaultdict
from datetime import date
from typing import Literal

from pydantic import BaseModel

from models.time_target import is_valid_time
from models.timetable_config import TimetableConfig


class ConsistencyIssue(BaseModel):
    """Ein einzelnes gefundenes Problem."""

    severity: Literal["error", "warning"]
    check: str           # z.B. "duplicate_schedule"
    description: str
    entity: str          # Tag / Fach-UUID / Zeitfenster-UUID / Datum


class ConsistencyReport(BaseModel):
    """Ergebnis der Strukturprüfung."""

    issues: list[ConsistencyIssue]
    is_consistent: bool  # True wenn keine Errors (Warnings ok)

    def by_check(self) -> dict[str, list[ConsistencyIssue]]:
        """Probleme nach Prüfung gruppiert, Fehler-Prüfungen zuerst."""
        groups: dict[str, list[ConsistencyIssue]] = defaultdict(list)
        for issue in self.issues:
            groups[issue.check].append(issue)
        return dict(sorted(
            groups.items(),
            key=lambda kv: (kv[1][0].severity != "error", kv[0]),
        ))

    def print_rich(self) -> None:
        """Gibt den Report als Baum (Prüfung → betroffene Einträge) aus."""
        from rich.console import Console
        from rich.tree import Tree

        console = Console()
        n_errors = sum(1 for i in self.issues if i.severity == "error")
        n_warnings = len(self.issues) - n_errors
        headline = (
            "[bold green]✓ KONSISTENT[/bold green]"
            if self.is_consistent
            else "[bold red]✗ NICHT KONSISTENT[/bold red]"
        )
        tree = Tree(f"{headline}  (Fehler: {n_errors}, Warnungen: {n_warnings})")
        for check, issues in self.by_check().items():
            color = "red" if issues[0].severity == "error" else "yellow"
            branch = tree.add(f"[{color}]{check}[/{color}] ({len(issues)})")
            for issue in issues:
                branch.add(f"[dim]{issue.entity}[/dim]: {issue.description}")
        console.print(tree)


class ConsistencyChecker:
    """Prüft eine TimetableConfig auf strukturelle Probleme."""

    def check(self, config: TimetableConfig) -> ConsistencyReport:
        issues: list[ConsistencyIssue] = []

        issues.extend(self._check_duplicate_schedules(config))
        issues.extend(self._check_subject_references(config))
        issues.extend(self._check_time_references(config))
        issues.extend(self._check_time_groups(config))
        issues.extend(self._check_temporary_dates(config))

        has_errors = any(i.severity == "error" for i in issues)
        return ConsistencyReport(issues=issues, is_consistent=not has_errors)

    # ── Einzelprüfungen ──────────────────────────────────────────────────────

    def _check_duplicate_schedules(self, config: TimetableConfig) -> list[ConsistencyIssue]:
        """Mehrere wiederkehrende Pläne für dasselbe (Tag, Woche): nur der erste zählt."""
        counts: dict[tuple, int] = defaultdict(int)
        for s in config.schedules:
            if not s.date_mode:
                counts[(s.active_day, s.active_week)] += 1
        issues = []
        for (day, week), n in sorted(counts.items(), key=lambda kv: (kv[0][0], kv[0][1] or 0)):
            if n > 1:
                label = week.label if week is not None else "alle Wochen"
                issues.append(ConsistencyIssue(
                    severity="warning",
                    check="duplicate_schedule",
                    description=f"{n} Tagespläne für Tag {day} ({label}); nur der erste wird verwendet.",
                    entity=f"Tag {day}",
                ))
        return issues

    def _check_subject_references(self, config: TimetableConfig) -> list[ConsistencyIssue]:
        known = {s.uuid for s in config.subjects}
        issues = []
        for where, lesson in self._all_lessons(config):
            if lesson.subject_uuid not in known:
                issues.append(ConsistencyIssue(
                    severity="error",
                    check="unknown_subject",
                    description=f"{where}: Fach {lesson.subject_uuid} existiert nicht.",
                    entity=lesson.subject_uuid,
                ))
        return issues

    def _check_time_references(self, config: TimetableConfig) -> list[ConsistencyIssue]:
        known = {t.uuid for t in config.all_time_targets()}
        issues = []
        for where, lesson in self._all_lessons(config):
            if lesson.time_uuid is not None and lesson.time_uuid not in known:
                issues.append(ConsistencyIssue(
                    severity="error",
                    check="unknown_time_target",
                    description=f"{where}: Zeitfenster {lesson.time_uuid} existiert nicht.",
                    entity=lesson.time_uuid,
                ))
        return issues

    def _check_time_groups(self, config: TimetableConfig) -> list[ConsistencyIssue]:
        issues = []
        for group in config.time_groups:
            targets = group.sorted_targets()
            for t in targets:
                if not (is_valid_time(t.start_time) and is_valid_time(t.end_time)):
                    issues.append(ConsistencyIssue(
                        severity="error",
                        check="invalid_time",
                        description=f"Gruppe '{group.name}': ungültige Zeit {t}.",
                        entity=t.uuid,
                    ))
            # Vergleich mit dem bisher am spätesten endenden Fenster
            latest = None
            for b in targets:
                if latest is not None and latest.overlaps(b.start_time, b.end_time):
                    issues.append(ConsistencyIssue(
                        severity="error",
                        check="overlapping_time_targets",
                        description=f"Gruppe '{group.name}': {latest} überschneidet {b}.",
                        entity=b.uuid,
                    ))
                if latest is None or b.end_time > latest.end_time:
                    latest = b
        return issues

    def _check_temporary_dates(self, config: TimetableConfig) -> list[ConsistencyIssue]:
        issues = []
        for ts in config.temporary_schedules:
            try:
                date.fromisoformat(ts.date)
            except ValueError:
                issues.append(ConsistencyIssue(
                    severity="error",
                    check="invalid_temporary_date",
                    description=f"Temporärer Tagesplan mit ungültigem Datum {ts.date!r}.",
                    entity=ts.date,
                ))
        return issues

    @staticmethod
    def _all_lessons(config: TimetableConfig):
        for s in config.schedules:
            where = (
                f"Datum {s.active_date}" if s.date_mode
                else f"Tag {s.active_day}" + (f" ({s.active_week.label})" if s.active_week else "")
            )
            for lesson in s.lessons:
                yield where, lesson
        for ts in config.temporary_schedules:
            for lesson in ts.lessons:
                yield f"Temporär {ts.date}", lesson
