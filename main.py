"""Stundenplan-Kern — Haupt-CLI.

Verwendung:
  python main.py init                         Leere Konfiguration anlegen
  python main.py today [--date YYYY-MM-DD]    Stunden eines Tages anzeigen
  python main.py status                       Aktueller Unterrichtsstatus
  python main.py subjects [--all]             Fächer auflisten
  python main.py teacher <name>               Stunden einer Lehrkraft
  python main.py swap <tag> <std> <tag> <std> Zwei Stunden tauschen
  python main.py check                        Konsistenz-Prüfung
  python main.py import-cses <datei.yaml>     CSES-Datei importieren
  python main.py export-cses <datei.yaml>     CSES-Datei exportieren
"""

import logging
import sys
from datetime import date, datetime
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

DAY_NAMES = ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"]
WEEK_CHOICE = click.Choice(["odd", "even"])


def _load_kernel_or_abort(ctx: click.Context):
    """Lädt die Konfiguration und baut den Kernel, oder bricht ab."""
    from config.manager import ConfigManager
    from planner.kernel import ScheduleKernel

    mgr = ConfigManager()
    try:
        config = mgr.load(ctx.obj["config_path"])
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    return mgr, ScheduleKernel(config)


def _parse_date(value: str | None) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Ungültiges Datum: {value} (erwartet YYYY-MM-DD)")


def _parity(value: str | None):
    from models.base import Parity
    return Parity.from_label(value) if value else None


# ─── INIT ─────────────────────────────────────────────────────────────────────

@click.command("init")
@click.option("--start-date", default=None, help="Beginn des Zwei-Wochen-Rhythmus (YYYY-MM-DD).")
@click.pass_context
def cmd_init(ctx: click.Context, start_date: str | None):
    """Legt eine leere Konfiguration an."""
    from config.defaults import default_config
    from config.manager import ConfigManager

    path = ctx.obj["config_path"]
    if path.exists() and not click.confirm(f"{path} existiert bereits. Überschreiben?", default=False):
        return
    config = default_config()
    config.start_date = _parse_date(start_date)
    ConfigManager().save(config, path)


# ─── TODAY ────────────────────────────────────────────────────────────────────

@click.command("today")
@click.option("--date", "on", default=None, help="Datum (YYYY-MM-DD), Standard: heute.")
@click.pass_context
def cmd_today(ctx: click.Context, on: str | None):
    """Zeigt die Stunden eines Tages."""
    _, kernel = _load_kernel_or_abort(ctx)
    day = _parse_date(on)
    resolved = kernel.get_lessons_for_date(day)
    info = resolved.week_info

    targets = {t.uuid: t for t in kernel.config.all_time_targets()}
    table = Table(
        title=f"{DAY_NAMES[info.day_index - 1]} {day.isoformat()} "
              f"({'ungerade' if info.is_odd else 'gerade'} Woche, Quelle: {resolved.source})",
        box=box.ROUNDED,
    )
    table.add_column("#")
    table.add_column("Zeit")
    table.add_column("Fach")
    table.add_column("Lehrkraft")
    for i, lesson in enumerate(resolved.lessons):
        subject = kernel.get_subject(lesson.subject_uuid)
        target = targets.get(lesson.time_uuid) if lesson.time_uuid else None
        table.add_row(
            str(i),
            str(target) if target else "[dim]–[/dim]",
            subject.name if subject else f"[red]{lesson.cached_name or lesson.subject_uuid}[/red]",
            (subject.teacher_name or "") if subject else "",
        )
    console.print(table)


# ─── STATUS ───────────────────────────────────────────────────────────────────

@click.command("status")
@click.pass_context
def cmd_status(ctx: click.Context):
    """Zeigt den aktuellen Unterrichtsstatus."""
    _, kernel = _load_kernel_or_abort(ctx)
    status = kernel.get_current_lesson_status(datetime.now())

    def name(lesson):
        if lesson is None:
            return "–"
        return kernel.get_subject_name_by_uuid(lesson.subject_uuid) or lesson.cached_name or "?"

    lines = [f"[bold]Status:[/bold] {status.status.value}"]
    if status.current_lesson is not None:
        lines.append(f"Aktuell: {name(status.current_lesson)}")
    if status.next_lesson is not None:
        lines.append(f"Als Nächstes: {name(status.next_lesson)}")
    if status.time_target is not None:
        lines.append(f"Zeitfenster: {status.time_target}")
    console.print(Panel("\n".join(lines), title="Unterrichtsstatus", border_style="cyan"))


# ─── SUBJECTS / TEACHER ───────────────────────────────────────────────────────

@click.command("subjects")
@click.option("--all", "include_activities", is_flag=True, default=False,
              help="Auch Aktivitäten anzeigen.")
@click.pass_context
def cmd_subjects(ctx: click.Context, include_activities: bool):
    """Listet alle Fächer auf."""
    _, kernel = _load_kernel_or_abort(ctx)
    table = Table(title="Fächer", box=box.ROUNDED)
    table.add_column("Name", style="bold")
    table.add_column("Kurz")
    table.add_column("Lehrkraft")
    table.add_column("Art")
    for s in kernel.get_all_subjects(include_activities):
        table.add_row(s.name, s.short_name or "", s.teacher_name or "", s.kind.value)
    console.print(table)


@click.command("teacher")
@click.argument("name")
@click.pass_context
def cmd_teacher(ctx: click.Context, name: str):
    """Zeigt alle Stunden einer Lehrkraft."""
    _, kernel = _load_kernel_or_abort(ctx)
    groups = kernel.get_teacher_lessons(name)
    if not groups:
        console.print(f"[yellow]Keine Fächer für Lehrkraft '{name}'.[/yellow]")
        return
    table = Table(title=f"Stunden: {name}", box=box.ROUNDED)
    table.add_column("Fach", style="bold")
    table.add_column("Tag")
    table.add_column("Woche")
    table.add_column("Stunde")
    for group in groups:
        for loc in group.lessons:
            table.add_row(
                group.subject.name,
                DAY_NAMES[loc.day - 1] if 1 <= loc.day <= 7 else "?",
                loc.week.label if loc.week is not None else "alle",
                str(loc.lesson_index),
            )
    console.print(table)


# ─── SWAP ─────────────────────────────────────────────────────────────────────

@click.command("swap")
@click.argument("source_day", type=click.IntRange(1, 7))
@click.argument("source_index", type=int)
@click.argument("target_day", type=click.IntRange(1, 7))
@click.argument("target_index", type=int)
@click.option("--source-week", type=WEEK_CHOICE, default=None)
@click.option("--target-week", type=WEEK_CHOICE, default=None)
@click.option("--date", "on", default=None, help="Nur für dieses Datum tauschen (mit --temporary).")
@click.option("--temporary", is_flag=True, default=False, help="Temporärer Tausch für --date.")
@click.pass_context
def cmd_swap(ctx, source_day, source_index, target_day, target_index,
             source_week, target_week, on, temporary):
    """Tauscht zwei Stunden (regulär oder temporär)."""
    from planner.lessons import LessonRef

    mgr, kernel = _load_kernel_or_abort(ctx)
    ok = kernel.swap_lessons(
        LessonRef(source_day, source_index, _parity(source_week)),
        LessonRef(target_day, target_index, _parity(target_week)),
        on=_parse_date(on) if on else None,
        is_temporary=temporary,
    )
    if not ok:
        console.print("[red]Tausch nicht möglich: Stunde nicht gefunden.[/red]")
        sys.exit(1)
    mgr.save(kernel.config, ctx.obj["config_path"])


# ─── CHECK ────────────────────────────────────────────────────────────────────

@click.command("check")
@click.pass_context
def cmd_check(ctx: click.Context):
    """Prüft die Konfiguration auf strukturelle Probleme."""
    _, kernel = _load_kernel_or_abort(ctx)
    console.print(f"[dim]{kernel.config.summary()}[/dim]\n")
    report = kernel.check_consistency()
    report.print_rich()
    sys.exit(0 if report.is_consistent else 1)


# ─── CSES ─────────────────────────────────────────────────────────────────────

@click.command("import-cses")
@click.argument("datei", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def cmd_import_cses(ctx: click.Context, datei: Path):
    """Importiert eine CSES-Datei als neue Konfiguration."""
    from config.cses import CsesError, CsesTransformer
    from config.manager import ConfigManager

    try:
        config = CsesTransformer.from_cses(datei.read_text(encoding="utf-8"))
    except CsesError as e:
        console.print(f"[red bold]Import fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)
    console.print(f"[green]✓[/green] Import erfolgreich!\n{config.summary()}")
    ConfigManager().save(config, ctx.obj["config_path"])


@click.command("export-cses")
@click.argument("datei", type=click.Path(path_type=Path))
@click.pass_context
def cmd_export_cses(ctx: click.Context, datei: Path):
    """Exportiert die Konfiguration als CSES-Datei."""
    from config.cses import CsesError, CsesTransformer

    _, kernel = _load_kernel_or_abort(ctx)
    try:
        content = CsesTransformer.to_cses(kernel.config)
    except CsesError as e:
        console.print(f"[red bold]Export fehlgeschlagen:[/red bold]\n{e}")
        sys.exit(1)
    datei.parent.mkdir(parents=True, exist_ok=True)
    datei.write_text(content, encoding="utf-8")
    console.print(f"[green]✓[/green] CSES gespeichert: {datei}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", default="timetable.json",
              type=click.Path(path_type=Path), help="Pfad zur Konfigurationsdatei.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Ausführliches Logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path, verbose: bool):
    """Stundenplan mit Zwei-Wochen-Rhythmus und temporären Tagesplänen.

    Starten Sie mit: python main.py init
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# Befehle registrieren
cli.add_command(cmd_init)
cli.add_command(cmd_today)
cli.add_command(cmd_status)
cli.add_command(cmd_subjects)
cli.add_command(cmd_teacher)
cli.add_command(cmd_swap)
cli.add_command(cmd_check)
cli.add_command(cmd_import_cses)
cli.add_command(cmd_export_cses)


def main():
    """Einstiegspunkt."""
    cli(obj={})


if __name__ == "__main__":
    main()
