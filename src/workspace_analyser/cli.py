"""CLI interface for Workspace Analyser."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from workspace_analyser.core.analyzer import WorkspaceAnalyzer
from workspace_analyser.core.classifier import severity_color
from workspace_analyser.core.details import get_controller_details, list_controller_contents
from workspace_analyser.core.errors import WorkspaceNotFoundError
from workspace_analyser.core.junk import (
    default_patterns,
    delete_junk,
    load_patterns,
    save_patterns,
    scan_for_junk,
)
from workspace_analyser.core.markers import find_nearest_project
from workspace_analyser.models.junk_pattern import JunkPattern
from workspace_analyser.models.scan_result import JunkScanResult
from workspace_analyser.report import result_to_dict, save_analysis_report
from workspace_analyser.settings import LAST_PATH_KEY, SORT_ASCENDING_KEY, Settings
from workspace_analyser.utils import format_percentage, format_size


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _fail(message: str) -> NoReturn:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


def _resolve_path(path: Path | None, settings: Settings) -> Path:
    """Use the given path, or the last analysed one when omitted."""
    if path is None:
        last = settings.get(LAST_PATH_KEY)
        if not last:
            _fail("No path given and no previous workspace remembered.")
        path = Path(last)
    return path


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """Workspace Analyser: disk usage and junk cleanup for project workspaces."""
    _setup_logging(verbose)


# ── analyze ──────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.option("--sort", "sort_order", type=click.Choice(["ascending", "descending"]), default=None,
              help="Order projects and controllers by size (remembered)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--report/--no-report", default=True, help="Write <name>_analysis.json")
@click.option("--output", "-o", "output_dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory for the JSON report (default: current directory)")
def analyze(path: Path | None, sort_order: str | None, as_json: bool, report: bool, output_dir: Path | None) -> None:
    """Show project and controller disk usage under PATH."""
    settings = Settings.instance()
    path = _resolve_path(path, settings)

    if sort_order is None:
        ascending = bool(settings.get(SORT_ASCENDING_KEY, True))
    else:
        ascending = sort_order == "ascending"
        settings.set(SORT_ASCENDING_KEY, ascending)

    if not as_json:
        click.echo(f"\n{click.style('🔍', bold=True)} Analysing {path}...\n")

    try:
        result = WorkspaceAnalyzer().analyze(path, sort_ascending=ascending)
    except WorkspaceNotFoundError as exc:
        _fail(str(exc))

    settings.set(LAST_PATH_KEY, str(path.absolute()))

    if report and result.projects:
        try:
            saved = save_analysis_report(result, output_dir)
        except OSError as exc:
            click.echo(click.style(f"Could not save analysis report: {exc}", fg="yellow"), err=True)
        else:
            if not as_json:
                click.echo(f"Report written to {saved}\n")

    if as_json:
        click.echo(json.dumps(result_to_dict(result), indent=2))
        return

    if not result.projects:
        click.echo("No project (prj.xml) or controller (ust.xml) found under this path.")
        return

    for project in result.projects:
        color = severity_color(project.severity)
        click.echo(f"  {click.style(str(project.path), fg=color, bold=True)}: {project.formatted_size}")
        for controller in project.controllers:
            pct = format_percentage(controller.percentage)
            click.echo(
                f"      {click.style(str(controller.path), fg=severity_color(controller.severity))}: "
                f"{controller.formatted_size} ({pct})"
            )

    click.echo(
        f"\nWorkspace: {click.style(format_size(result.workspace_size), bold=True)}  "
        f"Projects: {result.project_count}  Controllers: {result.controller_count}\n"
    )


# ── junk ─────────────────────────────────────────────────────────────────

@main.group()
def junk() -> None:
    """Find and delete junk files."""


def _scan_or_fail(path: Path, patterns: list[JunkPattern]) -> JunkScanResult:
    try:
        return scan_for_junk(path, patterns)
    except WorkspaceNotFoundError as exc:
        _fail(str(exc))


@junk.command("scan")
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def junk_scan(path: Path | None, as_json: bool) -> None:
    """List junk files under PATH (preview only, never deletes)."""
    settings = Settings.instance()
    path = _resolve_path(path, settings)
    result = _scan_or_fail(path, load_patterns(settings))

    if as_json:
        data = {
            "root": str(result.root),
            "total_bytes": result.total_bytes,
            "entries": [
                {
                    "path": str(e.path),
                    "size_bytes": e.size_bytes,
                    "pattern": e.pattern,
                    "description": e.description,
                }
                for e in result.entries
            ],
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not result.entries:
        click.echo("No junk files found.")
        return

    for entry in sorted(result.entries, key=lambda e: str(e.path)):
        click.echo(f"  {str(entry.path):60s} {format_size(entry.size_bytes):>10s}  {entry.description}")
    click.echo(
        f"\n{len(result.entries):,} junk files, "
        f"{click.style(format_size(result.total_bytes), fg='green', bold=True)} reclaimable\n"
    )


@junk.command("clean")
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without doing it")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def junk_clean(path: Path | None, yes: bool, dry_run: bool, as_json: bool) -> None:
    """Scan PATH and permanently delete the junk files found."""
    settings = Settings.instance()
    path = _resolve_path(path, settings)
    result = _scan_or_fail(path, load_patterns(settings))

    if not result.entries:
        if as_json:
            click.echo(json.dumps({"status": "nothing_to_clean", "deleted": [], "errors": []}))
        else:
            click.echo("No junk files to delete.")
        return

    if dry_run:
        if as_json:
            data = {
                "status": "dry_run",
                "would_free_bytes": result.total_bytes,
                "files": [str(e.path) for e in result.entries],
            }
            click.echo(json.dumps(data, indent=2))
        else:
            for entry in result.entries:
                click.echo(f"  {entry.path}")
            click.echo(f"\nWould delete {len(result.entries):,} files ({format_size(result.total_bytes)})")
            click.echo("(dry run, no files were deleted)")
        return

    if not yes and not as_json:
        click.confirm(
            f"Permanently delete {len(result.entries):,} file(s) ({format_size(result.total_bytes)})? "
            "This cannot be undone.",
            default=False,
            abort=True,
        )

    outcome = delete_junk(result.entries)

    if as_json:
        data = {
            "status": "cleaned",
            "freed_bytes": outcome.freed_bytes,
            "deleted": [str(p) for p in outcome.deleted],
            "errors": outcome.errors,
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(
        f"\n  {click.style('✓', fg='green')} {outcome.files_removed:,} file(s) deleted, "
        f"freed {click.style(format_size(outcome.freed_bytes), fg='green', bold=True)}"
    )
    if outcome.errors:
        click.echo(f"  {click.style('!', fg='yellow')} {len(outcome.errors)} file(s) could not be deleted:")
        for error in outcome.errors:
            click.echo(f"      {error}")
    click.echo()


# ── junk patterns ────────────────────────────────────────────────────────

@junk.group()
def patterns() -> None:
    """Manage junk file patterns."""


@patterns.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def patterns_list(as_json: bool) -> None:
    """List configured junk file patterns."""
    current = load_patterns(Settings.instance())
    if as_json:
        click.echo(json.dumps([p.to_dict() for p in current], indent=2))
        return
    for p in current:
        status = click.style("on ", fg="green") if p.enabled else click.style("off", fg="bright_black")
        click.echo(f"  [{status}] {click.style(p.pattern, fg='cyan', bold=True):30s}  {p.description}")


def _validate_pattern(value: str) -> str:
    value = value.strip()
    wildcard = value.startswith("*.") and len(value) > 2 and "*" not in value[1:]
    if not value or ("*" in value and not wildcard):
        raise click.BadParameter("use an exact file name or '*.<extension>'", param_hint="PATTERN")
    return value


@patterns.command("add")
@click.argument("pattern")
@click.argument("description", required=False, default="")
@click.option("--disabled", is_flag=True, help="Add the pattern switched off")
def patterns_add(pattern: str, description: str, disabled: bool) -> None:
    """Add PATTERN (exact file name or *.ext) to the junk patterns."""
    pattern = _validate_pattern(pattern)
    settings = Settings.instance()
    current = load_patterns(settings)
    if any(p.pattern.casefold() == pattern.casefold() for p in current):
        _fail(f"Pattern '{pattern}' already exists.")
    current.append(JunkPattern(pattern, description, enabled=not disabled))
    save_patterns(settings, current)
    click.echo(f"Added {pattern}")


def _find_pattern(current: list[JunkPattern], pattern: str) -> JunkPattern:
    for p in current:
        if p.pattern.casefold() == pattern.casefold():
            return p
    _fail(f"Pattern '{pattern}' not found.")


@patterns.command("remove")
@click.argument("pattern")
def patterns_remove(pattern: str) -> None:
    """Remove PATTERN from the junk patterns."""
    settings = Settings.instance()
    current = load_patterns(settings)
    target = _find_pattern(current, pattern)
    current.remove(target)
    save_patterns(settings, current)
    click.echo(f"Removed {target.pattern}")


def _set_enabled(pattern: str, enabled: bool) -> None:
    settings = Settings.instance()
    current = load_patterns(settings)
    target = _find_pattern(current, pattern)
    target.enabled = enabled
    save_patterns(settings, current)
    click.echo(f"{'Enabled' if enabled else 'Disabled'} {target.pattern}")


@patterns.command("enable")
@click.argument("pattern")
def patterns_enable(pattern: str) -> None:
    """Switch PATTERN on."""
    _set_enabled(pattern, True)


@patterns.command("disable")
@click.argument("pattern")
def patterns_disable(pattern: str) -> None:
    """Switch PATTERN off."""
    _set_enabled(pattern, False)


@patterns.command("reset")
def patterns_reset() -> None:
    """Restore the built-in junk patterns."""
    save_patterns(Settings.instance(), default_patterns())
    click.echo("Junk patterns reset to defaults.")


# ── controller ───────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def details(path: Path, as_json: bool) -> None:
    """Show details of the controller at PATH."""
    info = get_controller_details(path)

    if as_json:
        data = {
            "path": str(info.path),
            "macro_count": info.macro_count,
            "fup_sheet_count": info.fup_sheet_count,
            "hardware_type": info.hardware_type,
            "cp_version": info.cp_version,
            "ip_address": info.ip_address,
            "compiled": info.compiled,
            "compile_text": info.compile_text,
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"\n  {click.style('Path:', bold=True)}          {info.path}")
    click.echo(f"  {click.style('Macros:', bold=True)}        {info.macro_count}")
    click.echo(f"  {click.style('FUP sheets:', bold=True)}    {info.fup_sheet_count}")
    click.echo(f"  {click.style('Hardware:', bold=True)}      {info.hardware_type or '-'}")
    click.echo(f"  {click.style('CP version:', bold=True)}    {info.cp_version or '-'}")
    click.echo(f"  {click.style('IP address:', bold=True)}    {info.ip_address or '-'}")
    compiled = click.style("yes", fg="green") if info.compiled else click.style("no", fg="yellow")
    click.echo(f"  {click.style('Compiled:', bold=True)}      {compiled}")
    for line in info.compile_text.splitlines():
        click.echo(f"                 {line}")
    click.echo()


@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--filter", "-f", "filter_text", default="", help="Only show entries containing this text")
def contents(path: Path, filter_text: str) -> None:
    """List the files and folders of the controller at PATH."""
    items = list_controller_contents(path, filter_text)
    if not items:
        click.echo("No matching entries.")
        return
    for item in items:
        click.echo(f"  {item.display_name}")


@main.command("find-project")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
def find_project(path: Path) -> None:
    """Print the nearest project enclosing PATH."""
    project = find_nearest_project(path)
    if project is None:
        _fail(f"No project (prj.xml) found at or above {path}.")
    click.echo(str(project))
