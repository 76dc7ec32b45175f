"""Rich terminal report."""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from contract.kinds import (
    COMPLIANCE_TARGET,
    SCORE_BANDS,
    VIOLATION_KIND_TITLES,
    score_band,
)
from report.remediation import suggestions_for

if TYPE_CHECKING:
    from contract.models import ComplianceScore, ModuleGraph, ModuleRecord
    from report.options import ReportOptions

_PASS = f"[green]{SCORE_BANDS[0].symbol}[/green]"
_WARN = f"[yellow]{SCORE_BANDS[1].symbol}[/yellow]"
_FAIL = f"[red]{SCORE_BANDS[2].symbol}[/red]"


def _module_status(record: ModuleRecord) -> str:
    if not record.violations:
        return _PASS
    if record.count_by_severity("critical"):
        return _FAIL
    return _WARN


def _module_table(graph: ModuleGraph, score: ComplianceScore) -> Table:
    table = Table(title="Module Summary", show_lines=False)
    table.add_column("", no_wrap=True)
    table.add_column("Module", style="bold")
    table.add_column("Layer", justify="right")
    table.add_column("Files", justify="right")
    table.add_column("Violations", justify="right")
    table.add_column("Score", justify="right")
    for record in graph.modules:
        module_score = score.by_module.get(record.name, 0.0)
        color = score_band(module_score).color
        table.add_row(
            _module_status(record),
            escape(record.name),
            str(record.layer),
            str(record.file_count),
            str(len(record.violations)),
            f"[{color}]{module_score:.1f}%[/{color}]",
        )
    return table


def print_console_report(
    graph: ModuleGraph,
    score: ComplianceScore,
    options: ReportOptions,
    console: Console | None = None,
) -> None:
    """Print the report to ``console`` (stdout by default)."""
    console = console or Console()
    band = score_band(score.overall)
    scores = score.by_severity

    console.rule("[bold]Dependency Analysis Report[/bold]")
    console.print(
        f"[bold {band.color}]Overall Compliance: {score.overall:.2f}% "
        f"({band.label})[/bold {band.color}]"
    )
    console.print()

    console.print("[bold]Compliance by Severity:[/bold]")
    critical_status = _PASS if scores.critical == 100 else _FAIL
    major_status = _PASS if scores.major == 100 else _WARN
    minor_status = _PASS if scores.minor >= 80 else _WARN
    console.print(f"  Critical: {scores.critical}% {critical_status}")
    console.print(f"  Major: {scores.major}% {major_status}")
    console.print(f"  Minor: {scores.minor}% {minor_status}")
    console.print(f"  Warning: {scores.warning}%")
    console.print()

    console.print(_module_table(graph, score))

    if options.verbose and graph.violations():
        console.rule("Violation Details")
        for record in graph.modules:
            if not record.violations:
                continue
            console.print(
                f"\n[bold]{escape(record.name)}[/bold] "
                f"({len(record.violations)} violations):"
            )
            for violation in record.violations:
                console.print(
                    f"  {violation.severity.upper()}: {violation.message}",
                    markup=False,
                )
                console.print(
                    f"    File: {violation.file}:{violation.line}:{violation.column}",
                    markup=False,
                )
        console.print()

    if graph.diagnostics:
        console.print("[bold]Diagnostics:[/bold]")
        for diagnostic in graph.diagnostics:
            location = f" ({diagnostic.file})" if diagnostic.file else ""
            console.print(
                f"  {diagnostic.level.upper()} {diagnostic.module}: "
                f"{diagnostic.message}{location}",
                markup=False,
            )
        console.print()

    if options.include_suggestions:
        suggestions = suggestions_for(graph)
        if suggestions:
            console.print("[bold]Remediation Suggestions:[/bold]")
            for suggestion in suggestions:
                title = VIOLATION_KIND_TITLES[suggestion.kind]
                console.print(f"  {suggestion.module} ({title}):", markup=False)
                for action in suggestion.actions:
                    console.print(f"    - {action}", markup=False)
            console.print()

    if score.overall < COMPLIANCE_TARGET:
        console.print("[bold]Recommendations:[/bold]")
        if scores.critical < 100:
            console.print("  Fix all critical violations immediately")
        if scores.major < 100:
            console.print("  Address major violations to improve architecture")
        console.print(
            f"  Target: achieve {COMPLIANCE_TARGET:.0f}% compliance for production "
            "readiness"
        )
    else:
        console.print(
            f"[green]Compliance target of {COMPLIANCE_TARGET:.0f}% achieved.[/green]"
        )


def render_console(
    graph: ModuleGraph,
    score: ComplianceScore,
    options: ReportOptions,
) -> str:
    """Plain-text rendition of the console report, for writing to a file."""
    console = Console(file=StringIO(), width=100, color_system=None, record=True)
    print_console_report(graph, score, options, console=console)
    return console.export_text()


__all__ = ["print_console_report", "render_console"]
