"""Markdown report encoding."""

from __future__ import annotations

import re
from itertools import groupby
from typing import TYPE_CHECKING

from contract.kinds import COMPLIANCE_TARGET, VIOLATION_KIND_TITLES, score_band
from report.remediation import suggestions_for

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contract.models import ComplianceScore, ModuleGraph, ModuleRecord
    from report.options import ReportOptions

_MERMAID_UNSAFE = re.compile(r"[^A-Za-z0-9_]")


def _mermaid_ids(names: Iterable[str]) -> dict[str, str]:
    """Map module names to distinct node ids, suffixing sanitised collisions."""
    ids: dict[str, str] = {}
    for name in names:
        base = candidate = _MERMAID_UNSAFE.sub("_", name)
        suffix = 2
        while candidate in ids.values():
            candidate = f"{base}_{suffix}"
            suffix += 1
        ids[name] = candidate
    return ids


def _severity_rows(score: ComplianceScore) -> list[str]:
    scores = score.by_severity
    return [
        "| Severity | Score | Status |",
        "|----------|-------|--------|",
        f"| Critical | {scores.critical}% | "
        f"{'Pass' if scores.critical == 100 else 'Fail'} |",
        f"| Major | {scores.major}% | {'Pass' if scores.major == 100 else 'Warning'} |",
        f"| Minor | {scores.minor}% | {'Pass' if scores.minor >= 80 else 'Warning'} |",
        f"| Warning | {scores.warning}% | Info |",
    ]


def _module_rows(graph: ModuleGraph, score: ComplianceScore) -> list[str]:
    lines = [
        "| Module | Layer | Files | Imports | Dependencies | Violations | Score |",
        "|--------|-------|-------|---------|--------------|------------|-------|",
    ]
    for record in graph.modules:
        module_score = score.by_module.get(record.name, 0.0)
        lines.append(
            f"| {record.name} | {record.layer} | {record.file_count} | "
            f"{record.import_count} | {len(record.dependencies)} | "
            f"{len(record.violations)} | {module_score:.1f}% "
            f"{score_band(module_score).symbol} |"
        )
    return lines


def _violation_lines(record: ModuleRecord) -> list[str]:
    lines = [f"### {record.name} ({len(record.violations)} violations)", ""]
    # Kinds in order of first appearance, violations in scan order within each.
    kinds = list(dict.fromkeys(violation.kind for violation in record.violations))
    ordered = sorted(record.violations, key=lambda v: kinds.index(v.kind))
    for kind, violations in groupby(ordered, key=lambda v: v.kind):
        lines.extend([f"#### {VIOLATION_KIND_TITLES[kind]} Violations", ""])
        for violation in violations:
            lines.extend(
                [
                    f"- **{violation.severity.upper()}**: {violation.message}",
                    f"  - File: `{violation.file}`",
                    f"  - Location: Line {violation.line}, Column {violation.column}",
                    f"  - Import: `{violation.import_path}`",
                    "",
                ]
            )
    return lines


def _graph_lines(graph: ModuleGraph) -> list[str]:
    lines = ["## Dependency Graph", "", "```mermaid", "graph TD"]
    ids = _mermaid_ids(record.name for record in graph.modules)
    for record in graph.modules:
        lines.append(f'    {ids[record.name]}["{record.name}"]')
    for record in graph.modules:
        violating = {violation.target_module for violation in record.violations}
        for dependency in record.dependencies:
            arrow = "-.->|violation|" if dependency in violating else "-->"
            lines.append(f"    {ids[record.name]} {arrow} {ids[dependency]}")
    lines.extend(["```", ""])
    return lines


def _recommendation_lines(score: ComplianceScore) -> list[str]:
    lines = ["## Recommendations", ""]
    if score.by_severity.critical < 100:
        lines.extend(
            [
                "### Critical Actions Required",
                "",
                "1. Fix all critical violations immediately",
                "2. Review and refactor forbidden dependencies",
                "3. Eliminate circular dependencies",
                "",
            ]
        )
    if score.by_severity.major < 100:
        lines.extend(
            [
                "### Major Improvements Needed",
                "",
                "1. Address layer violation issues",
                "2. Refactor peer dependencies",
                "3. Improve module boundaries",
                "",
            ]
        )
    if score.overall >= COMPLIANCE_TARGET:
        lines.extend(
            [
                "### Excellent Compliance Achieved",
                "",
                f"The codebase meets the {COMPLIANCE_TARGET:.0f}% compliance target.",
                "Continue monitoring to maintain this standard.",
                "",
            ]
        )
    return lines


def render_markdown(
    graph: ModuleGraph,
    score: ComplianceScore,
    options: ReportOptions,
) -> str:
    violations = graph.violations()
    lines = [
        "# Dependency Analysis Report",
        "",
        f"*Generated: {options.generated_at()}*",
        "",
        "## Executive Summary",
        "",
        f"- **Overall Compliance**: {score.overall:.2f}% "
        f"{score_band(score.overall).symbol}",
        f"- **Total Modules**: {len(graph.modules)}",
        f"- **Total Violations**: {len(violations)}",
        f"- **Critical Issues**: {graph.count_by_severity('critical')}",
        f"- **Major Issues**: {graph.count_by_severity('major')}",
        f"- **Minor Issues**: {graph.count_by_severity('minor')}",
        f"- **Warnings**: {graph.count_by_severity('warning')}",
        "",
        "## Compliance by Severity",
        "",
        *_severity_rows(score),
        "",
        "## Module Analysis",
        "",
        *_module_rows(graph, score),
        "",
        "## Violations by Module",
        "",
    ]

    if not violations:
        lines.extend(["No violations found.", ""])
    for record in graph.modules:
        if record.violations:
            lines.extend(_violation_lines(record))

    if options.include_graph:
        lines.extend(_graph_lines(graph))

    if graph.diagnostics:
        lines.extend(["## Diagnostics", ""])
        for diagnostic in graph.diagnostics:
            location = f" (`{diagnostic.file}`)" if diagnostic.file else ""
            lines.append(
                f"- **{diagnostic.level.upper()}** {diagnostic.module}: "
                f"{diagnostic.message}{location}"
            )
        lines.append("")

    if options.include_suggestions:
        suggestions = suggestions_for(graph)
        if suggestions:
            lines.extend(["## Remediation Suggestions", ""])
            for suggestion in suggestions:
                title = VIOLATION_KIND_TITLES[suggestion.kind]
                lines.extend([f"### {suggestion.module}: {title}", ""])
                lines.extend(f"- {action}" for action in suggestion.actions)
                lines.append("")

    lines.extend(_recommendation_lines(score))
    return "\n".join(lines)


__all__ = ["render_markdown"]
