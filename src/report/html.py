"""Self-contained HTML report encoding."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

from contract.kinds import score_band

if TYPE_CHECKING:
    from contract.models import ComplianceScore, ModuleGraph
    from report.options import ReportOptions

_STYLE = """
body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; margin: 40px; }
.container { max-width: 1200px; margin: 0 auto; }
h1 { border-bottom: 3px solid #007bff; padding-bottom: 10px; }
.score-badge { display: inline-block; padding: 5px 15px; border-radius: 20px; }
.score-excellent { background: #28a745; color: white; }
.score-acceptable { background: #ffc107; color: #333; }
.score-poor { background: #dc3545; color: white; }
table { width: 100%; border-collapse: collapse; margin: 20px 0; }
th { background: #007bff; color: white; padding: 12px; text-align: left; }
td { padding: 10px; border-bottom: 1px solid #ddd; }
.violation { background: #fff3cd; padding: 10px; margin: 10px 0;
  border-left: 4px solid #ffc107; }
.critical { border-left-color: #dc3545; background: #f8d7da; }
.diagnostic { color: #555; }
""".strip()


def _module_table(graph: ModuleGraph, score: ComplianceScore) -> list[str]:
    rows = [
        "<table>",
        "<thead><tr><th>Module</th><th>Layer</th><th>Files</th>"
        "<th>Dependencies</th><th>Violations</th><th>Score</th></tr></thead>",
        "<tbody>",
    ]
    for record in graph.modules:
        module_score = score.by_module.get(record.name, 0.0)
        rows.append(
            f"<tr><td>{escape(record.name)}</td><td>{record.layer}</td>"
            f"<td>{record.file_count}</td><td>{len(record.dependencies)}</td>"
            f"<td>{len(record.violations)}</td><td>{module_score:.1f}%</td></tr>"
        )
    rows.extend(["</tbody>", "</table>"])
    return rows


def _violation_blocks(graph: ModuleGraph) -> list[str]:
    blocks: list[str] = []
    for record in graph.modules:
        if not record.violations:
            continue
        blocks.append(f"<h3>{escape(record.name)}</h3>")
        for violation in record.violations:
            css = "violation"
            if violation.severity == "critical":
                css = "violation critical"
            blocks.append(
                f'<div class="{css}"><strong>{violation.severity.upper()}</strong>: '
                f"{escape(violation.message)}<br>"
                f"<small>File: {escape(violation.file)} (Line {violation.line})"
                "</small></div>"
            )
    if not blocks:
        blocks.append("<p>No violations found.</p>")
    return blocks


def render_html(
    graph: ModuleGraph,
    score: ComplianceScore,
    options: ReportOptions,
) -> str:
    band = score_band(score.overall)
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="UTF-8">',
        "<title>Dependency Analysis Report</title>",
        f"<style>\n{_STYLE}\n</style>",
        "</head>",
        "<body>",
        '<div class="container">',
        "<h1>Dependency Analysis Report</h1>",
        f"<p><em>Generated: {escape(options.generated_at())}</em></p>",
        "<h2>Executive Summary</h2>",
        f'<div class="score-badge score-{band.label}">'
        f"Overall Compliance: {score.overall:.2f}%</div>",
        "<ul>",
        f"<li>Total Modules: {len(graph.modules)}</li>",
        f"<li>Total Violations: {score.details.failed_rules}</li>",
        f"<li>Critical Issues: {graph.count_by_severity('critical')}</li>",
        f"<li>Major Issues: {graph.count_by_severity('major')}</li>",
        f"<li>Minor Issues: {graph.count_by_severity('minor')}</li>",
        f"<li>Warnings: {graph.count_by_severity('warning')}</li>",
        "</ul>",
        "<h2>Module Compliance</h2>",
        *_module_table(graph, score),
        "<h2>Violations</h2>",
        *_violation_blocks(graph),
    ]
    if graph.diagnostics:
        parts.append("<h2>Diagnostics</h2>")
        parts.append("<ul>")
        for diagnostic in graph.diagnostics:
            location = f" ({escape(diagnostic.file)})" if diagnostic.file else ""
            parts.append(
                f'<li class="diagnostic">{diagnostic.level.upper()} '
                f"{escape(diagnostic.module)}: {escape(diagnostic.message)}"
                f"{location}</li>"
            )
        parts.append("</ul>")
    parts.extend(["</div>", "</body>", "</html>"])
    return "\n".join(parts)


__all__ = ["render_html"]
