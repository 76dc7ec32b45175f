from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO
from pathlib import Path

import orjson
import pytest
from rich.console import Console

from contract.models import ModuleGraph, ModuleRecord, ScanDiagnostic, Violation
from report.console import print_console_report
from report.options import ReportOptions
from report.remediation import suggestions_for
from report.write import render_report, write_report
from rules.engine import RuleEngine

TIMESTAMP = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _violation(module: str, target: str, kind: str, severity: str) -> Violation:
    return Violation(
        module=module,
        file=f"packages/{module}/src/index.ts",
        line=2,
        column=23,
        import_path=f"@cvplus/{target}",
        target_module=target,
        kind=kind,
        severity=severity,
        message=f"{kind} violation: {module} <script> {target}",
    )


def _graph() -> ModuleGraph:
    return ModuleGraph(
        modules=(
            ModuleRecord(
                name="core",
                layer=0,
                root="packages/core",
                files=("packages/core/src/index.ts",),
                file_count=1,
                import_count=1,
                external_dependencies=("zod",),
            ),
            ModuleRecord(
                name="auth",
                layer=1,
                root="packages/auth",
                files=("packages/auth/src/index.ts",),
                file_count=1,
                import_count=2,
                dependencies=("core", "cv-processing"),
                violations=(
                    _violation("auth", "cv-processing", "layer", "critical"),
                    _violation("auth", "cv-processing", "layer", "major"),
                ),
            ),
            ModuleRecord(name="cv-processing", layer=2, root="packages/cv-processing"),
        ),
        diagnostics=(
            ScanDiagnostic(
                module="core",
                kind="external-dependencies",
                level="info",
                message="1 external package(s) in a core-layer module: zod",
                rule_id="R10",
            ),
        ),
    )


def _render(fmt: str, **options: object) -> str:
    graph = _graph()
    score = RuleEngine().calculate_compliance_score(graph)
    return render_report(
        graph,
        score,
        fmt,
        ReportOptions(timestamp=TIMESTAMP, project_root="/repo", **options),
    )


def test_json_report_structure() -> None:
    payload = orjson.loads(_render("json", include_suggestions=True))

    assert payload["schemaVersion"] == 1
    assert payload["generatedAt"] == "2026-01-02T03:04:05+00:00"
    assert payload["projectRoot"] == "/repo"
    assert payload["compliance"]["bySeverity"] == {
        "critical": 0,
        "major": 80,
        "minor": 100,
        "warning": 100,
    }
    assert payload["compliance"]["statistics"]["totalRules"] == 30
    assert payload["summary"] == {
        "totalModules": 3,
        "totalViolations": 2,
        "criticalViolations": 1,
        "majorViolations": 1,
        "minorViolations": 0,
        "warningViolations": 0,
    }
    auth = payload["modules"][1]
    assert auth["metrics"] == {
        "fileCount": 1,
        "importCount": 2,
        "dependencyCount": 2,
        "externalDependencyCount": 0,
        "violationCount": 2,
    }
    assert auth["violations"][0]["importPath"] == "@cvplus/cv-processing"
    assert auth["violations"][0]["targetModule"] == "cv-processing"
    assert payload["diagnostics"][0]["ruleId"] == "R10"
    assert payload["suggestions"] == [
        {
            "module": "auth",
            "kind": "layer",
            "actions": [
                "Refactor the dependency on cv-processing towards a lower layer",
                "Consider moving the functionality to a shared lower layer",
                "Use a facade to abstract the dependency",
            ],
        }
    ]


def test_json_report_is_stable_for_fixed_timestamp() -> None:
    assert _render("json") == _render("json")
    assert "suggestions" not in orjson.loads(_render("json"))


def test_markdown_report_sections() -> None:
    text = _render("markdown", include_graph=True, include_suggestions=True)

    assert text.startswith("# Dependency Analysis Report")
    assert "*Generated: 2026-01-02T03:04:05+00:00*" in text
    assert "- **Overall Compliance**: 91.07%" in text
    assert "| Critical | 0% | Fail |" in text
    assert "| Major | 80% | Warning |" in text
    assert "| auth | 1 | 1 | 2 | 2 | 2 | 73.2% ✘ |" in text
    assert "### auth (2 violations)" in text
    assert text.count("#### Layer Hierarchy Violations") == 1
    assert "  - Location: Line 2, Column 23" in text
    assert "```mermaid" in text
    assert "    auth -.->|violation| cv_processing" in text
    assert "    auth --> core" in text
    assert '    cv_processing["cv-processing"]' in text
    assert "## Diagnostics" in text
    assert "## Remediation Suggestions" in text
    assert "### Critical Actions Required" in text
    assert "### Major Improvements Needed" in text
    assert "Excellent Compliance Achieved" not in text


def test_markdown_report_for_clean_graph() -> None:
    graph = ModuleGraph(modules=(ModuleRecord(name="core", layer=0, root="core"),))
    score = RuleEngine().calculate_compliance_score(graph)

    text = render_report(graph, score, "markdown", ReportOptions(timestamp=TIMESTAMP))

    assert "No violations found." in text
    assert "### Excellent Compliance Achieved" in text
    assert "## Dependency Graph" not in text


def test_html_report_escapes_text() -> None:
    text = _render("html")

    assert text.startswith("<!DOCTYPE html>")
    assert "<script>" not in text
    assert "&lt;script&gt;" in text
    assert 'class="score-badge score-acceptable"' in text
    assert "<td>cv-processing</td>" in text


def test_console_report_lists_modules_and_recommendations() -> None:
    graph = _graph()
    score = RuleEngine().calculate_compliance_score(graph)
    console = Console(file=StringIO(), width=120, color_system=None)

    print_console_report(
        graph,
        score,
        ReportOptions(verbose=True, include_suggestions=True),
        console=console,
    )
    output = console.file.getvalue()

    assert "Overall Compliance: 91.07% (acceptable)" in output
    assert "Critical: 0%" in output
    assert "cv-processing" in output
    assert "File: packages/auth/src/index.ts:2:23" in output
    assert "Remediation Suggestions:" in output
    assert "Fix all critical violations immediately" in output


def test_html_report_counts_every_severity() -> None:
    text = _render("html")

    assert "<li>Critical Issues: 1</li>" in text
    assert "<li>Major Issues: 1</li>" in text
    assert "<li>Minor Issues: 0</li>" in text
    assert "<li>Warnings: 0</li>" in text


def test_mermaid_node_ids_are_distinct_for_similar_names() -> None:
    graph = ModuleGraph(
        modules=(
            ModuleRecord(
                name="app",
                layer=4,
                root="packages/app",
                dependencies=("cv-processing", "cv_processing"),
            ),
            ModuleRecord(name="cv-processing", layer=2, root="packages/a"),
            ModuleRecord(name="cv_processing", layer=2, root="packages/b"),
        )
    )
    score = RuleEngine().calculate_compliance_score(graph)

    text = render_report(
        graph, score, "markdown", ReportOptions(timestamp=TIMESTAMP, include_graph=True)
    )

    assert '    cv_processing["cv-processing"]' in text
    assert '    cv_processing_2["cv_processing"]' in text
    assert "    app --> cv_processing\n" in text
    assert "    app --> cv_processing_2\n" in text


def test_console_report_prints_module_names_literally() -> None:
    graph = ModuleGraph(
        modules=(
            ModuleRecord(name="core", layer=0, root="packages/core"),
            ModuleRecord(
                name="[red]ui",
                layer=4,
                root="packages/ui",
                dependencies=("core",),
                violations=(_violation("[red]ui", "core", "layer", "minor"),),
            ),
        )
    )
    score = RuleEngine().calculate_compliance_score(graph)
    console = Console(file=StringIO(), width=120, color_system=None)

    print_console_report(graph, score, ReportOptions(verbose=True), console=console)
    output = console.file.getvalue()

    assert output.count("[red]ui") >= 2
    assert "[red]ui (1 violations):" in output


def test_console_rendering_to_text() -> None:
    text = _render("console")

    assert "Dependency Analysis Report" in text
    assert "Module Summary" in text


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown report format"):
        _render("pdf")


def test_suggestions_once_per_module_and_kind() -> None:
    graph = _graph()

    suggestions = suggestions_for(graph)

    assert [(s.module, s.kind) for s in suggestions] == [("auth", "layer")]


def test_write_report_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "reports" / "out.md"

    write_report("# title", target)

    assert target.read_text(encoding="utf-8") == "# title\n"
