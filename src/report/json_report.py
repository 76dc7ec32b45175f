"""Structured (JSON) report encoding."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from contract.kinds import REPORT_SCHEMA_VERSION
from report.remediation import suggestions_for

if TYPE_CHECKING:
    from contract.models import ComplianceScore, ModuleGraph
    from report.options import ReportOptions

JSON_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2


def _dump(model: Any) -> Any:
    return model.model_dump(by_alias=True, mode="json")


def build_report_payload(
    graph: ModuleGraph,
    score: ComplianceScore,
    options: ReportOptions,
) -> dict[str, Any]:
    """Assemble the report document as plain JSON-compatible data."""
    modules = [
        {
            "name": record.name,
            "layer": record.layer,
            "root": record.root,
            "metrics": {
                "fileCount": record.file_count,
                "importCount": record.import_count,
                "dependencyCount": len(record.dependencies),
                "externalDependencyCount": len(record.external_dependencies),
                "violationCount": len(record.violations),
            },
            "files": list(record.files),
            "dependencies": list(record.dependencies),
            "externalDependencies": list(record.external_dependencies),
            "violations": [_dump(violation) for violation in record.violations],
        }
        for record in graph.modules
    ]

    payload: dict[str, Any] = {
        "schemaVersion": REPORT_SCHEMA_VERSION,
        "generatedAt": options.generated_at(),
        "projectRoot": options.project_root,
        "compliance": {
            "overall": score.overall,
            "bySeverity": _dump(score.by_severity),
            "byModule": dict(score.by_module),
            "statistics": _dump(score.details),
        },
        "modules": modules,
        "summary": {
            "totalModules": len(graph.modules),
            "totalViolations": score.details.failed_rules,
            "criticalViolations": graph.count_by_severity("critical"),
            "majorViolations": graph.count_by_severity("major"),
            "minorViolations": graph.count_by_severity("minor"),
            "warningViolations": graph.count_by_severity("warning"),
        },
        "diagnostics": [_dump(diagnostic) for diagnostic in graph.diagnostics],
    }
    if options.include_suggestions:
        payload["suggestions"] = [
            suggestion.to_dict() for suggestion in suggestions_for(graph)
        ]
    return payload


def encode_payload(payload: dict[str, Any]) -> str:
    return orjson.dumps(payload, option=JSON_OPTIONS).decode("utf-8")


def render_json(
    graph: ModuleGraph,
    score: ComplianceScore,
    options: ReportOptions,
) -> str:
    return encode_payload(build_report_payload(graph, score, options))


__all__ = ["JSON_OPTIONS", "build_report_payload", "encode_payload", "render_json"]
