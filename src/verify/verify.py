"""Determinism verification against a saved JSON report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import orjson

from report.json_report import build_report_payload
from report.options import ReportOptions
from rules.engine import RuleEngine
from scan.scanner import DependencyScanner

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import ComplianceConfig

# Keys that legitimately differ between two runs over the same tree.
VOLATILE_KEYS = frozenset({"generatedAt"})


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _compare(
    saved: Any,
    fresh: Any,
    path: str,
    result: dict[str, list[str]],
) -> None:
    if isinstance(saved, dict) and isinstance(fresh, dict):
        for key in sorted(set(saved) | set(fresh)):
            if not path and key in VOLATILE_KEYS:
                continue
            child = f"{path}.{key}" if path else key
            if key not in fresh:
                result["missing"].append(child)
            elif key not in saved:
                result["extra"].append(child)
            else:
                _compare(saved[key], fresh[key], child, result)
        return
    if isinstance(saved, list) and isinstance(fresh, list):
        if len(saved) != len(fresh):
            result["mismatches"].append(path)
            return
        for index, (left, right) in enumerate(zip(saved, fresh)):
            _compare(left, right, f"{path}[{index}]", result)
        return
    if saved != fresh:
        result["mismatches"].append(path)


def verify_determinism(
    *,
    root: Path,
    config: ComplianceConfig,
    report_path: Path,
) -> DeterminismResult:
    """Verify that a fresh scan reproduces a saved JSON report.

    Re-scans ``root``, rebuilds the structured report with the options the
    saved report implies, and compares the two documents key by key.
    ``generatedAt`` is ignored.

    Args:
        root: Project root to analyze.
        config: Configuration used for the fresh scan.
        report_path: JSON report written by an earlier ``scan --format json``.

    Returns:
        DeterminismResult with ok status and the dotted key paths that are
        missing from, extra in, or different in the fresh report.

    Raises:
        FileNotFoundError: If report_path does not exist.
        ValueError: If report_path is not a JSON object.
    """
    if not report_path.is_file():
        msg = f"Report does not exist: {report_path}"
        raise FileNotFoundError(msg)

    try:
        saved = orjson.loads(report_path.read_bytes())
    except orjson.JSONDecodeError as exc:
        msg = f"Report is not valid JSON: {report_path}: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(saved, dict):
        msg = f"Report is not a JSON object: {report_path}"
        raise ValueError(msg)

    engine = RuleEngine()
    graph = DependencyScanner.from_config(root, config, engine=engine).scan_all()
    score = engine.calculate_compliance_score(graph)
    options = ReportOptions(
        include_suggestions="suggestions" in saved,
        project_root=str(saved.get("projectRoot", root)),
    )
    fresh = orjson.loads(
        orjson.dumps(build_report_payload(graph, score, options))
    )

    result: dict[str, list[str]] = {"mismatches": [], "missing": [], "extra": []}
    _compare(saved, fresh, "", result)

    ok = not any(result.values())
    return DeterminismResult(
        ok=ok,
        mismatches=tuple(result["mismatches"]),
        missing=tuple(result["missing"]),
        extra=tuple(result["extra"]),
    )
