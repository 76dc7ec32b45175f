"""Stable vocabulary shared by the scanner, rule engine and reporters.

Violation kinds, severities and diagnostic kinds appear verbatim in the
structured report, so changing a value here is a report-schema change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

# Structured report schema version (report-v1).
REPORT_SCHEMA_VERSION = 1

ViolationKind = Literal["layer", "circular", "forbidden", "peer"]
Severity = Literal["critical", "major", "minor", "warning"]
DiagnosticKind = Literal[
    "missing-root",
    "parse-error",
    "missing-entry-point",
    "external-dependencies",
]
DiagnosticLevel = Literal["warning", "info"]

VIOLATION_KINDS: tuple[ViolationKind, ...] = get_args(ViolationKind)
SEVERITIES: tuple[Severity, ...] = get_args(Severity)

# Location recorded for structural violations that have no import site.
STRUCTURAL_FILE = "N/A"

VIOLATION_KIND_TITLES: dict[ViolationKind, str] = {
    "layer": "Layer Hierarchy",
    "circular": "Circular Dependency",
    "forbidden": "Forbidden Import",
    "peer": "Peer Dependency",
}


@dataclass(frozen=True)
class ScoreBand:
    """Presentation band for a percentage score."""

    label: str
    minimum: float
    color: str
    symbol: str


# Ordered from best to worst; the first band whose minimum is met wins.
SCORE_BANDS: tuple[ScoreBand, ...] = (
    ScoreBand(label="excellent", minimum=99.0, color="green", symbol="✔"),
    ScoreBand(label="acceptable", minimum=80.0, color="yellow", symbol="!"),
    ScoreBand(label="poor", minimum=0.0, color="red", symbol="✘"),
)

# Overall score a project must reach to count as compliant.
COMPLIANCE_TARGET = 99.0


def score_band(score: float) -> ScoreBand:
    for band in SCORE_BANDS:
        if score >= band.minimum:
            return band
    return SCORE_BANDS[-1]


__all__ = [
    "COMPLIANCE_TARGET",
    "REPORT_SCHEMA_VERSION",
    "SCORE_BANDS",
    "SEVERITIES",
    "STRUCTURAL_FILE",
    "VIOLATION_KINDS",
    "VIOLATION_KIND_TITLES",
    "DiagnosticKind",
    "DiagnosticLevel",
    "ScoreBand",
    "Severity",
    "ViolationKind",
    "score_band",
]
