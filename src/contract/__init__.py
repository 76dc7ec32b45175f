"""Records and vocabulary shared by scanner, rule engine and reporters."""

from contract.kinds import (
    COMPLIANCE_TARGET,
    REPORT_SCHEMA_VERSION,
    SEVERITIES,
    STRUCTURAL_FILE,
    VIOLATION_KINDS,
    Severity,
    ViolationKind,
    score_band,
)
from contract.models import (
    ComplianceScore,
    ModuleGraph,
    ModuleRecord,
    ScanDiagnostic,
    ScoreDetails,
    SeverityScores,
    Violation,
)

__all__ = [
    "COMPLIANCE_TARGET",
    "REPORT_SCHEMA_VERSION",
    "SEVERITIES",
    "STRUCTURAL_FILE",
    "VIOLATION_KINDS",
    "ComplianceScore",
    "ModuleGraph",
    "ModuleRecord",
    "ScanDiagnostic",
    "ScoreDetails",
    "Severity",
    "SeverityScores",
    "Violation",
    "ViolationKind",
    "score_band",
]
