"""Frozen records produced by the scanner and the rule engine.

Field names are snake_case in Python and camelCase in the structured report
(``import_path`` -> ``importPath``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from contract.kinds import (
    DiagnosticKind,
    DiagnosticLevel,
    Severity,
    ViolationKind,
)


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Violation(_Record):
    """A rule failure on one import site or one structural property."""

    module: str
    file: str
    line: int
    column: int
    import_path: str
    target_module: str
    kind: ViolationKind
    severity: Severity
    message: str


class ScanDiagnostic(_Record):
    """A non-scoring observation made while scanning a module."""

    module: str
    kind: DiagnosticKind
    level: DiagnosticLevel
    message: str
    file: str | None = None
    rule_id: str | None = None


class ModuleRecord(_Record):
    """Snapshot of one registered module after the scan completed."""

    name: str
    layer: int
    root: str
    files: tuple[str, ...] = ()
    file_count: int = 0
    import_count: int = 0
    dependencies: tuple[str, ...] = ()
    external_dependencies: tuple[str, ...] = ()
    violations: tuple[Violation, ...] = ()

    def count_by_severity(self, severity: Severity) -> int:
        return sum(1 for violation in self.violations if violation.severity == severity)


class ModuleGraph(_Record):
    """All module records in registry order plus scan diagnostics."""

    modules: tuple[ModuleRecord, ...] = ()
    diagnostics: tuple[ScanDiagnostic, ...] = ()

    def get(self, name: str) -> ModuleRecord | None:
        for record in self.modules:
            if record.name == name:
                return record
        return None

    def violations(self) -> list[Violation]:
        return [violation for record in self.modules for violation in record.violations]

    def count_by_severity(self, severity: Severity) -> int:
        return sum(record.count_by_severity(severity) for record in self.modules)

    @property
    def has_critical(self) -> bool:
        return self.count_by_severity("critical") > 0


class SeverityScores(_Record):
    critical: int = 100
    major: int = 100
    minor: int = 100
    warning: int = 100


class ScoreDetails(_Record):
    total_rules: int
    passed_rules: int
    failed_rules: int
    violations: tuple[Violation, ...] = ()


class ComplianceScore(_Record):
    """Weighted compliance summary for a module graph."""

    overall: float
    by_module: dict[str, float] = Field(default_factory=dict)
    by_severity: SeverityScores = Field(default_factory=SeverityScores)
    details: ScoreDetails


__all__ = [
    "ComplianceScore",
    "ModuleGraph",
    "ModuleRecord",
    "ScanDiagnostic",
    "ScoreDetails",
    "SeverityScores",
    "Violation",
]
