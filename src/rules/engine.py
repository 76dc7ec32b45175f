"""Rule evaluation and compliance scoring."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contract.kinds import SEVERITIES
from contract.models import (
    ComplianceScore,
    ScoreDetails,
    SeverityScores,
)
from rules.catalog import RULE_CATALOG, Rule

if TYPE_CHECKING:
    from collections.abc import Sequence

    from contract.kinds import Severity, ViolationKind
    from contract.models import ModuleGraph, Violation

# Points deducted from a severity score per violation of that severity.
# Critical is binary and handled separately.
SEVERITY_PENALTIES: dict[Severity, int] = {
    "major": 20,
    "minor": 10,
    "warning": 5,
}


@dataclass(frozen=True)
class RuleEvaluation:
    """Outcome of checking one edge against every rule."""

    passed: tuple[Rule, ...]
    failed: tuple[Rule, ...]

    @property
    def ok(self) -> bool:
        return not self.failed


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def build_violation_rule_index(
    rules: Sequence[Rule],
) -> dict[tuple[Severity, ViolationKind], Rule]:
    """Map (severity, violation kind) to the rule whose weight it deducts.

    Violations do not carry a rule id; when several rules share a severity
    and kind the first one in catalog order wins.
    """
    index: dict[tuple[Severity, ViolationKind], Rule] = {}
    for rule in rules:
        if rule.violation_kind is None:
            continue
        index.setdefault((rule.severity, rule.violation_kind), rule)
    return index


class RuleEngine:
    """Evaluates dependency edges against a rule catalog and scores graphs."""

    def __init__(self, rules: Sequence[Rule] = RULE_CATALOG) -> None:
        self._rules: tuple[Rule, ...] = tuple(rules)
        self._violation_index = build_violation_rule_index(self._rules)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def module_weight(self) -> int:
        return sum(rule.weight for rule in self._rules)

    def rule_for_violation(self, violation: Violation) -> Rule | None:
        return self._violation_index.get((violation.severity, violation.kind))

    def validate_dependency(
        self,
        source: str,
        target: str,
        source_layer: int,
        target_layer: int,
    ) -> RuleEvaluation:
        """Check one edge against every rule; no rule short-circuits another."""
        passed: list[Rule] = []
        failed: list[Rule] = []
        for rule in self._rules:
            if rule.is_satisfied(source, target, source_layer, target_layer):
                passed.append(rule)
            else:
                failed.append(rule)
        return RuleEvaluation(passed=tuple(passed), failed=tuple(failed))

    def _achieved_weight(self, violations: Sequence[Violation]) -> int:
        achieved = self.module_weight
        for violation in violations:
            rule = self.rule_for_violation(violation)
            if rule is not None:
                achieved -= rule.weight
        return max(0, achieved)

    def calculate_compliance_score(self, graph: ModuleGraph) -> ComplianceScore:
        """Compute overall, per-module and per-severity compliance.

        Args:
            graph: Frozen module graph produced by the scanner

        Returns:
            ComplianceScore; an empty graph scores 100 everywhere.
        """
        module_weight = self.module_weight
        by_module: dict[str, float] = {}
        all_violations: list[Violation] = []
        total_weight = 0
        achieved_weight = 0

        for record in graph.modules:
            all_violations.extend(record.violations)
            achieved = self._achieved_weight(record.violations)
            total_weight += module_weight
            achieved_weight += achieved
            by_module[record.name] = (
                achieved / module_weight * 100 if module_weight > 0 else 100.0
            )

        ratio = achieved_weight / total_weight if total_weight > 0 else None
        overall = _round_half_up(ratio * 100, 2) if ratio is not None else 100.0

        total_rules = len(self._rules) * len(graph.modules)
        passed_rules = 0
        if ratio is not None:
            passed_rules = int(_round_half_up(ratio * total_rules))

        return ComplianceScore(
            overall=overall,
            by_module=by_module,
            by_severity=_severity_scores(all_violations),
            details=ScoreDetails(
                total_rules=total_rules,
                passed_rules=passed_rules,
                failed_rules=len(all_violations),
                violations=tuple(all_violations),
            ),
        )


def _severity_scores(violations: Sequence[Violation]) -> SeverityScores:
    counts: dict[Severity, int] = dict.fromkeys(SEVERITIES, 0)
    for violation in violations:
        counts[violation.severity] += 1

    penalised = {
        severity: max(0, 100 - penalty * counts[severity])
        for severity, penalty in SEVERITY_PENALTIES.items()
    }
    return SeverityScores(
        critical=100 if counts["critical"] == 0 else 0,
        major=penalised["major"],
        minor=penalised["minor"],
        warning=penalised["warning"],
    )


__all__ = [
    "SEVERITY_PENALTIES",
    "RuleEngine",
    "RuleEvaluation",
    "build_violation_rule_index",
]
