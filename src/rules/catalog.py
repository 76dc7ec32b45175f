"""The fixed architecture rule catalog.

Rules are plain values tagged with a :class:`RuleKind`; their predicates are
looked up in :data:`RULE_CHECKERS` rather than stored as closures, so every
rule can be listed, compared and tested on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from rules.layers import (
    ModuleLayer,
    depends_upward,
    exceeds_ceiling,
    is_peer,
    is_same_module,
)

if TYPE_CHECKING:
    from contract.kinds import Severity, ViolationKind


class RuleKind(str, Enum):
    """Shape of a rule's edge predicate."""

    ISOLATION = "isolation"
    HIERARCHY = "hierarchy"
    PEER = "peer"
    LAYER_CEILING = "layer_ceiling"
    STRUCTURAL = "structural"


@dataclass(frozen=True)
class Rule:
    """One catalog entry.

    ``source_layer`` restricts the rule to edges leaving that layer (``None``
    means every layer). ``ceiling`` and ``allow_same_layer`` only apply to
    ``LAYER_CEILING`` rules. ``violation_kind`` is ``None`` for rules that are
    never failed by an edge.
    """

    id: str
    slug: str
    name: str
    description: str
    severity: Severity
    weight: int
    kind: RuleKind
    violation_kind: ViolationKind | None = None
    source_layer: int | None = None
    ceiling: int | None = None
    allow_same_layer: bool = False

    def applies_to(self, source_layer: int) -> bool:
        return self.source_layer is None or self.source_layer == source_layer

    def is_satisfied(
        self,
        source: str,
        target: str,
        source_layer: int,
        target_layer: int,
    ) -> bool:
        checker = RULE_CHECKERS[self.kind]
        return checker(self, source, target, source_layer, target_layer)


class RuleChecker(Protocol):
    def __call__(
        self,
        rule: Rule,
        source: str,
        target: str,
        source_layer: int,
        target_layer: int,
    ) -> bool: ...


def _check_isolation(
    rule: Rule, source: str, target: str, source_layer: int, target_layer: int
) -> bool:
    if not rule.applies_to(source_layer):
        return True
    return is_same_module(source, target)


def _check_hierarchy(
    rule: Rule, source: str, target: str, source_layer: int, target_layer: int
) -> bool:
    return not depends_upward(source_layer, target_layer)


def _check_peer(
    rule: Rule, source: str, target: str, source_layer: int, target_layer: int
) -> bool:
    if not rule.applies_to(source_layer):
        return True
    return not is_peer(source, target, source_layer, target_layer)


def _check_layer_ceiling(
    rule: Rule, source: str, target: str, source_layer: int, target_layer: int
) -> bool:
    if not rule.applies_to(source_layer) or rule.ceiling is None:
        return True
    return not exceeds_ceiling(
        source_layer,
        target_layer,
        rule.ceiling,
        allow_same_layer=rule.allow_same_layer,
    )


def _check_structural(
    rule: Rule, source: str, target: str, source_layer: int, target_layer: int
) -> bool:
    return True


RULE_CHECKERS: dict[RuleKind, RuleChecker] = {
    RuleKind.ISOLATION: _check_isolation,
    RuleKind.HIERARCHY: _check_hierarchy,
    RuleKind.PEER: _check_peer,
    RuleKind.LAYER_CEILING: _check_layer_ceiling,
    RuleKind.STRUCTURAL: _check_structural,
}


RULE_CATALOG: tuple[Rule, ...] = (
    Rule(
        id="R1",
        slug="core-isolation",
        name="Core Module Isolation",
        description="The most foundational layer must not depend on any other module",
        severity="critical",
        weight=10,
        kind=RuleKind.ISOLATION,
        violation_kind="forbidden",
        source_layer=ModuleLayer.CORE,
    ),
    Rule(
        id="R2",
        slug="layer-hierarchy",
        name="Layer Hierarchy",
        description="Modules may only depend on their own or lower layers",
        severity="critical",
        weight=8,
        kind=RuleKind.HIERARCHY,
        violation_kind="layer",
    ),
    Rule(
        id="R3",
        slug="no-peer",
        name="No Peer Dependencies",
        description="Modules on the same layer must not depend on each other",
        severity="major",
        weight=6,
        kind=RuleKind.PEER,
        violation_kind="peer",
    ),
    Rule(
        id="R4",
        slug="foundation-restriction",
        name="Foundation Layer Restrictions",
        description="Foundation modules may only depend on the core layer",
        severity="major",
        weight=7,
        kind=RuleKind.LAYER_CEILING,
        violation_kind="layer",
        source_layer=ModuleLayer.FOUNDATION,
        ceiling=ModuleLayer.CORE,
    ),
    Rule(
        id="R5",
        slug="domain-boundary",
        name="Domain Layer Boundaries",
        description=(
            "Domain modules may depend on foundation, core and other domain modules"
        ),
        severity="minor",
        weight=4,
        kind=RuleKind.LAYER_CEILING,
        violation_kind="layer",
        source_layer=ModuleLayer.DOMAIN,
        ceiling=ModuleLayer.FOUNDATION,
        allow_same_layer=True,
    ),
    Rule(
        id="R6",
        slug="feature-independence",
        name="Feature Layer Independence",
        description="Feature modules must not depend on other feature modules",
        severity="major",
        weight=5,
        kind=RuleKind.PEER,
        violation_kind="peer",
        source_layer=ModuleLayer.FEATURE,
    ),
    Rule(
        id="R7",
        slug="application-orchestration",
        name="Application Layer Orchestration",
        description="Application modules may use every lower layer but not each other",
        severity="minor",
        weight=3,
        kind=RuleKind.PEER,
        violation_kind="peer",
        source_layer=ModuleLayer.APPLICATION,
    ),
    Rule(
        id="R8",
        slug="no-circular",
        name="No Circular Dependencies",
        description="Modules must not depend on each other in a cycle",
        severity="critical",
        weight=10,
        kind=RuleKind.STRUCTURAL,
        violation_kind="circular",
    ),
    Rule(
        id="R9",
        slug="barrel-export",
        name="Barrel Exports Required",
        description="Every module exposes a single public entry point",
        severity="minor",
        weight=2,
        kind=RuleKind.STRUCTURAL,
    ),
    Rule(
        id="R10",
        slug="external-dependency-minimization",
        name="External Dependency Management",
        description="External packages should be kept to a minimum in the core layer",
        severity="warning",
        weight=1,
        kind=RuleKind.STRUCTURAL,
    ),
)


def failure_message(
    rule: Rule,
    source: str,
    target: str,
    source_layer: int,
    target_layer: int,
) -> str:
    """Describe why ``source -> target`` failed ``rule``."""
    if rule.kind is RuleKind.ISOLATION:
        text = (
            f"Forbidden import: {source} (layer {source_layer}) cannot import "
            f"from any other module, found {target}"
        )
    elif rule.kind is RuleKind.HIERARCHY:
        text = (
            f"Layer violation: {source} (layer {source_layer}) cannot import "
            f"from {target} (layer {target_layer})"
        )
    elif rule.kind is RuleKind.LAYER_CEILING:
        text = (
            f"Layer violation: {source} (layer {source_layer}) may only import "
            f"from layer {rule.ceiling} and below, found {target} "
            f"(layer {target_layer})"
        )
    elif rule.kind is RuleKind.PEER:
        text = (
            f"Peer dependency violation: {source} cannot import from {target} "
            f"(same layer {source_layer})"
        )
    else:
        text = f"{rule.name}: {source} -> {target}"
    return f"{text} [{rule.id}]"


RULES_BY_ID: dict[str, Rule] = {rule.id: rule for rule in RULE_CATALOG}

CIRCULAR_RULE = RULES_BY_ID["R8"]
BARREL_RULE = RULES_BY_ID["R9"]
EXTERNAL_RULE = RULES_BY_ID["R10"]


__all__ = [
    "BARREL_RULE",
    "CIRCULAR_RULE",
    "EXTERNAL_RULE",
    "RULES_BY_ID",
    "RULE_CATALOG",
    "RULE_CHECKERS",
    "Rule",
    "RuleChecker",
    "RuleKind",
    "failure_message",
]
