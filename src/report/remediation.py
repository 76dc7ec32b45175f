"""Canned remediation advice per violation kind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contract.kinds import ViolationKind
    from contract.models import ModuleGraph

# ``{targets}`` is replaced with the comma-separated target modules.
REMEDIATION_ACTIONS: dict[ViolationKind, tuple[str, ...]] = {
    "forbidden": (
        "Move shared types and interfaces into the core module",
        "Use dependency inversion with interfaces",
        "Consider an event-based communication pattern",
    ),
    "layer": (
        "Refactor the dependency on {targets} towards a lower layer",
        "Consider moving the functionality to a shared lower layer",
        "Use a facade to abstract the dependency",
    ),
    "peer": (
        "Extract shared functionality from {targets} to a lower layer",
        "Use a mediator for peer communication",
        "Consider merging the modules if they are highly coupled",
    ),
    "circular": (
        "Break the cycle through {targets} using dependency inversion",
        "Extract the shared functionality to a new module",
        "Use event-based decoupling",
    ),
}


@dataclass(frozen=True)
class RemediationSuggestion:
    module: str
    kind: ViolationKind
    actions: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        return {"module": self.module, "kind": self.kind, "actions": list(self.actions)}


def suggestions_for(graph: ModuleGraph) -> list[RemediationSuggestion]:
    """One suggestion per (module, kind) pair that has violations.

    Pairs follow registry order, then the order in which each kind first
    appears among the module's violations.
    """
    suggestions: list[RemediationSuggestion] = []
    for record in graph.modules:
        targets_by_kind: dict[ViolationKind, list[str]] = {}
        for violation in record.violations:
            targets = targets_by_kind.setdefault(violation.kind, [])
            if violation.target_module not in targets:
                targets.append(violation.target_module)

        for kind, targets in targets_by_kind.items():
            joined = ", ".join(targets)
            suggestions.append(
                RemediationSuggestion(
                    module=record.name,
                    kind=kind,
                    actions=tuple(
                        action.format(targets=joined)
                        for action in REMEDIATION_ACTIONS[kind]
                    ),
                )
            )
    return suggestions


__all__ = ["REMEDIATION_ACTIONS", "RemediationSuggestion", "suggestions_for"]
