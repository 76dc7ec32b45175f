"""Mutable scan state and its frozen snapshot.

Each :class:`ModuleRecordBuilder` is written only by the scan of its own
module. :meth:`ModuleGraphBuilder.freeze` turns the whole state into an
immutable :class:`~contract.models.ModuleGraph` once cycle detection is done.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contract.models import ModuleGraph, ModuleRecord

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from contract.models import ScanDiagnostic, Violation


@dataclass
class ModuleRecordBuilder:
    name: str
    layer: int
    root: str
    files: list[str] = field(default_factory=list)
    import_count: int = 0
    dependencies: set[str] = field(default_factory=set)
    external_dependencies: set[str] = field(default_factory=set)
    violations: list[Violation] = field(default_factory=list)

    def add_file(self, relative_path: str) -> None:
        self.files.append(relative_path)

    def count_import(self) -> None:
        self.import_count += 1

    def add_dependency(self, module: str) -> None:
        self.dependencies.add(module)

    def add_external(self, package: str) -> None:
        self.external_dependencies.add(package)

    def add_violation(self, violation: Violation) -> None:
        self.violations.append(violation)

    def build(self) -> ModuleRecord:
        return ModuleRecord(
            name=self.name,
            layer=self.layer,
            root=self.root,
            files=tuple(sorted(self.files)),
            file_count=len(self.files),
            import_count=self.import_count,
            dependencies=tuple(sorted(self.dependencies)),
            external_dependencies=tuple(sorted(self.external_dependencies)),
            violations=tuple(self.violations),
        )


class ModuleGraphBuilder:
    """Accumulates module records and diagnostics for one scan."""

    def __init__(self, registry: Mapping[str, int], roots: Mapping[str, str]) -> None:
        self._registry = dict(registry)
        self._modules: dict[str, ModuleRecordBuilder] = {
            name: ModuleRecordBuilder(name=name, layer=layer, root=roots[name])
            for name, layer in self._registry.items()
        }
        self._diagnostics: list[ScanDiagnostic] = []
        self._frozen = False

    def _check_open(self) -> None:
        if self._frozen:
            msg = "module graph is frozen; no further scan results can be recorded"
            raise RuntimeError(msg)

    @property
    def registry(self) -> dict[str, int]:
        return dict(self._registry)

    def module(self, name: str) -> ModuleRecordBuilder:
        self._check_open()
        return self._modules[name]

    def __iter__(self) -> Iterator[ModuleRecordBuilder]:
        return iter(self._modules.values())

    def add_diagnostic(self, diagnostic: ScanDiagnostic) -> None:
        self._check_open()
        self._diagnostics.append(diagnostic)

    def dependency_map(self) -> dict[str, set[str]]:
        return {
            name: set(record.dependencies) for name, record in self._modules.items()
        }

    def freeze(self) -> ModuleGraph:
        self._frozen = True
        return ModuleGraph(
            modules=tuple(record.build() for record in self._modules.values()),
            diagnostics=tuple(self._diagnostics),
        )


__all__ = ["ModuleGraphBuilder", "ModuleRecordBuilder"]
