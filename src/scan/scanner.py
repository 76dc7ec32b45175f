"""Module dependency scanner.

Walks every registered module, records edges between registered modules,
validates each edge as soon as it is found, and runs cycle detection once
the whole graph is known.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from contract.kinds import STRUCTURAL_FILE
from contract.models import ScanDiagnostic, Violation
from graph.algos import build_dependency_graph, find_cycles, format_cycle
from parse import extract_specifiers
from parse.specifiers import ParseError, classify_specifier
from rules.catalog import CIRCULAR_RULE, failure_message
from rules.config import DEFAULT_ENTRY_POINTS, DEFAULT_EXCLUDE, DEFAULT_EXTENSIONS
from rules.engine import RuleEngine
from rules.layers import ModuleLayer
from scan.builder import ModuleGraphBuilder
from scan.files import find_source_files
from utils import relative_posix

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from contract.models import ModuleGraph
    from parse.specifiers import ImportSpecifier
    from rules.config import ComplianceConfig
    from scan.builder import ModuleRecordBuilder

    SpecifierExtractor = Callable[[Path], list[ImportSpecifier]]

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """Raised when the scan cannot continue (e.g. an unreadable project root)."""


@dataclass(frozen=True)
class ScanSettings:
    """Specifier namespace and source discovery settings."""

    namespace: str = "@cvplus"
    extensions: tuple[str, ...] = tuple(DEFAULT_EXTENSIONS)
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = tuple(DEFAULT_EXCLUDE)
    entry_points: tuple[str, ...] = tuple(DEFAULT_ENTRY_POINTS)
    nested_gitignore: bool = False

    @classmethod
    def from_config(cls, config: ComplianceConfig) -> ScanSettings:
        return cls(
            namespace=config.namespace,
            extensions=tuple(config.extensions),
            include=tuple(config.include),
            exclude=tuple(config.exclude),
            entry_points=tuple(config.entry_points),
            nested_gitignore=config.nested_gitignore,
        )


@dataclass
class DependencyScanner:
    """Scans registered modules and produces a frozen module graph.

    Args:
        root: Project root; violation file paths are relative to it
        registry: Module name -> layer, in scan order
        module_roots: Optional module name -> root directory overrides
            (default: ``<root>/packages/<name>``)
        settings: Namespace and discovery settings
        engine: Rule engine used to validate each edge
        extractor: Callable returning a file's import specifiers (default:
            the suffix-dispatching extractor bound to the namespace)
    """

    root: Path
    registry: Mapping[str, int]
    module_roots: Mapping[str, Path] = field(default_factory=dict)
    settings: ScanSettings = field(default_factory=ScanSettings)
    engine: RuleEngine = field(default_factory=RuleEngine)
    extractor: SpecifierExtractor | None = None

    @classmethod
    def from_config(
        cls,
        root: Path,
        config: ComplianceConfig,
        *,
        engine: RuleEngine | None = None,
    ) -> DependencyScanner:
        return cls(
            root=root,
            registry=config.registry(),
            module_roots={
                name: config.module_root(root, name) for name in config.modules
            },
            settings=ScanSettings.from_config(config),
            engine=engine or RuleEngine(),
        )

    def _extract(self, file_path: Path) -> list[ImportSpecifier]:
        if self.extractor is not None:
            return self.extractor(file_path)
        return extract_specifiers(file_path, self.settings.namespace)

    def _module_root(self, name: str) -> Path:
        return self.module_roots.get(name, self.root / "packages" / name)

    def scan_all(self) -> ModuleGraph:
        """Scan every registered module, then detect cycles and freeze.

        Raises:
            ScanError: The project root or a module root cannot be enumerated.
        """
        if not self.root.is_dir():
            msg = f"Project root is not a readable directory: {self.root}"
            raise ScanError(msg)

        logger.info("Starting dependency scan of %d modules", len(self.registry))

        roots = {name: self._module_root(name) for name in self.registry}
        graph = ModuleGraphBuilder(
            self.registry,
            {name: relative_posix(path, self.root) for name, path in roots.items()},
        )

        for name, layer in self.registry.items():
            module_root = roots[name]
            if not module_root.is_dir():
                relative_root = relative_posix(module_root, self.root)
                logger.warning("Module root not found for %s: %s", name, relative_root)
                graph.add_diagnostic(
                    ScanDiagnostic(
                        module=name,
                        kind="missing-root",
                        level="warning",
                        message=f"Module root not found: {relative_root}",
                    )
                )
                continue
            logger.info("Scanning module %s (layer %d)", name, layer)
            self._scan_module(graph, name, module_root)

        # Every dependency set is complete from here on.
        self._detect_circular_dependencies(graph)
        self._check_structure(graph, roots)

        return graph.freeze()

    def _scan_module(
        self, graph: ModuleGraphBuilder, name: str, module_root: Path
    ) -> None:
        record = graph.module(name)
        try:
            files = list(
                find_source_files(
                    module_root,
                    extensions=self.settings.extensions,
                    include_patterns=list(self.settings.include),
                    exclude_patterns=list(self.settings.exclude),
                    nested_gitignore=self.settings.nested_gitignore,
                )
            )
        except OSError as exc:
            msg = f"Cannot enumerate module root {module_root}: {exc}"
            raise ScanError(msg) from exc

        for file_path in files:
            relative_path = relative_posix(file_path, self.root)
            record.add_file(relative_path)
            try:
                specifiers = self._extract(file_path)
            except ParseError as exc:
                logger.warning("Parse error in %s: %s", relative_path, exc.reason)
                graph.add_diagnostic(
                    ScanDiagnostic(
                        module=name,
                        kind="parse-error",
                        level="warning",
                        message=exc.reason,
                        file=relative_path,
                    )
                )
                specifiers = list(exc.recovered)

            for specifier in specifiers:
                self._analyze_specifier(record, relative_path, specifier)

        logger.debug(
            "Module %s: %d files, %d imports, %d dependencies",
            name,
            len(record.files),
            record.import_count,
            len(record.dependencies),
        )

    def _analyze_specifier(
        self,
        record: ModuleRecordBuilder,
        relative_path: str,
        specifier: ImportSpecifier,
    ) -> None:
        record.count_import()
        classified = classify_specifier(
            specifier.text, self.settings.namespace, self.registry
        )

        if classified.kind == "external" and classified.target:
            record.add_external(classified.target)
            return

        if classified.kind != "scoped" or classified.target is None:
            return

        target = classified.target
        if target == record.name:
            return

        record.add_dependency(target)
        self._validate_edge(record, relative_path, specifier, target)

    def _validate_edge(
        self,
        record: ModuleRecordBuilder,
        relative_path: str,
        specifier: ImportSpecifier,
        target: str,
    ) -> None:
        target_layer = self.registry[target]
        evaluation = self.engine.validate_dependency(
            record.name, target, record.layer, target_layer
        )
        for rule in evaluation.failed:
            if rule.violation_kind is None:
                continue
            record.add_violation(
                Violation(
                    module=record.name,
                    file=relative_path,
                    line=specifier.line,
                    column=specifier.column,
                    import_path=specifier.text,
                    target_module=target,
                    kind=rule.violation_kind,
                    severity=rule.severity,
                    message=failure_message(
                        rule, record.name, target, record.layer, target_layer
                    ),
                )
            )

    def _detect_circular_dependencies(self, graph: ModuleGraphBuilder) -> None:
        dependencies = build_dependency_graph(graph.dependency_map())
        cycles = find_cycles(dependencies, roots=self.registry)
        for cycle in cycles:
            message = f"Circular dependency detected: {format_cycle(cycle)}"
            logger.warning(message)
            for index, current in enumerate(cycle):
                next_module = cycle[(index + 1) % len(cycle)]
                graph.module(current).add_violation(
                    Violation(
                        module=current,
                        file=STRUCTURAL_FILE,
                        line=0,
                        column=0,
                        import_path=f"{self.settings.namespace}/{next_module}",
                        target_module=next_module,
                        kind="circular",
                        severity=CIRCULAR_RULE.severity,
                        message=message,
                    )
                )

    def _check_structure(
        self, graph: ModuleGraphBuilder, roots: Mapping[str, Path]
    ) -> None:
        """Record the informational barrel-export and external-package notes."""
        entry_points = self.settings.entry_points
        for record in graph:
            module_root = roots[record.name]
            if not module_root.is_dir():
                continue

            has_entry_point = any(
                (module_root / entry).is_file() for entry in entry_points
            )
            if entry_points and not has_entry_point:
                graph.add_diagnostic(
                    ScanDiagnostic(
                        module=record.name,
                        kind="missing-entry-point",
                        level="info",
                        message="No public entry point found (looked for "
                        f"{', '.join(entry_points)})",
                        rule_id="R9",
                    )
                )

            if record.layer == ModuleLayer.CORE and record.external_dependencies:
                packages = sorted(record.external_dependencies)
                graph.add_diagnostic(
                    ScanDiagnostic(
                        module=record.name,
                        kind="external-dependencies",
                        level="info",
                        message=f"{len(packages)} external package(s) in a core-layer "
                        f"module: {', '.join(packages)}",
                        rule_id="R10",
                    )
                )


def scan_project(root: Path, config: ComplianceConfig) -> ModuleGraph:
    """Scan ``root`` with the registry and settings from ``config``."""
    return DependencyScanner.from_config(root, config).scan_all()


__all__ = ["DependencyScanner", "ScanError", "ScanSettings", "scan_project"]
