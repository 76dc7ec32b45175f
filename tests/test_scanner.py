from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from parse.specifiers import ImportSpecifier, ParseError
from rules.engine import RuleEngine
from scan.builder import ModuleGraphBuilder
from scan.scanner import DependencyScanner, ScanError, ScanSettings

if TYPE_CHECKING:
    from contract.models import ModuleGraph


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _module(root: Path, name: str, *imports: str) -> None:
    lines = [f'import {{ x{i} }} from "{spec}";' for i, spec in enumerate(imports)]
    lines.append("export const ready = true;")
    _write(root / "packages" / name / "src" / "index.ts", "\n".join(lines) + "\n")


def _scan(root: Path, registry: dict[str, int]) -> ModuleGraph:
    return DependencyScanner(root=root, registry=registry).scan_all()


def test_downward_import_is_compliant(tmp_path: Path) -> None:
    _module(tmp_path, "core")
    _module(tmp_path, "auth", "@cvplus/core")

    graph = _scan(tmp_path, {"core": 0, "auth": 1})
    score = RuleEngine().calculate_compliance_score(graph)

    assert graph.violations() == []
    assert graph.get("auth").dependencies == ("core",)
    assert score.by_module == {"core": 100.0, "auth": 100.0}
    assert score.overall == 100.0


def test_core_importing_auth_fails_isolation_and_hierarchy(tmp_path: Path) -> None:
    _module(tmp_path, "core", "@cvplus/auth")
    _module(tmp_path, "auth")

    graph = _scan(tmp_path, {"core": 0, "auth": 1})
    score = RuleEngine().calculate_compliance_score(graph)

    core = graph.get("core")
    assert [(v.kind, v.severity) for v in core.violations] == [
        ("forbidden", "critical"),
        ("layer", "critical"),
    ]
    for violation in core.violations:
        assert violation.file == "packages/core/src/index.ts"
        assert (violation.line, violation.column) == (1, 20)
        assert violation.import_path == "@cvplus/auth"
        assert violation.target_module == "auth"
    assert score.by_module["core"] < 100.0
    assert score.by_module["auth"] == 100.0
    assert score.overall < 100.0
    assert graph.has_critical


def test_three_module_cycle_marks_every_member(tmp_path: Path) -> None:
    _module(tmp_path, "a", "@cvplus/b")
    _module(tmp_path, "b", "@cvplus/c")
    _module(tmp_path, "c", "@cvplus/a")

    graph = _scan(tmp_path, {"a": 2, "b": 2, "c": 2})

    expected_targets = {"a": "b", "b": "c", "c": "a"}
    for name, target in expected_targets.items():
        circular = [v for v in graph.get(name).violations if v.kind == "circular"]
        assert len(circular) == 1
        violation = circular[0]
        assert violation.severity == "critical"
        assert violation.target_module == target
        assert violation.file == "N/A"
        assert (violation.line, violation.column) == (0, 0)
        assert violation.import_path == f"@cvplus/{target}"
        assert "a → b → c → a" in violation.message


def test_self_reference_counts_as_import_but_not_edge(tmp_path: Path) -> None:
    _module(tmp_path, "auth", "@cvplus/auth/session")

    graph = _scan(tmp_path, {"auth": 1})

    auth = graph.get("auth")
    assert auth.import_count == 1
    assert auth.dependencies == ()
    assert auth.violations == ()


def test_relative_and_external_specifiers(tmp_path: Path) -> None:
    _module(
        tmp_path,
        "core",
        "./types",
        "../shared",
        "zod",
        "lodash/fp",
        "@cvplus/unregistered",
    )

    graph = _scan(tmp_path, {"core": 0})

    core = graph.get("core")
    assert core.import_count == 5
    assert core.dependencies == ()
    assert core.external_dependencies == ("@cvplus", "lodash", "zod")
    assert core.violations == ()
    assert [(d.kind, d.rule_id) for d in graph.diagnostics] == [
        ("external-dependencies", "R10")
    ]


def test_missing_module_root_is_a_warning(tmp_path: Path) -> None:
    _module(tmp_path, "core")

    graph = _scan(tmp_path, {"core": 0, "ghost": 1})

    ghost = graph.get("ghost")
    assert ghost.file_count == 0
    assert ghost.root == "packages/ghost"
    assert [(d.module, d.kind, d.level) for d in graph.diagnostics] == [
        ("ghost", "missing-root", "warning")
    ]


def test_missing_project_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ScanError):
        _scan(tmp_path / "missing", {"core": 0})


def test_unparsable_file_is_skipped_and_reported(tmp_path: Path) -> None:
    _write(tmp_path / "packages" / "auth" / "__init__.py", "")
    _write(tmp_path / "packages" / "auth" / "bad.py", "def (:\n")
    _write(tmp_path / "packages" / "auth" / "good.py", "import cvplus_core\n")

    graph = _scan(tmp_path, {"auth": 1})

    auth = graph.get("auth")
    assert auth.files == (
        "packages/auth/__init__.py",
        "packages/auth/bad.py",
        "packages/auth/good.py",
    )
    assert auth.import_count == 1
    assert auth.external_dependencies == ("cvplus_core",)
    assert [(d.kind, d.file) for d in graph.diagnostics] == [
        ("parse-error", "packages/auth/bad.py")
    ]


def test_python_namespace_import_names_registered_module(tmp_path: Path) -> None:
    _write(tmp_path / "packages" / "core" / "__init__.py", "from cvplus import auth\n")
    _write(tmp_path / "packages" / "auth" / "__init__.py", "")

    scanner = DependencyScanner(
        root=tmp_path,
        registry={"core": 0, "auth": 1},
        settings=ScanSettings(namespace="cvplus"),
    )
    graph = scanner.scan_all()

    core = graph.get("core")
    assert core.dependencies == ("auth",)
    assert core.external_dependencies == ()
    assert [(v.kind, v.severity, v.line, v.column) for v in core.violations] == [
        ("forbidden", "critical", 1, 20),
        ("layer", "critical", 1, 20),
    ]


def test_syntax_error_keeps_edges_from_valid_statements(tmp_path: Path) -> None:
    _write(
        tmp_path / "packages" / "core" / "src" / "index.ts",
        'import { a } from "@cvplus/auth";\nexport const broken = ;\n',
    )
    _module(tmp_path, "auth")

    graph = _scan(tmp_path, {"core": 0, "auth": 1})

    core = graph.get("core")
    assert core.dependencies == ("auth",)
    assert [(v.kind, v.severity) for v in core.violations] == [
        ("forbidden", "critical"),
        ("layer", "critical"),
    ]
    assert [(d.kind, d.file) for d in graph.diagnostics] == [
        ("parse-error", "packages/core/src/index.ts")
    ]


def test_injected_extractor_failures_do_not_abort_module(tmp_path: Path) -> None:
    _write(tmp_path / "packages" / "a" / "index.ts", "")
    _write(tmp_path / "packages" / "a" / "broken.ts", "")
    _write(tmp_path / "packages" / "b" / "index.ts", "")

    def extractor(path: Path) -> list[ImportSpecifier]:
        if path.name == "broken.ts":
            raise ParseError(path, "boom")
        if path.parent.name == "a":
            return [ImportSpecifier(text="@cvplus/b", line=3, column=5)]
        return []

    scanner = DependencyScanner(
        root=tmp_path, registry={"a": 1, "b": 1}, extractor=extractor
    )
    graph = scanner.scan_all()

    a = graph.get("a")
    assert a.dependencies == ("b",)
    assert [(v.kind, v.line, v.column) for v in a.violations] == [
        ("peer", 3, 5),
        ("layer", 3, 5),
    ]
    assert [d.message for d in graph.diagnostics] == ["boom"]


def test_test_files_and_declarations_are_excluded(tmp_path: Path) -> None:
    _module(tmp_path, "core")
    _write(tmp_path / "packages" / "core" / "src" / "index.test.ts", "")
    _write(tmp_path / "packages" / "core" / "src" / "types.d.ts", "")
    _write(tmp_path / "packages" / "core" / "node_modules" / "x" / "i.js", "")

    graph = _scan(tmp_path, {"core": 0})

    assert graph.get("core").files == ("packages/core/src/index.ts",)


def test_gitignored_files_are_skipped(tmp_path: Path) -> None:
    _module(tmp_path, "core")
    _write(tmp_path / "packages" / "core" / ".gitignore", "generated/\n")
    _write(tmp_path / "packages" / "core" / "generated" / "api.ts", "")

    graph = _scan(tmp_path, {"core": 0})

    assert graph.get("core").files == ("packages/core/src/index.ts",)


def test_missing_entry_point_is_informational(tmp_path: Path) -> None:
    _write(tmp_path / "packages" / "utils" / "lib" / "helpers.ts", "")

    graph = _scan(tmp_path, {"utils": 1})

    assert [(d.kind, d.level, d.rule_id) for d in graph.diagnostics] == [
        ("missing-entry-point", "info", "R9")
    ]
    assert graph.violations() == []


def test_rescanning_is_deterministic(tmp_path: Path) -> None:
    _module(tmp_path, "core", "@cvplus/auth", "zod")
    _module(tmp_path, "auth", "@cvplus/core", "@cvplus/billing")
    _module(tmp_path, "billing", "@cvplus/auth")
    registry = {"core": 0, "auth": 1, "billing": 1}
    engine = RuleEngine()

    first = _scan(tmp_path, registry)
    second = _scan(tmp_path, registry)

    assert first == second
    assert engine.calculate_compliance_score(first) == (
        engine.calculate_compliance_score(second)
    )


def test_builder_rejects_writes_after_freeze() -> None:
    builder = ModuleGraphBuilder({"core": 0}, {"core": "packages/core"})
    builder.module("core").count_import()

    graph = builder.freeze()

    assert graph.get("core").import_count == 1
    with pytest.raises(RuntimeError):
        builder.module("core")
