from __future__ import annotations

from pathlib import Path

import pytest

from parse import extract_specifiers
from parse.ast_imports import extract_imports_ast
from parse.specifiers import ImportSpecifier, ParseError
from parse.treesitter_imports import extract_imports_treesitter


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_typescript_imports_and_re_exports(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "index.ts",
        'import { User } from "@cvplus/core";\n'
        "import './polyfill';\n"
        'export * from "./types";\n'
        'export { login } from "@cvplus/auth";\n'
        "export const answer = 42;\n",
    )

    assert extract_imports_treesitter(source) == [
        ImportSpecifier(text="@cvplus/core", line=1, column=22),
        ImportSpecifier(text="./polyfill", line=2, column=8),
        ImportSpecifier(text="./types", line=3, column=15),
        ImportSpecifier(text="@cvplus/auth", line=4, column=23),
    ]


def test_dynamic_imports_and_requires_are_not_collected(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "lazy.js",
        'const a = require("left-pad");\n'
        'const b = import("@cvplus/core");\n',
    )

    assert extract_imports_treesitter(source) == []


def test_tsx_sources_parse_with_jsx(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "Button.tsx",
        'import React from "react";\n'
        "export const Button = () => <button>ok</button>;\n",
    )

    assert [s.text for s in extract_imports_treesitter(source)] == ["react"]


def test_typescript_syntax_error_raises_parse_error(tmp_path: Path) -> None:
    source = _write(tmp_path / "broken.ts", "import { from ;\nexport const = ;\n")

    with pytest.raises(ParseError, match="syntax error"):
        extract_imports_treesitter(source)


def test_typescript_errors_keep_well_formed_imports(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "partial.ts",
        'import { a } from "@cvplus/auth";\nexport const broken = ;\n',
    )

    with pytest.raises(ParseError, match="syntax error") as excinfo:
        extract_imports_treesitter(source)

    assert excinfo.value.recovered == (
        ImportSpecifier(text="@cvplus/auth", line=1, column=19),
    )


def test_typescript_columns_count_characters_not_bytes(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "accented.ts", '/* é */ import x from "@cvplus/auth";\n'
    )

    assert extract_imports_treesitter(source) == [
        ImportSpecifier(text="@cvplus/auth", line=1, column=23)
    ]


def test_python_imports_become_slash_specifiers(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "mod.py",
        "import os.path\n"
        "from pkg.sub import thing\n"
        "from . import sibling\n"
        "from ..up import other\n",
    )

    assert extract_imports_ast(source) == [
        ImportSpecifier(text="os/path", line=1, column=8),
        ImportSpecifier(text="pkg/sub", line=2, column=6),
        ImportSpecifier(text=".", line=3, column=6),
        ImportSpecifier(text="../up", line=4, column=6),
    ]


def test_python_from_import_column_points_at_module(tmp_path: Path) -> None:
    source = _write(
        tmp_path / "mod.py",
        "from cvplus.auth import x\n"
        "from \\\n    cvplus.core import y\n"
        "é = 1; from cvplus.billing import z\n",
    )

    assert extract_imports_ast(source) == [
        ImportSpecifier(text="cvplus/auth", line=1, column=6),
        ImportSpecifier(text="cvplus/core", line=3, column=5),
        ImportSpecifier(text="cvplus/billing", line=4, column=13),
    ]


def test_python_namespace_import_yields_one_specifier_per_name(
    tmp_path: Path,
) -> None:
    source = _write(
        tmp_path / "mod.py",
        "from cvplus import auth, billing\nfrom cvplus import *\nfrom other import x\n",
    )

    assert extract_imports_ast(source, namespace="cvplus") == [
        ImportSpecifier(text="cvplus/auth", line=1, column=20),
        ImportSpecifier(text="cvplus/billing", line=1, column=26),
        ImportSpecifier(text="other", line=3, column=6),
    ]
    assert [s.text for s in extract_imports_ast(source)] == [
        "cvplus",
        "cvplus",
        "other",
    ]


def test_python_syntax_error_raises_parse_error(tmp_path: Path) -> None:
    source = _write(tmp_path / "bad.py", "def (:\n")

    with pytest.raises(ParseError, match="syntax error"):
        extract_imports_ast(source)


def test_python_undecodable_file_raises_parse_error(tmp_path: Path) -> None:
    source = tmp_path / "latin.py"
    source.write_bytes(b"x = '\xff\xfe'\n")

    with pytest.raises(ParseError, match="UTF-8"):
        extract_imports_ast(source)


def test_extract_specifiers_dispatches_by_suffix(tmp_path: Path) -> None:
    py_file = _write(tmp_path / "a.py", "import json\n")
    ts_file = _write(tmp_path / "a.ts", 'import json from "json5";\n')

    assert [s.text for s in extract_specifiers(py_file)] == ["json"]
    assert [s.text for s in extract_specifiers(ts_file)] == ["json5"]
