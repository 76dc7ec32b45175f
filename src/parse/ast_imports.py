"""AST-based import extraction for Python sources.

Dotted module paths are rewritten with slashes (``pkg.sub`` -> ``pkg/sub``)
and relative imports keep their leading dots, so Python specifiers classify
the same way as script specifiers.
"""

from __future__ import annotations

import ast
import re
from typing import TYPE_CHECKING

from parse.specifiers import ImportSpecifier, ParseError

if TYPE_CHECKING:
    from pathlib import Path

# Module token after ``from``; may continue on the next line via backslash.
_FROM_MODULE = re.compile(r"from(?:\s|\\\n)+(\.*[\w.]*)")


def _to_specifier(module: str, level: int = 0) -> str:
    path = module.replace(".", "/")
    if level > 0:
        return "." * level + ("/" + path if path else "")
    return path


def _char_column(lines: list[str], lineno: int, byte_offset: int) -> int:
    """Convert an AST UTF-8 byte offset into a 1-based character column."""
    if not 0 < lineno <= len(lines):
        return byte_offset + 1
    encoded = lines[lineno - 1].encode("utf-8")
    return len(encoded[:byte_offset].decode("utf-8", errors="replace")) + 1


class _ImportCollector:
    """Turns Import/ImportFrom nodes into specifiers positioned at their token."""

    def __init__(self, source: str, namespace: str | None) -> None:
        self.source = source
        self.lines = source.split("\n")
        self.line_offsets = [0]
        for line in self.lines:
            self.line_offsets.append(self.line_offsets[-1] + len(line) + 1)
        self.namespace = namespace.replace("/", ".") if namespace else None
        self.specifiers: list[ImportSpecifier] = []

    def _alias_position(self, alias: ast.alias, node: ast.stmt) -> tuple[int, int]:
        lineno = getattr(alias, "lineno", node.lineno)
        col_offset = getattr(alias, "col_offset", node.col_offset)
        return lineno, _char_column(self.lines, lineno, col_offset)

    def _module_position(self, node: ast.ImportFrom) -> tuple[int, int]:
        lineno = node.lineno
        column = _char_column(self.lines, lineno, node.col_offset)
        if lineno > len(self.lines):
            return lineno, column
        start = self.line_offsets[lineno - 1] + column - 1
        match = _FROM_MODULE.match(self.source, start)
        if match is None:
            return lineno, column
        token_start = match.start(1)
        token_line = self.source.count("\n", 0, token_start) + 1
        return token_line, token_start - self.line_offsets[token_line - 1] + 1

    def add_import(self, node: ast.Import) -> None:
        for name in node.names:
            line, column = self._alias_position(name, node)
            self.specifiers.append(
                ImportSpecifier(text=_to_specifier(name.name), line=line, column=column)
            )

    def add_import_from(self, node: ast.ImportFrom) -> None:
        module = node.module or ""
        if node.level == 0 and self.namespace and module == self.namespace:
            # ``from <namespace> import auth`` names one module per alias.
            for name in node.names:
                if name.name == "*":
                    continue
                line, column = self._alias_position(name, node)
                self.specifiers.append(
                    ImportSpecifier(
                        text=_to_specifier(f"{module}.{name.name}"),
                        line=line,
                        column=column,
                    )
                )
            return

        line, column = self._module_position(node)
        self.specifiers.append(
            ImportSpecifier(
                text=_to_specifier(module, node.level), line=line, column=column
            )
        )


def extract_imports_ast(
    file_path: Path, namespace: str | None = None
) -> list[ImportSpecifier]:
    """Extract import specifiers from a Python file using AST.

    Args:
        file_path: Path to the Python file to analyze
        namespace: Optional package prefix of registered modules; a
            ``from <namespace> import a, b`` statement yields one specifier
            per imported name

    Returns:
        Specifiers in source order, positioned at the module token.

    Raises:
        ParseError: The file cannot be read, decoded or parsed.
    """
    try:
        with file_path.open(encoding="utf-8") as file:
            source = file.read()
        tree = ast.parse(source, str(file_path))
    except SyntaxError as exc:
        msg = f"syntax error at line {exc.lineno}: {exc.msg}"
        raise ParseError(file_path, msg) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(file_path, f"not valid UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise ParseError(file_path, f"cannot read file: {exc.strerror}") from exc

    collector = _ImportCollector(source, namespace)
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            collector.add_import(node)
        elif isinstance(node, ast.ImportFrom):
            collector.add_import_from(node)

    return sorted(collector.specifiers, key=lambda s: (s.line, s.column))


__all__ = ["extract_imports_ast"]
