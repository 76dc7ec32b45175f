"""Import specifier records and their classification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Container
    from pathlib import Path

SpecifierKind = Literal["scoped", "relative", "external"]


@dataclass(frozen=True)
class ImportSpecifier:
    """A string specifier from an import or export statement.

    ``line`` and ``column`` are 1-based and point at the specifier token.
    """

    text: str
    line: int
    column: int


@dataclass(frozen=True)
class ClassifiedSpecifier:
    kind: SpecifierKind
    target: str | None


class ParseError(Exception):
    """Raised when a source file cannot be read or parsed.

    ``recovered`` holds the specifiers that could still be read from
    well-formed statements of a file whose syntax tree has errors.
    """

    def __init__(
        self,
        path: Path,
        reason: str,
        recovered: tuple[ImportSpecifier, ...] = (),
    ) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
        self.recovered = recovered


def is_relative(specifier: str) -> bool:
    return specifier.startswith((".", "/"))


def scoped_module_name(specifier: str, namespace: str) -> str | None:
    """Return the module segment of ``<namespace>/<module>[/...]`` or None.

    Examples:
        >>> scoped_module_name("@cvplus/auth/session", "@cvplus")
        'auth'
        >>> scoped_module_name("@cvplusx/auth", "@cvplus") is None
        True
    """
    prefix = f"{namespace}/"
    if not specifier.startswith(prefix):
        return None
    module = specifier[len(prefix) :].split("/", 1)[0]
    return module or None


def classify_specifier(
    specifier: str,
    namespace: str,
    registry: Container[str],
) -> ClassifiedSpecifier:
    """Classify a specifier as a registered-module edge, relative, or external.

    Scoped specifiers naming a module outside the registry fall through to
    external, keyed by their first path segment like any other package.
    """
    module = scoped_module_name(specifier, namespace)
    if module is not None and module in registry:
        return ClassifiedSpecifier(kind="scoped", target=module)

    if is_relative(specifier):
        return ClassifiedSpecifier(kind="relative", target=None)

    return ClassifiedSpecifier(kind="external", target=specifier.split("/", 1)[0])


__all__ = [
    "ClassifiedSpecifier",
    "ImportSpecifier",
    "ParseError",
    "SpecifierKind",
    "classify_specifier",
    "is_relative",
    "scoped_module_name",
]
