"""Source file discovery for module roots."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterator
    from pathlib import Path

    GitignoreMatcher = Callable[[str], bool]

# Directories never descended into, whatever the patterns say.
PRUNED_DIRECTORIES = frozenset({".git", "node_modules"})


@dataclass(frozen=True)
class SourceFilter:
    """Suffix and glob filters applied to paths relative to a module root.

    Patterns use fnmatch semantics, where ``*`` also matches ``/``.
    An empty ``include`` keeps every file with a matching suffix.
    """

    extensions: frozenset[str]
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    def accepts(self, relative_path: str, suffix: str) -> bool:
        if suffix not in self.extensions:
            return False
        if self.include and not any(fnmatch(relative_path, p) for p in self.include):
            return False
        return not any(fnmatch(relative_path, p) for p in self.exclude)


def _gitignore_files(root: Path, *, nested: bool) -> list[Path]:
    """Return the .gitignore files that apply, root first then by depth."""
    candidates = [root / ".gitignore"]
    if nested:
        candidates.extend(root.rglob(".gitignore"))
    unique = {path for path in candidates if path.is_file() and not path.is_symlink()}
    return sorted(unique, key=lambda p: p.relative_to(root).as_posix())


def _build_gitignore_matcher(
    root: Path,
    *,
    nested_gitignore: bool,
) -> GitignoreMatcher | None:
    matchers = [
        cast("GitignoreMatcher", parse_gitignore(path))
        for path in _gitignore_files(root, nested=nested_gitignore)
    ]
    if not matchers:
        return None
    if len(matchers) == 1:
        return matchers[0]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                # Path outside this .gitignore's base directory.
                continue
        return False

    return matches


def _walk(directory: Path, ignored: GitignoreMatcher | None) -> Iterator[Path]:
    for entry in directory.iterdir():
        if entry.is_symlink():
            continue
        if ignored is not None and ignored(str(entry)):
            continue
        if entry.is_dir():
            if entry.name not in PRUNED_DIRECTORIES:
                yield from _walk(entry, ignored)
        elif entry.is_file():
            yield entry


def find_source_files(
    directory: Path,
    *,
    extensions: Collection[str],
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find source files under a module root, respecting .gitignore.

    Symlinks are never followed, so discovery cannot escape the root.

    Args:
        directory: Module root to search
        extensions: File suffixes to keep (e.g. ".ts", ".py")
        include_patterns: Optional list of fnmatch patterns; if provided,
            files must match at least one pattern to be included
        exclude_patterns: Optional list of fnmatch patterns; files matching
            any pattern are excluded (test and generated files)
        nested_gitignore: Compose every .gitignore below the root

    Yields:
        Path objects for each source file found, sorted lexicographically
        by relative path for deterministic ordering.

    Raises:
        OSError: The directory cannot be enumerated.
    """
    source_filter = SourceFilter(
        extensions=frozenset(extensions),
        include=tuple(include_patterns or ()),
        exclude=tuple(exclude_patterns or ()),
    )
    ignored = _build_gitignore_matcher(directory, nested_gitignore=nested_gitignore)

    matched = sorted(
        (path.relative_to(directory).as_posix(), path)
        for path in _walk(directory, ignored)
    )
    for relative_path, path in matched:
        if source_filter.accepts(relative_path, path.suffix):
            yield path


__all__ = ["PRUNED_DIRECTORIES", "SourceFilter", "find_source_files"]
