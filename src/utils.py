"""Shared path helpers."""

from __future__ import annotations

from pathlib import Path


def relative_posix(path: str | Path, root: Path) -> str:
    """Render ``path`` relative to ``root`` with forward slashes.

    Args:
        path: File or directory path (absolute, or relative to the cwd)
        root: Project root

    Returns:
        POSIX-style relative path, or the path unchanged (as POSIX) when it
        does not live under ``root``.

    Examples:
        >>> relative_posix(Path("/repo/packages/core/index.ts"), Path("/repo"))
        'packages/core/index.ts'
        >>> relative_posix(Path("/elsewhere/x.ts"), Path("/repo"))
        '/elsewhere/x.ts'
    """
    candidate = Path(path)
    try:
        return candidate.relative_to(root).as_posix()
    except ValueError:
        return candidate.as_posix()
