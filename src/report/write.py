"""Report dispatch and output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from report.console import render_console
from report.html import render_html
from report.json_report import render_json
from report.markdown import render_markdown

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from contract.models import ComplianceScore, ModuleGraph
    from report.options import ReportFormat, ReportOptions

    Renderer = Callable[[ModuleGraph, ComplianceScore, ReportOptions], str]

RENDERERS: dict[str, Renderer] = {
    "console": render_console,
    "json": render_json,
    "markdown": render_markdown,
    "html": render_html,
}


def render_report(
    graph: ModuleGraph,
    score: ComplianceScore,
    fmt: ReportFormat,
    options: ReportOptions,
) -> str:
    """Render ``graph`` and ``score`` in the requested encoding.

    Raises:
        ValueError: Unknown format.
    """
    try:
        renderer = RENDERERS[fmt]
    except KeyError:
        msg = f"Unknown report format: {fmt}"
        raise ValueError(msg) from None
    return renderer(graph, score, options)


def write_report(text: str, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text if text.endswith("\n") else f"{text}\n", encoding="utf-8")


__all__ = ["RENDERERS", "render_report", "write_report"]
