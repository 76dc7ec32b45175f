"""Report encodings and rendering options."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, get_args

ReportFormat = Literal["console", "json", "markdown", "html"]
REPORT_FORMATS: tuple[ReportFormat, ...] = get_args(ReportFormat)


@dataclass(frozen=True)
class ReportOptions:
    """Switches shared by every encoding.

    ``timestamp`` is injected so rendering stays a pure function of its
    inputs; when omitted the current UTC time is used.
    """

    include_graph: bool = False
    include_suggestions: bool = False
    verbose: bool = False
    timestamp: datetime | None = None
    project_root: str = "."

    def generated_at(self) -> str:
        moment = self.timestamp or datetime.now(timezone.utc)
        return moment.isoformat()


__all__ = ["REPORT_FORMATS", "ReportFormat", "ReportOptions"]
