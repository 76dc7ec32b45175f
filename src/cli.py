"""Command-line interface for layergate."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.table import Table

from logging_config import setup_logging
from report.console import print_console_report
from report.options import REPORT_FORMATS, ReportOptions
from report.write import render_report, write_report
from rules.catalog import RULE_CATALOG
from rules.config import ConfigError, load_config
from rules.engine import RuleEngine
from scan.scanner import DependencyScanner, ScanError
from verify.verify import verify_determinism

logger = logging.getLogger(__name__)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration file (default: <root>/layergate.toml)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="layergate")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan", help="Scan modules and report dependency compliance"
    )
    _add_common_paths(scan_parser)
    scan_parser.add_argument(
        "--format",
        choices=REPORT_FORMATS,
        default="console",
        help="Report format (default: console)",
    )
    scan_parser.add_argument(
        "--output",
        default=None,
        help="Write the report to this file instead of stdout",
    )
    scan_parser.add_argument(
        "--graph",
        action="store_true",
        help="Include a dependency graph (markdown)",
    )
    scan_parser.add_argument(
        "--suggestions",
        action="store_true",
        help="Include remediation suggestions",
    )
    scan_parser.add_argument(
        "--verbose", action="store_true", help="Show violation details and debug logs"
    )
    scan_parser.add_argument(
        "--quiet", action="store_true", help="Only log errors"
    )

    subparsers.add_parser("rules", help="List the architecture rule catalog")

    verify_parser = subparsers.add_parser(
        "verify", help="Verify that a saved JSON report is reproducible"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--report",
        required=True,
        help="JSON report written by 'scan --format json'",
    )

    return parser


def _config_path(value: str | None) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser().resolve()


def _handle_scan(root: Path, args: argparse.Namespace) -> int:
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    try:
        config = load_config(root, _config_path(args.config))
        engine = RuleEngine()
        graph = DependencyScanner.from_config(root, config, engine=engine).scan_all()
    except (ConfigError, ScanError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    score = engine.calculate_compliance_score(graph)
    options = ReportOptions(
        include_graph=args.graph,
        include_suggestions=args.suggestions,
        verbose=args.verbose,
        timestamp=datetime.now(timezone.utc),
        project_root=str(root),
    )

    if args.output is not None:
        output = Path(args.output).expanduser().resolve()
        write_report(render_report(graph, score, args.format, options), output)
        logger.info("Report written to %s", output)
    elif args.format == "console":
        print_console_report(graph, score, options)
    else:
        sys.stdout.write(render_report(graph, score, args.format, options))
        sys.stdout.write("\n")

    return 1 if graph.has_critical else 0


def _handle_rules() -> int:
    table = Table(title="Architecture Rules")
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Severity")
    table.add_column("Weight", justify="right")
    table.add_column("Description")
    for rule in RULE_CATALOG:
        table.add_row(
            rule.id, rule.name, rule.severity, str(rule.weight), rule.description
        )
    Console().print(table)
    return 0


def _handle_verify(root: Path, args: argparse.Namespace) -> int:
    setup_logging()
    report_path = Path(args.report).expanduser().resolve()
    try:
        config = load_config(root, _config_path(args.config))
        result = verify_determinism(root=root, config=config, report_path=report_path)
    except (FileNotFoundError, ValueError) as exc:
        sys.stderr.write(f"report: {report_path}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    except (ConfigError, ScanError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "rules":
        return _handle_rules()

    root = Path(args.root).expanduser().resolve()

    if args.command == "scan":
        return _handle_scan(root, args)

    if args.command == "verify":
        return _handle_verify(root, args)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
