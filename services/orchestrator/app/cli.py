"""Command-line entry point for the specialist orchestrator."""
from __future__ import annotations

import argparse
import json
import sys

from .config import get_settings
from .domain.errors import InvalidInputError, RegistryError
from .domain.orchestrator_service import Orchestrator
from .domain.registry import load_registry
from .domain.report import build_report, format_report
from .observability.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="specialist-orchestrator",
        description="Recommend Apps Script specialists and an execution plan for a project description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  specialist-orchestrator "Sync Business Central orders to Google Sheets with OAuth2"
  specialist-orchestrator --json "Automate weekly sales report from Sheets"
  specialist-orchestrator --registry registry.json "Claude powered email triage"
        """,
    )
    parser.add_argument("description", nargs="?", help="Project description (read from stdin when omitted)")
    parser.add_argument("--json", action="store_true", help="Print the JSON report instead of text")
    parser.add_argument("--registry", default=None, help="JSON registry override document")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    description = args.description if args.description is not None else sys.stdin.read()
    try:
        registry = load_registry(args.registry) if args.registry else None
        orchestrator = Orchestrator(registry, settings)
        result = orchestrator.orchestrate(description)
    except InvalidInputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except RegistryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(build_report(result, orchestrator.registry), indent=2))
    else:
        print(format_report(result, orchestrator.registry), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
