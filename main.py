"""CLI entry point for the Jobsuche tools.

Each subcommand calls one tool and prints its JSON result on stdout. Logs go
to stderr.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from jobsuche_mcp.core.config import Settings, load_settings
from jobsuche_mcp.core.context import ServerContext
from jobsuche_mcp.core.errors import ConfigError, UpstreamError
from jobsuche_mcp.platforms.arbeitsagentur.client import ArbeitsagenturClient
from jobsuche_mcp.server import JobsucheServer, describe_tools

# CLI subcommand → tool name
COMMAND_TOOLS: dict[str, str] = {
    "search": "search_jobs",
    "details": "get_job_details",
    "search-details": "search_jobs_with_details",
    "batch": "batch_search_jobs",
    "status": "get_server_status",
}

_CONFIG_HINT = """
Please check:
  - JOBSUCHE_API_URL environment variable (optional, uses default if not set)
  - JOBSUCHE_API_KEY environment variable (optional, uses default if not set)
  - JOBSUCHE_DEFAULT_PAGE_SIZE / JOBSUCHE_MAX_PAGE_SIZE (1 <= default <= max <= 100)
"""


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML file (default: JOBSUCHE_* environment variables)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def _add_search_filters(parser: argparse.ArgumentParser, *, paging: bool = True) -> None:
    parser.add_argument("--job-title", help='Job title or keywords, e.g. "Software Engineer"')
    parser.add_argument("--employer", help="Employer name, combined into the query")
    parser.add_argument("--branch", help="Branch/industry, combined into the query")
    parser.add_argument("--location", help='Location name, e.g. "Berlin"')
    parser.add_argument("--radius-km", type=int, help="Search radius around the location")
    parser.add_argument(
        "--employment-type",
        action="append",
        help="fulltime, parttime, mini_job, home_office, shift (repeatable)",
    )
    parser.add_argument(
        "--contract-type",
        action="append",
        help="permanent or temporary (repeatable)",
    )
    parser.add_argument(
        "--published-since-days", type=int, help="Only postings from the last N days",
    )
    if paging:
        parser.add_argument("--page-size", type=int, help="Results per page (capped by config)")
        parser.add_argument("--page", type=int, help="Page number, starting from 1")


def _add_field_filter(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--include-field", action="append", help="Only return this detail field (repeatable)",
    )
    parser.add_argument(
        "--exclude-field", action="append", help="Omit this detail field (repeatable)",
    )
    parser.add_argument(
        "--detail-concurrency",
        type=int,
        default=1,
        help="Parallel detail lookups per call (default: 1, sequential)",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Jobsuche tools - search German job listings of the Federal Employment Agency",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- search ---
    search_parser = subparsers.add_parser("search", help="Search for jobs")
    _add_search_filters(search_parser)
    _add_common(search_parser)

    # --- details ---
    details_parser = subparsers.add_parser("details", help="Get details of one job posting")
    details_parser.add_argument("reference_number", help="Reference number from search results")
    _add_common(details_parser)

    # --- search-details ---
    sd_parser = subparsers.add_parser(
        "search-details",
        help="Search and fetch details for the top results",
    )
    _add_search_filters(sd_parser)
    sd_parser.add_argument(
        "--max-details", type=int, help="Details to fetch (default: 5, max: 20)",
    )
    _add_field_filter(sd_parser)
    _add_common(sd_parser)

    # --- batch ---
    batch_parser = subparsers.add_parser(
        "batch",
        help="Run several named searches from a YAML file",
    )
    batch_parser.add_argument(
        "--file",
        required=True,
        help="YAML file with a 'searches' list (max 10 entries are run)",
    )
    batch_parser.add_argument(
        "--max-details-per-search",
        type=int,
        help="Details per search (default: 3, max: 10); overrides the file",
    )
    _add_field_filter(batch_parser)
    _add_common(batch_parser)

    # --- status ---
    status_parser = subparsers.add_parser("status", help="Show server and API status")
    _add_common(status_parser)

    # --- tools ---
    tools_parser = subparsers.add_parser("tools", help="List tools and their input schemas")
    tools_parser.add_argument("--verbose", "-v", action="store_true", help=argparse.SUPPRESS)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def load_batch_file(path: str | Path) -> dict[str, Any]:
    """Read batch parameters from YAML.

    Accepts either a mapping with a ``searches`` key (plus optional
    ``max_details_per_search`` and ``fields``) or a bare list of searches.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Batch file not found: {path}"
        raise FileNotFoundError(msg)
    raw = yaml.safe_load(path.read_text()) or {}
    if isinstance(raw, list):
        return {"searches": raw}
    if not isinstance(raw, dict):
        msg = f"Batch file must contain a mapping or a list: {path}"
        raise ValueError(msg)
    return raw


def build_arguments(args: argparse.Namespace) -> dict[str, Any]:
    """Turn parsed CLI flags into the tool's JSON arguments (unset flags omitted)."""
    arguments: dict[str, Any] = {}

    if args.command == "details":
        return {"reference_number": args.reference_number}

    if args.command == "batch":
        arguments = load_batch_file(args.file)
        if args.max_details_per_search is not None:
            arguments["max_details_per_search"] = args.max_details_per_search
        fields = _field_filter(args)
        if fields is not None:
            arguments["fields"] = fields
        return arguments

    if args.command in ("search", "search-details"):
        for key in (
            "job_title", "employer", "branch", "location", "radius_km",
            "employment_type", "contract_type", "published_since_days",
            "page_size", "page",
        ):
            value = getattr(args, key)
            if value is not None:
                arguments[key] = value

    if args.command == "search-details":
        if args.max_details is not None:
            arguments["max_details"] = args.max_details
        fields = _field_filter(args)
        if fields is not None:
            arguments["fields"] = fields

    return arguments


def _field_filter(args: argparse.Namespace) -> dict[str, list[str]] | None:
    fields: dict[str, list[str]] = {}
    if args.include_field:
        fields["include_fields"] = args.include_field
    if args.exclude_field:
        fields["exclude_fields"] = args.exclude_field
    return fields or None


async def run_tool(
    settings: Settings,
    tool: str,
    arguments: dict[str, Any],
    *,
    detail_concurrency: int = 1,
) -> dict[str, Any]:
    """Open an API client, call one tool, return its JSON-shaped result."""
    api = settings.api
    async with ArbeitsagenturClient(api) as client:
        ctx = ServerContext(client=client, api=api, detail_concurrency=detail_concurrency)
        server = JobsucheServer(ctx)
        return await server.call_tool(tool, arguments)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "tools":
        print(json.dumps(describe_tools(), indent=2, ensure_ascii=False))
        return

    try:
        settings = load_settings(args.config)
    except (ConfigError, FileNotFoundError, ValueError) as e:
        print(f"Failed to start Jobsuche tools: {e}", file=sys.stderr)
        print(_CONFIG_HINT, file=sys.stderr)
        sys.exit(1)

    try:
        arguments = build_arguments(args)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        result = asyncio.run(run_tool(
            settings,
            COMMAND_TOOLS[args.command],
            arguments,
            detail_concurrency=getattr(args, "detail_concurrency", 1),
        ))
    except (UpstreamError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
