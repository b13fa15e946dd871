"""Command line entry point for querying the memory worker."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, NoReturn

from mem_bridge.config import Settings
from mem_bridge.core.logging import configure_logging
from mem_bridge.core.models import SEARCH_TYPES


def _build_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.log_level:
        overrides["log_level"] = args.log_level
    return Settings(**overrides)


def _print_json(payload: Any) -> None:
    json.dump(payload, sys.stdout, indent=2, ensure_ascii=False, default=str)
    sys.stdout.write("\n")


async def _run_status(settings: Settings) -> int:
    from mem_bridge.client import WorkerClient

    async with WorkerClient(settings) as client:
        ready = await client.ensure_worker()
    print(f"Worker at {settings.base_url}: {'ready' if ready else 'unavailable'}")
    return 0 if ready else 1


async def _run_query(settings: Settings, command: str, params: dict[str, Any]) -> int:
    from mem_bridge.client import WorkerClient
    from mem_bridge.tools.query import QueryTools

    async with WorkerClient(settings) as client:
        tools = QueryTools(client)
        if command == "search":
            result = await tools.search(params)
        elif command == "timeline":
            result = await tools.timeline(params)
        else:
            result = await tools.get_observations(params)

    _print_json(result)
    if isinstance(result, dict) and "error" in result:
        return 1
    return 0


def run_command(args: argparse.Namespace) -> int:
    """Run a parsed command.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    settings = _build_settings(args)
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    if args.command == "tools":
        from mem_bridge.tools.definitions import TOOL_DEFINITIONS

        _print_json(TOOL_DEFINITIONS)
        return 0

    if args.command == "status":
        return asyncio.run(_run_status(settings))

    if args.command == "search":
        params = {
            "query": args.query,
            "limit": args.limit,
            "project": args.project,
            "type": args.type,
            "dateStart": args.date_start,
            "dateEnd": args.date_end,
        }
    elif args.command == "timeline":
        params = {
            "anchor": args.anchor,
            "query": args.query,
            "depth_before": args.depth_before,
            "depth_after": args.depth_after,
            "project": args.project,
        }
    else:
        params = {"ids": args.ids}

    return asyncio.run(_run_query(settings, args.command, params))


def build_parser() -> argparse.ArgumentParser:
    from mem_bridge import __version__

    parser = argparse.ArgumentParser(
        prog="mem-bridge",
        description="Query the memory worker service",
    )
    parser.add_argument("--version", "-V", action="version", version=f"mem-bridge {__version__}")
    parser.add_argument("--host", help="Worker host (default: $CLAUDE_MEM_HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Worker port (default: $CLAUDE_MEM_PORT or 37777)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
        required=True,
    )

    subparsers.add_parser("status", help="Check whether the worker is ready")
    subparsers.add_parser("tools", help="Show the tool definitions exposed to agents")

    search_parser = subparsers.add_parser("search", help="Search memory for an index of IDs")
    search_parser.add_argument("query", nargs="?", help="Search query (natural language)")
    search_parser.add_argument("--limit", type=int, help="Maximum results (default: 20)")
    search_parser.add_argument("--project", help="Filter by project name")
    search_parser.add_argument("--type", choices=SEARCH_TYPES, help="Filter by type")
    search_parser.add_argument("--date-start", help="Filter from date (ISO format)")
    search_parser.add_argument("--date-end", help="Filter to date (ISO format)")

    timeline_parser = subparsers.add_parser(
        "timeline", help="Show chronological context around an observation"
    )
    timeline_parser.add_argument("--anchor", type=int, help="Observation ID to anchor timeline")
    timeline_parser.add_argument("--query", help="Find the anchor by query instead")
    timeline_parser.add_argument("--depth-before", type=int, help="Items before anchor (default: 3)")
    timeline_parser.add_argument("--depth-after", type=int, help="Items after anchor (default: 3)")
    timeline_parser.add_argument("--project", help="Filter by project")

    fetch_parser = subparsers.add_parser(
        "get-observations", help="Fetch full details for observation IDs"
    )
    fetch_parser.add_argument("ids", type=int, nargs="+", help="Observation IDs")

    return parser


def main() -> NoReturn:
    """Main entry point with subcommand support."""
    parser = build_parser()
    args = parser.parse_args()
    sys.exit(run_command(args))


if __name__ == "__main__":
    main()
