"""
CLI_MAIN
========

Command-line interface for the Hindsight memory bank.

Global Flags:
    --base-url URL      Hindsight API root (overrides HINDSIGHT_BASE_URL)
    --bank-id ID        Memory bank (overrides HINDSIGHT_BANK_ID)
    --namespace NS      Hindsight namespace (overrides HINDSIGHT_NAMESPACE)

Commands:
    status              Check Hindsight health, config and bank stats
    search              Search memories (prints a JSON array)
    reflect             Ask Hindsight to reason about a query

Errors from `search` and `reflect` are not caught: the process exits with the
traceback of the failed request.
"""

import argparse
import asyncio
import dataclasses
import json
from typing import List, Optional

from pydantic import ValidationError

from core.exceptions import MemoryServiceError
from core.logger import setup_logging
from core.memory_adapter import MemoryOrchestrator, MemorySettings, get_memory_settings
from infrastructure.db.hindsight_client import HindsightClient


def build_orchestrator(
    settings: MemorySettings,
    client: Optional[HindsightClient] = None,
) -> MemoryOrchestrator:
    """Create a stand-alone orchestrator for one CLI invocation."""
    return MemoryOrchestrator(settings, client or HindsightClient(settings.base_url, settings.namespace))


# ============================================================================
# CLI COMMANDS
# ============================================================================

async def cli_status(orchestrator: MemoryOrchestrator) -> bool:
    """
    Print health, configuration and best-effort counts.

    Returns:
        Whether the service answered the health check.
    """
    cfg = orchestrator.settings
    client = orchestrator.client

    healthy = await client.health()
    print(f"Hindsight API: {'healthy' if healthy else 'unreachable'}")
    print(f"URL: {cfg.base_url}")
    print(f"Bank: {cfg.bank_id}")
    print(f"Auto-recall: {cfg.auto_recall}")
    print(f"Auto-capture: {cfg.auto_capture}")

    if healthy:
        try:
            memories = await client.list_memories(cfg.bank_id, 1)
            entities = await client.list_entities(cfg.bank_id)
        except (MemoryServiceError, ValidationError):
            print("Bank not yet created.")
        else:
            print(f"Memories: {len(memories.items)}+")
            print(f"Entities: {len(entities.items)}")
    return healthy


async def cli_search(orchestrator: MemoryOrchestrator, query: str, limit: int = 5) -> list:
    """
    Search memories and print them as JSON.

    Args:
        orchestrator: Orchestrator owning the client and bank lifecycle
        query: Search query
        limit: Max results

    Returns:
        The printed matches
    """
    await orchestrator.ensure_bank()
    result = await orchestrator.client.recall(orchestrator.settings.bank_id, query, limit)
    if not result.results:
        print("No memories found.")
        return []

    matches = [
        {"id": m.id, "type": m.type, "text": m.text, "entities": m.entities}
        for m in result.results
    ]
    print(json.dumps(matches, indent=2, ensure_ascii=False))
    return matches


async def cli_reflect(orchestrator: MemoryOrchestrator, query: str) -> str:
    """Print Hindsight's free-form answer to a query."""
    await orchestrator.ensure_bank()
    result = await orchestrator.client.reflect(orchestrator.settings.bank_id, query)
    print(result.answer)
    return result.answer


# ============================================================================
# ENTRY POINT
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hindsight",
        description="Hindsight memory commands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
========

  %(prog)s status
  %(prog)s search "breakfast" --limit 3
  %(prog)s --bank-id work reflect "What projects am I on?"
        """
    )
    parser.add_argument("--base-url", help="Hindsight API root URL")
    parser.add_argument("--bank-id", help="Memory bank ID")
    parser.add_argument("--namespace", help="Hindsight namespace")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>"
    )

    subparsers.add_parser(
        "status",
        help="Check Hindsight health and stats",
    )

    search_parser = subparsers.add_parser(
        "search",
        help="Search memories",
    )
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument("--limit", "-l", type=int, default=5, help="Max results")

    reflect_parser = subparsers.add_parser(
        "reflect",
        help="Ask Hindsight to reason about a query",
    )
    reflect_parser.add_argument("query", help="Question")

    return parser


def resolve_settings(args: argparse.Namespace, base: Optional[MemorySettings] = None) -> MemorySettings:
    """Apply command-line overrides on top of the environment configuration."""
    settings = base or get_memory_settings()
    overrides = {}
    if args.base_url:
        overrides["base_url"] = args.base_url.rstrip("/")
    if args.bank_id:
        overrides["bank_id"] = args.bank_id
    if args.namespace:
        overrides["namespace"] = args.namespace
    return dataclasses.replace(settings, **overrides) if overrides else settings


async def run_command(args: argparse.Namespace, orchestrator: MemoryOrchestrator) -> int:
    async with orchestrator.client:
        if args.command == "status":
            await cli_status(orchestrator)
        elif args.command == "search":
            await cli_search(orchestrator, args.query, args.limit)
        elif args.command == "reflect":
            await cli_reflect(orchestrator, args.query)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(level=args.log_level, include_timestamp=False)
    orchestrator = build_orchestrator(resolve_settings(args))
    return asyncio.run(run_command(args, orchestrator))


if __name__ == "__main__":
    raise SystemExit(main())
