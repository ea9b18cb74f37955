"""CLI entrypoint for the cockpit.

The engine backend is loaded from ``COCKPIT_BACKEND_FACTORY``; each command
runs a single cockpit operation and prints its result as JSON.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from pydantic import ValidationError

from workflow_cockpit import __version__
from workflow_cockpit.cockpit import Cockpit
from workflow_cockpit.config import CockpitSettings
from workflow_cockpit.exceptions import BackendNotConfigured, CockpitError
from workflow_cockpit.logging import configure_logging
from workflow_cockpit.provider import CockpitProvider

logger = logging.getLogger(__name__)


def _json_object(value: str) -> dict[str, Any]:
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workflow-cockpit",
        description="Query the workflow engine through the cockpit",
    )
    parser.add_argument("--version", action="version", version=f"workflow-cockpit {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for_actor = subparsers.add_parser(
        "workflows-for-actor", help="List the workflows an actor may start"
    )
    for_actor.add_argument(
        "--actor",
        type=_json_object,
        required=True,
        help='Actor attributes as a JSON object, e.g. \'{"id": "u1", "claims": ["admin"]}\'',
    )

    counts = subparsers.add_parser(
        "status-counts", help="Count processes per status for every workflow"
    )
    counts.add_argument(
        "--filters", type=_json_object, default=None, help="Store filters as a JSON object"
    )

    history = subparsers.add_parser("state-history", help="Show the state history of a process")
    history.add_argument("--process-id", required=True, help="Process id")

    return parser


async def _run(cockpit: Cockpit, args: argparse.Namespace) -> Any:
    if args.command == "workflows-for-actor":
        return await cockpit.get_workflows_for_actor(args.actor)
    if args.command == "status-counts":
        return await cockpit.fetch_workflows_with_process_status_count(args.filters)
    if args.command == "state-history":
        return await cockpit.get_process_state_history(args.process_id)
    raise ValueError(f"Unknown command: {args.command}")


def _to_jsonable(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_to_jsonable(v) for v in value]
    return value


def main(argv: list[str] | None = None, *, provider: CockpitProvider | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = CockpitSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        cockpit = (provider or CockpitProvider(settings=settings)).get()
        result = asyncio.run(_run(cockpit, args))
    except BackendNotConfigured as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 2
    except CockpitError as e:
        logger.warning(str(e), extra={"command": args.command})
        print(str(e), file=sys.stderr)
        return 1
    except Exception:
        logger.exception("Command failed")
        return 1

    print(json.dumps(_to_jsonable(result), indent=2, ensure_ascii=False, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
