"""CLI entry point for ThreadBrotr.

Resolves one thread and prints the flat-text block (or a JSON document) on
stdout. Logs go to stderr.

Examples:
    ```bash
    python -m threadbrotr nevent1qqs...
    python -m threadbrotr note1... --json
    python -m threadbrotr <hex-id> --relay wss://relay.example.com --max-depth 3
    ```

Exit codes:
    0: Success (including an empty thread without ``--require-replies``).
    1: Invalid reference, unreachable relays, or configuration error.
    2: Empty thread with ``--require-replies``.
    130: Interrupted.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from threadbrotr.core.exceptions import (
    ConfigurationError,
    InvalidReferenceError,
    RelaySetUnreachableError,
)
from threadbrotr.core.logger import Logger, StructuredFormatter
from threadbrotr.core.yaml import load_yaml
from threadbrotr.services.resolver import ResolverConfig, ThreadResolver


DEFAULT_CONFIG = Path("config") / "threadbrotr.yaml"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_REPLIES = 2
EXIT_INTERRUPTED = 130

logger = Logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="threadbrotr",
        description="Reconstruct a Nostr thread from a note1/nevent1/naddr1 or hex reference",
    )

    parser.add_argument("reference", help="note1, nevent1, naddr1, nostr: URI or 64-char hex id")

    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Config path (default: {DEFAULT_CONFIG})",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    parser.add_argument("--json", action="store_true", help="Print a JSON document")

    parser.add_argument("--max-depth", type=int, help="Override limits.max_depth")

    parser.add_argument(
        "--relay",
        action="append",
        default=[],
        metavar="URL",
        help="Additional relay (repeatable, appended to the configured relays)",
    )

    parser.add_argument(
        "--require-replies",
        action="store_true",
        help="Exit with code 2 when the thread has no replies",
    )

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Install a ``StructuredFormatter`` on a stderr root handler."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def _load_yaml_dict(path: Path) -> dict[str, Any]:
    """Load a YAML file as a dict, returning ``{}`` if the file does not exist."""
    if not path.exists():
        logger.warning("config_not_found", path=str(path))
        return {}
    return load_yaml(path)


def build_config(args: argparse.Namespace) -> ResolverConfig:
    """Merge the YAML file with CLI overrides.

    Raises:
        ConfigurationError: If the file or the merged result is invalid.
    """
    data = _load_yaml_dict(args.config)
    if args.relay:
        relays = data.get("relays") or ResolverConfig().relays
        if not isinstance(relays, list):
            raise ConfigurationError("Invalid configuration: relays must be a list")
        data["relays"] = [*relays, *args.relay]
    if args.max_depth is not None:
        limits = data.get("limits") or {}
        if not isinstance(limits, dict):
            raise ConfigurationError("Invalid configuration: limits must be a mapping")
        data["limits"] = {**limits, "max_depth": args.max_depth}
    try:
        return ResolverConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


async def run(args: argparse.Namespace) -> int:
    """Resolve the thread and print it. Returns the exit code."""
    try:
        config = build_config(args)
        thread = await ThreadResolver(config).resolve(args.reference)
    except InvalidReferenceError as e:
        logger.error("invalid_reference", reference=e.reference, error=e.reason)
        return EXIT_FAILURE
    except RelaySetUnreachableError as e:
        logger.error("relays_unreachable", attempted=len(e.relay_urls))
        return EXIT_FAILURE
    except ConfigurationError as e:
        logger.error("configuration_error", error=str(e))
        return EXIT_FAILURE

    if args.json:
        print(json.dumps(thread.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(thread.render(), end="")

    if thread.is_empty:
        logger.warning("no_replies", root_id=thread.root_id)
        if args.require_replies:
            return EXIT_NO_REPLIES
    return EXIT_OK


async def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, configure logging, resolve."""
    args = parse_args(argv)
    setup_logging(args.log_level)
    try:
        return await run(args)
    except KeyboardInterrupt:
        logger.info("interrupted")
        return EXIT_INTERRUPTED


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(EXIT_INTERRUPTED)


if __name__ == "__main__":
    cli()
