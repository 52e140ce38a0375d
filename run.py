#!/usr/bin/env python3
"""
Provenance registry - command line host

Usage:
    python run.py register --caller alice --fingerprint <hex> --content-type article \
        --signature <hex> --title "Hello World"
    python run.py verify <hex>
    python run.py list --author alice --start 0 --limit 20
    python run.py stats --author alice

Each invocation loads the checkpoint, runs one operation and, for writes,
saves the checkpoint again at the next logical height.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from src.config import load_config, get_validated_config
from src.config_schema import AppConfig
from src.provenance import (
    BlockClock,
    ContentRegistry,
    EventLogger,
    RegistryError,
    RegistryHost,
    load_checkpoint,
    save_checkpoint,
)
from src.provenance.errors import validation_error

CONFIG_ENV_VAR = "PROVENANCE_CONFIG"


def build_host(config: AppConfig, state_file: str) -> RegistryHost:
    """Restore the registry from ``state_file`` (or start empty) and wrap it in a host."""
    event_logger = EventLogger(config.logging.output_file) if config.logging.enabled else None
    loaded = load_checkpoint(state_file, **ContentRegistry.config_kwargs(config, event_logger))
    if loaded is None:
        return RegistryHost(ContentRegistry.from_config(config, event_logger), BlockClock())
    registry, height = loaded
    return RegistryHost(registry, BlockClock(height))


class RegistryArgumentError(Exception):
    """Raised when a CLI argument cannot be decoded."""

    def __init__(self, message: str, field: str) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


def _hex_arg(value: str, name: str) -> bytes:
    try:
        return bytes.fromhex(value.removeprefix("0x"))
    except ValueError:
        raise RegistryArgumentError(f"{name} is not valid hex", name) from None


def execute(args: argparse.Namespace, host: RegistryHost) -> tuple[dict[str, Any], bool]:
    """Run the selected command.

    Returns:
        (result dict, whether state changed)
    """
    if args.command == "register":
        host.produce_block()
        fingerprint = host.register(
            caller=args.caller,
            fingerprint=_hex_arg(args.fingerprint, "fingerprint"),
            content_type=args.content_type,
            signature=_hex_arg(args.signature, "signature"),
            title=args.title,
            storage_url=args.storage_url,
        )
        return {"success": True, "fingerprint": fingerprint.hex(), "height": host.clock.height}, True

    if args.command == "verify":
        record = host.verify(_hex_arg(args.fingerprint, "fingerprint"))
        return {"success": True, "record": record.to_dict()}, False

    if args.command == "list":
        page = host.list_author_content(args.author, args.start, args.limit)
        return {
            "success": True,
            "author": args.author,
            "start": args.start,
            "fingerprints": [fp.hex() for fp in page],
        }, False

    if args.command == "stats":
        stats = host.get_stats(args.author)
        return {"success": True, "author": args.author, **stats.to_dict()}, False

    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Content provenance registry"
    )
    parser.add_argument(
        "--config",
        default=os.environ.get(CONFIG_ENV_VAR, "config/config.yaml"),
        help=f"Path to config file (env: {CONFIG_ENV_VAR})",
    )
    parser.add_argument("--state", default=None, help="Checkpoint file (default: from config)")
    sub = parser.add_subparsers(dest="command", required=True)

    reg = sub.add_parser("register", help="Claim a fingerprint")
    reg.add_argument("--caller", required=True, help="Author identity")
    reg.add_argument("--fingerprint", required=True, help="32-byte hash, hex")
    reg.add_argument("--content-type", required=True, help="Content type tag")
    reg.add_argument("--signature", required=True, help="65-byte signature, hex")
    reg.add_argument("--title", required=True, help="Title")
    reg.add_argument("--storage-url", default=None, help="Optional storage pointer")

    ver = sub.add_parser("verify", help="Look up a fingerprint")
    ver.add_argument("fingerprint", help="32-byte hash, hex")

    lst = sub.add_parser("list", help="Page through an author's fingerprints")
    lst.add_argument("--author", required=True)
    lst.add_argument("--start", type=int, default=0)
    lst.add_argument("--limit", type=int, default=None)

    st = sub.add_parser("stats", help="Show an author's counters")
    st.add_argument("--author", required=True)
    return parser


def main(argv: list[str] | None = None) -> int:
    args: argparse.Namespace = build_parser().parse_args(argv)

    load_config(args.config)
    config = get_validated_config()
    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    state_file: str = args.state or config.checkpoint.file
    try:
        host = build_host(config, state_file)
    except ValueError as e:
        print(json.dumps(validation_error(f"Cannot load checkpoint: {e}", field="state"), indent=2))
        return 1

    try:
        result, changed = execute(args, host)
    except RegistryError as e:
        print(json.dumps(e.to_dict(), indent=2))
        return 1
    except RegistryArgumentError as e:
        print(json.dumps(validation_error(e.message, field=e.field), indent=2))
        return 1

    if changed:
        save_checkpoint(host.registry, Path(state_file), host.clock.height)
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
