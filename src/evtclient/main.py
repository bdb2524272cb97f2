"""Command line entry point.

Usage:
    evtclient info
    evtclient push request.json

Signing keys for ``push`` come from ``EVT_PRIVATE_KEYS``.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx

from evtclient.actions.base import UnsupportedActionError
from evtclient.assembler import TransactionAssembler
from evtclient.chain.base import ChainError
from evtclient.chain.factory import get_gateway
from evtclient.config import Settings, get_settings
from evtclient.signing.base import SigningError

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_assembler(settings: Settings) -> TransactionAssembler:
    """Create an assembler for the configured node and keys."""
    return TransactionAssembler(
        get_gateway(settings),
        key_provider=settings.key_list or None,
        expiration_seconds=settings.expiration_seconds,
    )


async def cmd_info(settings: Settings) -> int:
    assembler = build_assembler(settings)
    info = await assembler.get_info()
    print(json.dumps(info.raw, indent=2, sort_keys=True))
    return 0


async def cmd_push(settings: Settings, path: Path) -> int:
    request = json.loads(path.read_text())
    assembler = build_assembler(settings)
    await assembler.push_transaction(request)
    print("executed")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="evtclient", description="everiToken transaction client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("info", help="Show chain info")
    push = sub.add_parser("push", help="Sign and push a transaction request")
    push.add_argument("request", type=Path, help="Path to a JSON transaction request")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(args.debug or settings.debug)

    logger.debug(f"Settings: {settings.get_safe_dict()}")

    try:
        if args.command == "info":
            return asyncio.run(cmd_info(settings))
        return asyncio.run(cmd_push(settings, args.request))
    except (ChainError, SigningError, UnsupportedActionError, httpx.HTTPError, ValueError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
