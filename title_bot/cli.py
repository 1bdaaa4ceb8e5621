"""Command line entry point for the title bot."""
from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Sequence

from dotenv import load_dotenv

from .config import load_config
from .core.application import Application


_LOGGER = logging.getLogger("title_bot.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rename Telegram groups from a title template")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Start the bot and the title scheduler (default)")
    run_parser.set_defaults(command="run")

    refresh_parser = subparsers.add_parser(
        "refresh", help="Update the title of every enabled chat once and exit"
    )
    refresh_parser.set_defaults(command="refresh")

    parser.set_defaults(command="run")
    return parser


async def _refresh() -> int:
    app = Application(config=load_config())
    updated = await app.refresh_once()
    _LOGGER.info("Updated %s chat title(s)", updated)
    return 0


async def _run() -> None:
    app = Application(config=load_config())
    await app.run()


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    load_dotenv()

    if args.command == "refresh":
        return asyncio.run(_refresh())

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        _LOGGER.info("Interrupted, shutting down")
    return 0


__all__ = ["main"]
