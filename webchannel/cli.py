"""Command-line interface for webchannel."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .client import create
from .config import WebChannelConfig, load_config
from .core.errors import ConfigurationError
from .core.models import Result
from .host import Gadget
from .logging import configure_logging

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME,
        description="Issue web requests through an event channel client",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Send a GET request")
    get_parser.add_argument("url")

    post_parser = subparsers.add_parser("post", help="Send a POST request")
    post_parser.add_argument("url")
    post_parser.add_argument("data")

    for request_parser in (get_parser, post_parser):
        request_parser.add_argument(
            "--wait",
            type=float,
            default=30.0,
            help="Seconds to wait for completion before aborting (default: 30)",
        )

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


async def run_request(
    config: WebChannelConfig,
    method: str,
    url: str,
    data: Optional[str] = None,
    *,
    wait: float = 30.0,
) -> Optional[Result]:
    """Issue one request and return its result, or None if it was aborted."""

    gadget = Gadget.from_config(config)
    try:
        client = create(
            gadget=gadget,
            channel=config.client.channel,
            device_name=config.device.name,
            unit_name=config.unit.name,
        )

        done = asyncio.Event()
        if method == "post":
            request = client.post(url, data or "", lambda _result: done.set())
        else:
            request = client.get(url, lambda _result: done.set())

        try:
            await asyncio.wait_for(done.wait(), timeout=wait)
        except asyncio.TimeoutError:
            LOGGER.warning("No response after %.1fs; aborting %s", wait, url)
            request.abort()
        return request.result
    finally:
        await gadget.aclose()


def _print_result(result: Optional[Result]) -> int:
    if result is None:
        print("Request aborted", file=sys.stderr)
        return 1
    if result.is_error:
        print(f"{result.error_type}: {result.error_message}", file=sys.stderr)
        return 1

    print(f"HTTP {result.response_code} {result.content_type}".rstrip())
    print(result.text)
    return 0 if result.ok else 1


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)

    if args.command in ("get", "post"):
        configure_logging(config.logging)
        try:
            result = asyncio.run(
                run_request(
                    config,
                    args.command,
                    args.url,
                    getattr(args, "data", None),
                    wait=args.wait,
                )
            )
        except ConfigurationError as exc:
            LOGGER.error("Cannot create web client: %s", exc)
            return 1
        return _print_result(result)

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
