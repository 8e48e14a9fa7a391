from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from eczemahub.cli.commands import (
    admin_cmd,
    export_cmd,
    init_cmd,
    resources_cmd,
    status_cmd,
    web_cmd,
)
from eczemahub.cli.context import CLIContext
from eczemahub.core.config import load_paths
from eczemahub.core.errors import EczemaHubError
from eczemahub.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eczemahub",
        description="Eczema Hub resource store CLI",
    )
    parser.add_argument(
        "--home",
        type=Path,
        default=None,
        help="Directory holding the store snapshot (default: $ECZEMAHUB_HOME or ./.eczemahub)",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    init_cmd.register(subparsers)
    resources_cmd.register(subparsers)
    admin_cmd.register(subparsers)
    status_cmd.register(subparsers)
    export_cmd.register(subparsers)
    web_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        ctx = CLIContext(paths=load_paths(args.home), console=console)
        return handler(args, ctx)
    except EczemaHubError as exc:
        logger.error(str(exc))
        return 1
