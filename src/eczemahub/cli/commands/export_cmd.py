from __future__ import annotations

import argparse
from pathlib import Path

from eczemahub.cli.context import CLIContext
from eczemahub.core.files import write_bytes_atomic


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("export", help="Write the current snapshot to a file")
    parser.add_argument("--out", required=True, type=Path)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    blob = host.store.snapshot()
    target = args.out.expanduser().resolve()
    write_bytes_atomic(target, blob)
    ctx.console.print(f"[green]Exported[/green] {len(blob)} bytes to {target}")
    return 0
