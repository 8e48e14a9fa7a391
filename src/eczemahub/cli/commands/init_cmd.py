from __future__ import annotations

import argparse

from eczemahub.cli.context import CLIContext
from eczemahub.core.files import ensure_directory


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("init", help="Create the store home and an initial snapshot")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    if not ctx.paths.home_dir.exists():
        ensure_directory(ctx.paths.home_dir)
        ctx.console.print(f"[green]Created[/green] {ctx.paths.home_dir}")

    if ctx.paths.snapshot_path.exists():
        ctx.console.print(f"[yellow]Snapshot already exists[/yellow] {ctx.paths.snapshot_path}")
        return 0

    host = ctx.boot_host()
    host.suspend()
    ctx.console.print(f"[green]Snapshot ready[/green] {ctx.paths.snapshot_path}")
    return 0
