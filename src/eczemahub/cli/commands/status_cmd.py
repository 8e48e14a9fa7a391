from __future__ import annotations

import argparse

from rich.table import Table

from eczemahub.cli.context import CLIContext


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("status", help="Summarize store contents")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    stats = host.store.stats()

    out = Table(title="Store Status")
    out.add_column("Metric")
    out.add_column("Value")
    out.add_row("Snapshot", str(ctx.paths.snapshot_path))
    out.add_row("Resources", str(stats.total))
    out.add_row("Verified", str(stats.verified))
    out.add_row("Next ID", str(stats.next_id))
    out.add_row("Admin set", "yes" if stats.has_admin else "no")
    for category, count in stats.by_category.items():
        out.add_row(f"  {category}", str(count))

    ctx.console.print(out)
    return 0
