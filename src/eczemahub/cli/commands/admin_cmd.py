from __future__ import annotations

import argparse

from eczemahub.cli.context import CLIContext


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("admin", help="Admin identity management")
    admin_subparsers = parser.add_subparsers(dest="admin_command", required=True)

    set_parser = admin_subparsers.add_parser("set", help="Replace the admin identity")
    set_parser.add_argument("caller")
    set_parser.set_defaults(handler=run_set)

    show_parser = admin_subparsers.add_parser("show", help="Show the admin identity")
    show_parser.set_defaults(handler=run_show)


def run_set(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    host.store.set_admin(args.caller)
    host.suspend()
    ctx.console.print(f"[green]Admin set[/green] {args.caller}")
    return 0


def run_show(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    admin = host.store.get_admin()
    if admin is None:
        ctx.console.print("[yellow]No admin set[/yellow]")
    else:
        ctx.console.print(f"Admin: {admin}")
    return 0
