from __future__ import annotations

import argparse
from datetime import datetime, timezone

from rich.panel import Panel
from rich.table import Table

from eczemahub.cli.context import CLIContext
from eczemahub.domain.models.resource import Resource, ResourceCategory

CATEGORY_CHOICES = [c.value for c in ResourceCategory]


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("resources", help="Create, inspect and edit resources")
    resources_subparsers = parser.add_subparsers(dest="resources_command", required=True)

    create_parser = resources_subparsers.add_parser("create", help="Create a resource")
    create_parser.add_argument("--title", required=True)
    create_parser.add_argument("--description", required=True)
    create_parser.add_argument("--category", required=True, type=_category, help=", ".join(CATEGORY_CHOICES))
    create_parser.set_defaults(handler=run_create)

    get_parser = resources_subparsers.add_parser("get", help="Show one resource")
    get_parser.add_argument("id", type=int)
    get_parser.set_defaults(handler=run_get)

    list_parser = resources_subparsers.add_parser("list", help="List resources")
    list_parser.add_argument("--category", type=_category, help="Filter by category")
    list_parser.set_defaults(handler=run_list)

    search_parser = resources_subparsers.add_parser("search", help="Search titles and descriptions")
    search_parser.add_argument("query", nargs="?", default="")
    search_parser.set_defaults(handler=run_search)

    update_parser = resources_subparsers.add_parser("update", help="Replace a resource's fields")
    update_parser.add_argument("id", type=int)
    update_parser.add_argument("--title", required=True)
    update_parser.add_argument("--description", required=True)
    update_parser.add_argument("--category", required=True, type=_category)
    update_parser.set_defaults(handler=run_update)

    delete_parser = resources_subparsers.add_parser("delete", help="Delete a resource")
    delete_parser.add_argument("id", type=int)
    delete_parser.set_defaults(handler=run_delete)

    verify_parser = resources_subparsers.add_parser("verify", help="Mark a resource as verified (admin only)")
    verify_parser.add_argument("id", type=int)
    verify_parser.add_argument("--caller", required=True, help="Identity performing the verification")
    verify_parser.set_defaults(handler=run_verify)


def _category(value: str) -> ResourceCategory:
    try:
        return ResourceCategory.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _fmt_ts(value: int) -> str:
    return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()


def _print_table(ctx: CLIContext, title: str, resources: list[Resource]) -> None:
    out = Table(title=f"{title} ({len(resources)})")
    out.add_column("ID")
    out.add_column("Category")
    out.add_column("Title", overflow="fold")
    out.add_column("Verified")
    out.add_column("Updated")

    for r in resources:
        out.add_row(str(r.id), r.category.value, r.title, "yes" if r.verified else "no", _fmt_ts(r.updated_at))

    ctx.console.print(out)


def _print_resource(ctx: CLIContext, resource: Resource, heading: str) -> None:
    ctx.console.print(
        Panel.fit(
            "\n".join(
                [
                    f"ID: {resource.id}",
                    f"Title: {resource.title}",
                    f"Category: {resource.category.value}",
                    f"Verified: {'yes' if resource.verified else 'no'}",
                    f"Created: {_fmt_ts(resource.created_at)}",
                    f"Updated: {_fmt_ts(resource.updated_at)}",
                    "",
                    resource.description,
                ]
            ),
            title=heading,
        )
    )


def run_create(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    resource = host.store.create_resource(args.title, args.description, args.category)
    host.suspend()
    _print_resource(ctx, resource, "Resource Created")
    return 0


def run_get(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    _print_resource(ctx, host.store.get_resource(args.id), "Resource")
    return 0


def run_list(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    if args.category is not None:
        resources = host.store.list_resources_by_category(args.category)
        _print_table(ctx, f"Resources in {args.category.value}", resources)
    else:
        _print_table(ctx, "Resources", host.store.list_resources())
    return 0


def run_search(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    _print_table(ctx, f"Matches for {args.query!r}", host.store.search_resources(args.query))
    return 0


def run_update(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    resource = host.store.update_resource(args.id, args.title, args.description, args.category)
    host.suspend()
    _print_resource(ctx, resource, "Resource Updated")
    return 0


def run_delete(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    host.store.delete_resource(args.id)
    host.suspend()
    ctx.console.print(f"[green]Deleted[/green] resource {args.id}")
    return 0


def run_verify(args: argparse.Namespace, ctx: CLIContext) -> int:
    host = ctx.boot_host()
    resource = host.store.verify_resource(args.id, args.caller)
    host.suspend()
    _print_resource(ctx, resource, "Resource Verified")
    return 0
