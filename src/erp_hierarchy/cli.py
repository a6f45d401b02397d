"""CLI for browsing and editing the category and program hierarchies."""

import dataclasses
import json
from concurrent.futures import Future
from enum import Enum
from typing import Annotated, Any

import typer
from loguru import logger

from erp_hierarchy.api import ErpApi
from erp_hierarchy.core.tree.domains import DOMAINS
from erp_hierarchy.core.tree.navigation import find_node, flatten_with_indent, search_by_name
from erp_hierarchy.core.tree.render import render_forest
from erp_hierarchy.core.tree.screen import TreeScreen
from erp_hierarchy.logging_config import configure_logging

app = typer.Typer(help="ERP hierarchy: browse and edit category and program trees.")


class DomainName(str, Enum):
    category = "category"
    program = "program"


DomainArg = Annotated[DomainName, typer.Argument(help="Which hierarchy to work on")]
ScopeOpt = Annotated[
    int | None,
    typer.Option("--scope-id", "-s", help="Owning organization (bpId) for categories"),
]
MenuKindOpt = Annotated[
    str | None,
    typer.Option("--menu-kind", "-k", help="Menu kind filter for programs"),
]
JsonOpt = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _notice(message: str) -> None:
    typer.echo(message, err=True)


def _open_screen(domain: DomainName, scope_id: int | None) -> TreeScreen:
    return TreeScreen(ErpApi(), DOMAINS[domain.value], scope_id=scope_id, notify=_notice)


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _finish(future: "Future[dict[str, Any]] | None", *, output_json: bool, noop: str) -> None:
    """Wait for a mutation and print its outcome."""
    if future is None:
        if output_json:
            typer.echo(json.dumps({"success": False, "error": noop}, indent=2))
        else:
            typer.echo(noop)
        raise typer.Exit(1)

    result = future.result()
    if output_json:
        typer.echo(json.dumps(_jsonable(result), indent=2))
    elif result.get("success"):
        typer.echo("Done.")
    else:
        for field, message in (result.get("errors") or {}).items():
            typer.echo(f"  {field}: {message}")
        if result.get("error"):
            typer.echo(f"Error: {result['error']}")
    if not result.get("success"):
        raise typer.Exit(1)


@app.command()
def tree(
    domain: DomainArg,
    scope_id: ScopeOpt = None,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Category name filter")] = None,
    depth: Annotated[int, typer.Option("--depth", help="1 = major, 2 = minor categories")] = 1,
    active: Annotated[
        bool | None, typer.Option("--active/--inactive", help="Only (in)active categories")
    ] = None,
    menu_kind: MenuKindOpt = None,
    collapsed: bool = typer.Option(False, "--collapsed", "-c", help="Honour the initial expand state"),
    output_json: JsonOpt = False,
) -> None:
    """Show a hierarchy as an indented list."""
    with _open_screen(domain, scope_id) as screen:
        forest = screen.search(name=name, depth=depth, is_active=active, menu_kind=menu_kind)
        if output_json:
            typer.echo(json.dumps({"count": screen.result_count, "nodes": _jsonable(forest)}, indent=2))
            return
        if not forest:
            typer.echo(f"No {domain.value} entries found.")
            return
        typer.echo(f"{screen.result_count} entries:\n")
        typer.echo(
            render_forest(
                forest,
                expanded=screen.expand_state if collapsed else None,
                overlay=screen.overlay,
            )
        )


@app.command()
def options(
    domain: DomainArg,
    scope_id: ScopeOpt = None,
    menu_kind: MenuKindOpt = None,
    output_json: JsonOpt = False,
) -> None:
    """List every entry flattened with depth markers, as shown in pickers."""
    with _open_screen(domain, scope_id) as screen:
        entries = flatten_with_indent(screen.search(menu_kind=menu_kind))
        if output_json:
            data = [{"id": e.node.id, "depth": e.depth, "label": e.label} for e in entries]
            typer.echo(json.dumps(data, indent=2))
            return
        for entry in entries:
            typer.echo(f"  {entry.label}  [id={entry.node.id}]")


@app.command()
def search(
    domain: DomainArg,
    keyword: str = typer.Argument(..., help="Case-insensitive name fragment"),
    scope_id: ScopeOpt = None,
    menu_kind: MenuKindOpt = None,
    output_json: JsonOpt = False,
) -> None:
    """Find entries by name and show the path leading to each."""
    with _open_screen(domain, scope_id) as screen:
        hits = search_by_name(screen.search(menu_kind=menu_kind), keyword)
        if output_json:
            data = {"results": [{"id": h.node_id, "path": list(h.path)} for h in hits], "count": len(hits)}
            typer.echo(json.dumps(data, indent=2))
            return
        typer.echo(f"Found {len(hits)} results:\n")
        for hit in hits:
            typer.echo(f"  {' > '.join(hit.path)}  [id={hit.node_id}]")


@app.command()
def reorder(
    domain: DomainArg,
    active_id: int = typer.Argument(..., help="Node being moved"),
    target_id: int = typer.Argument(..., help="Sibling whose position it takes"),
    scope_id: ScopeOpt = None,
    menu_kind: MenuKindOpt = None,
    output_json: JsonOpt = False,
) -> None:
    """Move a node to a sibling's position (same parent only)."""
    with _open_screen(domain, scope_id) as screen:
        screen.search(menu_kind=menu_kind)
        future = screen.on_drag_end(active_id, target_id)
        _finish(future, output_json=output_json, noop="Nothing to reorder: nodes are not distinct siblings.")


@app.command()
def toggle(
    domain: DomainArg,
    node_id: int = typer.Argument(..., help="Node to switch on/off (children follow)"),
    scope_id: ScopeOpt = None,
    output_json: JsonOpt = False,
) -> None:
    """Flip a node's operating status together with its direct children."""
    with _open_screen(domain, scope_id) as screen:
        screen.search()
        future = screen.toggle_active(node_id)
        _finish(future, output_json=output_json, noop=f"Node {node_id} cannot be toggled.")


@app.command()
def add(
    domain: DomainArg,
    name: str = typer.Argument(..., help="Name of the new entry"),
    parent_id: Annotated[int | None, typer.Option("--parent", "-p", help="Parent node id")] = None,
    scope_id: ScopeOpt = None,
    inactive: bool = typer.Option(False, "--inactive", help="Create as not operating"),
    path: Annotated[str | None, typer.Option("--path", help="Program route path")] = None,
    menu_kind: MenuKindOpt = None,
    output_json: JsonOpt = False,
) -> None:
    """Create a top-level entry or a child of --parent."""
    with _open_screen(domain, scope_id) as screen:
        screen.search(menu_kind=menu_kind)
        future = screen.create(parent_id, name=name, is_active=not inactive, path=path)
        _finish(future, output_json=output_json, noop="Nothing created.")


@app.command()
def update(
    domain: DomainArg,
    node_id: int = typer.Argument(..., help="Node to edit"),
    name: Annotated[str | None, typer.Option("--name", "-n", help="New name")] = None,
    active: Annotated[bool | None, typer.Option("--active/--inactive", help="New status")] = None,
    path: Annotated[str | None, typer.Option("--path", help="Program route path")] = None,
    scope_id: ScopeOpt = None,
    menu_kind: MenuKindOpt = None,
    output_json: JsonOpt = False,
) -> None:
    """Rename an entry or change its active flag."""
    with _open_screen(domain, scope_id) as screen:
        node = find_node(node_id, screen.search(menu_kind=menu_kind))
        if node is None:
            typer.echo(f"Node '{node_id}' not found.")
            raise typer.Exit(1)
        future = screen.update(
            node_id,
            name=node.name if name is None else name,
            is_active=node.is_active if active is None else active,
            path=getattr(node.payload, "path", None) if path is None else path,
        )
        _finish(future, output_json=output_json, noop="Nothing updated.")


@app.command()
def delete(
    domain: DomainArg,
    node_id: int = typer.Argument(..., help="Node to delete"),
    scope_id: ScopeOpt = None,
    menu_kind: MenuKindOpt = None,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    output_json: JsonOpt = False,
) -> None:
    """Delete an entry after confirmation."""

    def confirm(name: str) -> bool:
        return yes or typer.confirm(f'Delete "{name}"?')

    with _open_screen(domain, scope_id) as screen:
        if find_node(node_id, screen.search(menu_kind=menu_kind)) is None:
            typer.echo(f"Node '{node_id}' not found.")
            raise typer.Exit(1)
        future = screen.delete(node_id, confirm)
        if future is None:
            logger.debug("Delete of {} aborted", node_id)
            typer.echo("Aborted.")
            return
        _finish(future, output_json=output_json, noop="Nothing deleted.")
