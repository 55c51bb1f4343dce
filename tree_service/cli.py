"""
This file is the entry point for the 'filetree' command-line tool.
It talks to a running tree service (see tree_service.daemon) over REST.
Run 'filetree --help' in your shell to use the CLI.
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import httpx
import typer
from pydantic import TypeAdapter
from rich import print as rich_print
from rich.table import Table

from common.app_setup import print_and_log, print_error, setup_logging
from common.settings import apply_collation, load_settings
from connectors.tree_client import RemoteTree, TreeSession, error_detail
from filetree.formatting import format_date, format_file_size
from filetree.sorting import SortDirection, SortKey
from filetree.tree import ROOT_ID

app = typer.Typer(add_completion=False, help="Browse and edit the file tree held by a running tree service.")

_parse_time = TypeAdapter(datetime).validate_python


def _connect(url: str) -> RemoteTree:
    return RemoteTree(TreeSession(url))


def _full_path(path: Optional[List[str]]) -> list[str]:
    # the root id may be left out on the command line
    steps = list(path or [])
    if not steps or steps[0] != ROOT_ID:
        steps.insert(0, ROOT_ID)
    return steps


def _remote(ctx: typer.Context) -> RemoteTree:
    return ctx.obj["remote"]


def _fail(message: str):
    print_error(message)
    raise typer.Exit(1)


@app.callback()
def main(
        ctx: typer.Context,
        url: Optional[str] = typer.Option(None, help="Base URL of the tree service"),
        config: Optional[Path] = typer.Option(None, help="Configuration file (defaults to $FILETREE_CONFIG)"),
):
    settings = load_settings(config)
    setup_logging(app_name=settings.app_name, daemon=False, loglevel=settings.log_level, logfile=settings.log_file)
    apply_collation(settings)
    remote = _connect(url or settings.url)
    ctx.call_on_close(remote.session.disconnect)
    ctx.obj = {"settings": settings, "remote": remote}


def _run(call):
    """Run a client call, turning transport and HTTP failures into exit code 1."""
    try:
        return call()
    except httpx.HTTPStatusError as e:
        _fail(f"Request failed: {error_detail(e)}")
    except httpx.RequestError as e:
        _fail(f"Error contacting tree service: {e}")


@app.command()
def status(ctx: typer.Context):
    """Show the service status and node count."""
    info = _run(lambda: _remote(ctx).status)
    print_and_log(f"Service {info.status} with {info.nodes} nodes.")


@app.command()
def stop(ctx: typer.Context):
    """Gracefully stop the tree service via REST."""
    _run(lambda: _remote(ctx).request("POST", "/shutdown"))
    print_and_log("Tree service stopping.")


@app.command("ls")
def list_folder(
        ctx: typer.Context,
        path: Optional[List[str]] = typer.Argument(None, help="Folder ids from the root, e.g. 'documents'"),
        query: str = typer.Option("", "--query", "-q", help="Case-insensitive name filter"),
        sort: SortKey = typer.Option(None, help="Sort key"),
        direction: SortDirection = typer.Option(None, help="Sort direction"),
):
    """List a folder's children, folders first."""
    settings = ctx.obj["settings"]
    sort = sort or settings.default_sort
    direction = direction or settings.default_direction
    steps = _full_path(path)
    items = _run(lambda: _remote(ctx).list_children(steps, query, sort.value, direction.value))
    table = Table("Type", "Name", "Size", "Modified", "Id")
    table.columns[-1].no_wrap = True
    for item in items:
        size = format_file_size(item.size_bytes) if item.type == "file" else f"{item.child_count} items"
        table.add_row(item.type, item.name, size, format_date(_parse_time(item.modified)), item.id)
    rich_print(table)
    if not items:
        print_and_log("No matching items.")


@app.command()
def crumbs(ctx: typer.Context, path: Optional[List[str]] = typer.Argument(None, help="Folder ids from the root")):
    """Print the breadcrumb trail of a folder path."""
    trail = _run(lambda: _remote(ctx).breadcrumbs(_full_path(path)))
    print_and_log(" > ".join(f"{crumb.name} ({crumb.id})" for crumb in trail))


@app.command()
def show(ctx: typer.Context, node_id: str = typer.Argument(..., help="Node id")):
    """Show one node's details."""
    node = _run(lambda: _remote(ctx).get_node(node_id))
    print_and_log(f"{node.type} {node.name} ({node.id})")
    print_and_log(f"Modified: {format_date(_parse_time(node.modified))}")
    if node.type == "file":
        print_and_log(f"Size: {format_file_size(node.size_bytes)}")
        print_and_log(f"Content: {node.content_ref}")
    else:
        print_and_log(f"Items: {node.child_count}")


@app.command("mv")
def move(
        ctx: typer.Context,
        source_id: str = typer.Argument(..., help="Id of the node to move"),
        target_id: str = typer.Argument(..., help="Id of the destination folder"),
):
    """Move a node into another folder."""
    _run(lambda: _remote(ctx).move(source_id, target_id))
    print_and_log(f"Moved {source_id} into {target_id}.")


@app.command()
def upload(
        ctx: typer.Context,
        folder_id: str = typer.Argument(..., help="Id of the destination folder"),
        files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Local files"),
):
    """Add local files to a folder (name, size and timestamp only; bytes stay on disk)."""
    items = []
    for file in files:
        stat = file.stat()
        items.append({
            "name": file.name,
            "size_bytes": stat.st_size,
            "content_ref": file.resolve().as_uri(),
            "timestamp": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
        })
    ids = _run(lambda: _remote(ctx).upload(folder_id, items))
    for file, new_id in zip(files, ids):
        print_and_log(f"Uploaded {file.name} as {new_id}.")


@app.command("rm")
def remove(ctx: typer.Context, node_id: str = typer.Argument(..., help="Id of the node to delete")):
    """Delete a node and everything below it."""
    _run(lambda: _remote(ctx).delete(node_id))
    print_and_log(f"Deleted {node_id}.")


@app.command()
def rename(
        ctx: typer.Context,
        node_id: str = typer.Argument(..., help="Id of the node to rename"),
        name: str = typer.Argument(..., help="New display name"),
):
    """Rename a node."""
    node = _run(lambda: _remote(ctx).rename(node_id, name))
    print_and_log(f"Renamed {node.id} to {node.name}.")


if __name__ == "__main__":
    app()
