"""
tree_service.daemon
-------------------
This module serves one in-memory TreeStore over a REST API using FastAPI.
It provides endpoints to list a folder's children (searched and sorted),
resolve breadcrumbs, inspect, rename, delete and move nodes, and insert
uploaded files. State is process-local and lost when the server stops.
"""
import json
import logging
import socket
import sys
from pathlib import Path

import typer
import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from common.app_setup import setup_logging
from common.settings import apply_collation, load_settings
from filetree import (
    Breadcrumb,
    InvalidTargetError,
    NodeInfo,
    NodeSummary,
    NotAFolderError,
    NotFoundError,
    SortDirection,
    SortKey,
    TreeError,
    TreeStore,
    UploadItem,
)
from filetree.tree import ROOT_ID

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[TreeError], int] = {
    NotFoundError: 404,
    NotAFolderError: 400,
    InvalidTargetError: 409,
}


class MoveRequest(BaseModel):
    target_id: str = Field(..., min_length=1)


class RenameRequest(BaseModel):
    name: str = Field(..., min_length=1)


class UploadResult(BaseModel):
    ids: list[str]


router = APIRouter()


def get_store(request: Request) -> TreeStore:
    return request.app.state.store


def get_server(request: Request):
    # Helper to get the running server instance
    return getattr(request.app.state, "uvicorn_server", None)


@router.post("/shutdown")
def shutdown(request: Request):
    """Shutdown the server gracefully."""
    logger.info("Shutdown requested via /shutdown endpoint.")
    server = get_server(request)
    if server:
        server.should_exit = True
    return {"message": "Server shutting down"}


@router.get("/status")
def status(request: Request, store: TreeStore = Depends(get_store)):
    """Health/status endpoint for the tree service."""
    server = get_server(request)
    state = "shutting_down" if server and server.should_exit else "ok"
    return {"status": state, "nodes": len(store)}


@router.get("/folders/children", response_model=list[NodeSummary])
def list_children(
        path: list[str] = Query(default=[ROOT_ID]),
        q: str = "",
        sort: SortKey = SortKey.NAME,
        direction: SortDirection = SortDirection.ASC,
        store: TreeStore = Depends(get_store),
) -> list[NodeSummary]:
    """List the children of the folder at ``path``, filtered by ``q`` and sorted."""
    logger.info(f"Listing {path} q={q!r} sort={sort.value} direction={direction.value}")
    return store.listing(path, q, sort, direction)


@router.get("/folders/breadcrumbs", response_model=list[Breadcrumb])
def breadcrumbs(path: list[str] = Query(default=[ROOT_ID]), store: TreeStore = Depends(get_store)) -> list[Breadcrumb]:
    return store.breadcrumbs(path)


@router.post("/folders/{folder_id}/uploads", response_model=UploadResult, status_code=201)
def upload(folder_id: str, items: list[UploadItem], store: TreeStore = Depends(get_store)) -> UploadResult:
    """Insert already-read uploads as new files of ``folder_id``."""
    ids = store.insert(folder_id, items)
    return UploadResult(ids=ids)


@router.get("/nodes/{node_id}", response_model=NodeInfo)
def get_node(node_id: str, store: TreeStore = Depends(get_store)) -> NodeInfo:
    """Retrieve details for a node by its id."""
    return store.info(node_id)


@router.put("/nodes/{node_id}", response_model=NodeInfo)
def rename_node(node_id: str, update: RenameRequest, store: TreeStore = Depends(get_store)) -> NodeInfo:
    store.rename(node_id, update.name)
    return store.info(node_id)


@router.delete("/nodes/{node_id}", status_code=204)
def delete_node(node_id: str, store: TreeStore = Depends(get_store)):
    """Delete a node and everything below it."""
    store.delete(node_id)
    return Response(status_code=204)


@router.post("/nodes/{node_id}/move", response_model=NodeInfo)
def move_node(node_id: str, move: MoveRequest, store: TreeStore = Depends(get_store)) -> NodeInfo:
    """Move a node into another folder (drop target)."""
    store.move(node_id, move.target_id)
    return store.info(node_id)


def create_app(store: TreeStore | None = None) -> FastAPI:
    """Build the FastAPI application around ``store`` (the sample tree when omitted)."""
    app = FastAPI(title="filetree")
    app.state.store = store if store is not None else TreeStore.from_seed()
    app.state.uvicorn_server = None

    @app.exception_handler(TreeError)
    async def tree_error_handler(request: Request, exc: TreeError):
        status_code = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400)
        logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error": exc.kind, "node_id": exc.node_id},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.warning(f"{request.method} {request.url.path} -> 422: {exc}")
        return JSONResponse(status_code=422, content={"detail": str(exc), "error": "invalid_value"})

    app.include_router(router)
    return app


app_cli = typer.Typer(add_completion=False)


@app_cli.command()
def run(
        port: int = typer.Option(None, help="Port to run the server on (auto if not set)"),
        seed: Path = typer.Option(None, help="YAML/JSON tree to serve instead of the sample tree"),
        config: Path = typer.Option(None, help="Configuration file (defaults to $FILETREE_CONFIG)"),
):
    """Run the tree service using Uvicorn, reporting the actual port used."""
    settings = load_settings(config)
    setup_logging(app_name=settings.app_name, daemon=True, loglevel=settings.log_level)
    apply_collation(settings)
    store = TreeStore.from_seed(seed or settings.seed_file)
    app = create_app(store)
    if port is None:
        port = settings.port
    if port is None or port == 0:
        # Bind to port 0 to get a free port, then close and reuse
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((settings.host, 0))
            port = s.getsockname()[1]
        logger.info(f"Selected port: {port}")
        print(json.dumps({"event": "port_selected", "port": port}), flush=True)
    else:
        # Check if port is available
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((settings.host, port))
            except OSError:
                logger.error(f"Port {port} is already in use.")
                sys.exit(98)  # 98 = EADDRINUSE
        logger.info(f"Using port: {port}")
        print(json.dumps({"event": "port_used", "port": port}), flush=True)
    server = uvicorn.Server(uvicorn.Config(app, host=settings.host, port=port, log_level="info"))
    app.state.uvicorn_server = server  # Store server instance for shutdown
    logger.info(f"Starting Uvicorn server on {settings.host}:{port} with {len(store)} nodes")
    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt in main thread")
    logger.info("Server stopped")


if __name__ == "__main__":
    app_cli()
