"""FastAPI application exposing Salvo sessions over WebSockets."""
from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, WebSocket
from fastapi.responses import FileResponse, JSONResponse

from . import config
from .connection import ConnectionSupervisor
from .rooms import SessionRegistry

logger = logging.getLogger(__name__)


def create_app(registry: Optional[SessionRegistry] = None) -> FastAPI:
    """Create the application with its own session registry."""

    app = FastAPI(title=config.GAME_NAME, version="0.1.0")
    app.state.registry = registry or SessionRegistry()

    def get_registry(request: Request) -> SessionRegistry:
        return request.app.state.registry

    def get_ws_registry(websocket: WebSocket) -> SessionRegistry:
        return websocket.app.state.registry

    @app.get("/health")
    async def healthcheck(registry: SessionRegistry = Depends(get_registry)) -> JSONResponse:
        """Liveness probe reporting how many sessions and players are live."""

        return JSONResponse({"status": "healthy", **registry.stats()})

    @app.get("/")
    async def index() -> FileResponse:
        """Serve the browser client when one is deployed alongside the server."""

        if config.STATIC_DIR is None or not (config.STATIC_DIR / "index.html").exists():
            raise HTTPException(status_code=404, detail="Client not built")
        return FileResponse(config.STATIC_DIR / "index.html")

    @app.websocket("/ws")
    async def websocket_endpoint(
        websocket: WebSocket, registry: SessionRegistry = Depends(get_ws_registry)
    ) -> None:
        await websocket.accept()
        logger.info("New WebSocket connection from %s", websocket.client)
        await ConnectionSupervisor(registry).run(websocket)

    return app


app = create_app()


def main(argv: Optional[List[str]] = None) -> None:  # pragma: no cover - side-effect entrypoint
    parser = argparse.ArgumentParser(description=f"{config.GAME_NAME} session server")
    parser.add_argument("--host", default=config.HOST, help="Interface to bind.")
    parser.add_argument("--port", type=int, default=config.PORT, help="Port to listen on.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity.")
    parser.add_argument(
        "-q", "--quiet", dest="quiet", action="store_true", help="Only log errors."
    )
    args = parser.parse_args(argv)

    if args.quiet:
        level = logging.ERROR
    elif args.debug or config.DEBUG:
        level = logging.DEBUG
    elif args.verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    logger.info("%s server listening on %s:%d", config.GAME_NAME, args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=logging.getLevelName(level).lower())


__all__ = ["app", "create_app", "main"]
