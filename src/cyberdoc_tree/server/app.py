"""Starlette ASGI application exposing the hierarchy queries."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..exceptions import CyberdocTreeError, IndexNotReadyError, LookupFailure, NotFoundError
from ..session import HierarchySession

logger = logging.getLogger(__name__)


def _error(exc: CyberdocTreeError, status_code: int) -> JSONResponse:
    return JSONResponse({"error": exc.message, "details": exc.details}, status_code=status_code)


def _split_path(raw: str) -> list[str]:
    return [part for part in raw.split("/") if part]


def create_app(session: HierarchySession, load_on_startup: bool = True) -> Starlette:
    """Build the Starlette application wired to *session*.

    Args:
        session: Session holding the current hierarchy index
        load_on_startup: Fetch the dataset and build the index during
            application startup
    """

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if load_on_startup and not session.ready:
            index = await session.load()
            logger.info(f"Index ready: {len(index)} entries, {len(index.roots)} roots")
        yield

    async def api_status(request: Request) -> JSONResponse:
        if not session.ready:
            return JSONResponse({"ready": False, "status": "loading"}, status_code=202)
        index = session.index
        return JSONResponse(
            {
                "ready": True,
                "generation": session.generation,
                "entries": len(index),
                "roots": len(index.roots),
            }
        )

    async def api_roots(request: Request) -> JSONResponse:
        try:
            roots = session.roots()
        except IndexNotReadyError as e:
            return _error(e, 503)
        return JSONResponse([{"index": r.index, "name": r.name} for r in roots])

    async def api_class(request: Request) -> JSONResponse:
        """Treemap trace for ``/api/class/<root>/.../<target>?filter=...``."""
        path = _split_path(request.path_params["path"])
        filters = request.query_params.getlist("filter")
        try:
            trace = session.trace(path, filters)
        except IndexNotReadyError as e:
            return _error(e, 503)
        except NotFoundError as e:
            return _error(e, 404)
        return JSONResponse(trace.to_plotly())

    async def api_route(request: Request) -> JSONResponse:
        index = request.path_params["index"]
        try:
            names = session.route_names(index)
        except IndexNotReadyError as e:
            return _error(e, 503)
        except LookupFailure as e:
            return _error(e, 404)
        return JSONResponse({"index": index, "route": "/".join(names), "names": names})

    async def api_refresh(request: Request) -> JSONResponse:
        """Force a reload from the dataset source. POST /api/refresh"""
        try:
            index = await session.load(force=True)
        except CyberdocTreeError as e:
            logger.error(f"Refresh failed: {e}")
            return _error(e, 502)
        return JSONResponse(
            {"status": "refreshed", "generation": session.generation, "entries": len(index)}
        )

    routes = [
        Route("/api/status", api_status),
        Route("/api/roots", api_roots),
        Route("/api/class/{path:path}", api_class),
        Route("/api/route/{index:int}", api_route),
        Route("/api/refresh", api_refresh, methods=["POST"]),
    ]

    return Starlette(routes=routes, lifespan=lifespan)
