"""Ledger graph FastAPI application."""

from __future__ import annotations

import json
import logging
import logging.config
import time
from contextlib import asynccontextmanager
from pathlib import Path
from uuid import uuid4

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledger_graph import LedgerGraphClient, QueryFailure

from .api.routes import router
from .config import get_settings
from .graph import init_graph_service
from .observability import setup_observability
from .version import __version__

logger = logging.getLogger(__name__)

QUERY_FAILURE_MESSAGE = "Graph backend query failed"


def create_app(graph_client: LedgerGraphClient | None = None) -> FastAPI:
    """Build the FastAPI app.

    Args:
        graph_client: pre-built client, used instead of one made from NEO4J_* settings.
    """

    _setup_logging()
    settings = get_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        graph_service = init_graph_service(settings, client=graph_client)
        app.state.graph_service = graph_service
        try:
            yield
        finally:
            graph_service.close()

    app = FastAPI(
        title="Ledger Graph API",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=_lifespan,
    )
    setup_observability(app, service_name="ledger-graph-api")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    @app.middleware("http")
    async def inject_trace_id(request: Request, call_next):  # type: ignore[override]
        """Attach `trace_id` to request state and response headers."""

        incoming = request.headers.get("x-trace-id") or request.headers.get("x-request-id")
        trace_id = incoming or uuid4().hex
        request.state.trace_id = trace_id
        response: Response = await call_next(request)
        response.headers["X-Trace-Id"] = trace_id
        response.headers.setdefault("X-Request-Id", trace_id)
        return response

    @app.exception_handler(QueryFailure)
    async def query_failure_handler(request: Request, exc: QueryFailure):  # type: ignore[override]
        trace_id = getattr(request.state, "trace_id", "")
        logger.error("Graph query failed (traceId=%s): %s", trace_id, exc, exc_info=exc)
        return JSONResponse({"error": QUERY_FAILURE_MESSAGE}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        payload = {
            "code": exc.status_code,
            "error": "HTTPException",
            "message": str(exc.detail),
            "traceId": getattr(request.state, "trace_id", ""),
        }
        return JSONResponse(payload, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):  # type: ignore[override]
        logger.exception("Unhandled error: %s", exc)
        payload = {
            "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "error": "InternalError",
            "message": "Internal Server Error",
            "traceId": getattr(request.state, "trace_id", ""),
        }
        return JSONResponse(payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.middleware("http")
    async def http_logger(request: Request, call_next):  # type: ignore[override]
        """Log method, path, status and elapsedMs with traceId."""

        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            logging.getLogger("http").info(
                "method=%s path=%s status=%s elapsedMs=%s traceId=%s",
                request.method,
                request.url.path,
                response.status_code if response else 500,
                elapsed_ms,
                getattr(request.state, "trace_id", ""),
            )

    @app.get("/config", tags=["system"])
    def read_config(request: Request) -> dict[str, str | int]:
        """Return service config snapshot for diagnostics."""

        graph_service = getattr(request.app.state, "graph_service", None)
        graph_state = "enabled" if graph_service and graph_service.client.has_driver() else "disabled"
        return {
            "apiVersion": settings.api_version,
            "graph": graph_state,
            "rootLimit": settings.graph_root_limit,
            "traceId": getattr(request.state, "trace_id", ""),
        }

    logger.info("Ledger graph API initialised with API version %s", settings.api_version)
    return app


def _setup_logging() -> None:
    """Load JSON logging config if present."""

    config_path = Path.cwd() / "observability" / "logging.json"
    if not config_path.exists():
        return
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            logging.config.dictConfig(json.load(fh))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring broken logging config %s: %s", config_path, exc)
