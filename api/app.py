"""
FastAPI application factory.

Usage:
    python -m api.app                               # Dev server on port 8000
    APP_DATA_DIR=/data/json python -m api.app
    APP_COMBINED_FILE=/data/combined.json python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

The app holds one FilterSession.  Records load on a background thread
started from the lifespan hook; until loading finishes every engine
endpoint answers 503 and /health reports ``loading``.

Environment-driven settings are described in utils.config.AppConfig.
APP_LOG_FORMAT=json switches request and engine logs to one JSON object
per line.
"""

import json
import logging
import threading
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models import HealthOut
from api.routes import selection, traits
from engine.errors import InvalidKey, LoadFailure, SessionNotReady
from engine.session import FilterSession, SessionState
from loader.sources import RecordSource, source_from_config
from utils.config import AppConfig

_logger = logging.getLogger("trait_explorer_api")

_HEALTH_STATUS = {
    SessionState.EMPTY: "empty",
    SessionState.LOADING: "loading",
    SessionState.READY: "ok",
    SessionState.FAILED: "failed",
}


# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def _configure_logging(log_format: str) -> None:
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.basicConfig(handlers=[handler], level=logging.INFO, force=True)


# ── Background load ───────────────────────────────────────────────────────────


def _load_in_background(session: FilterSession, source: RecordSource) -> None:
    try:
        session.load(source)
    except LoadFailure:
        # FilterSession keeps the error; /health and the 503s report it
        _logger.warning("Serving without records until the app is restarted")
    except Exception:
        _logger.exception("Unexpected error while loading records; "
                          "serving without records until the app is restarted")


def create_app(
    config: AppConfig | None = None,
    session: FilterSession | None = None,
    source: RecordSource | None = None,
    load_on_startup: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings (default: AppConfig.from_env()).
        session: Use this session instead of a fresh one (useful for
            testing with pre-loaded records).  A READY session is not
            reloaded.
        source: Record source to load from (default: built from
            ``config.load``).
        load_on_startup: Start loading when the app starts.

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or AppConfig.from_env()
    _configure_logging(cfg.log_format)

    session = session or FilterSession(policy=cfg.no_results_policy)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Kick off the record load without blocking startup."""
        if load_on_startup and session.state is SessionState.EMPTY:
            record_source = source or source_from_config(cfg.load)
            thread = threading.Thread(
                target=_load_in_background,
                args=(session, record_source),
                name="record-load",
                daemon=True,
            )
            thread.start()
            app.state.load_thread = thread
        yield

    app = FastAPI(
        title="Trait Explorer API",
        summary="Browse a record collection by selecting trait values.",
        description=(
            "## Trait Explorer API\n\n"
            "Indexes every trait type and value found in the record collection "
            "and filters the collection by the values you check.\n\n"
            "### Filtering rules\n"
            "- A record matches when it has **every** checked (trait, value) pair. "
            "Checking two values of the same trait requires both.\n"
            "- Results keep the original collection order.\n"
            "- With nothing checked, or nothing matching, the result is empty "
            "(or the single `NONE_SENTINEL` record when "
            "`APP_NO_RESULTS_POLICY=sentinel`).\n\n"
            "### Loading\n"
            "Records load in the background at startup. Engine endpoints return "
            "`503` until `/health` reports `ok`."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "traits",
                "description": "Trait types, their values, and the record collection.",
            },
            {
                "name": "selection",
                "description": "Checkbox state, toggle, reset, and the filtered result.",
            },
            {
                "name": "meta",
                "description": "Health check and loading flag.",
            },
        ],
    )
    app.state.session = session
    app.state.config = cfg

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request and tag the response with a request ID."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, request.url.path, response.status_code,
                duration_ms, request_id,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(InvalidKey)
    async def invalid_key_handler(request: Request, exc: InvalidKey):
        return JSONResponse(
            status_code=400,
            content={"error": "Unknown trait selection", "detail": str(exc),
                     "status_code": 400},
        )

    @app.exception_handler(SessionNotReady)
    async def not_ready_handler(request: Request, exc: SessionNotReady):
        return JSONResponse(
            status_code=503,
            content={"error": "Records not ready", "detail": str(exc),
                     "state": exc.state, "status_code": 503},
            headers={"Retry-After": "1"} if exc.state == "loading" else None,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc),
                "status_code": 500,
            },
        )

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check and loading flag",
             response_model=HealthOut)
    def health():
        """Return 200 once records are loaded; 503 while empty, loading or failed."""
        status = _HEALTH_STATUS[session.state]
        report = session.load_report
        body = HealthOut(
            status=status,
            error=session.load_error,
            load=report.to_dict() if report else None,
        )
        if session.state is SessionState.READY:
            body.records = len(session.records)
            body.trait_types = len(session.trait_index)
            return body
        return JSONResponse(status_code=503, content=body.model_dump())

    # ── Register routers ──────────────────────────────────────────────────────

    prefix = "/api/v1"
    app.include_router(traits.router,    prefix=prefix)
    app.include_router(selection.router, prefix=prefix)

    return app


if __name__ == "__main__":
    import uvicorn

    _cfg = AppConfig.from_env()
    uvicorn.run(
        create_app(_cfg),
        host=_cfg.api_host,
        port=_cfg.api_port,
        log_level="info",
    )
