# shiftlog/main.py
from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse, PlainTextResponse

from shiftlog.api.routes.maintenance import router as maintenance_router
from shiftlog.core.config import Settings, settings
from shiftlog.core.errors import ShiftLogError, StoreError
from shiftlog.core.logging import configure_logging
from shiftlog.services.log_service import MaintenanceLogService
from shiftlog.store.base import LogStore
from shiftlog.store.factory import build_store
from shiftlog.utils.dates import resolve_timezone

logger = logging.getLogger("shiftlog")


# -------------------------
# Response helpers
# -------------------------
def ok(data: Any = None) -> Dict[str, Any]:
    return {"success": True, "data": data}


def fail(code: str, message: str, error: Optional[Any] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"success": False, "message": message, "code": code}
    if error is not None:
        payload["error"] = error
    return payload


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


# -------------------------
# App factory
# -------------------------
def create_app(
    store: Optional[LogStore] = None,
    config: Settings = settings,
) -> FastAPI:
    """
    Build the API.

    `store` is injected by tests; when omitted the configured store is built
    once at startup and shared through `app.state`.
    """
    app = FastAPI(
        title="Maintenance Shift Log API",
        version="0.1.0",
        default_response_class=ORJSONResponse,
    )

    # -------------------------
    # Middleware
    # -------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1024)

    # Request-id + timing
    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.perf_counter()

        response = await call_next(request)

        response.headers["x-request-id"] = request_id
        response.headers["x-response-ms"] = f"{(time.perf_counter() - start) * 1000:.2f}"
        return response

    # -------------------------
    # Routes
    # -------------------------
    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root():
        return "Maintenance API is running..."

    @app.get("/health")
    async def health():
        store_name = getattr(getattr(app.state, "store", None), "name", None)
        return ok({"status": "ok", "env": config.ENV, "store": store_name})

    app.include_router(maintenance_router, tags=["maintenance-log"])

    # -------------------------
    # Error handling
    # -------------------------
    @app.exception_handler(ShiftLogError)
    async def shiftlog_error_handler(request: Request, exc: ShiftLogError):
        if isinstance(exc, StoreError) and exc.status_code >= 500:
            logger.error(
                "Store failure on %s %s: %s (%s)",
                request.method,
                request.url.path,
                exc.message,
                exc.error,
            )
        return ORJSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return ORJSONResponse(
            status_code=400,
            content=fail(code="INVALID_INPUT", message=_validation_message(exc)),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

        # Show minimal debug info only in dev
        error = None
        if config.ENV == "dev":
            error = f"{exc.__class__.__name__}: {exc}"

        return ORJSONResponse(
            status_code=500,
            content=fail(code="INTERNAL_ERROR", message="Something went wrong", error=error),
        )

    # -------------------------
    # Startup / shutdown
    # -------------------------
    @app.on_event("startup")
    async def on_startup():
        configure_logging(config.LOG_LEVEL)

        try:
            log_store = store if store is not None else await build_store(config)
            await log_store.init()
        except Exception:
            logger.exception("Backing store initialization failed")
            raise

        app.state.store = log_store
        app.state.log_service = MaintenanceLogService(
            log_store, tz=resolve_timezone(config.TIMEZONE)
        )
        logger.info("Maintenance API ready (env=%s, store=%s)", config.ENV, log_store.name)

    @app.on_event("shutdown")
    async def on_shutdown():
        log_store = getattr(app.state, "store", None)
        if log_store is not None:
            await log_store.close()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("shiftlog.main:app", host=settings.HOST, port=settings.PORT)
