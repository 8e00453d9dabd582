from __future__ import annotations

import logging
import os
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalog.handlers import CatalogWriteError
from config.settings import settings
from live.workspace import registry
from ops.structured_logger import setup_logging
from utils.request_context import clear_request_context, set_request_id

from app.routers.auth import router as auth_router
from app.routers.health import router as health_router
from app.routers.items import router as items_router
from app.routers.regions import router as regions_router
from app.routers.ui import router as ui_router

setup_logging(settings.LOG_LEVEL)
log = logging.getLogger("catalog.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", extra={"extra": {"event": "startup", "environment": settings.ENVIRONMENT}})
    yield
    closed = registry.close_all()
    log.info("shutdown", extra={"extra": {"event": "shutdown", "closed_workspaces": closed}})


app = FastAPI(title="Region Catalog Admin", version="1.0.0", lifespan=lifespan)


def _get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id") or ""


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    set_request_id(rid)
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["X-Request-Id"] = rid
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    rid = _get_request_id(request)
    log.warning(
        "http_exception",
        extra={
            "extra": {
                "event": "http_exception",
                "status_code": exc.status_code,
                "detail": exc.detail,
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    rid = _get_request_id(request)
    log.warning(
        "validation_error",
        extra={
            "extra": {
                "event": "validation_error",
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
    )
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_errors(exc), "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
    )


def jsonable_errors(exc: RequestValidationError):
    # pydantic v2 error dicts may carry the raw exception under "ctx".
    out = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in (err.get("ctx") or {}).items()}
        out.append(err)
    return out


@app.exception_handler(CatalogWriteError)
async def catalog_write_error_handler(request: Request, exc: CatalogWriteError):
    # detail is the message the admin UI renders verbatim.
    rid = _get_request_id(request)
    return JSONResponse(
        status_code=502,
        content={
            "detail": exc.message,
            "operation": exc.operation,
            "request_id": rid,
            "revision": os.getenv("K_REVISION") or "",
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _get_request_id(request)
    log.error(
        "internal_unhandled_exception",
        extra={
            "extra": {
                "event": "internal_unhandled_exception",
                "error_type": type(exc).__name__,
                "message": str(exc),
                "path": request.url.path,
                "method": request.method,
                "request_id": rid,
            }
        },
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "internal_unhandled_exception", "request_id": rid, "revision": os.getenv("K_REVISION") or ""},
    )


# The admin UI is a browser app on another origin (Firebase Hosting).
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(health_router, tags=["health"])
app.include_router(auth_router, tags=["auth"])
app.include_router(ui_router, tags=["ui"])
app.include_router(items_router, prefix="/api", tags=["items"])
app.include_router(regions_router, prefix="/api", tags=["regions"])
