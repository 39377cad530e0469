# vidshare/main.py
# -*- coding: utf-8 -*-
from __future__ import annotations
"""
VidShare API bootstrap

Key guarantees:
- Bearer-only API (no cookies leaked to clients)
- CORS from FRONTEND_URL / CORS_ORIGINS
- Security headers, request timing, request id
- One error envelope for every failure: {success: false, message, errors?}
- Models registered before startup; tables created when AUTO_CREATE_TABLES

Centralizes:
- FastAPI app creation (create_app)
- Logging setup
- Middleware wiring
- Exception handlers
- Router registration (all API routers under API_PREFIX, /health + /readyz at root)
"""

import json
import logging
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from typing import Any, List, Optional

import anyio
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import ClientDisconnect
from starlette.responses import JSONResponse, Response

from vidshare.config import settings
from vidshare.db import Base, db_healthcheck, engine
from vidshare.errors import AppError
from vidshare.schemas.common import ErrorDetail
from vidshare import models  # noqa: F401  (register mappers)
from vidshare.routes import API_ROUTERS, health_routes

# ────────────────────────────── Logging setup ──────────────────────────────
class _JsonFmt(logging.Formatter):
    def format(self, r: logging.LogRecord) -> str:
        out = {
            "ts": self.formatTime(r, "%Y-%m-%dT%H:%M:%S"),
            "level": r.levelname,
            "logger": r.name,
            "msg": r.getMessage(),
        }
        if r.exc_info:
            out["exc"] = self.formatException(r.exc_info)
        return json.dumps(out, ensure_ascii=False)


def setup_logging() -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(
        _JsonFmt() if settings.LOG_JSON else logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        )
    )
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))


setup_logging()
log = logging.getLogger("vidshare.main")


# ────────────────────────────── Error envelopes ──────────────────────────────
def error_body(message: str, errors: Optional[List[Any]] = None, stack: Optional[str] = None) -> dict:
    body: dict = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if stack:
        body["stack"] = stack
    return body


def internal_error_response(e: Exception) -> JSONResponse:
    if settings.is_production:
        return JSONResponse(status_code=500, content=error_body("Something went wrong!"))
    stack = "".join(traceback.format_exception(type(e), e, e.__traceback__))
    return JSONResponse(status_code=500, content=error_body(str(e) or type(e).__name__, stack=stack))


def _field_errors(errors) -> List[dict]:
    out = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "form")]
        value = err.get("input")
        if not isinstance(value, (str, int, float, bool, type(None))):
            value = None
        detail = ErrorDetail(field=".".join(loc), message=err.get("msg", "Invalid value"), value=value)
        out.append(detail.model_dump())
    return out


# ────────────────────────────── Security middleware ──────────────────────────────
class SecurityHeaders(BaseHTTPMiddleware):
    """Add strict security headers to every response."""
    async def dispatch(self, request: Request, call_next):
        try:
            resp: Response = await call_next(request)
        except (ClientDisconnect, anyio.EndOfStream):
            # 499 = client closed early
            return Response(status_code=499)

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if request.headers.get("x-forwarded-proto", "").lower() == "https":
            resp.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        resp.headers.setdefault("Vary", "Origin")
        return resp


class RequestIDTiming(BaseHTTPMiddleware):
    """
    - Attach x-request-id if not provided
    - Attach x-process-time-ms with wall-clock processing time
    - Turn unexpected exceptions into the 500 envelope
    """
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex
        t0 = time.perf_counter()
        try:
            resp: Response = await call_next(request)
        except Exception as e:
            log.exception("unhandled xrid=%s %s %s", rid, request.method, request.url.path)
            resp = internal_error_response(e)
        dur_ms = (time.perf_counter() - t0) * 1000.0
        resp.headers["x-request-id"] = rid
        resp.headers["x-process-time-ms"] = str(int(dur_ms))
        return resp


class NoCookieMiddleware(BaseHTTPMiddleware):
    """Force bearer-token only API by stripping any Set-Cookie headers."""
    async def dispatch(self, request: Request, call_next):
        resp: Response = await call_next(request)
        for k in list(resp.headers.keys()):
            if k.lower() == "set-cookie":
                del resp.headers[k]
        return resp


# ────────────────────────────── Lifespan ──────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    h = db_healthcheck()
    log.info(
        "Starting %s %s (env=%s, db_ok=%s)",
        settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT, h.get("ok"),
    )
    if not h.get("ok"):
        log.error("Database ping failed at startup (%s)", h.get("error"))

    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        log.info("Tables verified/created")

    settings.videos_dir.mkdir(parents=True, exist_ok=True)
    settings.avatars_dir.mkdir(parents=True, exist_ok=True)
    try:
        yield
    finally:
        log.info("Shutting down %s", settings.APP_NAME)


# ────────────────────────────── CORS config ──────────────────────────────
def setup_cors(app: FastAPI) -> None:
    """Stateless CORS for a bearer-only API (no credentials)."""
    origins = settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
        allow_headers=["authorization", "content-type", "accept", "accept-language", "x-request-id"],
        expose_headers=["x-request-id", "x-process-time-ms"],
        max_age=86400,
    )
    log.info("CORS configured: origins=%s", origins)


# ────────────────────────────── Exception handlers ──────────────────────────────
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, e: AppError):
        if e.status_code >= 500:
            log.error("app error %s %s: %s", request.method, request.url.path, e.message)
            return internal_error_response(e)
        return JSONResponse(status_code=e.status_code, content=error_body(e.message, e.errors))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_: Request, e: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=error_body("Validation failed", _field_errors(e.errors())),
        )

    @app.exception_handler(PydanticValidationError)
    async def _model_validation(_: Request, e: PydanticValidationError):
        return JSONResponse(
            status_code=400,
            content=error_body("Validation failed", _field_errors(e.errors())),
        )

    @app.exception_handler(IntegrityError)
    async def _integrity(request: Request, e: IntegrityError):
        log.warning("integrity error %s %s: %s", request.method, request.url.path, e.orig)
        return JSONResponse(status_code=400, content=error_body("Duplicate or conflicting value"))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc(_: Request, e: StarletteHTTPException):
        message = e.detail if isinstance(e.detail, str) else "Request failed"
        if e.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return JSONResponse(status_code=e.status_code, content=error_body(message), headers=e.headers)


# ────────────────────────────── FastAPI app factory ──────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware order matters
    setup_cors(app)
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(SecurityHeaders)
    app.add_middleware(NoCookieMiddleware)
    app.add_middleware(RequestIDTiming)

    register_exception_handlers(app)

    app.include_router(health_routes.router)
    for router in API_ROUTERS:
        app.include_router(router, prefix=settings.API_PREFIX)
    log.info("Mounted %d routers under %s", len(API_ROUTERS), settings.API_PREFIX)

    return app


# ────────────────────────────── Singleton ASGI app ──────────────────────────────
app = create_app()
