# vidshare/routes/health_routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from vidshare import __version__
from vidshare.config import settings
from vidshare.db import db_healthcheck

router = APIRouter(tags=["Health"])


@router.get("/health")
def health():
    h = db_healthcheck()
    return {
        "status": "ok" if h.get("ok") else "degraded",
        "db_ok": bool(h.get("ok")),
        "db_msg": h.get("error"),
        "env": settings.ENVIRONMENT,
        "version": __version__,
        "auth_mode": "bearer_only",
        "ts": time.time(),
    }


@router.get("/readyz")
def ready():
    t0 = time.perf_counter()
    h = db_healthcheck()
    body = {"ready": bool(h.get("ok")), "db_ms": (time.perf_counter() - t0) * 1000.0}
    return JSONResponse(status_code=200 if body["ready"] else 503, content=body)
