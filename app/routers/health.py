from __future__ import annotations

import os
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends
from google.cloud.firestore import Client

from config.settings import settings
from live.workspace import registry
from models.schema import COL_SYSTEM, DOC_HEALTHZ
from storage.firestore_client import get_firestore_client

router = APIRouter()


def _firestore_probe(db: Client, timeout_s: float = 0.20) -> Dict[str, Any]:
    """
    Read-only, bounded-time Firestore connectivity probe.
    - No writes
    - Uses a fixed doc path.
    """
    try:
        t0 = time.time()
        db.collection(COL_SYSTEM).document(DOC_HEALTHZ).get(timeout=timeout_s)
        dt_ms = int((time.time() - t0) * 1000)
        return {"ok": True, "latency_ms": dt_ms}
    except Exception as e:
        return {"ok": False, "error_type": type(e).__name__, "message": str(e)}


@router.get("/health")
def health(db: Client = Depends(get_firestore_client)):
    fs = _firestore_probe(db)
    return {
        "ok": bool(fs.get("ok", False)),
        "service": "region-catalog-admin",
        "cloudrun_service": os.getenv("K_SERVICE") or "",
        "revision": os.getenv("K_REVISION") or "",
        "environment": settings.ENVIRONMENT,
        "firestore_ok": bool(fs.get("ok", False)),
        "firestore": fs,
        "open_workspaces": len(registry),
        "time_unix": time.time(),
    }
