from __future__ import annotations

import json
from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from google.cloud.firestore import Client

from catalog.search import categories, region_usage
from config.settings import settings
from live.workspace import AdminWorkspace, registry
from models.messages import (
    ACCESS_DENIED_TITLE,
    SIGN_OUT_LABEL,
    TAB_LABELS,
    TAB_MANAGE_ITEMS,
    TAB_MANAGE_REGIONS,
    TAB_SEARCH,
)
from security.admin_auth import AdminAccess, AdminContext, resolve_admin_status
from storage.firestore_client import get_firestore_client
from utils.auth import SessionContext, optional_session

router = APIRouter()

Tab = Literal["search", "manageItems", "manageRegions"]


def _tab_payload(tab: str, ws: AdminWorkspace) -> Dict[str, Any]:
    items = ws.items.records
    regions = ws.regions.records
    if tab == TAB_MANAGE_REGIONS:
        return {"regions": region_usage(items, regions), "items": items}
    if tab == TAB_MANAGE_ITEMS:
        return {"items": items, "regions": regions, "categories": categories(items)}
    return {"items": items, "regions": regions}


def admin_view(tab: str, ws: AdminWorkspace) -> Dict[str, Any]:
    return {
        "view": "admin",
        "active_tab": tab,
        "tabs": [{"id": t, "label": label, "active": t == tab} for t, label in TAB_LABELS.items()],
        "actions": [{"id": "signout", "label": SIGN_OUT_LABEL}],
        "db_error": ws.db_error,
        "loaded": ws.items.loaded and ws.regions.loaded,
        **_tab_payload(tab, ws),
    }


@router.get("/ui/view")
def ui_view(
    tab: Tab = TAB_SEARCH,
    session: Optional[SessionContext] = Depends(optional_session),
    db: Client = Depends(get_firestore_client),
):
    if session is None:
        return {"view": "landing", "actions": [{"id": "signin"}]}

    if not resolve_admin_status(db, session.uid):
        registry.close(session.session_id)
        return {
            "view": "access_denied",
            "title": ACCESS_DENIED_TITLE,
            "actions": [{"id": "signout", "label": SIGN_OUT_LABEL}],
        }

    ws = registry.open(db, session.session_id, session.uid, expires_at=session.expires_at)
    return admin_view(tab, ws)


def _sse(event: str, data: Dict[str, Any]) -> str:
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False, default=str)}\n\n"


async def workspace_events(request: Request, ws: AdminWorkspace, keepalive_s: float):
    snap = ws.snapshot()
    version = snap["version"]
    yield _sse("snapshot", snap)

    while not ws.closed:
        if await request.is_disconnected():
            break
        nxt = await run_in_threadpool(ws.wait_for_change, version, keepalive_s)
        if nxt is None:
            if ws.closed:
                break
            yield ": keepalive\n\n"
            continue
        version = nxt["version"]
        yield _sse("snapshot", nxt)


@router.get("/ui/stream")
def ui_stream(request: Request, ctx: AdminContext = AdminAccess):
    return StreamingResponse(
        workspace_events(request, ctx.workspace, settings.STREAM_KEEPALIVE_SEC),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
