from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from catalog.handlers import catalog_service
from catalog.search import categories, search_items
from config.settings import settings
from models.catalog import ItemIn
from security.admin_auth import AdminAccess, AdminContext

router = APIRouter()


@router.get("/items")
def list_items(ctx: AdminContext = AdminAccess):
    ws = ctx.workspace
    items = ws.items.records
    return {"ok": True, "items": items, "categories": categories(items), "db_error": ws.db_error}


@router.get("/items/search")
def search(
    q: str = Query(default="", max_length=200),
    region_id: Optional[str] = Query(default=None, max_length=128),
    category: Optional[str] = Query(default=None, max_length=100),
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    ctx: AdminContext = AdminAccess,
):
    ws = ctx.workspace
    results = search_items(
        ws.items.records,
        ws.regions.records,
        query=q,
        region_id=region_id,
        category=category,
        limit=limit or settings.SEARCH_MAX_RESULTS,
    )
    return {"ok": True, "count": len(results), "items": results, "db_error": ws.db_error}


@router.post("/items")
def add_item(body: ItemIn, ctx: AdminContext = AdminAccess):
    item_id = catalog_service(ctx.workspace, ctx.db).add_item(body.to_doc())
    return {"ok": True, "id": item_id}


@router.put("/items/{item_id}")
def update_item(item_id: str, body: ItemIn, ctx: AdminContext = AdminAccess):
    catalog_service(ctx.workspace, ctx.db).update_item(item_id, body.to_doc())
    return {"ok": True, "id": item_id}


@router.delete("/items/{item_id}")
def delete_item(item_id: str, ctx: AdminContext = AdminAccess):
    catalog_service(ctx.workspace, ctx.db).delete_item(item_id)
    return {"ok": True, "deleted": item_id}
