from __future__ import annotations

from fastapi import APIRouter

from catalog.handlers import catalog_service
from catalog.search import region_usage
from models.catalog import AssignItemsRequest, RegionIn
from security.admin_auth import AdminAccess, AdminContext

router = APIRouter()


@router.get("/regions")
def list_regions(ctx: AdminContext = AdminAccess):
    ws = ctx.workspace
    return {"ok": True, "regions": region_usage(ws.items.records, ws.regions.records), "db_error": ws.db_error}


@router.post("/regions")
def add_region(body: RegionIn, ctx: AdminContext = AdminAccess):
    region_id = catalog_service(ctx.workspace, ctx.db).add_region(body.to_doc())
    return {"ok": True, "id": region_id}


@router.put("/regions/{region_id}")
def update_region(region_id: str, body: RegionIn, ctx: AdminContext = AdminAccess):
    catalog_service(ctx.workspace, ctx.db).update_region(region_id, body.to_doc())
    return {"ok": True, "id": region_id}


@router.delete("/regions/{region_id}")
def delete_region(region_id: str, ctx: AdminContext = AdminAccess):
    # Items keep their regionId; search shows them with regionName = null.
    catalog_service(ctx.workspace, ctx.db).delete_region(region_id)
    return {"ok": True, "deleted": region_id}


@router.post("/regions/{region_id}/assign")
def assign_items(region_id: str, body: AssignItemsRequest, ctx: AdminContext = AdminAccess):
    updated = catalog_service(ctx.workspace, ctx.db).assign_items_to_region(
        region_id, body.item_ids, ctx.workspace.items.records
    )
    skipped = [i for i in body.item_ids if i not in set(updated)]
    return {"ok": True, "region_id": region_id, "updated": updated, "skipped": skipped}
