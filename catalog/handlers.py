from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from live.workspace import AdminWorkspace
from models.messages import (
    ERR_ADD_ITEM,
    ERR_ADD_REGION,
    ERR_DELETE_ITEM,
    ERR_DELETE_REGION,
    ERR_UPDATE_ITEM,
    ERR_UPDATE_REGION,
)
from models.schema import FIELD_REGION_ID
from repos.item_repo import ItemRepository
from repos.region_repo import RegionRepository

log = logging.getLogger("catalog.handlers")


class CatalogWriteError(Exception):
    """A Firestore write failed; `message` is what the admin UI shows."""

    def __init__(self, message: str, operation: str):
        super().__init__(message)
        self.message = message
        self.operation = operation


class CatalogService:
    """
    Admin mutations over `items` and `regions`.

    Each operation is exactly one SDK call. Success clears the workspace
    error; failure stores the operation's message there and raises
    CatalogWriteError. Lists are not refreshed here: the live
    subscriptions deliver the new state.
    """

    def __init__(self, workspace: Optional[AdminWorkspace], items: ItemRepository, regions: RegionRepository):
        self.workspace = workspace
        self.items = items
        self.regions = regions

    def _run(self, operation: str, message: str, fn, **ctx):
        try:
            out = fn()
        except Exception as e:
            log.error(
                "catalog_write_failed",
                extra={"extra": {"event": "catalog_write_failed", "operation": operation,
                                 "error_type": type(e).__name__, "message": str(e), **ctx}},
                exc_info=True,
            )
            if self.workspace is not None:
                self.workspace.record_error(message)
            raise CatalogWriteError(message, operation) from e
        if self.workspace is not None:
            self.workspace.record_success()
        log.info("catalog_write", extra={"extra": {"event": "catalog_write", "operation": operation, **ctx}})
        return out

    # -------- Items --------
    def add_item(self, data: Dict[str, Any]) -> str:
        return self._run("add_item", ERR_ADD_ITEM, lambda: self.items.add(data))

    def update_item(self, item_id: str, data: Dict[str, Any]) -> None:
        self._run("update_item", ERR_UPDATE_ITEM, lambda: self.items.set(item_id, data), item_id=item_id)

    def delete_item(self, item_id: str) -> None:
        self._run("delete_item", ERR_DELETE_ITEM, lambda: self.items.delete(item_id), item_id=item_id)

    # -------- Regions --------
    def add_region(self, data: Dict[str, Any]) -> str:
        return self._run("add_region", ERR_ADD_REGION, lambda: self.regions.add(data))

    def update_region(self, region_id: str, data: Dict[str, Any]) -> None:
        self._run("update_region", ERR_UPDATE_REGION, lambda: self.regions.set(region_id, data), region_id=region_id)

    def delete_region(self, region_id: str) -> None:
        self._run("delete_region", ERR_DELETE_REGION, lambda: self.regions.delete(region_id), region_id=region_id)

    def assign_items_to_region(self, region_id: str, item_ids: Iterable[str],
                               current_items: List[Dict[str, Any]]) -> List[str]:
        """
        Point each listed item at `region_id` by rewriting the whole item
        document (same path as the item editor). Unknown ids are skipped.
        Returns the ids that were updated.
        """
        by_id = {it["id"]: it for it in current_items}
        updated: List[str] = []
        for item_id in item_ids:
            item = by_id.get(item_id)
            if item is None:
                continue
            body = {k: v for k, v in item.items() if k != "id"}
            body[FIELD_REGION_ID] = region_id
            self.update_item(item_id, body)
            updated.append(item_id)
        return updated


def catalog_service(workspace: Optional[AdminWorkspace], db) -> CatalogService:
    return CatalogService(workspace, ItemRepository(db), RegionRepository(db))
