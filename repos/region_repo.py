from __future__ import annotations

from typing import Any, Dict, List, Optional
from google.cloud.firestore import Client
from storage.firestore_client import get_firestore_client
from models.schema import COL_REGIONS
from repos.item_repo import doc_to_record


class RegionRepository:
    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def collection(self):
        return self.db.collection(COL_REGIONS)

    def get(self, region_id: str) -> Optional[Dict[str, Any]]:
        snap = self.collection().document(region_id).get()
        if not snap.exists:
            return None
        return doc_to_record(snap)

    def list_all(self) -> List[Dict[str, Any]]:
        return [doc_to_record(d) for d in self.collection().stream()]

    def add(self, data: Dict[str, Any]) -> str:
        _ts, ref = self.collection().add(dict(data))
        return ref.id

    def set(self, region_id: str, data: Dict[str, Any]) -> None:
        self.collection().document(region_id).set(data, merge=False)

    def delete(self, region_id: str) -> None:
        self.collection().document(region_id).delete()
