from __future__ import annotations

from typing import Any, Dict, List, Optional
from google.cloud.firestore import Client
from storage.firestore_client import get_firestore_client
from models.schema import COL_ITEMS, FIELD_APPROVED


def doc_to_record(snap) -> Dict[str, Any]:
    d = snap.to_dict() or {}
    # A stored "id" field wins over the document id.
    return {"id": snap.id, **d}


class ItemRepository:
    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def collection(self):
        return self.db.collection(COL_ITEMS)

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        snap = self.collection().document(item_id).get()
        if not snap.exists:
            return None
        return doc_to_record(snap)

    def list_all(self) -> List[Dict[str, Any]]:
        return [doc_to_record(d) for d in self.collection().stream()]

    def add(self, data: Dict[str, Any]) -> str:
        # Items created from the admin UI are approved immediately.
        _ts, ref = self.collection().add({**data, FIELD_APPROVED: True})
        return ref.id

    def set(self, item_id: str, data: Dict[str, Any]) -> None:
        # Full overwrite: fields missing from `data` are dropped.
        self.collection().document(item_id).set(data, merge=False)

    def delete(self, item_id: str) -> None:
        self.collection().document(item_id).delete()
