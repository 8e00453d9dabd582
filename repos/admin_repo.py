from __future__ import annotations

from typing import Any, Dict, Optional
from google.cloud.firestore import Client
from storage.firestore_client import get_firestore_client
from models.schema import COL_ADMINS, FIELD_IS_ADMIN


class AdminRepository:
    """
    Role lookup: admins/{uid}.isAdmin.

    Only a stored boolean `true` grants access; "true", 1 or a missing
    field do not.
    """

    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def get(self, uid: str) -> Optional[Dict[str, Any]]:
        snap = self.db.collection(COL_ADMINS).document(uid).get()
        if not snap.exists:
            return None
        return snap.to_dict() or {}

    def is_admin(self, uid: str) -> bool:
        if not uid:
            return False
        d = self.get(uid)
        if d is None:
            return False
        return d.get(FIELD_IS_ADMIN) is True
