from __future__ import annotations

from typing import Any, Dict, Optional
import time
import hashlib

from google.cloud.firestore import Client
from google.cloud import firestore

from storage.firestore_client import get_firestore_client
from models.schema import COL_AUTH_SESSIONS


def _sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


class SessionRepository:
    """
    Server-issued bearer sessions, minted after a Firebase ID token was verified.

    Session doc id = sha256_hex(token); the raw token is never stored.
    """

    def __init__(self, db: Optional[Client] = None):
        self.db = db or get_firestore_client()

    def create(self, uid: str, email: str, token: str, ttl_sec: int) -> Dict[str, Any]:
        now = int(time.time())
        token_hash = _sha256_hex(token)
        ref = self.db.collection(COL_AUTH_SESSIONS).document(token_hash)
        payload = {
            "uid": uid,
            "email": email,
            "token_hash": token_hash,
            "created_at": firestore.SERVER_TIMESTAMP,
            "expires_at": now + int(ttl_sec),
            "revoked_at": None,
        }
        ref.set(payload, merge=False)
        return {"session_id": token_hash, **payload}

    def get_by_token(self, token: str) -> Optional[Dict[str, Any]]:
        token_hash = _sha256_hex(token)
        snap = self.db.collection(COL_AUTH_SESSIONS).document(token_hash).get()
        if not snap.exists:
            return None
        d = snap.to_dict() or {}
        d["session_id"] = token_hash
        return d

    def revoke(self, token: str) -> str:
        token_hash = _sha256_hex(token)
        self.db.collection(COL_AUTH_SESSIONS).document(token_hash).set(
            {"revoked_at": int(time.time())}, merge=True
        )
        return token_hash
