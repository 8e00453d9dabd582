from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import secrets
import time

from fastapi import Depends, HTTPException, Request
from google.cloud.firestore import Client

from repos.session_repo import SessionRepository
from storage.firestore_client import get_firestore_client
from live.workspace import registry
from utils.request_context import set_uid


@dataclass
class SessionContext:
    session_id: str
    token: str
    uid: str
    email: str
    expires_at: int = 0


def mint_bearer_token() -> str:
    return secrets.token_urlsafe(32)


def parse_bearer_token(request: Request) -> str:
    h = request.headers.get("Authorization", "").strip()
    if not h:
        raise HTTPException(status_code=401, detail="missing_auth")
    parts = h.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise HTTPException(status_code=401, detail="invalid_auth_header")
    return parts[1].strip()


def load_session(db: Client, token: str) -> SessionContext:
    s = SessionRepository(db).get_by_token(token)
    if not s:
        raise HTTPException(status_code=401, detail="invalid_session")
    session_id = str(s.get("session_id") or "")
    if s.get("revoked_at"):
        registry.close(session_id)
        raise HTTPException(status_code=401, detail="revoked_session")
    now = int(time.time())
    exp = int(s.get("expires_at") or 0)
    if exp <= now:
        # Listeners of a dead session go with it, signed out or not.
        registry.close(session_id)
        raise HTTPException(status_code=401, detail="expired_session")
    ctx = SessionContext(
        session_id=session_id,
        token=token,
        uid=str(s.get("uid") or ""),
        email=str(s.get("email") or ""),
        expires_at=exp,
    )
    set_uid(ctx.uid)
    return ctx


def require_session(request: Request, db: Client = Depends(get_firestore_client)) -> SessionContext:
    """Valid, non-expired, non-revoked session or 401."""
    return load_session(db, parse_bearer_token(request))


def optional_session(request: Request, db: Client = Depends(get_firestore_client)) -> Optional[SessionContext]:
    """Like require_session, but a missing or dead session yields None (signed-out view)."""
    if not request.headers.get("Authorization", "").strip():
        return None
    try:
        return load_session(db, parse_bearer_token(request))
    except HTTPException:
        return None
