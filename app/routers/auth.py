from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from google.cloud.firestore import Client
from pydantic import BaseModel, Field

from config.settings import settings
from live.workspace import registry
from repos.session_repo import SessionRepository
from security.admin_auth import resolve_admin_status, verify_firebase_id_token
from storage.firestore_client import get_firestore_client
from utils.auth import SessionContext, mint_bearer_token, require_session
from utils.request_context import set_uid

log = logging.getLogger("catalog.router.auth")
router = APIRouter()


class SignInBody(BaseModel):
    id_token: str = Field(..., min_length=16, max_length=4096)


@router.post("/auth/signin")
def sign_in(body: SignInBody, db: Client = Depends(get_firestore_client)):
    claims = verify_firebase_id_token(body.id_token.strip())
    uid = str(claims.get("sub") or "")
    email = str(claims.get("email") or "")
    set_uid(uid)

    is_admin = resolve_admin_status(db, uid)

    token = mint_bearer_token()
    session = SessionRepository(db).create(uid=uid, email=email, token=token, ttl_sec=settings.SESSION_TTL_SEC)
    # A new sign-in replaces the live views of this user's earlier sessions;
    # those sessions reopen theirs on their next gated request.
    registry.close_for_uid(uid, keep_session_id=session["session_id"])
    if is_admin:
        registry.open(db, session["session_id"], uid, expires_at=session["expires_at"])

    log.info("auth_session_issued", extra={"extra": {"event": "auth_session_issued", "is_admin": is_admin}})
    return {
        "ok": True,
        "token": token,
        "uid": uid,
        "email": email,
        "is_admin": is_admin,
        "expires_in_sec": settings.SESSION_TTL_SEC,
    }


@router.post("/auth/signout")
def sign_out(session: SessionContext = Depends(require_session), db: Client = Depends(get_firestore_client)):
    registry.close(session.session_id)
    try:
        SessionRepository(db).revoke(session.token)
    except Exception as e:
        log.error(
            "signout_error",
            extra={"extra": {"event": "signout_error", "error_type": type(e).__name__, "message": str(e)}},
            exc_info=True,
        )
    return {"ok": True}


@router.get("/auth/me")
def me(session: SessionContext = Depends(require_session), db: Client = Depends(get_firestore_client)):
    return {
        "ok": True,
        "uid": session.uid,
        "email": session.email,
        "is_admin": resolve_admin_status(db, session.uid),
    }
