from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from fastapi import Depends, HTTPException
from google.cloud.firestore import Client
from google.oauth2 import id_token
from google.auth.transport import requests as google_requests

from config.settings import settings
from live.workspace import AdminWorkspace, registry
from repos.admin_repo import AdminRepository
from storage.firestore_client import get_firestore_client
from utils.auth import SessionContext, require_session

log = logging.getLogger("catalog.admin_auth")


def verify_firebase_id_token(token: str) -> Dict[str, Any]:
    """Verify a Firebase Authentication ID token; returns its claims (`sub` == uid)."""
    audience = settings.auth_audience
    if not audience:
        # Fail closed: require explicit Firebase project to be configured
        raise HTTPException(status_code=500, detail="auth_audience_not_configured")

    try:
        claims = id_token.verify_firebase_token(token, google_requests.Request(), audience=audience)
    except Exception as e:
        log.warning("firebase_token verify failed", extra={"extra": {"error": str(e)}})
        raise HTTPException(status_code=401, detail="invalid_id_token")

    if not claims or not claims.get("sub"):
        raise HTTPException(status_code=401, detail="invalid_id_token")
    return claims


def resolve_admin_status(db: Client, uid: str) -> bool:
    # A failed lookup is treated as "not an admin".
    try:
        return AdminRepository(db).is_admin(uid)
    except Exception as e:
        log.error(
            "admin_status_lookup_failed",
            extra={"extra": {"event": "admin_status_lookup_failed", "error_type": type(e).__name__, "message": str(e)}},
            exc_info=True,
        )
        return False


@dataclass
class AdminContext:
    session: SessionContext
    workspace: AdminWorkspace
    db: Client


def require_admin(
    session: SessionContext = Depends(require_session),
    db: Client = Depends(get_firestore_client),
) -> AdminContext:
    if not resolve_admin_status(db, session.uid):
        # Role revoked mid-session: drop any live subscriptions it still holds.
        registry.close(session.session_id)
        raise HTTPException(status_code=403, detail="access_denied")
    ws = registry.open(db, session.session_id, session.uid, expires_at=session.expires_at)
    return AdminContext(session=session, workspace=ws, db=db)


AdminAccess = Depends(require_admin)
