from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, List, Optional

from google.cloud.firestore import Client

from live.collection_watch import CollectionWatch
from models.messages import ERR_LOAD_ITEMS, ERR_LOAD_REGIONS
from models.schema import COL_ITEMS, COL_REGIONS

log = logging.getLogger("catalog.live.workspace")


class AdminWorkspace:
    """
    Live state behind one signed-in admin's screens.

    Holds the items and regions subscriptions plus a single `db_error`
    slot. The last event wins: a failed load or write sets it, any good
    snapshot or successful write clears it. Every change bumps `version`
    so stream readers can wait for the next state.
    """

    def __init__(self, db: Client, session_id: str, uid: str, expires_at: int = 0):
        self.session_id = session_id
        self.uid = uid
        self.expires_at = int(expires_at or 0)  # 0: no expiry known
        self._cond = threading.Condition()
        self._db_error: Optional[str] = None
        self._version = 0
        self._closed = False
        self.items = CollectionWatch(db.collection(COL_ITEMS), COL_ITEMS, ERR_LOAD_ITEMS)
        self.regions = CollectionWatch(db.collection(COL_REGIONS), COL_REGIONS, ERR_LOAD_REGIONS)
        self.items.add_listener(self._on_watch_event)
        self.regions.add_listener(self._on_watch_event)

    def start(self) -> "AdminWorkspace":
        if self._closed:
            return self
        self.items.start()
        self.regions.start()
        log.info("workspace_opened", extra={"extra": {"event": "workspace_opened", "uid": self.uid}})
        return self

    def _on_watch_event(self, records: List[Dict[str, Any]], error: Optional[str]) -> None:
        self._set_error(error)

    def _set_error(self, error: Optional[str]) -> None:
        with self._cond:
            self._db_error = error
            self._version += 1
            self._cond.notify_all()

    def record_success(self) -> None:
        self._set_error(None)

    def record_error(self, message: str) -> None:
        self._set_error(message)

    @property
    def db_error(self) -> Optional[str]:
        with self._cond:
            return self._db_error

    @property
    def version(self) -> int:
        with self._cond:
            return self._version

    @property
    def closed(self) -> bool:
        return self._closed

    def expired(self, now: int) -> bool:
        return bool(self.expires_at) and self.expires_at <= now

    def snapshot(self) -> Dict[str, Any]:
        with self._cond:
            db_error = self._db_error
            version = self._version
        return {
            "items": self.items.records,
            "regions": self.regions.records,
            "db_error": db_error,
            "version": version,
        }

    def wait_for_change(self, after_version: int, timeout: float) -> Optional[Dict[str, Any]]:
        """Block until `version` moves past `after_version`; None on timeout or close."""
        with self._cond:
            self._cond.wait_for(lambda: self._closed or self._version > after_version, timeout=timeout)
            if self._closed or self._version <= after_version:
                return None
        return self.snapshot()

    def close(self) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        self.items.close()
        self.regions.close()
        log.info("workspace_closed", extra={"extra": {"event": "workspace_closed", "uid": self.uid}})


class WorkspaceRegistry:
    """
    Workspaces keyed by session id; subscriptions exist only for signed-in admins.

    Entries whose session has expired are swept on every open, so a session
    that is simply abandoned does not keep its listeners alive.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_session: Dict[str, AdminWorkspace] = {}

    def _pop_expired(self, now: int) -> List[AdminWorkspace]:
        dead = [sid for sid, ws in self._by_session.items() if ws.expired(now)]
        return [self._by_session.pop(sid) for sid in dead]

    def open(self, db: Client, session_id: str, uid: str, expires_at: int = 0) -> AdminWorkspace:
        with self._lock:
            stale = self._pop_expired(int(time.time()))
            ws = self._by_session.get(session_id)
            if ws is None or ws.closed:
                ws = AdminWorkspace(db, session_id, uid, expires_at=expires_at)
                self._by_session[session_id] = ws
                fresh = True
            else:
                fresh = False
        for old in stale:
            old.close()
        # start() is a no-op on a workspace that a concurrent close() already shut.
        return ws.start() if fresh else ws

    def close_for_uid(self, uid: str, keep_session_id: str = "") -> int:
        """Close every workspace of `uid` except `keep_session_id` (a newer sign-in replaces them)."""
        with self._lock:
            sids = [sid for sid, ws in self._by_session.items() if ws.uid == uid and sid != keep_session_id]
            workspaces = [self._by_session.pop(sid) for sid in sids]
        for ws in workspaces:
            ws.close()
        return len(workspaces)

    def close(self, session_id: str) -> bool:
        with self._lock:
            ws = self._by_session.pop(session_id, None)
        if ws is None:
            return False
        ws.close()
        return True

    def close_all(self) -> int:
        with self._lock:
            workspaces = list(self._by_session.values())
            self._by_session.clear()
        for ws in workspaces:
            ws.close()
        return len(workspaces)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_session)


registry = WorkspaceRegistry()
