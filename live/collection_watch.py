from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from repos.item_repo import doc_to_record

log = logging.getLogger("catalog.live.watch")

# listener(records, error_message); error_message is None for a good snapshot
Listener = Callable[[List[Dict[str, Any]], Optional[str]], None]


class CollectionWatch:
    """
    Standing query over one collection.

    Wraps `CollectionReference.on_snapshot`: every delivery replaces the
    record list wholesale (`{"id": doc.id, **data}` in delivery order) and
    clears the error. A failed start or an unreadable snapshot records
    `load_error_message` and keeps the previous records.

    Firestore invokes the callback on its own watch thread.
    """

    def __init__(self, collection_ref, name: str, load_error_message: str):
        self._ref = collection_ref
        self.name = name
        self.load_error_message = load_error_message
        self._lock = threading.Lock()
        self._records: List[Dict[str, Any]] = []
        self._error: Optional[str] = None
        self._loaded = False
        self._listeners: List[Listener] = []
        self._watch = None
        self._closed = False

    def add_listener(self, fn: Listener) -> None:
        self._listeners.append(fn)

    def start(self) -> "CollectionWatch":
        if self._closed:
            return self
        try:
            watch = self._ref.on_snapshot(self._on_snapshot)
        except Exception as e:
            log.error(
                "watch_start_failed",
                extra={"extra": {"event": "watch_start_failed", "collection": self.name,
                                 "error_type": type(e).__name__, "message": str(e)}},
                exc_info=True,
            )
            self._fail()
            return self

        with self._lock:
            if not self._closed:
                self._watch = watch
                return self
        # close() ran while the listener was being opened; nobody else owns it.
        self._unsubscribe(watch)
        return self

    def _on_snapshot(self, docs, changes, read_time) -> None:
        if self._closed:
            return
        try:
            records = [doc_to_record(d) for d in docs]
        except Exception as e:
            log.error(
                "watch_snapshot_unreadable",
                extra={"extra": {"event": "watch_snapshot_unreadable", "collection": self.name,
                                 "error_type": type(e).__name__, "message": str(e)}},
                exc_info=True,
            )
            self._fail()
            return

        with self._lock:
            self._records = records
            self._error = None
            self._loaded = True
        log.debug("watch_snapshot", extra={"extra": {"collection": self.name, "count": len(records)}})
        self._notify(records, None)

    def _fail(self) -> None:
        with self._lock:
            self._error = self.load_error_message
            records = list(self._records)
        self._notify(records, self.load_error_message)

    def _notify(self, records: List[Dict[str, Any]], error: Optional[str]) -> None:
        for fn in list(self._listeners):
            try:
                fn(records, error)
            except Exception:
                log.exception("watch_listener_failed", extra={"extra": {"collection": self.name}})

    @property
    def records(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._records)

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    @property
    def loaded(self) -> bool:
        with self._lock:
            return self._loaded

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            watch, self._watch = self._watch, None
        if watch is not None:
            self._unsubscribe(watch)

    def _unsubscribe(self, watch) -> None:
        try:
            watch.unsubscribe()
        except Exception as e:
            log.warning(
                "watch_unsubscribe_failed",
                extra={"extra": {"collection": self.name, "error_type": type(e).__name__, "message": str(e)}},
            )
