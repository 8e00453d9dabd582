from __future__ import annotations

from contextvars import ContextVar

_request_id_var: ContextVar[str] = ContextVar("request_id", default="")
_uid_var: ContextVar[str] = ContextVar("uid", default="")


def set_request_id(rid: str) -> None:
    _request_id_var.set(rid or "")


def get_request_id() -> str:
    return _request_id_var.get() or ""


def set_uid(uid: str) -> None:
    # Firebase uid of the caller, once a session has been resolved.
    _uid_var.set(uid or "")


def get_uid() -> str:
    return _uid_var.get() or ""


def clear_request_context() -> None:
    _request_id_var.set("")
    _uid_var.set("")
