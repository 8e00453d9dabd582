import json
import logging

from ops.structured_logger import JsonFormatter
from utils.request_context import clear_request_context, set_request_id, set_uid


def test_json_formatter_carries_request_context_and_extra():
    set_request_id("rid-1")
    set_uid("uid-admin")
    try:
        record = logging.LogRecord("catalog.test", logging.ERROR, __file__, 1, "catalog_write_failed", None, None)
        record.extra = {"operation": "add_item", "message_de": "Fehler beim Hinzufügen des Artikels zur Datenbank."}
        out = json.loads(JsonFormatter().format(record))
    finally:
        clear_request_context()

    assert out["severity"] == "ERROR"
    assert out["request_id"] == "rid-1"
    assert out["uid"] == "uid-admin"
    assert out["operation"] == "add_item"
    assert out["message_de"].endswith("Datenbank.")
