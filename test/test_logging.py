import json
import logging

from bsm.logging_config import JsonFormatter, split_event


def test_split_event_reads_key_value_fields():
    event, fields = split_event("http_request_failed endpoint=sales status=500 error=API responded with status: 500")

    assert event == "http_request_failed"
    assert fields == {"endpoint": "sales", "status": "500", "error": "API responded with status: 500"}


def test_split_event_plain_message():
    assert split_event("app started") == ("app started", {})


def test_json_formatter_emits_event_and_fields():
    record = logging.LogRecord(
        "bsm.sales", logging.INFO, __file__, 1,
        "sale_created sale_id=%s total=%.2f", ("6", 42.5), None,
    )

    line = json.loads(JsonFormatter().format(record))

    assert line["logger"] == "bsm.sales"
    assert line["event"] == "sale_created"
    assert line["fields"] == {"sale_id": "6", "total": "42.50"}
    assert line["message"] == "sale_created sale_id=6 total=42.50"
