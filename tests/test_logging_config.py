"""Tests for structured JSON logging."""

import io
import json
import logging

from bankdesk.logging_config import JSONFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord("bankdesk.domain.ledger", logging.INFO, __file__, 1, "Opened account %s", ("ACC1",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_structured_fields():
    entry = json.loads(JSONFormatter().format(make_record(operation="open_account", account_id=3, record_ids=[7])))

    assert entry["level"] == "INFO"
    assert entry["logger"] == "bankdesk.domain.ledger"
    assert entry["message"] == "Opened account ACC1"
    assert entry["operation"] == "open_account"
    assert entry["account_id"] == 3
    assert entry["record_ids"] == [7]
    assert "timestamp" in entry


def test_formatter_skips_absent_fields():
    entry = json.loads(JSONFormatter().format(make_record()))
    assert "operation" not in entry
    assert "exception" not in entry


def test_setup_logging_replaces_handlers():
    setup_logging("INFO")
    logger = setup_logging("DEBUG")

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.propagate is False


def test_ledger_operations_are_logged(ledger):
    logger = setup_logging("INFO")
    stream = io.StringIO()
    logger.handlers[0].setStream(stream)

    account = ledger.open_account(owner_id=1, account_type="SAVINGS", initial_balance="10.00")
    ledger.credit(account.id, "5.00")

    entries = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert [e["operation"] for e in entries] == ["open_account", "credit"]
    assert entries[1]["account_id"] == account.id
