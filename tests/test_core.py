from __future__ import annotations

import logging

import pytest

from sgsst_connector.core.errors import (
    AuthenticationError,
    ConfigurationError,
    ConnectorError,
    FetchError,
    FieldNotFoundError,
    Result,
    report_error,
)
from sgsst_connector.core.logging import StructuredLogFormatter, configure_logging, get_logger, log_progress


def test_report_error_raises_requested_class():
    with pytest.raises(FetchError) as excinfo:
        report_error("Could not fetch data.", "HTTP 500", error_cls=FetchError)

    error = excinfo.value
    assert error.user_message == "Could not fetch data."
    assert error.debug_detail == "HTTP 500"
    assert error.to_response() == {"errorCode": "FETCH_FAILED", "errorMessage": "Could not fetch data."}


def test_report_error_defaults_debug_detail_to_message():
    with pytest.raises(ConnectorError) as excinfo:
        report_error("Something broke.")

    assert excinfo.value.debug_detail == "Something broke."
    assert excinfo.value.error_code == "CONNECTOR_ERROR"


@pytest.mark.parametrize(
    "error_cls, code",
    [
        (ConfigurationError, "MISSING_REQUIRED_FIELDS"),
        (AuthenticationError, "INVALID_CREDENTIALS"),
        (FetchError, "FETCH_FAILED"),
        (FieldNotFoundError, "FIELD_NOT_FOUND"),
    ],
)
def test_error_codes(error_cls, code):
    assert error_cls("x").to_response()["errorCode"] == code


def test_result_success_and_failure():
    ok = Result.success(3)
    failed = Result.failure(AuthenticationError("nope"))

    assert ok.ok and ok.unwrap() == 3
    assert not failed.ok
    with pytest.raises(AuthenticationError):
        failed.unwrap()


def test_structured_formatter_appends_extras():
    formatter = StructuredLogFormatter(use_color=False)
    record = logging.LogRecord(
        name="sgsst.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Rows fetched",
        args=(),
        exc_info=None,
    )
    record.row_count = 2
    record.phase = "data"
    record.endpoint = "/pesv/vehiculo"

    formatted = formatter.format(record)

    assert formatted.index("phase=data") < formatted.index("endpoint=/pesv/vehiculo") < formatted.index("row_count=2")


def test_logger_adapter_merges_call_extras(caplog):
    logger = get_logger("sgsst.test.adapter", extra={"schema_mode": "dynamic"})

    with caplog.at_level(logging.INFO, logger="sgsst.test.adapter"):
        log_progress(logger, "Schema resolved", phase="schema", status="ok", extra={"field_count": 3})

    record = caplog.records[-1]
    assert record.schema_mode == "dynamic"
    assert record.phase == "schema"
    assert record.field_count == 3


def test_configure_logging_installs_structured_formatter():
    root = logging.getLogger()
    existing_handlers = list(root.handlers)
    existing_level = root.level
    try:
        configure_logging("DEBUG", force=True)
        assert isinstance(root.handlers[0].formatter, StructuredLogFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers = existing_handlers
        root.setLevel(existing_level)
