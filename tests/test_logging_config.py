from __future__ import annotations

import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="services.pipeline",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="provider request failed",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_extra_context_is_appended() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s")

    output = formatter.format(_record(provider="airnow", status=503, unrelated="x"))

    assert output == "WARNING provider request failed | provider=airnow status=503"


def test_plain_record_is_unchanged() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", context_keys=["provider"])

    assert formatter.format(_record(status=503)) == "provider request failed"
