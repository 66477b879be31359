import io
import logging
from collections.abc import Iterator

import pytest

from statement_ingest.logging_setup import (
    LOG_LEVEL_ENV,
    PACKAGE_LOGGER,
    configure_logging,
    get_logger,
    resolve_level,
)


@pytest.fixture
def pkg_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


@pytest.mark.parametrize(
    "level, expected",
    [
        (logging.DEBUG, logging.DEBUG),
        ("warning", logging.WARNING),
        (" error ", logging.ERROR),
        ("15", 15),
        ("chatty", logging.INFO),
    ],
)
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected


def test_resolve_level_reads_environment(monkeypatch: pytest.MonkeyPatch):
    assert resolve_level() == logging.INFO
    monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")
    assert resolve_level() == logging.DEBUG


def test_configure_logging_writes_module_records(pkg_logger: logging.Logger):
    buf = io.StringIO()
    configure_logging("INFO", stream=buf, force=True)

    get_logger("statement_ingest.reconcile").info("reconcile:done inserted=%d", 2)
    get_logger("statement_ingest.reconcile").debug("reconcile:hidden")

    out = buf.getvalue()
    assert "INFO reconcile:done inserted=2" in out
    assert "reconcile:hidden" not in out
    assert pkg_logger.propagate is False


def test_configure_logging_is_idempotent(pkg_logger: logging.Logger):
    first = io.StringIO()
    configure_logging(stream=first, force=True)
    configure_logging(stream=io.StringIO())

    named = [h for h in pkg_logger.handlers if h.get_name() == "statement_ingest.stderr"]
    assert len(named) == 1
    assert named[0].stream is first
    assert not any(isinstance(h, logging.NullHandler) for h in pkg_logger.handlers)
