"""configure_logging: levels, handler ownership and JSON rendering."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from caliber.config.logging import HANDLER_NAME, configure_logging


@pytest.fixture(autouse=True)
def _snapshot_loggers() -> Iterator[None]:
    root, ours = logging.getLogger(), logging.getLogger("caliber")
    saved = (list(root.handlers), root.level, ours.level)
    yield
    root.handlers = saved[0]
    root.setLevel(saved[1])
    ours.setLevel(saved[2])


def _installed() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]


def _last_json_line(capfd: pytest.CaptureFixture[str]) -> dict:
    return json.loads(capfd.readouterr().err.strip().splitlines()[-1])


@pytest.mark.parametrize(("verbose", "level"), [(False, logging.WARNING), (True, logging.DEBUG)])
def test_caliber_level(verbose: bool, level: int) -> None:
    configure_logging(verbose=verbose)
    assert logging.getLogger("caliber").level == level
    assert logging.getLogger().level == logging.WARNING


def test_second_call_swaps_handler() -> None:
    configure_logging()
    first = _installed()
    configure_logging(log_json=True)
    assert len(_installed()) == 1
    assert _installed() != first


def test_other_handlers_untouched() -> None:
    foreign = logging.NullHandler()
    logging.getLogger().addHandler(foreign)
    configure_logging()
    assert foreign in logging.getLogger().handlers


def test_info_hidden_unless_verbose(capfd: pytest.CaptureFixture[str]) -> None:
    configure_logging(log_json=True)
    logging.getLogger("caliber.services.tags").info("renamed")
    assert capfd.readouterr().err == ""


class TestJsonLines:
    def test_structlog_event(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("caliber.test").warning("journal saved", bytes=42)
        record = _last_json_line(capfd)
        assert record["event"] == "journal saved"
        assert record["bytes"] == 42
        assert record["level"] == "warning"
        assert "T" in record["timestamp"]

    def test_stdlib_record(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("caliber.services.day").info("Added task to %s", "2026-01-15")
        record = _last_json_line(capfd)
        assert record["event"] == "Added task to 2026-01-15"
        assert record["logger"] == "caliber.services.day"
