"""Tests for protoweave.logging."""

from __future__ import annotations

import logging
import sys

import pytest

from protoweave.logging import (
    VERBOSE_ENV,
    configure_logging,
    configure_plugin_logging,
    get_logger,
    verbose_from_env,
)


def test_get_logger_nests_under_protoweave() -> None:
    assert get_logger("linker").name == "protoweave.linker"
    assert get_logger().name == "protoweave"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1", True), ("yes", True), (" TRUE ", True), ("", False), ("0", False), ("off", False)],
)
def test_verbose_from_env(value: str, expected: bool) -> None:
    assert verbose_from_env({VERBOSE_ENV: value}) is expected


def test_plugin_logging_reads_verbosity_from_environment(monkeypatch) -> None:
    monkeypatch.setenv(VERBOSE_ENV, "1")

    logger = configure_plugin_logging()

    assert logger.level == logging.DEBUG
    assert not logger.propagate
    [handler] = logger.handlers
    assert isinstance(handler, logging.StreamHandler)
    assert handler.stream is sys.stderr


def test_plugin_logging_defaults_to_info(monkeypatch) -> None:
    monkeypatch.delenv(VERBOSE_ENV, raising=False)

    assert configure_plugin_logging().level == logging.INFO


def test_plugin_output_stays_off_stdout(monkeypatch, capsys) -> None:
    monkeypatch.setenv(VERBOSE_ENV, "true")
    configure_plugin_logging()

    get_logger("plugin").debug("Processing %d files", 3)

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[protoweave] DEBUG Processing 3 files" in captured.err


def test_repeated_configuration_keeps_one_console_handler(tmp_path) -> None:
    configure_logging()
    logger = configure_logging(verbose=True, log_file=tmp_path / "protoweave.log")

    get_logger("config").info("Reading configuration")

    assert len(logger.handlers) == 2
    for handler in logger.handlers:
        handler.flush()
    assert "INFO protoweave.config: Reading configuration" in (
        tmp_path / "protoweave.log"
    ).read_text(encoding="utf-8")
