# -*- coding: utf-8 -*-
"""Unit tests for configure_logging (stderr logs, stdout left to CLI output)."""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from wallet_inspector.config import AppSettings, Settings
from wallet_inspector.logging.config import configure_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_logs_go_to_stderr_and_stdout_stays_clean(
    settings: Settings,
    capsys: pytest.CaptureFixture[str],
) -> None:
    configure_logging(settings, json_format=True)

    structlog.get_logger("ownership").info("ownership_reconciled", held=2)

    captured = capsys.readouterr()
    assert captured.out == ""
    event = json.loads(captured.err.strip().splitlines()[-1])
    assert event["event"] == "ownership_reconciled"
    assert event["held"] == 2
    assert event["level"] == "info"
    assert event["logger"] == "ownership"
    assert event["app_name"] == "wallet-inspector"
    assert event["environment"] == "development"


def test_service_identity_comes_from_given_settings() -> None:
    stream = io.StringIO()
    settings = Settings(app=AppSettings(service_name="inspector-api", service_version="1.2.0", environment="test"))

    configure_logging(settings, json_format=True, stream=stream)
    structlog.get_logger("main").warning("main_command_failed")

    event = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert event["service_name"] == "inspector-api"
    assert event["service_version"] == "1.2.0"
    assert event["environment"] == "test"


def test_level_override_filters_lower_events(settings: Settings) -> None:
    stream = io.StringIO()

    configure_logging(settings, level="WARNING", json_format=True, stream=stream)
    logger = structlog.get_logger("activity")
    logger.info("activity_aggregated")
    logger.warning("stats_lookup_skipped", lookup="balance")

    events = [json.loads(line)["event"] for line in stream.getvalue().strip().splitlines()]
    assert events == ["stats_lookup_skipped"]


def test_console_renderer_is_plain_text(settings: Settings) -> None:
    stream = io.StringIO()

    configure_logging(settings, json_format=False, stream=stream)
    structlog.get_logger("rpc").info("rpc_request", method="eth_getLogs")

    line = stream.getvalue().strip().splitlines()[-1]
    assert "rpc_request" in line
    assert "method=eth_getLogs" in line
    with pytest.raises(json.JSONDecodeError):
        json.loads(line)
