import io
import json
import logging

import pytest

from common.logging_config import (
    JSONFormatter,
    installer_console,
    resolve_log_level,
)
from installer.config_models import AppSettings


def test_json_formatter_emits_structured_record():
    formatter = JSONFormatter(service_name="baxoo-test")
    record = logging.LogRecord(
        name="installer.steps",
        level=logging.ERROR,
        pathname=__file__,
        lineno=42,
        msg="Clone failed for %s",
        args=("baxoo-app",),
        exc_info=None,
    )

    entry = json.loads(formatter.format(record))

    assert entry["level"] == "ERROR"
    assert entry["service"] == "baxoo-test"
    assert entry["logger"] == "installer.steps"
    assert entry["message"] == "Clone failed for baxoo-app"
    assert entry["line"] == 42
    assert "exception" not in entry


def test_resolve_log_level_verbose_wins(monkeypatch):
    monkeypatch.setenv("LOGLEVEL", "ERROR")
    assert resolve_log_level(verbose=True) == logging.DEBUG


def test_resolve_log_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOGLEVEL", "warning")
    assert resolve_log_level() == logging.WARNING


def test_resolve_log_level_invalid_defaults_to_info(monkeypatch):
    monkeypatch.setenv("LOGLEVEL", "LOUD")
    assert resolve_log_level() == logging.INFO


def test_installer_console_writes_prefixed_messages(monkeypatch):
    monkeypatch.delenv("LOGLEVEL", raising=False)
    stream = io.StringIO()
    settings = AppSettings(log_prefix="[TEST]")

    with installer_console(settings, stream=stream) as console_logger:
        console_logger.info("📥 Cloning the repository...")

    assert stream.getvalue() == "[TEST] 📥 Cloning the repository...\n"


def test_installer_console_releases_handlers_on_exit():
    stream = io.StringIO()
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)
    level_before = root_logger.level

    with pytest.raises(SystemExit):
        with installer_console(AppSettings(), stream=stream):
            assert len(root_logger.handlers) == len(handlers_before) + 1
            raise SystemExit(1)

    assert root_logger.handlers == handlers_before
    assert root_logger.level == level_before


def test_installer_console_json_log_file(tmp_path):
    log_file = tmp_path / "logs" / "installer.log"
    settings = AppSettings(log_file=log_file)

    with installer_console(settings, stream=io.StringIO()) as console_logger:
        console_logger.warning("⚠️ The directory already exists")

    lines = log_file.read_text(encoding="utf-8").splitlines()
    entries = [json.loads(line) for line in lines]
    assert any(
        entry["message"] == "⚠️ The directory already exists"
        and entry["level"] == "WARNING"
        for entry in entries
    )


def test_installer_console_unusable_log_file_restores_root(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    settings = AppSettings(log_file=blocker / "sub" / "installer.log")
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)
    level_before = root_logger.level

    with pytest.raises(OSError):
        with installer_console(settings, verbose=True, stream=io.StringIO()):
            pass

    assert root_logger.handlers == handlers_before
    assert root_logger.level == level_before
