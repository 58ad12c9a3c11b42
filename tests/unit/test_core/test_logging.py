# SPDX-License-Identifier: LGPL-3.0-or-later
"""Logger setup, formatters and the log_step helper."""
from __future__ import annotations

import json
import logging

import pytest

from fakes.fake_logger import FakeLogger
from urischeme.core.exceptions import NotRegisteredError
from urischeme.core.logger import TRACE, EmojiFormatter, JsonFormatter, Log, LogStyle
from urischeme.core.logging_utils import emoji_for_level, log_step, safe_logger


def _record(msg="hello", level=logging.INFO, ctx=None):
    rec = logging.LogRecord("urischeme.test", level, __file__, 10, msg, None, None)
    if ctx is not None:
        rec.ctx = ctx
    return rec


@pytest.mark.unit
class TestLevels:
    @pytest.mark.parametrize(
        "verbose,quiet,level",
        [
            (0, 0, logging.INFO),
            (1, 0, logging.INFO),
            (2, 0, logging.DEBUG),
            (3, 0, TRACE),
            (0, 1, logging.WARNING),
            (0, 2, logging.ERROR),
            (3, 1, logging.WARNING),
        ],
    )
    def test_flags(self, verbose, quiet, level):
        assert Log._level_from_flags(verbose, quiet) == level


@pytest.mark.unit
class TestFormatters:
    def test_json_formatter_includes_ctx(self):
        line = JsonFormatter(utc=True).format(_record(ctx={"scheme": "demo"}))
        obj = json.loads(line)
        assert obj["msg"] == "hello"
        assert obj["level"] == "INFO"
        assert obj["ctx"] == {"scheme": "demo"}

    def test_emoji_formatter_plain(self):
        line = EmojiFormatter(LogStyle(color=False, unicode=False)).format(_record(ctx={"handler": "Demo"}))
        assert "INFO" in line
        assert line.endswith("hello handler=Demo")


@pytest.mark.unit
class TestSetup:
    def test_setup_replaces_handlers(self, tmp_path):
        log_file = tmp_path / "logs" / "u.log"
        name = "tests.setup"
        Log.setup(0, str(log_file), logger_name=name)
        lg = Log.setup(2, str(log_file), logger_name=name, json_logs=True)
        try:
            assert len(lg.handlers) == 2
            assert lg.level == logging.DEBUG
            lg.info("written")
            for h in lg.handlers:
                h.flush()
            last = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
            assert json.loads(last)["msg"] == "written"
        finally:
            for h in list(lg.handlers):
                lg.removeHandler(h)
                h.close()

    def test_warn_once(self):
        log = FakeLogger()
        assert Log.warn_once(log, ("k", 1), "first")
        assert not Log.warn_once(log, ("k", 1), "again")
        assert len(log.messages("warning")) == 1

    def test_bind_carries_context(self, caplog):
        adapter = Log.bind(logging.getLogger("tests.bind"), scheme="demo")
        with caplog.at_level(logging.INFO, logger="tests.bind"):
            adapter.bind(handler="Demo").info("x")
        assert caplog.records[-1].ctx == {"scheme": "demo", "handler": "Demo"}


@pytest.mark.unit
class TestLogStep:
    def test_success(self):
        log = FakeLogger()
        with log_step(log, "Registering demo"):
            pass
        assert any("Registering demo done" in m for m in log.messages("info"))

    def test_failure_reraises(self):
        log = FakeLogger()
        with pytest.raises(RuntimeError):
            with log_step(log, "Registering demo"):
                raise RuntimeError("nope")
        assert any("failed" in m and "nope" in m for m in log.messages("error"))

    def test_context_and_error_code(self, caplog):
        lg = logging.getLogger("tests.step")
        with caplog.at_level(logging.DEBUG, logger="tests.step"):
            with pytest.raises(NotRegisteredError):
                with log_step(lg, "Unregistering 'demo'", handler="demo", scope="current_user"):
                    raise NotRegisteredError(msg="gone")
        assert all(r.ctx == {"handler": "demo", "scope": "current_user"} for r in caplog.records)
        assert "NotRegisteredError[6]: gone" in caplog.records[-1].getMessage()

    def test_emoji(self):
        assert emoji_for_level(logging.ERROR) == "❌"
        assert emoji_for_level(logging.DEBUG) == "🔍"

    def test_safe_logger(self):
        class _Has:
            logger = logging.getLogger("tests.has")

        assert safe_logger(_Has()).name == "tests.has"
        assert safe_logger(object()).name == "urischeme"
