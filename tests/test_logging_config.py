"""Tests for unified logging and stage timers.

Verifies:
    - setup_logging() is idempotent (no duplicate handlers)
    - Console lines are human-readable, the log file gets JSON lines
    - Human and JSON formats include contextual fields and exceptions
    - Warnings are routed to logging, quiet_libs capped at WARNING
    - install_excepthook() logs uncaught exceptions, passes Ctrl-C through
    - log_context() restores the previous context on exit
    - pop_context() removes keys without touching other contexts
    - Orchestrator tags records with the image path
    - StageTimings accumulates per-stage durations

Run: pytest tests/test_logging_config.py -v
"""
import json
import logging
import sys
import warnings

import pytest

from docima import ImageFile
from docima.utils import logging_config
from docima.utils.profiler import StageTimings, timer


@pytest.fixture
def clean_logging():
    """Restore root logger handlers/level and context after the test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    logging_config.pop_context()
    yield
    for handler in list(logging_config._installed_handlers):
        root.removeHandler(handler)
        handler.close()
    logging_config._installed_handlers.clear()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging_config.pop_context()
    logging.captureWarnings(False)


def _record(msg="hello"):
    return logging.LogRecord("docima.test", logging.INFO, __file__, 1, msg, None, None)


class TestSetupLogging:

    def test_idempotent(self, clean_logging, tmp_path):
        root = logging.getLogger()
        before = len(root.handlers)
        logging_config.setup_logging("DEBUG", str(tmp_path / "a.log"))
        logging_config.setup_logging("debug", str(tmp_path / "a.log"))
        assert len(root.handlers) == before + 2
        assert root.level == logging.DEBUG

    def test_file_gets_json_lines(self, clean_logging, tmp_path):
        log_file = tmp_path / "logs" / "build.jsonl"
        logging_config.setup_logging(
            "INFO", str(log_file), to_stderr=False, context={"app": "build"}
        )
        logging_config.get_logger("docima.test").info("generated %d images", 2)
        for handler in logging_config._installed_handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert entry["msg"] == "generated 2 images"
        assert entry["lvl"] == "INFO"
        assert entry["name"] == "docima.test"
        assert entry["app"] == "build"
        assert entry["t"].endswith("+00:00")

    def test_console_only_by_default(self, clean_logging):
        info = logging_config.setup_logging("INFO")
        assert len(info["handlers"]) == 1
        assert isinstance(info["handlers"][0].formatter, logging_config.ContextFormatter)
        assert info["handlers"][0].formatter.fmt_mode == "human"

    def test_quiet_libs(self, clean_logging):
        noisy = logging.getLogger("docima.test.noisy")
        old_level = noisy.level
        try:
            logging_config.setup_logging("DEBUG", to_stderr=False, quiet_libs=["docima.test.noisy"])
            assert noisy.level == logging.WARNING
        finally:
            noisy.setLevel(old_level)

    def test_warnings_captured(self, clean_logging):
        seen = []

        class Capture(logging.Handler):
            def emit(self, record):
                seen.append(record.getMessage())

        handler = Capture()
        py_warnings = logging.getLogger("py.warnings")
        py_warnings.addHandler(handler)
        try:
            logging_config.setup_logging("INFO", to_stderr=False)
            warnings.warn("deprecated knob", UserWarning)
        finally:
            py_warnings.removeHandler(handler)
        assert any("deprecated knob" in msg for msg in seen)

    def test_unknown_level(self, clean_logging):
        with pytest.raises(ValueError, match="Unknown log level"):
            logging_config.setup_logging("LOUD")


class TestFormatter:

    def test_human_format_includes_context(self, clean_logging):
        formatter = logging_config.ContextFormatter("human")
        logging_config.push_context(app="build")
        line = formatter.format(_record())
        assert line.endswith("| INFO     | app=build | hello")
        assert line.split(" | ")[0].endswith("Z")

    def test_human_format_without_context(self, clean_logging):
        line = logging_config.ContextFormatter("human").format(_record())
        assert line.endswith("| INFO     | hello")

    def test_json_includes_exception(self, clean_logging):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "docima.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        entry = json.loads(logging_config.ContextFormatter("json").format(record))
        assert entry["msg"] == "failed"
        assert "RuntimeError: boom" in entry["exc"]

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="format mode"):
            logging_config.ContextFormatter("xml")


class TestExcepthook:

    def test_uncaught_logged_critical(self, clean_logging, monkeypatch):
        monkeypatch.setattr(sys, "excepthook", sys.excepthook)
        seen = []

        class Capture(logging.Handler):
            def emit(self, record):
                seen.append(record)

        handler = Capture()
        logger = logging.getLogger("docima")
        logger.addHandler(handler)
        try:
            logging_config.install_excepthook()
            try:
                raise ValueError("escaped")
            except ValueError:
                sys.excepthook(*sys.exc_info())
        finally:
            logger.removeHandler(handler)

        assert [r.levelno for r in seen] == [logging.CRITICAL]
        assert seen[0].exc_info[1].args == ("escaped",)

    def test_keyboard_interrupt_not_logged(self, clean_logging, monkeypatch):
        monkeypatch.setattr(sys, "excepthook", sys.excepthook)
        forwarded = []
        monkeypatch.setattr(sys, "__excepthook__", lambda *exc: forwarded.append(exc[0]))

        logging_config.install_excepthook()
        sys.excepthook(KeyboardInterrupt, KeyboardInterrupt(), None)
        assert forwarded == [KeyboardInterrupt]


class TestContext:

    def test_log_context_restores(self, clean_logging):
        logging_config.push_context(app="build")
        with logging_config.log_context(image="a.html"):
            assert logging_config.get_context() == {"app": "build", "image": "a.html"}
        assert logging_config.get_context() == {"app": "build"}

    def test_log_context_restores_on_error(self, clean_logging):
        with pytest.raises(RuntimeError):
            with logging_config.log_context(image="a.html"):
                raise RuntimeError("boom")
        assert logging_config.get_context() == {}

    def test_pop_context_keys(self, clean_logging):
        logging_config.push_context(app="build", image="a.html")
        snapshot = logging_config.get_context()
        logging_config.pop_context(["image"])
        assert logging_config.get_context() == {"app": "build"}
        assert snapshot == {"app": "build", "image": "a.html"}

    def test_orchestrator_tags_image(self, clean_logging, tmp_path, settings, gradient):
        seen = []

        class Capture(logging.Handler):
            def emit(self, record):
                seen.append((record.getMessage(), logging_config.get_context()))

        handler = Capture(level=logging.INFO)
        logger = logging.getLogger("docima.orchestrator")
        logger.addHandler(handler)
        old_level = logger.level
        logger.setLevel(logging.INFO)
        try:
            out = tmp_path / "tagged.html"
            ImageFile().path(out).width(1).height(1).generate(gradient, settings)
        finally:
            logger.removeHandler(handler)
            logger.setLevel(old_level)

        assert any(ctx.get("image") == str(out) for _, ctx in seen)
        assert logging_config.get_context() == {}


class TestTimers:

    def test_stage_timings(self):
        timings = StageTimings()
        with timings.measure("encode"):
            pass
        with timings.measure("encode"):
            pass
        with timings.measure("write"):
            pass
        assert list(timings.stages) == ["encode", "write"]
        assert timings.total() >= 0.0
        assert timings.summary().startswith("encode=")

    def test_timer_sink(self):
        calls = []
        with timer("stage", sink=lambda name, elapsed: calls.append((name, elapsed))):
            pass
        assert len(calls) == 1
        assert calls[0][0] == "stage"
        assert calls[0][1] >= 0.0

    def test_timer_prints_without_sink(self, capsys):
        with timer("stage"):
            pass
        assert capsys.readouterr().out.startswith("stage: ")
