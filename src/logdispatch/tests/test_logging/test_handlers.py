# src/logdispatch/tests/test_logging/test_handlers.py
import io
import json
import logging
import stat
from datetime import datetime

import pytest

from logdispatch.core.logging.formatters import ColorFormatter, get_formatter
from logdispatch.core.logging.handlers import BaseHandler, ConsoleHandler, FileHandler, HandlerInterface, StdlibHandler
from logdispatch.exceptions import LoggerConfigurationError

# A date format without directives renders literally, which keeps lines stable.
FIXED_DATE = "today"


def test_builtin_handlers_satisfy_the_contract():
    for handler in (ConsoleHandler({"stream": io.StringIO()}), FileHandler({}), StdlibHandler({})):
        assert isinstance(handler, HandlerInterface)


def test_base_handler_accepts_all_levels_by_default():
    handler = BaseHandler()
    assert handler.can_handle("debug")
    assert handler.can_handle("emergency")


def test_handles_restricts_levels():
    handler = BaseHandler({"handles": ["error", "critical"]})
    assert handler.can_handle("error")
    assert not handler.can_handle("warning")


def test_set_date_format_chains():
    handler = BaseHandler()
    assert handler.set_date_format("%H:%M") is handler
    assert handler.date_format == "%H:%M"


def test_console_text_line():
    stream = io.StringIO()
    handler = ConsoleHandler({"stream": stream})
    assert handler.set_date_format(FIXED_DATE).handle("error", "disk full") is True
    assert stream.getvalue() == "ERROR - today --> disk full\n"


def test_console_color_line_wraps_only_the_level():
    stream = io.StringIO()
    ConsoleHandler({"stream": stream, "format": "color"}).set_date_format(FIXED_DATE).handle("error", "x")
    line = stream.getvalue()
    assert line.startswith(ColorFormatter.COLOR_CODES["error"])
    assert ColorFormatter.RESET in line
    assert line.endswith(" - today --> x\n")


def test_console_json_line():
    stream = io.StringIO()
    handler = ConsoleHandler({"stream": stream, "format": "json", "service": "billing"})
    handler.set_date_format(FIXED_DATE).handle("warning", "slow query ✓")
    data = json.loads(stream.getvalue())
    assert data == {"timestamp": "today", "level": "WARNING", "message": "slow query ✓", "service": "billing"}


def test_console_defaults_to_stderr(capsys):
    ConsoleHandler({}).set_date_format(FIXED_DATE).handle("info", "to stderr")
    ConsoleHandler({"stream": "stdout"}).set_date_format(FIXED_DATE).handle("info", "to stdout")
    captured = capsys.readouterr()
    assert captured.err == "INFO - today --> to stderr\n"
    assert captured.out == "INFO - today --> to stdout\n"


def test_file_handler_appends_to_a_daily_file(tmp_path):
    handler = FileHandler({"path": tmp_path / "logs", "file_permissions": 0o640})
    handler.set_date_format(FIXED_DATE)

    handler.handle("error", "first")
    handler.handle("info", "second")

    logfile = tmp_path / "logs" / f"log-{datetime.now():%Y-%m-%d}.log"
    assert logfile.read_text(encoding="utf-8") == "ERROR - today --> first\nINFO - today --> second\n"
    assert stat.S_IMODE(logfile.stat().st_mode) == 0o640


def test_file_handler_extension_and_json(tmp_path):
    handler = FileHandler({"path": tmp_path, "file_extension": ".txt", "format": "json"})
    handler.set_date_format(FIXED_DATE).handle("debug", "payload")

    logfile = handler.filepath()
    assert logfile.suffix == ".txt"
    assert json.loads(logfile.read_text(encoding="utf-8"))["message"] == "payload"


def test_file_handler_writes_through_a_stdlib_file_handler(tmp_path):
    handler = FileHandler({"path": tmp_path})
    handler.set_date_format(FIXED_DATE).handle("info", "x")

    assert isinstance(handler._handler, logging.FileHandler)
    assert handler._handler.baseFilename == str(handler.filepath().absolute())
    handler.close()


def test_file_handler_switches_files_when_the_day_changes(tmp_path, monkeypatch):
    handler = FileHandler({"path": tmp_path})
    handler.set_date_format(FIXED_DATE)
    days = iter([datetime(2025, 9, 26), datetime(2025, 9, 26), datetime(2025, 9, 27)])
    original = handler.filepath
    monkeypatch.setattr(handler, "filepath", lambda: original(next(days)))

    handler.handle("info", "one")
    handler.handle("info", "two")
    handler.handle("info", "three")
    handler.close()

    assert (tmp_path / "log-2025-09-26.log").read_text(encoding="utf-8") == (
        "INFO - today --> one\nINFO - today --> two\n"
    )
    assert (tmp_path / "log-2025-09-27.log").read_text(encoding="utf-8") == "INFO - today --> three\n"


def test_console_write_failure_reaches_the_caller():
    class BrokenStream(io.StringIO):
        def write(self, text):
            raise OSError("pipe closed")

    handler = ConsoleHandler({"stream": BrokenStream()})
    with pytest.raises(OSError, match="pipe closed"):
        handler.handle("error", "x")


def test_console_date_format_supports_datetime_directives():
    stream = io.StringIO()
    ConsoleHandler({"stream": stream}).set_date_format("%Y|%f").handle("info", "x")
    year, micro = stream.getvalue().split(" - ")[1].split(" --> ")[0].split("|")
    assert year == f"{datetime.now():%Y}"
    assert len(micro) == 6


def test_stdlib_handler_maps_levels(caplog):
    caplog.set_level(logging.DEBUG, logger="app.audit")
    handler = StdlibHandler({"logger": "app.audit"})

    handler.handle("alert", "page the on-call")
    handler.handle("notice", "cache warmed")

    assert [(r.name, r.levelno, r.getMessage()) for r in caplog.records] == [
        ("app.audit", logging.CRITICAL, "page the on-call"),
        ("app.audit", logging.INFO, "cache warmed"),
    ]
    assert caplog.records[0].severity == "alert"


def test_unknown_format_is_rejected():
    with pytest.raises(LoggerConfigurationError) as exc_info:
        get_formatter("xml")
    assert exc_info.value.error_code == "unknown_format"
