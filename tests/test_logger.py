import io
import re

import pytest

from imposm import logger
from imposm.logger import Level, LogFilter


def test_check_drops_levels_below_minimum():
    f = LogFilter(writer=io.StringIO())
    assert f.check("[debug] hidden") is False
    assert f.check("[progress] shown") is True
    assert f.check("[info] shown") is True


def test_check_passes_lines_without_level():
    f = LogFilter(writer=io.StringIO(), min_level=Level.FATAL)
    assert f.check("plain message") is True
    assert f.check("[error] message") is False


def test_set_min_level_changes_filter():
    f = LogFilter(writer=io.StringIO())
    f.set_min_level(Level.WARN)
    assert f.check("[info] x") is False
    assert f.check("[warn] x") is True
    f.set_min_level(Level.DEBUG)
    assert f.check("[debug] x") is True


def test_write_prefixes_line():
    out = io.StringIO()
    f = LogFilter(writer=out)
    written = f.write("[info] hello\n")
    text = out.getvalue()
    assert written == len(text)
    assert re.match(r"^\[[^\]]+\] \d+:\d{2}:\d{2} \[info\] hello\n$", text)


def test_write_filtered_writes_nothing():
    out = io.StringIO()
    f = LogFilter(writer=out)
    assert f.write("[debug] nope\n") == 0
    assert out.getvalue() == ""


def test_println_and_printf(capsys):
    logger.println("[info] a", 1, "b")
    logger.printf("[info] %s-%d", "x", 2)
    err = capsys.readouterr().err
    assert "[info] a 1 b\n" in err
    assert "[info] x-2\n" in err


def test_module_set_min_level(capsys):
    try:
        logger.set_min_level(Level.ERROR)
        logger.println("[info] suppressed")
        logger.println("[error] visible")
    finally:
        logger.set_min_level(Level.PROGRESS)
    err = capsys.readouterr().err
    assert "suppressed" not in err
    assert "[error] visible" in err


def test_fatal_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        logger.fatal("[error] reading mapping file: ", ValueError("broken"))
    assert exc.value.code == 1
    assert "[error] reading mapping file: broken" in capsys.readouterr().err


def test_step_logs_start_and_finish(capsys):
    finish = logger.step("Reading OSM data")
    first = capsys.readouterr().err
    assert "[step] Starting: Reading OSM data" in first
    finish()
    second = capsys.readouterr().err
    assert "[step] Finished: Reading OSM data in " in second