"""Level-filtered logging with elapsed-time prefixes and step timing."""

from __future__ import annotations

import sys
import time
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, TextIO


class Level(str, Enum):
    """Log levels, from most to least verbose."""

    DEBUG = "debug"
    PROGRESS = "progress"
    STEP = "step"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


_LEVEL_ORDER = (
    Level.DEBUG,
    Level.PROGRESS,
    Level.STEP,
    Level.INFO,
    Level.WARN,
    Level.ERROR,
    Level.FATAL,
)


def _rfc3339(now: datetime) -> str:
    text = now.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


class LogFilter:
    """Drops lines below a minimum level and prefixes the rest with time stamps.

    The level of a line is the text between the first ``[`` and the
    following ``]``. Lines without a level always pass.
    """

    def __init__(
        self,
        writer: Optional[TextIO] = None,
        min_level: Level = Level.PROGRESS,
        start: Optional[float] = None,
    ) -> None:
        self.writer = writer
        self.start = time.monotonic() if start is None else start
        self.levels = _LEVEL_ORDER
        self.min_level = Level(min_level)
        self._bad_levels: frozenset[str] = frozenset()
        self._update_bad_levels()

    def _update_bad_levels(self) -> None:
        bad = set()
        for level in self.levels:
            if level == self.min_level:
                break
            bad.add(level.value)
        self._bad_levels = frozenset(bad)

    def set_min_level(self, level: Level) -> None:
        """Only let lines of ``level`` and above pass."""
        self.min_level = Level(level)
        self._update_bad_levels()

    def check(self, line: str) -> bool:
        """Return True if the line passes the level filter."""
        level = ""
        start = line.find("[")
        if start >= 0:
            end = line.find("]", start)
            if end >= 0:
                level = line[start + 1 : end]
        return level not in self._bad_levels

    def write(self, line: str) -> int:
        """Write a single line with prefix; return the number of characters written."""
        if not self.check(line):
            return 0
        elapsed = time.monotonic() - self.start
        prefix = "[%s] %d:%02d:%02d " % (
            _rfc3339(datetime.now().astimezone()),
            int(elapsed // 3600),
            int((elapsed / 60) % 60),
            int(elapsed % 60),
        )
        out = prefix + line
        writer = self.writer if self.writer is not None else sys.stderr
        writer.write(out)
        writer.flush() if hasattr(writer, "flush") else None
        return len(out)


_default_filter = LogFilter()


def _output(message: str) -> None:
    if not message.endswith("\n"):
        message += "\n"
    _default_filter.write(message)


def _sprint(args: tuple) -> str:
    """Join operands, adding spaces only between two non-string operands."""
    parts = []
    prev_is_str = True
    for i, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if i > 0 and not is_str and not prev_is_str:
            parts.append(" ")
        parts.append(str(arg))
        prev_is_str = is_str
    return "".join(parts)


def _format_duration(seconds: float) -> str:
    if seconds <= 0:
        return "0s"
    if seconds < 1e-6:
        return f"{round(seconds * 1e9)}ns"
    if seconds < 1e-3:
        return _trim(f"{seconds * 1e6:.3f}") + "µs"
    if seconds < 1:
        return _trim(f"{seconds * 1e3:.6f}") + "ms"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    text = _trim(f"{secs:.9f}") + "s"
    if hours:
        return f"{int(hours)}h{int(minutes)}m{text}"
    if minutes:
        return f"{int(minutes)}m{text}"
    return text


def _trim(number: str) -> str:
    if "." in number:
        number = number.rstrip("0").rstrip(".")
    return number


def set_min_level(level: Level) -> None:
    """Set the minimum level of the default logger."""
    _default_filter.set_min_level(level)


def println(*args: object) -> None:
    """Log the arguments separated by spaces."""
    _output(" ".join(str(arg) for arg in args))


def printf(fmt: str, *args: object) -> None:
    """Log a %-formatted message."""
    _output(fmt % args if args else fmt)


def fatal(*args: object) -> None:
    """Log the message and exit with status 1."""
    _output(_sprint(args))
    raise SystemExit(1)


def step(name: str) -> Callable[[], None]:
    """Log the start of a step and return a callable that logs its end."""
    started = time.monotonic()
    println("[step] Starting:", name)

    def finished() -> None:
        printf("[step] Finished: %s in %s", name, _format_duration(time.monotonic() - started))

    return finished