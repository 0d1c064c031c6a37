"""A logger with the method set expected by gRPC's logging interfaces."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from logspy.observer import Entry, Level

GRPC_INFO = 0
GRPC_WARN = 1
GRPC_ERROR = 2
GRPC_FATAL = 3

_GRPC_TO_LEVEL = {
    GRPC_INFO: Level.INFO,
    GRPC_WARN: Level.WARN,
    GRPC_ERROR: Level.ERROR,
    GRPC_FATAL: Level.FATAL,
}

Option = Callable[["GrpcLogger"], None]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "<nil>"
    return str(value)


def sprint(*args: Any) -> str:
    """Join values, adding a space only between two non-string operands."""
    parts: list[str] = []
    previous: Any = None
    for position, arg in enumerate(args):
        if position and not isinstance(arg, str) and not isinstance(previous, str):
            parts.append(" ")
        parts.append(_format_value(arg))
        previous = arg
    return "".join(parts)


def _sprintln(args: tuple[Any, ...]) -> str:
    return " ".join(_format_value(arg) for arg in args)


def _sprintf(fmt: str, args: tuple[Any, ...]) -> str:
    return fmt % args if args else fmt


def with_debug() -> Option:
    """Make ``print``, ``printf`` and ``println`` log at DEBUG instead of INFO."""

    def apply(logger: "GrpcLogger") -> None:
        logger._print_level = Level.DEBUG

    return apply


class GrpcLogger:
    """Adapts a logging core to gRPC's v1 and v2 logger method sets.

    Fatal methods log at FATAL level and then raise :class:`SystemExit`.
    """

    def __init__(self, core: Any, *args: Option) -> None:
        self._core = core
        self._print_level = Level.INFO
        for option in args:
            option(self)

    def _enabled(self, level: Level) -> bool:
        return bool(self._core.enabled(level))

    def _log(self, level: Level, message: str) -> None:
        if level < Level.DPANIC and not self._enabled(level):
            return
        checked = self._core.check(Entry(level, message, datetime.now(timezone.utc)))
        if checked is not None:
            checked.write()
        if level == Level.FATAL:
            raise SystemExit(1)

    def _logln(self, level: Level, args: tuple[Any, ...]) -> None:
        if self._enabled(level):
            self._log(level, _sprintln(args))

    def print(self, *args: Any) -> None:
        self._log(self._print_level, sprint(*args))

    def printf(self, fmt: str, *args: Any) -> None:
        self._log(self._print_level, _sprintf(fmt, args))

    def println(self, *args: Any) -> None:
        self._logln(self._print_level, args)

    def info(self, *args: Any) -> None:
        self._log(Level.INFO, sprint(*args))

    def infoln(self, *args: Any) -> None:
        self._logln(Level.INFO, args)

    def infof(self, fmt: str, *args: Any) -> None:
        self._log(Level.INFO, _sprintf(fmt, args))

    def warning(self, *args: Any) -> None:
        self._log(Level.WARN, sprint(*args))

    def warningln(self, *args: Any) -> None:
        self._logln(Level.WARN, args)

    def warningf(self, fmt: str, *args: Any) -> None:
        self._log(Level.WARN, _sprintf(fmt, args))

    def error(self, *args: Any) -> None:
        self._log(Level.ERROR, sprint(*args))

    def errorln(self, *args: Any) -> None:
        self._logln(Level.ERROR, args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self._log(Level.ERROR, _sprintf(fmt, args))

    def fatal(self, *args: Any) -> None:
        self._log(Level.FATAL, sprint(*args))

    def fatalln(self, *args: Any) -> None:
        self._logln(Level.FATAL, args)

    def fatalf(self, fmt: str, *args: Any) -> None:
        self._log(Level.FATAL, _sprintf(fmt, args))

    def v(self, level: int) -> bool:
        """Report whether a gRPC verbosity level is enabled."""
        return self._enabled(_GRPC_TO_LEVEL.get(level, Level.INFO))