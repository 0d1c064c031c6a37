"""A logger that writes console-formatted lines to a test's log."""

from __future__ import annotations

import dataclasses
import json
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol, Sequence, runtime_checkable

from logspy.observer import Field, Level
from logspy.write_syncer import WriteSyncer


@runtime_checkable
class TestingT(Protocol):
    """The subset of a test object's API that the test logger relies on."""

    def logf(self, fmt: str, *args: Any) -> None:
        """Log a message without failing the test."""

    def errorf(self, fmt: str, *args: Any) -> None:
        """Log a message and mark the test as failed."""

    def fail(self) -> None:
        """Mark the test as failed."""

    def failed(self) -> bool:
        """Report whether the test has been marked as failed."""

    def name(self) -> str:
        """Return the test's name."""

    def fail_now(self) -> None:
        """Mark the test as failed and stop it."""


@dataclasses.dataclass(frozen=True)
class TestingWriter:
    """A write syncer that forwards each write to a test's log."""

    t: TestingT
    mark_failed: bool = False

    def with_mark_failed(self, value: bool) -> "TestingWriter":
        """Return a copy that marks the test failed on every write if ``value``."""
        return dataclasses.replace(self, mark_failed=value)

    def write(self, data: bytes) -> int:
        written = len(data)
        # The test log adds its own newline.
        text = bytes(data).rstrip(b"\n").decode("utf-8", errors="replace")
        self.t.logf("%s", text)
        if self.mark_failed:
            self.t.fail()
        return written

    def sync(self) -> None:
        return None


def _json_value(value: Any) -> str:
    def fallback(obj: Any) -> str:
        return str(obj)

    return json.dumps(value, default=fallback, ensure_ascii=False, separators=(", ", ": "))


def _encode_fields(fields: Sequence[Field]) -> str:
    items: list[str] = []
    for position, f in enumerate(fields):
        if f.is_namespace:
            items.append(f"{json.dumps(f.key)}: {_encode_fields(fields[position + 1:])}")
            break
        items.append(f"{json.dumps(f.key)}: {_json_value(f.value)}")
    return "{" + ", ".join(items) + "}"


def _format_time(moment: datetime) -> str:
    stamp = moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}"
    offset = moment.utcoffset()
    if not offset:
        return stamp + "Z"
    return stamp + moment.strftime("%z")


class TestLogger:
    """A structured logger that encodes entries as console lines."""

    def __init__(
        self,
        sink: WriteSyncer,
        enabler: Any,
        error_output: WriteSyncer,
        fields: Iterable[Field] = (),
    ) -> None:
        self.sink = sink
        self.enabler = enabler
        self.error_output = error_output
        self.fields = tuple(fields)

    def _enabled(self, level: Level) -> bool:
        check = getattr(self.enabler, "enabled", None)
        if callable(check):
            return bool(check(level))
        return bool(self.enabler(level))

    def _report(self, err: BaseException) -> None:
        moment = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f +0000 UTC")
        self.error_output.write(f"{moment} write error: {err}\n".encode("utf-8"))

    def _log(self, level: Level, msg: str, fields: Sequence[Field]) -> None:
        enabled = self._enabled(level)
        if enabled:
            all_fields = [*self.fields, *fields]
            parts = [_format_time(datetime.now().astimezone()), str(level).upper(), msg]
            if all_fields:
                parts.append(_encode_fields(all_fields))
            line = "\t".join(parts) + "\n"
            try:
                self.sink.write(line.encode("utf-8"))
                if level > Level.ERROR:
                    self.sink.sync()
            except Exception as exc:
                self._report(exc)
        if level == Level.PANIC:
            raise RuntimeError(msg)
        if level == Level.FATAL:
            raise SystemExit(1)

    def debug(self, msg: str, *args: Field) -> None:
        self._log(Level.DEBUG, msg, args)

    def info(self, msg: str, *args: Field) -> None:
        self._log(Level.INFO, msg, args)

    def warn(self, msg: str, *args: Field) -> None:
        self._log(Level.WARN, msg, args)

    def error(self, msg: str, *args: Field) -> None:
        self._log(Level.ERROR, msg, args)

    def panic(self, msg: str, *args: Field) -> None:
        """Log at PANIC level, then raise :class:`RuntimeError`."""
        self._log(Level.PANIC, msg, args)

    def with_fields(self, *args: Field) -> "TestLogger":
        """Return a child logger that adds ``args`` to every entry."""
        return TestLogger(self.sink, self.enabler, self.error_output, self.fields + args)


def new_logger(
    t: TestingT, level: Any = Level.DEBUG, fields: Iterable[Field] = ()
) -> TestLogger:
    """Build a logger writing to ``t``; internal errors also fail the test."""
    writer = TestingWriter(t)
    return TestLogger(writer, level, writer.with_mark_failed(True), fields)