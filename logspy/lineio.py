"""A writable stream that turns each written line into a log entry."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from logspy.observer import Entry, Level


class LineWriter:
    """Buffers written bytes and logs one entry per line.

    Partial lines stay buffered until a newline arrives or the writer is
    synced or closed.
    """

    def __init__(self, core: Any, level: Level = Level.INFO) -> None:
        self.core = core
        self.level = level
        self._buffer = bytearray()

    def write(self, data: bytes | str) -> int:
        """Log every complete line in ``data``; return its length."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        written = len(data)
        if not self.core.enabled(self.level):
            return written
        remaining = bytes(data)
        while remaining:
            remaining = self._write_line(remaining)
        return written

    def _write_line(self, line: bytes) -> bytes:
        idx = line.find(b"\n")
        if idx < 0:
            self._buffer += line
            return b""
        head, rest = line[:idx], line[idx + 1 :]
        if not self._buffer:
            self._log(head)
            return rest
        self._buffer += head
        # Empty lines in mid-stream are logged so "foo\n\nbar" keeps its gap.
        self._flush(allow_empty=True)
        return rest

    def sync(self) -> None:
        """Log any buffered partial line as its own entry."""
        self._flush(allow_empty=False)

    def close(self) -> None:
        """Flush buffered data; call when done writing."""
        self.sync()

    def __enter__(self) -> "LineWriter":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _flush(self, allow_empty: bool) -> None:
        if allow_empty or self._buffer:
            self._log(bytes(self._buffer))
        self._buffer.clear()

    def _log(self, data: bytes) -> None:
        message = data.decode("utf-8", errors="replace")
        checked = self.core.check(Entry(self.level, message, datetime.now(timezone.utc)))
        if checked is not None:
            checked.write()