"""Byte sinks that can flush, plus locking and fan-out combinators."""

from __future__ import annotations

import threading
from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class WriteSyncer(Protocol):
    """A byte sink that can also flush any buffered data."""

    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes written."""

    def sync(self) -> None:
        """Flush buffered data, raising on failure."""


class WriteSyncError(Exception):
    """Raised when one or more sinks of a fan-out writer fail."""

    def __init__(self, errors: Sequence[BaseException], written: int = 0) -> None:
        self.errors = list(errors)
        self.written = written
        super().__init__("; ".join(str(err) for err in self.errors))


class _WriterWrapper:
    """Gives a plain writer a ``sync`` method (its ``flush`` if it has one)."""

    def __init__(self, writer: Any) -> None:
        self._writer = writer

    def write(self, data: bytes) -> int:
        written = self._writer.write(data)
        return len(data) if written is None else written

    def sync(self) -> None:
        flush = getattr(self._writer, "flush", None)
        if callable(flush):
            flush()


class _LockedWriteSyncer:
    """Serialises writes and syncs on a wrapped sink."""

    def __init__(self, ws: WriteSyncer) -> None:
        self._ws = ws
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        with self._lock:
            return self._ws.write(data)

    def sync(self) -> None:
        with self._lock:
            self._ws.sync()


class _MultiWriteSyncer:
    """Duplicates writes and syncs across several sinks."""

    def __init__(self, syncers: Sequence[WriteSyncer]) -> None:
        self._syncers = tuple(syncers)

    def write(self, data: bytes) -> int:
        # Every sink is written even if an earlier one fails; the smallest
        # non-zero count is reported.
        errors: list[BaseException] = []
        written = 0
        for ws in self._syncers:
            try:
                count = ws.write(data)
            except Exception as exc:
                errors.append(exc)
                count = getattr(exc, "characters_written", 0)
            if written == 0 and count != 0:
                written = count
            elif count < written:
                written = count
        if errors:
            raise WriteSyncError(errors, written)
        return written

    def sync(self) -> None:
        errors: list[BaseException] = []
        for ws in self._syncers:
            try:
                ws.sync()
            except Exception as exc:
                errors.append(exc)
        if errors:
            raise WriteSyncError(errors)


def add_sync(writer: Any) -> WriteSyncer:
    """Return ``writer`` if it can already sync, otherwise wrap it."""
    if isinstance(writer, WriteSyncer):
        return writer
    return _WriterWrapper(writer)


def lock(ws: WriteSyncer) -> WriteSyncer:
    """Wrap ``ws`` in a lock, unless it is already locked."""
    if isinstance(ws, _LockedWriteSyncer):
        return ws
    return _LockedWriteSyncer(ws)


def multi_write_syncer(*args: WriteSyncer) -> WriteSyncer:
    """Combine sinks so that writes and syncs go to all of them."""
    if len(args) == 1:
        return args[0]
    return _MultiWriteSyncer(args)