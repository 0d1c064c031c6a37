"""Helpers for testing log output: spy and fake sinks, and timeout scaling.

Timeouts and sleeps are scaled by the ``TEST_TIMEOUT_SCALE`` environment
variable so that slow machines can stretch them.
"""

from __future__ import annotations

import os
import time
from datetime import timedelta
from typing import TypeVar

_SCALE_VARIABLE = "TEST_TIMEOUT_SCALE"

_D = TypeVar("_D", int, float, timedelta)


class Syncer:
    """A spy for the ``sync`` part of a write syncer."""

    def __init__(self) -> None:
        self._err: BaseException | None = None
        self._called = False

    def set_error(self, err: BaseException | None) -> None:
        """Make future ``sync`` calls raise ``err``."""
        self._err = err

    def sync(self) -> None:
        """Record the call and raise the configured error, if any."""
        self._called = True
        if self._err is not None:
            raise self._err

    def called(self) -> bool:
        """Report whether ``sync`` has been called."""
        return self._called


class Discarder(Syncer):
    """A sink that drops everything written to it."""

    def write(self, data: bytes) -> int:
        return len(data)


class FailWriter(Syncer):
    """A sink whose writes always fail."""

    def write(self, data: bytes) -> int:
        err = OSError("failed")
        err.characters_written = len(data)
        raise err


class ShortWriter(Syncer):
    """A sink that always reports one byte fewer than it was given."""

    def write(self, data: bytes) -> int:
        return len(data) - 1


class Buffer(Syncer):
    """An in-memory sink that can split its contents into lines."""

    def __init__(self) -> None:
        super().__init__()
        self._data = bytearray()

    def write(self, data: bytes) -> int:
        self._data += data
        return len(data)

    def write_string(self, text: str) -> int:
        return self.write(text.encode("utf-8"))

    def lines(self) -> list[str]:
        """Return the contents as lines, without trailing newlines."""
        return self.stripped().split("\n")

    def stripped(self) -> str:
        """Return the contents with trailing newlines removed."""
        return self._data.decode("utf-8").rstrip("\n")


def _scale() -> float:
    raw = os.environ.get(_SCALE_VARIABLE, "").strip()
    if not raw:
        return 1.0
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"invalid {_SCALE_VARIABLE} value {raw!r}") from exc


def timeout(base: _D) -> _D:
    """Scale a duration (seconds or timedelta) by ``TEST_TIMEOUT_SCALE``."""
    factor = _scale()
    if isinstance(base, int) and not isinstance(base, bool):
        return int(base * factor)
    return base * factor


def sleep(base: float | timedelta) -> None:
    """Sleep for a duration scaled by ``TEST_TIMEOUT_SCALE``."""
    scaled = timeout(base)
    if isinstance(scaled, timedelta):
        scaled = scaled.total_seconds()
    time.sleep(scaled)