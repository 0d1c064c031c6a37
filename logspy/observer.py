"""An in-memory core that records log entries without encoding them."""

from __future__ import annotations

import dataclasses
import enum
import threading
from datetime import datetime
from typing import Any, Callable, Iterable, Sequence


class Level(enum.IntEnum):
    """Logging priority; higher values are more important."""

    DEBUG = -1
    INFO = 0
    WARN = 1
    ERROR = 2
    DPANIC = 3
    PANIC = 4
    FATAL = 5

    def enabled(self, level: "Level") -> bool:
        """Report whether ``level`` is at or above this level."""
        return level >= self

    def __str__(self) -> str:
        return self.name.lower()


@dataclasses.dataclass(frozen=True)
class Entry:
    """The fixed part of a log message."""

    level: Level = Level.INFO
    message: str = ""
    time: datetime | None = None
    logger_name: str = ""
    caller: str | None = None
    stack: str = ""


@dataclasses.dataclass(frozen=True, eq=False)
class Field:
    """A key-value pair attached to a log entry, or a namespace marker."""

    key: str
    value: Any = None
    is_namespace: bool = False

    @staticmethod
    def namespace(key: str) -> "Field":
        """Create a field that nests all following fields under ``key``."""
        return Field(key, None, True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        return (
            self.key == other.key
            and self.is_namespace == other.is_namespace
            and type(self.value) is type(other.value)
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((self.key, self.is_namespace))


@dataclasses.dataclass
class LoggedEntry:
    """An encoding-agnostic record of one log message."""

    entry: Entry
    context: list[Field] = dataclasses.field(default_factory=list)

    @property
    def level(self) -> Level:
        return self.entry.level

    @property
    def message(self) -> str:
        return self.entry.message

    @property
    def time(self) -> datetime | None:
        return self.entry.time

    def context_map(self) -> dict[str, Any]:
        """Return the context fields as a (possibly nested) dict."""
        result: dict[str, Any] = {}
        current = result
        for f in self.context:
            if f.is_namespace:
                nested: dict[str, Any] = {}
                current[f.key] = nested
                current = nested
            else:
                current[f.key] = f.value
        return result


class ObservedLogs:
    """A thread-safe, ordered collection of observed log entries."""

    def __init__(self, logs: Iterable[LoggedEntry] = ()) -> None:
        self._lock = threading.Lock()
        self._logs = list(logs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._logs)

    def all(self) -> list[LoggedEntry]:
        """Return a copy of all observed entries."""
        with self._lock:
            return list(self._logs)

    def take_all(self) -> list[LoggedEntry]:
        """Return all observed entries and clear the collection."""
        with self._lock:
            taken, self._logs = self._logs, []
        return taken

    def all_untimed(self) -> list[LoggedEntry]:
        """Return all entries with their timestamps cleared."""
        return [
            LoggedEntry(dataclasses.replace(e.entry, time=None), list(e.context))
            for e in self.all()
        ]

    def filter_level_exact(self, level: Level) -> "ObservedLogs":
        """Keep entries logged at exactly ``level``."""
        return self.filter(lambda e: e.level == level)

    def filter_message(self, msg: str) -> "ObservedLogs":
        """Keep entries whose message equals ``msg``."""
        return self.filter(lambda e: e.message == msg)

    def filter_message_snippet(self, snippet: str) -> "ObservedLogs":
        """Keep entries whose message contains ``snippet``."""
        return self.filter(lambda e: snippet in e.message)

    def filter_field(self, field: Field) -> "ObservedLogs":
        """Keep entries carrying a field equal to ``field``."""
        return self.filter(lambda e: any(f == field for f in e.context))

    def filter_field_key(self, key: str) -> "ObservedLogs":
        """Keep entries carrying a field named ``key``."""
        return self.filter(lambda e: any(f.key == key for f in e.context))

    def filter(self, keep: Callable[[LoggedEntry], bool]) -> "ObservedLogs":
        """Return a new collection of the entries for which ``keep`` is true."""
        with self._lock:
            return ObservedLogs(e for e in self._logs if keep(e))

    def _add(self, entry: LoggedEntry) -> None:
        with self._lock:
            self._logs.append(entry)

    def _wait_for_writers(self) -> None:
        self._lock.acquire()
        self._lock.release()


class _CheckedEntry:
    """An entry that passed a core's level check and may be written."""

    def __init__(self, entry: Entry, core: "ObserverCore") -> None:
        self.entry = entry
        self._core = core

    def write(self, *fields: Field) -> None:
        self._core.write(self.entry, fields)


class ObserverCore:
    """A core that stores every enabled entry in an :class:`ObservedLogs`."""

    def __init__(
        self, enabler: Any, logs: ObservedLogs, context: Sequence[Field] = ()
    ) -> None:
        self._enabler = enabler
        self._logs = logs
        self._context = tuple(context)

    def enabled(self, level: Level) -> bool:
        check = getattr(self._enabler, "enabled", None)
        if callable(check):
            return bool(check(level))
        return bool(self._enabler(level))

    def with_fields(self, fields: Iterable[Field]) -> "ObserverCore":
        """Return a child core that adds ``fields`` to every entry."""
        return ObserverCore(self._enabler, self._logs, self._context + tuple(fields))

    def check(self, entry: Entry) -> _CheckedEntry | None:
        """Return a writable handle if ``entry``'s level is enabled."""
        if self.enabled(entry.level):
            return _CheckedEntry(entry, self)
        return None

    def write(self, entry: Entry, fields: Iterable[Field]) -> None:
        self._logs._add(LoggedEntry(entry, [*self._context, *fields]))

    def sync(self) -> None:
        """Wait for any write in progress; entries are never buffered."""
        self._logs._wait_for_writers()


def new(enabler: Any) -> tuple[ObserverCore, ObservedLogs]:
    """Create an observing core and the collection it records into."""
    logs = ObservedLogs()
    return ObserverCore(enabler, logs), logs