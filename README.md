# logspy

Tools for capturing and checking structured log output in tests, plus a few
small building blocks for routing log data.

## Modules

- `logspy.observer`: an in-memory core that records every enabled entry
  without encoding it. `Level` is the set of priorities, from `DEBUG` to
  `FATAL`. `Entry` holds the fixed part of a message, and `Field` holds one
  key-value pair. `Field.namespace(key)` nests the fields that follow it.
  `new(enabler)` returns an `ObserverCore` together with its `ObservedLogs`.
  The enabler is a `Level` or any callable that takes a level.
  - `ObserverCore` has `enabled`, `check` (returns a handle whose
    `write(*fields)` records the entry, or `None` if the level is off),
    `write`, `with_fields` (a child core that adds context fields) and
    `sync`.
  - `ObservedLogs` supports `len()`, `all()`, `take_all()` (returns the
    entries and clears them) and `all_untimed()` (timestamps set to `None`).
    It has the filters `filter_level_exact`, `filter_message`,
    `filter_message_snippet`, `filter_field`, `filter_field_key` and
    `filter(keep)`. Each filter returns a new `ObservedLogs`.
  - `LoggedEntry.context_map()` turns an entry's fields into a dict, nested
    where namespaces are used.
- `logspy.write_syncer`: `WriteSyncer` is a protocol for anything with
  `write(data)` and `sync()`.
  - `add_sync(writer)` gives a plain writer a `sync` that calls its `flush`,
    if it has one.
  - `lock(ws)` serialises access across threads.
  - `multi_write_syncer(*syncers)` fans writes and syncs out to every target.
    It reports the smallest non-zero byte count. Failures from its targets
    are gathered into a single `WriteSyncError`.
- `logspy.testing_writers`: test doubles.
  - `Syncer` records `sync` calls and can be told to fail with `set_error`.
  - `Discarder` drops what it is given.
  - `FailWriter` always raises `OSError`.
  - `ShortWriter` reports one byte fewer than it was given.
  - `Buffer` keeps its data and offers `lines()` and `stripped()`.
  - `timeout(base)` and `sleep(base)` scale a duration by the
    `TEST_TIMEOUT_SCALE` environment variable.
- `logspy.grpc`: `GrpcLogger(core, *options)` offers the gRPC logger method
  set on top of a core:
  - `print`, `printf`, `println`
  - `info`, `infof`, `infoln`
  - `warning`, `warningf`, `warningln`
  - `error`, `errorf`, `errorln`
  - `fatal`, `fatalf`, `fatalln`
  - `v(level)`

  The `fatal*` methods log at `FATAL` and then raise `SystemExit`. Pass
  `with_debug()` to log the `print*` family at `DEBUG` instead of `INFO`.
  `sprint(*args)` joins values the way the non-`ln` methods do.
- `logspy.lineio`: `LineWriter(core, level)` is a file-like writer that logs
  one entry per line. It accepts bytes or text. A partial line is held until
  a newline arrives, or until `sync()` or `close()` is called. It is also a
  context manager.
- `logspy.testlogger`: `new_logger(t, level, fields)` builds a `TestLogger`.
  `t` is any object that follows the `TestingT` protocol.
  - Each entry goes to `t.logf` as a tab-separated console line: time,
    level, message, and the fields as JSON.
  - The logger has `debug`, `info`, `warn`, `error`, `panic` (raises
    `RuntimeError` after logging) and `with_fields`.
  - If a write fails, the error is reported to `t` and the test is marked as
    failed.
  - `TestingWriter` is the sink behind it.

## Example

```python
from logspy.observer import Level, new
from logspy.lineio import LineWriter

core, logs = new(Level.INFO)

with LineWriter(core, Level.INFO) as out:
    out.write(b"starting up\nrunning\n")
    out.write(b"shutting down")

assert [e.message for e in logs.all()] == ["starting up", "running", "shutting down"]
```

## What it does not do

There is no general-purpose logger, no JSON encoder and no configuration
loading. Entries are either recorded in memory by `ObserverCore` or written
as console lines by `TestLogger`. Samplers, buffered sinks and file outputs
are not provided.

## Running the tests

```
pip install -e ".[test]"
pytest
```