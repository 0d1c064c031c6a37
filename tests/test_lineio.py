import pytest

from logspy import observer
from logspy.lineio import LineWriter
from logspy.observer import Entry, Level, LoggedEntry

CASES = [
    (
        "simple",
        Level.INFO,
        ["foo\n", "bar\n", "baz\n"],
        [Entry(Level.INFO, "foo"), Entry(Level.INFO, "bar"), Entry(Level.INFO, "baz")],
    ),
    ("level too low", Level.DEBUG, ["foo\n", "bar\n"], []),
    (
        "multiple newlines in a message",
        Level.WARN,
        ["foo\nbar\n", "baz\n", "qux\nquux\n"],
        [
            Entry(Level.WARN, "foo"),
            Entry(Level.WARN, "bar"),
            Entry(Level.WARN, "baz"),
            Entry(Level.WARN, "qux"),
            Entry(Level.WARN, "quux"),
        ],
    ),
    (
        "message split across multiple writes",
        Level.ERROR,
        ["foo", "bar\nbaz", "qux"],
        [Entry(Level.ERROR, "foobar"), Entry(Level.ERROR, "bazqux")],
    ),
    (
        "blank lines in the middle",
        Level.INFO,
        ["foo\n\nbar\nbaz"],
        [
            Entry(Level.INFO, "foo"),
            Entry(Level.INFO, ""),
            Entry(Level.INFO, "bar"),
            Entry(Level.INFO, "baz"),
        ],
    ),
    (
        "blank line at the end",
        Level.INFO,
        ["foo\nbar\nbaz\n"],
        [Entry(Level.INFO, "foo"), Entry(Level.INFO, "bar"), Entry(Level.INFO, "baz")],
    ),
    (
        "multiple blank line at the end",
        Level.INFO,
        ["foo\nbar\nbaz\n\n"],
        [
            Entry(Level.INFO, "foo"),
            Entry(Level.INFO, "bar"),
            Entry(Level.INFO, "baz"),
            Entry(Level.INFO, ""),
        ],
    ),
]


@pytest.mark.parametrize("desc,level,writes,want", CASES, ids=[c[0] for c in CASES])
def test_writer(desc, level, writes, want):
    core, logs = observer.new(Level.INFO)
    writer = LineWriter(core, level)
    for text in writes:
        assert writer.write(text) == len(text)
    writer.close()
    assert [e.entry for e in logs.all_untimed()] == want


def test_sync():
    core, logs = observer.new(Level.INFO)
    writer = LineWriter(core, Level.INFO)
    writer.write(b"foo")
    writer.write(b"bar")
    assert len(logs) == 0

    writer.sync()
    assert logs.all_untimed() == [LoggedEntry(Entry(Level.INFO, "foobar"), [])]
    logs.take_all()

    writer.sync()
    assert len(logs) == 0


def test_context_manager_flushes():
    core, logs = observer.new(Level.INFO)
    with LineWriter(core) as writer:
        writer.write("starting up\n")
        writer.write("running\n")
        writer.write("shutting down")
    assert [e.message for e in logs.all()] == ["starting up", "running", "shutting down"]
    assert all(e.level == Level.INFO for e in logs.all())