import io

import pytest

from logspy.testing_writers import Buffer, Discarder, FailWriter, ShortWriter, Syncer
from logspy.write_syncer import WriteSyncError, add_sync, lock, multi_write_syncer


class WriteSyncSpy(Syncer):
    def __init__(self):
        super().__init__()
        self.buffer = io.BytesIO()

    def write(self, data):
        return self.buffer.write(data)


def test_add_sync_keeps_write_syncer():
    concrete = WriteSyncSpy()
    ws = add_sync(concrete)
    assert ws is concrete
    assert ws.write(b"foo") == 3
    ws.sync()
    assert concrete.called()

    concrete.set_error(RuntimeError("fail"))
    with pytest.raises(RuntimeError, match="fail"):
        ws.sync()


def test_add_sync_wraps_plain_writer():
    buf = io.BytesIO()
    ws = add_sync(buf)
    assert ws is not buf
    assert ws.write(b"foo") == 3
    assert ws.sync() is None
    assert buf.getvalue() == b"foo"


def test_multi_write_syncer_single_writer_is_returned():
    w = Buffer()
    ws = multi_write_syncer(w)
    assert ws is w
    ws.sync()
    assert w.called()


def test_multi_write_syncer_writes_both():
    first, second = io.BytesIO(), io.BytesIO()
    ws = multi_write_syncer(add_sync(first), add_sync(second))
    msg = b"dumbledore"
    assert ws.write(msg) == len(msg)
    assert first.getvalue() == msg
    assert second.getvalue() == msg


def test_multi_write_syncer_fails_write():
    ws = multi_write_syncer(add_sync(FailWriter()))
    with pytest.raises(OSError):
        ws.write(b"test")


def test_multi_write_syncer_short_write():
    ws = multi_write_syncer(add_sync(ShortWriter()))
    assert ws.write(b"test") == 3


def test_multi_write_syncer_reports_smallest_count():
    ws = multi_write_syncer(Discarder(), ShortWriter())
    assert ws.write(b"test") == 3


def test_writes_to_all_even_if_first_errors():
    second = io.BytesIO()
    ws = multi_write_syncer(add_sync(FailWriter()), add_sync(second))
    with pytest.raises(WriteSyncError) as excinfo:
        ws.write(b"fail")
    assert second.getvalue() == b"fail"
    assert len(excinfo.value.errors) == 1
    assert excinfo.value.written == 4


def test_multi_sync_propagates_errors():
    badsink = Buffer()
    badsink.set_error(RuntimeError("sink is full"))
    ws = multi_write_syncer(Discarder(), badsink)
    with pytest.raises(WriteSyncError, match="sink is full"):
        ws.sync()


def test_multi_sync_no_errors_on_discard():
    d = Discarder()
    ws = multi_write_syncer(d)
    assert ws.sync() is None
    assert d.called()


def test_multi_sync_all_called():
    failed, second = Buffer(), Buffer()
    failed.set_error(RuntimeError("disposal broken"))
    ws = multi_write_syncer(failed, second)
    with pytest.raises(WriteSyncError):
        ws.sync()
    assert failed.called()
    assert second.called()


def test_lock_is_not_layered():
    locked = lock(Buffer())
    assert lock(locked) is locked


def test_lock_delegates():
    inner = Buffer()
    locked = lock(inner)
    assert locked.write(b"foo\n") == 4
    locked.sync()
    assert inner.lines() == ["foo"]
    assert inner.called()