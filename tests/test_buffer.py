import io

import pytest

from slimclient.buffer import DEFAULT_CAPACITY, SlimBuffer
from slimclient.status import StatusData


def _source(length):
    return bytes(i % 255 for i in range(length))


def test_prebuf():
    source = _source(1024)
    sb = SlimBuffer(io.BytesIO(source), StatusData(), 2)
    assert sb.peek() == source
    assert sb.prebuffered == len(source)


def test_prebuf_overfill():
    source = _source(2048)
    sb = SlimBuffer(io.BytesIO(source), StatusData(), 2)
    first = sb.read(2048)
    second = sb.read(2048 - len(first))
    assert first + second == source
    assert sb.prebuffered == 0


def test_callback():
    source = _source(2048)
    calls = []
    sb = SlimBuffer(io.BytesIO(source), StatusData(), 2, lambda: calls.append(1))
    first = sb.read(2048)
    sb.read(2048 - len(first))
    assert len(calls) == 1


def test_callback_called_without_threshold():
    calls = []
    sb = SlimBuffer(io.BytesIO(b"abc"), StatusData(), 0, lambda: calls.append(1))
    assert calls == [1]
    assert sb.prebuffered == 0


def test_status_updated():
    source = _source(2048)
    status = StatusData()
    sb = SlimBuffer(io.BytesIO(source), status, 2, capacity=4096)
    assert status.buffer_size == 4096
    first = sb.read(2048)
    assert status.bytes_received == len(first)
    rest = sb.read(4096)
    assert status.bytes_received == len(first) + len(rest) == len(source)
    assert status.fullness == 0


def test_default_capacity_recorded():
    status = StatusData()
    SlimBuffer(io.BytesIO(b""), status)
    assert status.buffer_size == DEFAULT_CAPACITY


def test_peek_and_consume_span_prebuf():
    source = _source(3000)
    sb = SlimBuffer(io.BytesIO(source), StatusData(), 1, capacity=2048)
    assert sb.peek() == source[:1024]
    sb.consume(1000)
    assert sb.peek() == source[1000:1024]
    sb.consume(24)
    assert sb.peek() == source[1024:2048]
    sb.consume(1024)
    assert sb.peek() == source[2048:]


def test_stream_without_read1():
    class ReadOnly:
        def __init__(self, data):
            self._data = io.BytesIO(data)

        def read(self, size):
            return self._data.read(size)

    source = _source(500)
    sb = SlimBuffer(ReadOnly(source), StatusData(), 100)
    data = sb.read(1000)
    data += sb.read(1000)
    assert data == source
    assert sb.read(10) == b""


def test_negative_size_rejected():
    sb = SlimBuffer(io.BytesIO(b"abc"), StatusData())
    with pytest.raises(ValueError):
        sb.read(-1)


def test_zero_capacity_rejected():
    with pytest.raises(ValueError):
        SlimBuffer(io.BytesIO(b"abc"), StatusData(), capacity=0)