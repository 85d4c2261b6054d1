import time
from datetime import timedelta

import pytest

from slimclient.messages import Stat
from slimclient.status import StatusCode, StatusData


@pytest.mark.parametrize(
    "code, text",
    [
        (StatusCode.CONNECT, "STMc"),
        (StatusCode.DECODER_READY, "STMd"),
        (StatusCode.STREAM_ESTABLISHED, "STMe"),
        (StatusCode.FLUSHED, "STMf"),
        (StatusCode.HEADERS_RECEIVED, "STMh"),
        (StatusCode.BUFFER_THRESHOLD, "STMl"),
        (StatusCode.NOT_SUPPORTED, "STMn"),
        (StatusCode.OUTPUT_UNDERRUN, "STMo"),
        (StatusCode.PAUSE, "STMp"),
        (StatusCode.RESUME, "STMr"),
        (StatusCode.TRACK_STARTED, "STMs"),
        (StatusCode.TIMER, "STMt"),
        (StatusCode.UNDERRUN, "STMu"),
    ],
)
def test_status_code_text(code, text):
    assert str(code) == text


def test_add_crlf_accumulates():
    status = StatusData()
    status.add_crlf(3)
    status.add_crlf(2)
    assert status.crlf == 3 + 2


def test_add_crlf_wraps_at_byte():
    status = StatusData(crlf=255)
    status.add_crlf(1)
    assert status.crlf == 0


def test_add_bytes_received_wraps_at_64_bits():
    status = StatusData(bytes_received=2**64 - 1)
    status.add_bytes_received(1)
    assert status.bytes_received == 0
    status.add_bytes_received(1234)
    assert status.bytes_received == 1234


def test_make_status_message_code_and_snapshot():
    status = StatusData(buffer_size=1234)
    msg = status.make_status_message(StatusCode.TIMER)
    assert isinstance(msg, Stat)
    assert msg.event_code == "STMt"
    assert msg.stat_data.buffer_size == 1234
    status.buffer_size = 5678
    assert msg.stat_data.buffer_size == 1234


def test_make_status_message_sets_jiffies():
    status = StatusData(start=time.monotonic() - 5.0)
    msg = status.make_status_message(StatusCode.CONNECT)
    assert msg.stat_data.jiffies >= timedelta(seconds=5)
    assert status.jiffies == msg.stat_data.jiffies


def test_timestamp_carried_into_message():
    status = StatusData()
    status.timestamp = timedelta(milliseconds=1234)
    msg = status.make_status_message(StatusCode.TIMER)
    assert msg.stat_data.timestamp == timedelta(milliseconds=1234)