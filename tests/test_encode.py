import struct
from datetime import timedelta

import pytest

from slimclient.encode import encode_client_message
from slimclient.messages import Bye, Helo, Name, Serv, Stat
from slimclient.status import StatusData


def _helo(**overrides):
    fields = dict(
        device_id=0,
        revision=1,
        mac=bytes([1, 2, 3, 4, 5, 6]),
        uuid=bytes([7] * 16),
        wlan_channel_list=0x89AB,
        bytes_received=1234,
        language="uk",
        capabilities="abcd",
    )
    fields.update(overrides)
    return Helo(**fields)


def _stat_data(**overrides):
    fields = dict(
        crlf=0,
        buffer_size=1234,
        fullness=5678,
        bytes_received=9123,
        sig_strength=45,
        jiffies=timedelta(milliseconds=6789),
        output_buffer_size=1234,
        output_buffer_fullness=5678,
        elapsed_seconds=9012,
        voltage=3456,
        elapsed_milliseconds=7890,
        timestamp=timedelta(milliseconds=1234),
        error_code=5678,
    )
    fields.update(overrides)
    return StatusData(**fields)


def test_send_helo():
    buf = encode_client_message(_helo())
    assert len(buf) == 48
    assert buf[:32] == bytes(
        [ord("H"), ord("E"), ord("L"), ord("O"), 0, 0, 0, 40, 0, 1, 1, 2, 3, 4, 5, 6]
        + [7] * 16
    )
    assert buf[32:] == bytes(
        [137, 171, 0, 0, 0, 0, 0, 0, 4, 210]
    ) + b"ukabcd"


def test_send_bye():
    buf = encode_client_message(Bye(55))
    assert buf == b"BYE!" + bytes([0, 0, 0, 1, 55])


def test_send_stat():
    buf = encode_client_message(Stat(event_code="STMt", stat_data=_stat_data()))
    assert len(buf) == 61
    assert buf[:32] == b"STAT" + bytes([0, 0, 0, 53]) + b"STMt" + bytes(
        [0, 0, 0, 0, 0, 4, 210, 0, 0, 22, 46, 0, 0, 0, 0, 0, 0, 35, 163, 0]
    )
    assert buf[32:] == bytes(
        [
            45, 0, 0, 26, 133, 0, 0, 4, 210, 0, 0, 22, 46, 0, 0, 35, 52, 13, 128,
            0, 0, 30, 210, 0, 0, 4, 210, 22, 46,
        ]
    )


def test_send_name():
    buf = encode_client_message(Name("BadBoy"))
    assert buf == b"SETD" + bytes([0, 0, 0, 7, 0]) + b"BadBoy"


def test_name_is_utf8_encoded():
    buf = encode_client_message(Name("Küche"))
    body = "Küche".encode("utf-8")
    assert buf[4:8] == struct.pack(">I", len(body) + 1)
    assert buf[9:] == body


def test_stat_oversized_intervals_encode_as_zero():
    data = _stat_data(
        jiffies=timedelta(milliseconds=0x1_0000_0000),
        timestamp=timedelta(days=100),
    )
    buf = encode_client_message(Stat(event_code="STMt", stat_data=data))
    # jiffies sits after opcode(4)+len(4)+code(4)+crlf(1)+pad(2)+3 sizes(16)+sig(2)
    assert buf[33:37] == bytes(4)
    # timestamp sits just before the final error code
    assert buf[-6:-2] == bytes(4)


def test_stat_truncates_sub_millisecond_interval():
    data = _stat_data(jiffies=timedelta(microseconds=2999))
    buf = encode_client_message(Stat(event_code="STMt", stat_data=data))
    assert buf[33:37] == bytes([0, 0, 0, 2])


@pytest.mark.parametrize(
    "overrides",
    [
        {"mac": bytes(5)},
        {"uuid": bytes(15)},
        {"language": "eng"},
    ],
)
def test_helo_rejects_wrong_lengths(overrides):
    with pytest.raises(ValueError):
        encode_client_message(_helo(**overrides))


def test_rejects_non_client_message():
    with pytest.raises(TypeError):
        encode_client_message(Serv(ip_address=None))