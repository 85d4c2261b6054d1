"""Serialisation of client messages into the framed wire format."""

from __future__ import annotations

import struct
from datetime import timedelta

from .messages import Bye, ClientMessage, Helo, Name, Stat

_U32_MAX = 0xFFFF_FFFF
_MILLISECOND = timedelta(milliseconds=1)


def _millis_u32(interval: timedelta) -> int:
    """Whole milliseconds of an interval, or 0 when it does not fit in 32 bits."""
    millis = interval // _MILLISECOND
    return millis if 0 <= millis <= _U32_MAX else 0


def _helo_body(msg: Helo) -> bytes:
    if len(msg.mac) != 6:
        raise ValueError("a MAC address is six bytes long")
    if len(msg.uuid) != 16:
        raise ValueError("a UUID is sixteen bytes long")
    if len(msg.language) != 2:
        raise ValueError("a language code is two characters long")
    language = bytes(ord(c) & 0xFF for c in msg.language)
    return b"".join(
        [
            struct.pack(">BB", msg.device_id, msg.revision),
            bytes(msg.mac),
            bytes(msg.uuid),
            struct.pack(">HQ", msg.wlan_channel_list, msg.bytes_received),
            language,
            msg.capabilities.encode("utf-8"),
        ]
    )


def _stat_body(msg: Stat) -> bytes:
    data = msg.stat_data
    return msg.event_code.encode("utf-8") + struct.pack(
        ">BHIIQHIIIIHIIH",
        data.crlf,
        0,
        data.buffer_size,
        data.fullness,
        data.bytes_received,
        data.sig_strength,
        _millis_u32(data.jiffies),
        data.output_buffer_size,
        data.output_buffer_fullness,
        data.elapsed_seconds,
        data.voltage,
        data.elapsed_milliseconds,
        _millis_u32(data.timestamp),
        data.error_code,
    )


def encode_client_message(msg: ClientMessage) -> bytes:
    """Encode a client message as opcode, 32-bit body length and body."""
    match msg:
        case Helo():
            opcode, body = b"HELO", _helo_body(msg)
        case Bye(value=value):
            opcode, body = b"BYE!", struct.pack(">B", value)
        case Stat():
            opcode, body = b"STAT", _stat_body(msg)
        case Name(name=name):
            opcode, body = b"SETD", b"\x00" + name.encode("utf-8")
        case _:
            raise TypeError(f"not a client message: {msg!r}")
    return opcode + struct.pack(">I", len(body)) + body