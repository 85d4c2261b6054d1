"""Framing and decoding of the messages exchanged with the server."""

from __future__ import annotations

import struct
from collections.abc import Callable, Iterator
from datetime import timedelta
from enum import Enum
from ipaddress import IPv4Address
from typing import BinaryIO, TypeVar

from .encode import encode_client_message
from .messages import (
    AutoStart,
    ClientMessage,
    DisableDac,
    Enable,
    Flush,
    Format,
    Gain,
    Pause,
    PcmChannels,
    PcmEndian,
    PcmSampleSize,
    Queryname,
    Serv,
    ServerMessage,
    Setname,
    Skip,
    SpdifEnable,
    Status,
    Stop,
    Stream,
    StreamFlags,
    TransType,
    Unpause,
    Unrecognised,
)

_GAIN_FACTOR = 65536.0
_HEADER_SIZE = 2
_READ_SIZE = 4096

_SAMPLE_RATES = {
    "0": 11_000,
    "1": 22_000,
    "2": 32_000,
    "3": 44_100,
    "4": 48_000,
    "5": 8_000,
    "6": 12_000,
    "7": 16_000,
    "8": 24_000,
    "9": 96_000,
}

_KNOWN_FLAGS = 0
for _flag in StreamFlags:
    _KNOWN_FLAGS |= _flag.value

_E = TypeVar("_E", bound=Enum)


class ProtocolError(ValueError):
    """Raised when data from the server cannot be understood."""


def _lookup(enum_type: type[_E], raw: object) -> _E:
    try:
        return enum_type(raw)
    except ValueError:
        raise ProtocolError(f"invalid {enum_type.__name__} value {raw!r}") from None


def _u32(data: bytes, offset: int) -> int:
    return struct.unpack_from(">I", data, offset)[0]


def _millis(data: bytes, offset: int) -> timedelta:
    return timedelta(milliseconds=_u32(data, offset))


def _decode_serv(body: bytes) -> ServerMessage:
    if len(body) < 4:
        raise ProtocolError("serv message too short")
    ip_address = IPv4Address(body[:4])
    rest = body[4:]
    sync_group = rest.decode("latin-1") if rest else None
    return Serv(ip_address=ip_address, sync_group_id=sync_group)


def _decode_stream(rest: bytes) -> Stream:
    autostart = _lookup(AutoStart, chr(rest[0]))
    fmt = _lookup(Format, chr(rest[1]))
    sample_size = _lookup(PcmSampleSize, chr(rest[2]))

    rate_code = chr(rest[3])
    if rate_code == "?":
        sample_rate = None
    elif rate_code in _SAMPLE_RATES:
        sample_rate = _SAMPLE_RATES[rate_code]
    else:
        raise ProtocolError(f"invalid sample rate code {rate_code!r}")

    channels = _lookup(PcmChannels, chr(rest[4]))
    endian = _lookup(PcmEndian, chr(rest[5]))
    threshold = rest[6] * 1024
    spdif = _lookup(SpdifEnable, rest[7])
    trans_period = timedelta(seconds=rest[8])
    trans_type = _lookup(TransType, chr(rest[9]))
    flag_bits = rest[10]
    flags = StreamFlags(flag_bits) if flag_bits & ~_KNOWN_FLAGS == 0 else StreamFlags(0)
    output_threshold = timedelta(milliseconds=rest[11] * 10)
    # rest[12] is reserved
    replay_gain = _u32(rest, 13) / _GAIN_FACTOR
    server_port = struct.unpack_from(">H", rest, 17)[0]
    server_ip = IPv4Address(rest[19:23])
    headers = rest[23:]
    http_headers = headers.decode("utf-8", errors="replace") if headers else None

    return Stream(
        autostart=autostart,
        format=fmt,
        pcmsamplesize=sample_size,
        pcmsamplerate=sample_rate,
        pcmchannels=channels,
        pcmendian=endian,
        threshold=threshold,
        spdif_enable=spdif,
        trans_period=trans_period,
        trans_type=trans_type,
        flags=flags,
        output_threshold=output_threshold,
        replay_gain=replay_gain,
        server_port=server_port,
        server_ip=server_ip,
        http_headers=http_headers,
    )


def _decode_strm(body: bytes) -> ServerMessage:
    if len(body) < 24:
        raise ProtocolError("strm message too short")
    command = chr(body[0])
    rest = body[1:]
    match command:
        case "t":
            return Status(_millis(rest, 14))
        case "s":
            return _decode_stream(rest)
        case "q":
            return Stop()
        case "f":
            return Flush()
        case "p":
            return Pause(_millis(rest, 13))
        case "u":
            return Unpause(_millis(rest, 13))
        case "a":
            return Skip(_millis(rest, 13))
        case _:
            return Unrecognised(f"strm_{command}")


def _decode_aude(body: bytes) -> ServerMessage:
    if len(body) < 2:
        raise ProtocolError("aude message too short")
    return Enable(spdif=body[0] != 0, dac=body[1] != 0)


def _decode_audg(body: bytes) -> ServerMessage:
    if len(body) < 18:
        raise ProtocolError("audg message too short")
    left = _u32(body, 10) / _GAIN_FACTOR
    right = _u32(body, 14) / _GAIN_FACTOR
    return Gain(left=left, right=right)


def _decode_setd(body: bytes) -> ServerMessage:
    if not body:
        raise ProtocolError("setd message is empty")
    kind, rest = body[0], body[1:]
    if kind == 0:
        if not rest:
            return Queryname()
        try:
            name = rest[:-1].decode("utf-8")
        except UnicodeDecodeError:
            name = ""
        return Setname(name)
    if kind == 4:
        return DisableDac()
    return Unrecognised(f"This SETD is unused: {kind}")


_DECODERS: dict[str, Callable[[bytes], ServerMessage]] = {
    "serv": _decode_serv,
    "strm": _decode_strm,
    "aude": _decode_aude,
    "audg": _decode_audg,
    "setd": _decode_setd,
}


def decode_server_message(data: bytes) -> ServerMessage:
    """Decode one unframed server message: a 4-byte opcode followed by its body."""
    data = bytes(data)
    if len(data) < 4:
        raise ProtocolError("message shorter than its opcode")
    try:
        opcode = data[:4].decode("utf-8")
    except UnicodeDecodeError:
        opcode = ""
    decoder = _DECODERS.get(opcode)
    if decoder is None:
        return Unrecognised(opcode)
    return decoder(data[4:])


class SlimCodec:
    """Encodes client messages and splits framed server data into messages."""

    def encode(self, item: ClientMessage) -> bytes:
        """Return the wire form of a client message."""
        return encode_client_message(item)

    def decode(self, buf: bytearray) -> list[ServerMessage] | None:
        """Consume every complete frame at the start of ``buf``.

        Returns the decoded messages, or None when not even one frame is
        complete. On corrupt data the buffer is cleared and ProtocolError raised.
        """
        messages: list[ServerMessage] = []
        while len(buf) > _HEADER_SIZE:
            frame_size = int.from_bytes(buf[:_HEADER_SIZE], "big")
            end = _HEADER_SIZE + frame_size
            if len(buf) < end:
                break
            frame = bytes(buf[_HEADER_SIZE:end])
            del buf[:end]
            try:
                messages.append(decode_server_message(frame))
            except ProtocolError as exc:
                buf.clear()
                raise ProtocolError(f"Server data corrupted: {exc}") from exc
        return messages or None


class FramedReader:
    """Reads batches of server messages from a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._codec = SlimCodec()
        self._buffer = bytearray()

    def _read_chunk(self) -> bytes:
        read1 = getattr(self._stream, "read1", None)
        if read1 is not None:
            return read1(_READ_SIZE)
        return self._stream.read(_READ_SIZE)

    def read(self) -> list[ServerMessage]:
        """Block until at least one message is available and return them all.

        Raises EOFError when the stream ends first.
        """
        while True:
            messages = self._codec.decode(self._buffer)
            if messages is not None:
                return messages
            chunk = self._read_chunk()
            if not chunk:
                raise EOFError("connection closed by server")
            self._buffer.extend(chunk)

    def __iter__(self) -> Iterator[ServerMessage]:
        """Yield messages one at a time until the stream ends."""
        while True:
            try:
                batch = self.read()
            except EOFError:
                return
            yield from batch


class FramedWriter:
    """Writes client messages to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._codec = SlimCodec()

    def write(self, msg: ClientMessage) -> None:
        """Encode, write and flush one client message."""
        self._stream.write(self._codec.encode(msg))
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()