"""Status data the server expects the client to report regularly."""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from .messages import Stat


class StatusCode(Enum):
    """Event codes sent with a status message."""

    CONNECT = "STMc"
    DECODER_READY = "STMd"
    STREAM_ESTABLISHED = "STMe"
    FLUSHED = "STMf"
    HEADERS_RECEIVED = "STMh"
    BUFFER_THRESHOLD = "STMl"
    NOT_SUPPORTED = "STMn"
    OUTPUT_UNDERRUN = "STMo"
    PAUSE = "STMp"
    RESUME = "STMr"
    TRACK_STARTED = "STMs"
    TIMER = "STMt"
    UNDERRUN = "STMu"

    def __str__(self) -> str:
        return self.value


@dataclass
class StatusData:
    """The fields of a status report, plus the client's start time."""

    crlf: int = 0
    buffer_size: int = 0
    fullness: int = 0
    bytes_received: int = 0
    sig_strength: int = 0
    jiffies: timedelta = timedelta(0)
    output_buffer_size: int = 0
    output_buffer_fullness: int = 0
    elapsed_seconds: int = 0
    voltage: int = 0
    elapsed_milliseconds: int = 0
    timestamp: timedelta = timedelta(0)
    error_code: int = 0
    start: float = field(default_factory=time.monotonic, compare=False, repr=False)

    def add_crlf(self, num_crlf: int) -> None:
        """Add to the count of CR/LF pairs seen, wrapping at one byte."""
        self.crlf = (self.crlf + num_crlf) & 0xFF

    def add_bytes_received(self, bytes_received: int) -> None:
        """Add to the byte counter, wrapping at 64 bits."""
        self.bytes_received = (self.bytes_received + bytes_received) & 0xFFFF_FFFF_FFFF_FFFF

    def make_status_message(self, code: StatusCode) -> Stat:
        """Refresh the jiffies and return a status message holding a snapshot."""
        self.jiffies = timedelta(seconds=time.monotonic() - self.start)
        return Stat(event_code=str(code), stat_data=dataclasses.replace(self))