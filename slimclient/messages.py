"""Messages exchanged with the server and the values they carry."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum, IntEnum, IntFlag
from ipaddress import IPv4Address
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .status import StatusData


class TlvKind(Enum):
    """Tokens the server answers discovery requests with."""

    NAME = "NAME"
    VERSION = "VERS"
    ADDRESS = "IPAD"
    PORT = "JSON"


@dataclass(frozen=True)
class ServerTlv:
    """A type-length-value item from a discovery response."""

    kind: TlvKind
    value: str | int | IPv4Address


class AutoStart(str, Enum):
    NONE = "0"
    AUTO = "1"
    DIRECT = "2"
    AUTO_DIRECT = "3"


class Format(str, Enum):
    PCM = "p"
    MP3 = "m"
    FLAC = "f"
    WMA = "w"
    OGG = "o"
    AAC = "a"
    ALAC = "l"


class PcmSampleSize(str, Enum):
    EIGHT = "0"
    SIXTEEN = "1"
    TWENTY = "2"
    THIRTY_TWO = "3"
    SELF_DESCRIBING = "?"


class PcmChannels(str, Enum):
    MONO = "1"
    STEREO = "2"
    SELF_DESCRIBING = "?"


class PcmEndian(str, Enum):
    BIG = "0"
    LITTLE = "1"
    SELF_DESCRIBING = "?"


class SpdifEnable(IntEnum):
    AUTO = 0
    ON = 1
    OFF = 2


class TransType(str, Enum):
    NONE = "0"
    CROSSFADE = "1"
    FADE_IN = "2"
    FADE_OUT = "3"
    FADE_IN_OUT = "4"


class StreamFlags(IntFlag):
    INF_LOOP = 0b1000_0000
    NO_RESTART_DECODER = 0b0100_0000
    INVERT_POLARITY_LEFT = 0b0000_0001
    INVERT_POLARITY_RIGHT = 0b0000_0010


# Client to server


@dataclass(frozen=True)
class Helo:
    """Announces the client to the server."""

    device_id: int
    revision: int
    mac: bytes
    uuid: bytes
    wlan_channel_list: int
    bytes_received: int
    language: str
    capabilities: str


@dataclass(frozen=True)
class Stat:
    """A status report with its event code."""

    event_code: str
    stat_data: StatusData


@dataclass(frozen=True)
class Bye:
    """Says goodbye to the server."""

    value: int


@dataclass(frozen=True)
class Name:
    """Tells the server the player's name."""

    name: str


ClientMessage = Union[Helo, Stat, Bye, Name]


# Server to client


@dataclass(frozen=True)
class Serv:
    """Asks the client to switch to another server."""

    ip_address: IPv4Address
    sync_group_id: str | None = None


@dataclass(frozen=True)
class Status:
    """A status request carrying the server's timestamp."""

    timestamp: timedelta


@dataclass(frozen=True)
class Stream:
    """Asks the client to start streaming."""

    autostart: AutoStart
    format: Format
    pcmsamplesize: PcmSampleSize
    pcmsamplerate: int | None  # None means self-describing
    pcmchannels: PcmChannels
    pcmendian: PcmEndian
    threshold: int
    spdif_enable: SpdifEnable
    trans_period: timedelta
    trans_type: TransType
    flags: StreamFlags
    output_threshold: timedelta
    replay_gain: float
    server_port: int
    server_ip: IPv4Address
    http_headers: str | None


@dataclass(frozen=True)
class Gain:
    left: float
    right: float


@dataclass(frozen=True)
class Enable:
    spdif: bool
    dac: bool


@dataclass(frozen=True)
class Flush:
    pass


@dataclass(frozen=True)
class Stop:
    pass


@dataclass(frozen=True)
class Pause:
    interval: timedelta


@dataclass(frozen=True)
class Unpause:
    interval: timedelta


@dataclass(frozen=True)
class Queryname:
    pass


@dataclass(frozen=True)
class Setname:
    name: str


@dataclass(frozen=True)
class DisableDac:
    pass


@dataclass(frozen=True)
class Skip:
    interval: timedelta


@dataclass(frozen=True)
class Unrecognised:
    text: str


ServerMessage = Union[
    Serv,
    Status,
    Stream,
    Gain,
    Enable,
    Flush,
    Stop,
    Pause,
    Unpause,
    Queryname,
    Setname,
    DisableDac,
    Skip,
    Unrecognised,
]