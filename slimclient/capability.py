"""Client capabilities announced to the server in the HELO message."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum


class CapabilityKind(Enum):
    """Kinds of capability, each holding the text template sent to the server."""

    WMA = "wma"
    WMAP = "wmap"
    WMAL = "wmal"
    OGG = "ogg"
    FLC = "flc"
    PCM = "pcm"
    AIF = "aif"
    MP3 = "mp3"
    ALC = "alc"
    AAC = "aac"
    MAXSAMPLERATE = "MaxSampleRate={}"
    MODEL = "Model={}"
    MODELNAME = "Modelname={}"
    RHAP = "Rhap"
    ACCURATEPLAYPOINTS = "AccuratePlayPoints=1"
    SYNCGROUPID = "SyncgroupID={}"
    HASDIGITALOUT = "HasDigitalOut=1"
    HASPREAMP = "HasPreAmp=1"
    HASDISABLEDAC = "HasDisableDac=1"
    FIRMWARE = "Firmware={}"
    BALANCE = "Balance=1"
    CAN_HTTPS = "canHTTPS=1"

    @property
    def takes_value(self) -> bool:
        """Whether a capability of this kind carries a value."""
        return "{}" in self.value


@dataclass(frozen=True, eq=False)
class Capability:
    """A single capability; two capabilities are equal when their kinds match."""

    kind: CapabilityKind
    value: int | str | None = None

    def __post_init__(self) -> None:
        if self.kind.takes_value and self.value is None:
            raise ValueError(f"capability {self.kind.name} requires a value")
        if not self.kind.takes_value and self.value is not None:
            raise ValueError(f"capability {self.kind.name} takes no value")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Capability):
            return NotImplemented
        return self.kind is other.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    def __str__(self) -> str:
        if self.kind.takes_value:
            return self.kind.value.format(self.value)
        return self.kind.value


class Capabilities:
    """An ordered list of capabilities, at most one of each kind."""

    def __init__(self, caps: Iterable[Capability] | None = None) -> None:
        self._caps: list[Capability] = list(caps) if caps is not None else []

    @classmethod
    def default(cls) -> Capabilities:
        """The capabilities most likely for a Squeezelite-like client."""
        return cls(
            [
                Capability(CapabilityKind.MODEL, "squeezelite"),
                Capability(CapabilityKind.MODELNAME, "SqueezeLite"),
                Capability(CapabilityKind.ACCURATEPLAYPOINTS),
                Capability(CapabilityKind.HASDIGITALOUT),
                Capability(CapabilityKind.HASPREAMP),
                Capability(CapabilityKind.HASDISABLEDAC),
            ]
        )

    def add(self, newcap: Capability) -> None:
        """Append a capability, replacing any existing one of the same kind."""
        if newcap in self._caps:
            self._caps.remove(newcap)
        self._caps.append(newcap)

    def add_name(self, name: str) -> None:
        """Set the model name shown by the server."""
        self.add(Capability(CapabilityKind.MODELNAME, name))

    def __iter__(self) -> Iterator[Capability]:
        return iter(self._caps)

    def __len__(self) -> int:
        return len(self._caps)

    def __repr__(self) -> str:
        return f"Capabilities({self._caps!r})"

    def __str__(self) -> str:
        return ",".join(str(cap) for cap in self._caps)