"""Connection details of a server and the means to connect to it."""

from __future__ import annotations

import socket
import uuid
from dataclasses import dataclass, field
from ipaddress import IPv4Address

from .capability import Capabilities
from .codec import FramedReader, FramedWriter
from .messages import Helo, ServerTlv

SLIM_PORT = 3483
DEFAULT_PORT = 9000

_FALLBACK_MAC = bytes([1, 2, 3, 4, 5, 6])
_DEVICE_ID = 12


def _mac_address() -> bytes:
    """The host's MAC address, or a fixed stand-in when none can be found."""
    node = uuid.getnode()
    if (node >> 40) & 1:
        # getnode() sets the multicast bit when it had to make a number up
        return _FALLBACK_MAC
    return node.to_bytes(6, "big")


@dataclass
class Server:
    """Where a server is, what it told us during discovery, and our capabilities."""

    ip_address: IPv4Address = IPv4Address("0.0.0.0")
    port: int = DEFAULT_PORT
    tlv_map: dict[str, ServerTlv] | None = None
    sync_group_id: str | None = None
    caps: Capabilities = field(default_factory=Capabilities)

    def __post_init__(self) -> None:
        self.ip_address = IPv4Address(self.ip_address)

    @classmethod
    def from_serv(cls, ip_address: IPv4Address | str, sync_group_id: str | None = None) -> Server:
        """A server on the protocol port, as named by a serv message."""
        return cls(ip_address=IPv4Address(ip_address), port=SLIM_PORT, sync_group_id=sync_group_id)

    @property
    def address(self) -> tuple[str, int]:
        """The (host, port) pair to connect to."""
        return str(self.ip_address), self.port

    def clone(self) -> Server:
        """A copy fit for connecting; the discovery TLV map is not kept."""
        return Server(
            ip_address=self.ip_address,
            port=self.port,
            tlv_map=None,
            sync_group_id=self.sync_group_id,
            caps=Capabilities(list(self.caps)),
        )

    def connect(self) -> tuple[FramedReader, FramedWriter]:
        """Connect, announce the client with a HELO message and return reader and writer."""
        sock = socket.create_connection(self.address)
        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            rx = FramedReader(sock.makefile("rb"))
            tx = FramedWriter(sock.makefile("wb"))
            tx.write(
                Helo(
                    device_id=_DEVICE_ID,
                    revision=0,
                    mac=_mac_address(),
                    uuid=bytes(16),
                    wlan_channel_list=0,
                    bytes_received=0,
                    language="en",
                    capabilities=str(self.caps),
                )
            )
        finally:
            # The file objects keep the connection open until they are closed.
            sock.close()
        return rx, tx