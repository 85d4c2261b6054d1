"""Finding a server on the local network by UDP broadcast."""

from __future__ import annotations

import re
import socket
import threading
from datetime import timedelta
from ipaddress import AddressValueError, IPv4Address

from .messages import ServerTlv, TlvKind
from .server import SLIM_PORT, Server

_UDP_MAX_SIZE = 1450
_PROBE = b"eNAME\0IPAD\0JSON\0VERS"
_PROBE_INTERVAL = 5.0
_PORT_PATTERN = re.compile(r"\+?[0-9]+")


def _parse_tlv(token: str, value: str) -> ServerTlv | None:
    match token:
        case "NAME":
            return ServerTlv(TlvKind.NAME, value)
        case "VERS":
            return ServerTlv(TlvKind.VERSION, value)
        case "IPAD":
            try:
                return ServerTlv(TlvKind.ADDRESS, IPv4Address(value))
            except AddressValueError:
                return None
        case "JSON":
            if not _PORT_PATTERN.fullmatch(value):
                return None
            port = int(value)
            return ServerTlv(TlvKind.PORT, port) if port <= 0xFFFF else None
        case _:
            return None


def decode_tlv(buf: bytes) -> dict[str, ServerTlv]:
    """Decode the TLV items of a discovery response, stopping at the first bad one."""
    result: dict[str, ServerTlv] = {}
    view = bytes(buf)
    while len(view) > 4 and view[0] < 0x80:
        try:
            token = view[:4].decode("utf-8")
        except UnicodeDecodeError:
            token = ""
        length = view[4]
        view = view[5:]
        if len(view) < length:
            break
        try:
            value = view[:length].decode("utf-8")
        except UnicodeDecodeError:
            value = ""
        tlv = _parse_tlv(token, value)
        if tlv is None:
            break
        result[token] = tlv
        view = view[length:]
    return result


def _announce(sock: socket.socket, stop: threading.Event) -> None:
    while True:
        try:
            sock.sendto(_PROBE, ("255.255.255.255", SLIM_PORT))
        except OSError:
            pass
        if stop.wait(_PROBE_INTERVAL):
            return


def discover(timeout: float | timedelta | None = None) -> Server | None:
    """Broadcast discovery requests until a server answers or the timeout passes.

    Returns None on timeout; with no timeout this waits for ever.
    """
    seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else timeout
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    stop = threading.Event()
    sender: threading.Thread | None = None
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.bind(("0.0.0.0", 0))
        sock.settimeout(seconds)
        sender = threading.Thread(target=_announce, args=(sock, stop), daemon=True)
        sender.start()
        try:
            data, address = sock.recvfrom(_UDP_MAX_SIZE)
        except TimeoutError:
            return None
    finally:
        stop.set()
        if sender is not None:
            sender.join()
        sock.close()

    tlv_map = decode_tlv(data[1:]) if data[:1] == b"E" else None
    return Server(ip_address=IPv4Address(address[0]), port=SLIM_PORT, tlv_map=tlv_map)