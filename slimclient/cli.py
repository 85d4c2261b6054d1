"""Command line tools: discover a server, watch its messages, or stay connected."""

from __future__ import annotations

import argparse
import sys
import threading
from typing import TextIO

from .codec import ProtocolError
from .discovery import discover
from .messages import Name, Queryname, Setname, Status
from .server import Server
from .status import StatusCode, StatusData

_CLIENT_NAME = "BoringExample"
_MODEL_NAME = "Example"


def run_discover(timeout: float | None = 3.0, out: TextIO | None = None) -> Server | None:
    """Look for a server and describe it on ``out``."""
    out = out if out is not None else sys.stdout
    try:
        server = discover(timeout)
    except OSError as exc:
        print(f"discovery failed: {exc}", file=out)
        return None
    if server is None:
        print("No response from server", file=out)
        return None
    print(f"Server Address: {server.ip_address}", file=out)
    print(f"Server Port: {server.port}", file=out)
    if server.sync_group_id is not None:
        print(f"Sync Group: {server.sync_group_id}", file=out)
    if server.tlv_map:
        print("TLV responses:", file=out)
        for tlv in server.tlv_map.values():
            print(f"\t{tlv.kind.name.title()}: {tlv.value}", file=out)
    return server


def keep_alive(server: Server, out: TextIO | None = None) -> str:
    """Stay connected, answering name queries and status ticks, until the server hangs up.

    Returns the name the client had when the connection ended.
    """
    out = out if out is not None else sys.stdout
    rx, tx = server.connect()
    client_name = _CLIENT_NAME
    status = StatusData()
    try:
        for msg in rx:
            print(repr(msg), file=out)
            match msg:
                case Queryname():
                    tx.write(Name(client_name))
                case Setname(name=name):
                    client_name = name
                case Status(timestamp=timestamp):
                    status.timestamp = timestamp
                    tx.write(status.make_status_message(StatusCode.TIMER))
    except (ProtocolError, OSError):
        pass
    return client_name


def _watch(server: Server, out: TextIO) -> None:
    try:
        rx, _tx = server.connect()
        for msg in rx:
            print(repr(msg), file=out)
    except (ProtocolError, OSError):
        pass


def _with_model_name(server: Server) -> Server:
    server.caps.add_name(_MODEL_NAME)
    return server


def _find(timeout: float, out: TextIO) -> Server | None:
    try:
        server = discover(timeout)
    except OSError as exc:
        print(f"discovery failed: {exc}", file=out)
        return None
    if server is None:
        print("No response from server", file=out)
    return server


def main(argv: list[str] | None = None) -> int:
    """Entry point of the command line tool."""
    parser = argparse.ArgumentParser(prog="slimclient", description="Talk to a Slim server.")
    commands = parser.add_subparsers(dest="command", required=True)

    find = commands.add_parser("discover", help="find a server on the network")
    find.add_argument("--timeout", type=float, default=3.0, help="seconds to wait")

    hello = commands.add_parser("hello", help="connect and print server messages for a while")
    hello.add_argument("--timeout", type=float, default=10.0, help="seconds to run")

    alive = commands.add_parser("keep-alive", help="stay connected, answering the server")
    alive.add_argument("--timeout", type=float, default=10.0, help="seconds to wait for a server")

    args = parser.parse_args(argv)
    out = sys.stdout

    if args.command == "discover":
        return 0 if run_discover(args.timeout, out) is not None else 1

    server = _find(args.timeout, out)
    if server is None:
        return 1
    _with_model_name(server)

    if args.command == "hello":
        watcher = threading.Thread(target=_watch, args=(server, out), daemon=True)
        watcher.start()
        watcher.join(args.timeout)
        return 0

    keep_alive(server, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())