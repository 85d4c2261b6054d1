# slimclient

A library for building clients that speak the Slim protocol to a media
server (the server known as LMS or Slim Server). It finds servers on the
local network, opens the TCP control connection, and encodes and decodes
the framed messages sent in both directions. It also keeps the status data
that the server expects the client to report at regular intervals.

The Slim protocol is IPv4 only.

## Installation

```
pip install slimclient
```

The package depends on the standard library alone. To run the tests:

```
pip install "slimclient[test]"
pytest
```

## Command line

The `slimclient` command takes one of three subcommands:

```
slimclient discover [--timeout SECONDS]
slimclient hello [--timeout SECONDS]
slimclient keep-alive [--timeout SECONDS]
```

- `discover` broadcasts discovery pings and prints the address, port, sync
  group and TLV answers of the first server that replies (default wait: 3
  seconds). It exits with status 1 when no server answers.
- `hello` finds a server, connects with the model name `Example`, and prints
  every message the server sends. `--timeout` (default 10) is both the time
  allowed for discovery and the time the command runs before it quits.
  Because it never answers status requests, the server may drop it sooner.
- `keep-alive` finds a server (waiting up to `--timeout` seconds, default
  10), connects, prints every message, answers name queries and status
  ticks, and remembers a name set by the server. It runs until the server
  closes the connection.

## Library overview

- `slimclient.discovery.discover(timeout)` sends discovery pings every five
  seconds and returns a `Server` on port 3483, or `None` when the timeout
  (seconds or a `timedelta`) runs out; with no timeout it waits for ever.
  `decode_tlv(buf)` parses the TLV part of a reply into a dict of
  `ServerTlv` values, stopping at the first item it cannot read.
- `slimclient.server.Server` holds a server's address, port, TLV map, sync
  group and the `Capabilities` to announce. `Server.connect()` opens the
  connection, sends the HELO announcement and returns a `FramedReader` and a
  `FramedWriter`. `Server.from_serv(ip_address, sync_group_id)` builds a
  server on the protocol port from a `Serv` message. `Server.clone()` copies
  it without the TLV map.
- `slimclient.capability.Capabilities` is the ordered list of `Capability`
  values announced to the server; adding a capability replaces any of the
  same `CapabilityKind`. `Capabilities.default()` describes a typical player
  and `add_name()` sets the model name.
- `slimclient.messages` defines the client messages (`Helo`, `Stat`, `Bye`,
  `Name`) and the server messages (`Serv`, `Status`, `Stream`, `Gain`,
  `Enable`, `Flush`, `Stop`, `Pause`, `Unpause`, `Skip`, `Queryname`,
  `Setname`, `DisableDac`, `Unrecognised`), together with the enums and
  `StreamFlags` used in a `Stream` request. A `Stream` whose
  `pcmsamplerate` is `None` leaves the rate to the stream itself.
- `slimclient.codec` holds `SlimCodec`, `FramedReader`, `FramedWriter`,
  `decode_server_message()` and `ProtocolError`. `FramedReader.read()`
  returns the next batch of messages and raises `EOFError` when the
  connection ends; iterating over a reader yields messages one at a time.
  Corrupt server data raises `ProtocolError`.
  `slimclient.encode.encode_client_message()` turns a client message into
  bytes.
- `slimclient.status.StatusData` collects buffer and playback counters.
  `make_status_message(StatusCode.TIMER)` builds the `Stat` reply to a
  server tick.
- `slimclient.buffer.SlimBuffer` wraps an audio data stream. It fills a
  pre-buffer up to a threshold, calls an optional callback when done, and
  updates `StatusData` as bytes are taken with `read()`, or with `peek()`
  and `consume()`.

## Example

```python
from slimclient.capability import Capabilities
from slimclient.discovery import discover
from slimclient.messages import Name, Queryname, Status
from slimclient.status import StatusCode, StatusData

server = discover(10.0)
if server is not None:
    server.caps = Capabilities.default()
    server.caps.add_name("Example")
    reader, writer = server.connect()
    status = StatusData()
    for msg in reader:
        if isinstance(msg, Queryname):
            writer.write(Name("Example"))
        elif isinstance(msg, Status):
            status.timestamp = msg.timestamp
            writer.write(status.make_status_message(StatusCode.TIMER))
```

## What it does not do

The package handles the control protocol only. It does not decode audio
or play it through a sound device: a player has to fetch the stream named
in a `Stream` message, decode it and drive the audio output itself, using
`SlimBuffer` and `StatusData` to keep the server informed.