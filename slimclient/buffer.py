"""A buffered reader that pre-fills before playback and keeps status data current."""

from __future__ import annotations

from collections.abc import Callable
from typing import BinaryIO

from .status import StatusData

DEFAULT_CAPACITY = 8 * 1024
_PREBUF_CHUNK = 1024


class SlimBuffer:
    """Wraps a byte stream, pre-reading ``threshold`` bytes before use.

    Every read updates the byte count and buffer fullness of ``status``.
    """

    def __init__(
        self,
        inner: BinaryIO,
        status: StatusData,
        threshold: int = 0,
        threshold_cb: Callable[[], None] | None = None,
        capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._inner = inner
        self._status = status
        self._threshold = threshold
        self._threshold_cb = threshold_cb
        self._capacity = capacity
        self._buf = bytearray()
        self._prebuf = bytearray()
        status.buffer_size = capacity
        self._pre_buf()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def prebuffered(self) -> int:
        """Bytes read ahead during pre-buffering and not yet handed out."""
        return len(self._prebuf)

    def _raw_read(self, size: int) -> bytes:
        read1 = getattr(self._inner, "read1", None)
        data = read1(size) if read1 is not None else self._inner.read(size)
        return bytes(data or b"")

    def _fill(self) -> bytearray:
        if not self._buf:
            self._buf.extend(self._raw_read(self._capacity))
        return self._buf

    def _read_inner(self, size: int) -> bytes:
        if not self._buf and size >= self._capacity:
            return self._raw_read(size)
        self._fill()
        data = bytes(self._buf[:size])
        del self._buf[:size]
        return data

    def _pre_buf(self) -> None:
        while len(self._prebuf) < self._threshold:
            try:
                chunk = self._read_inner(_PREBUF_CHUNK)
            except OSError:
                break
            if not chunk:
                break
            self._prebuf.extend(chunk)
        if self._threshold_cb is not None:
            self._threshold_cb()

    def read(self, size: int) -> bytes:
        """Return up to ``size`` bytes; an empty result means end of stream."""
        if size < 0:
            raise ValueError("size must not be negative")
        if self._prebuf:
            data = bytes(self._prebuf[:size])
            del self._prebuf[:size]
        else:
            data = self._read_inner(size)
        self._status.add_bytes_received(len(data))
        self._status.fullness = len(self._buf)
        return data

    def peek(self) -> bytes:
        """The bytes available without reading further; fills the buffer if empty."""
        if self._prebuf:
            return bytes(self._prebuf)
        return bytes(self._fill())

    def consume(self, amount: int) -> None:
        """Discard ``amount`` bytes of what ``peek`` returned."""
        if self._prebuf:
            taken = min(amount, len(self._prebuf))
            del self._prebuf[:taken]
            amount -= taken
        del self._buf[:amount]