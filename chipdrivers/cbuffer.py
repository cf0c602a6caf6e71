"""Byte-oriented circular buffer with length-prefixed object framing."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = ["CircularBufferError", "CircularBuffer"]


class CircularBufferError(Exception):
    """Raised when the buffer has too little room or too little data."""


class CircularBuffer:
    """Circular buffer of ``size`` bytes.

    One byte is always kept free to tell a full buffer from an empty one,
    so at most ``size - 1`` bytes can be stored.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("buffer size must be at least 1")
        self.size = size
        self._buffer = bytearray(size)
        self.head = 0
        self.tail = 0

    def reset(self) -> None:
        """Discard all stored data."""
        self.head = 0
        self.tail = 0

    def is_empty(self) -> bool:
        return self.head == self.tail

    def is_full(self) -> bool:
        return self.free_size() == 0

    def __len__(self) -> int:
        return self.size - self.free_size() - 1

    def free_size(self) -> int:
        """Number of bytes that can still be stored."""
        if self.head >= self.tail:
            return self.size + self.tail - self.head - 1
        return self.tail - self.head - 1

    def put(self, data: Iterable[int]) -> None:
        """Append ``data``; raise CircularBufferError if it does not fit."""
        data = bytes(data)
        count = len(data)
        if self.free_size() < count:
            raise CircularBufferError(
                f"not enough room for {count} bytes ({self.free_size()} free)"
            )
        first = min(count, self.size - self.head)
        self._buffer[self.head:self.head + first] = data[:first]
        self._buffer[:count - first] = data[first:]
        self.head = (self.head + count) % self.size

    def get(self, length: int) -> bytes:
        """Remove and return ``length`` bytes; raise CircularBufferError if fewer are stored."""
        if length < 0:
            raise ValueError("length must not be negative")
        if len(self) < length:
            raise CircularBufferError(
                f"cannot get {length} bytes, only {len(self)} stored"
            )
        first = min(length, self.size - self.tail)
        result = bytes(self._buffer[self.tail:self.tail + first])
        result += bytes(self._buffer[:length - first])
        self.tail = (self.tail + length) % self.size
        return result

    def remove(self, length: int) -> None:
        """Drop ``length`` bytes; drop everything if fewer are stored."""
        if len(self) < length:
            self.reset()
            return
        self.tail = (self.tail + length) % self.size

    def put_object(self, data: Iterable[int]) -> None:
        """Store ``data`` preceded by a one-byte length."""
        data = bytes(data)
        if len(data) > 0xFF:
            raise ValueError("objects are limited to 255 bytes")
        if self.free_size() < len(data) + 1:
            raise CircularBufferError(
                f"not enough room for an object of {len(data)} bytes"
            )
        self.put(bytes([len(data)]))
        self.put(data)

    def get_object(self) -> bytes | None:
        """Remove and return the next stored object, or None if there is none."""
        if len(self) < 2:
            return None
        length = self.get(1)[0]
        return self.get(length)