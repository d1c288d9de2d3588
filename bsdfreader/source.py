"""Sequential byte sources for the BSDF reader.

The reader never seeks: it pulls bytes front to back through a
:class:`ByteSource`, which adds a one-byte lookahead on top of whatever
actually produces the bytes (a file, a socket, an in-memory buffer).
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, Union

from .errors import ReaderError
from .format import READ_CHUNK


# ── ByteSource Protocol ─────────────────────────────────────────────────────


class ByteSource(ABC):
    """Abstract sequential byte source with a one-byte lookahead."""

    def __init__(self) -> None:
        self._peeked: Optional[bytes] = None

    @abstractmethod
    def _read_raw(self, n: int) -> bytes:
        """Read up to *n* bytes; return fewer only at end of stream."""

    @abstractmethod
    def close(self) -> None:
        """Release resources."""

    def _pull(self, n: int) -> bytes:
        try:
            return self._read_raw(n)
        except OSError as exc:
            raise ReaderError(exc) from exc

    def read(self, n: int) -> bytes:
        """Read up to *n* bytes, short only when the stream ends.

        Large requests are served in ``READ_CHUNK`` pieces so a declared
        length never turns into one allocation before the data exists.
        """
        if n <= 0:
            return b""
        parts: list[bytes] = []
        remaining = n
        if self._peeked is not None:
            parts.append(self._peeked)
            self._peeked = None
            remaining -= 1
        while remaining > 0:
            data = self._pull(min(remaining, READ_CHUNK))
            if not data:
                break
            parts.append(data)
            remaining -= len(data)
        return b"".join(parts)

    def peek(self) -> Optional[int]:
        """Return the next byte without consuming it, or ``None`` at end."""
        if self._peeked is None:
            data = self._pull(1)
            if not data:
                return None
            self._peeked = data
        return self._peeked[0]

    def skip(self, n: int) -> int:
        """Discard up to *n* bytes; return how many were actually skipped."""
        skipped = 0
        while skipped < n:
            data = self.read(min(n - skipped, READ_CHUNK))
            if not data:
                break
            skipped += len(data)
        return skipped

    def __enter__(self) -> ByteSource:
        return self

    def __exit__(self, *_) -> None:
        self.close()


# ── StreamSource ────────────────────────────────────────────────────────────


class StreamSource(ByteSource):
    """Byte source over any binary file-like object with ``read(n)``."""

    def __init__(self, stream: BinaryIO, *, owns: bool = False) -> None:
        super().__init__()
        self._stream = stream
        self._owns = owns

    def _read_raw(self, n: int) -> bytes:
        # Non-blocking or raw streams may return short reads mid-stream.
        parts: list[bytes] = []
        remaining = n
        while remaining > 0:
            data = self._stream.read(remaining)
            if not data:
                break
            parts.append(data)
            remaining -= len(data)
        return b"".join(parts)

    def close(self) -> None:
        if self._owns:
            self._stream.close()


# ── BytesSource ─────────────────────────────────────────────────────────────


class BytesSource(ByteSource):
    """Byte source over an in-memory buffer."""

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        super().__init__()
        self._view = memoryview(data).cast("B")
        self._pos = 0

    def _read_raw(self, n: int) -> bytes:
        chunk = self._view[self._pos : self._pos + n]
        self._pos += len(chunk)
        return chunk.tobytes()

    def close(self) -> None:
        self._view.release()


# ── Factory ─────────────────────────────────────────────────────────────────


def open_source(
    src: Union[str, os.PathLike, bytes, bytearray, memoryview, BinaryIO, ByteSource],
) -> ByteSource:
    """Open a ByteSource for a path, an in-memory buffer, or a binary stream.

    Paths are opened here and closed with the source; streams passed in
    stay open when the source is closed.
    """
    if isinstance(src, ByteSource):
        return src
    if isinstance(src, (bytes, bytearray, memoryview)):
        return BytesSource(src)
    if isinstance(src, (str, os.PathLike)):
        try:
            fd = open(src, "rb")  # noqa: SIM115
        except OSError as exc:
            raise ReaderError(exc) from exc
        return StreamSource(fd, owns=True)
    if hasattr(src, "read"):
        return StreamSource(src)
    raise TypeError(f"cannot read BSDF from {type(src).__name__}")
