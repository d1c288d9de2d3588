"""BSDF reader – validate the header and decode tagged values from a stream."""

from __future__ import annotations

import logging
import struct
from typing import Any, Iterator, Optional

from .codecs import CodecSet
from .errors import (
    Eof,
    InvalidBlobHash,
    InvalidHeader,
    InvalidSize,
    InvalidUtf8,
    MissingData,
)
from .format import (
    CHECKSUM_SET,
    COMPRESSION_NAMES,
    F32_FMT,
    F64_FMT,
    HEADER_FMT,
    HEADER_SIZE,
    INT16_FMT,
    INT64_FMT,
    LARGE_SIZE,
    MAGIC,
    MD5_SIZE,
    SCALAR_SIZES,
    SMALL_SIZE_CUTOFF,
    U64_FMT,
    Compression,
    Tag,
)
from .item import Item, ItemKind
from .source import ByteSource, open_source

logger = logging.getLogger("bsdfreader")


# ── BsdfReader ──────────────────────────────────────────────────────────────


class BsdfReader:
    """Decode BSDF values from a sequential byte source.

    Usage::

        with BsdfReader("data.bsdf") as r:
            item = r.parse()
            print(r.version, item.to_python())

    The header is checked on the first :meth:`parse` call; each call then
    decodes one top-level value.  ``None`` means the stream is exhausted
    (or the next tag byte is not a BSDF tag).
    """

    def __init__(self, source: Any, codecs: Optional[CodecSet] = None) -> None:
        self._source: ByteSource = open_source(source)
        self._codecs = codecs if codecs is not None else CodecSet.detect()
        self._version: Optional[int] = None

    # ── Public properties ────────────────────────────────────────────────

    @property
    def version(self) -> Optional[int]:
        """Header version, or ``None`` before the header has been read."""
        return self._version

    @property
    def codecs(self) -> CodecSet:
        return self._codecs

    # ── Parsing ──────────────────────────────────────────────────────────

    def parse(self) -> Optional[Item]:
        if self._version is None:
            self._parse_header()
        return self._parse_item()

    def __iter__(self) -> Iterator[Item]:
        while True:
            item = self.parse()
            if item is None:
                return
            yield item

    # ── Lifecycle ────────────────────────────────────────────────────────

    def close(self) -> None:
        self._source.close()

    def __enter__(self) -> BsdfReader:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    # ── Header ───────────────────────────────────────────────────────────

    def _parse_header(self) -> None:
        raw = self._source.read(HEADER_SIZE)
        if len(raw) != HEADER_SIZE:
            raise MissingData(f"stream too small for header ({len(raw)} bytes)")
        magic, version = struct.unpack(HEADER_FMT, raw)
        if magic != MAGIC:
            raise InvalidHeader(f"bad magic: {magic!r}")
        self._version = version
        logger.debug("BSDF header ok, version %d", version)

    # ── Values ───────────────────────────────────────────────────────────

    def _parse_item(self) -> Optional[Item]:
        if self._source.peek() is None:
            return None
        tag = self._source.read(1)[0]

        if tag == Tag.VOID:
            return Item.void()
        if tag == Tag.FALSE:
            return Item.boolean(False)
        if tag == Tag.TRUE:
            return Item.boolean(True)
        if tag == Tag.INT16:
            return Item(ItemKind.INT16, self._unpack(INT16_FMT))
        if tag == Tag.INT64:
            return Item(ItemKind.INT64, self._unpack(INT64_FMT))
        if tag == Tag.F32:
            return Item(ItemKind.F32, self._unpack(F32_FMT))
        if tag == Tag.F64:
            return Item(ItemKind.F64, self._unpack(F64_FMT))
        if tag == Tag.STRING:
            return Item(ItemKind.STRING, self._parse_string())
        if tag == Tag.LIST:
            return Item(ItemKind.LIST, self._parse_list())
        if tag == Tag.MAP:
            return Item(ItemKind.MAP, self._parse_map())
        if tag == Tag.BLOB:
            return Item(ItemKind.BLOB, self._parse_blob())

        # Unknown tags read as end of stream; containers turn this into
        # MissingData one level up.
        logger.debug("unrecognized tag byte 0x%02x, no value", tag)
        return None

    def _parse_required(self) -> Item:
        item = self._parse_item()
        if item is None:
            raise MissingData("container element missing")
        return item

    def _parse_string(self) -> str:
        length = self._parse_size()
        raw = self._read_exact(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUtf8(f"string is not utf-8: {exc.reason}") from exc

    def _parse_list(self) -> list[Item]:
        length = self._parse_size()
        return [self._parse_required() for _ in range(length)]

    def _parse_map(self) -> dict[str, Item]:
        length = self._parse_size()
        entries: dict[str, Item] = {}
        for _ in range(length):
            key = self._parse_string()
            entries[key] = self._parse_required()
        return entries

    # ── Blob ─────────────────────────────────────────────────────────────

    def _parse_blob(self) -> bytes:
        allocated_size = self._parse_size()
        used_size = self._parse_size()
        data_size = self._parse_size()
        compression = self._next_byte()
        checksum_setting = self._next_byte()
        md5_hash = (
            self._read_exact(MD5_SIZE) if checksum_setting == CHECKSUM_SET else None
        )

        pad = self._next_byte()
        if pad:
            self._source.skip(pad)
        data = self._read_exact(used_size)
        trailing = max(allocated_size - used_size, 0)
        if trailing:
            self._source.skip(trailing)
        logger.debug(
            "blob: allocated=%d used=%d data=%d compression=%s checksum=%s",
            allocated_size, used_size, data_size,
            _compression_name(compression), md5_hash is not None,
        )

        if md5_hash is not None:
            actual = self._codecs.md5_digest(data)
            if actual is None:
                logger.debug("checksum support disabled, blob hash not verified")
            elif actual != md5_hash:
                raise InvalidBlobHash(
                    f"MD5 mismatch: expected {md5_hash.hex()}, got {actual.hex()}"
                )

        return self._codecs.decompress(compression, data, data_size)

    # ── Size & scalars ───────────────────────────────────────────────────

    def _parse_size(self) -> int:
        first = self._next_byte()
        if first == LARGE_SIZE:
            return self._unpack(U64_FMT)
        if first >= SMALL_SIZE_CUTOFF:
            raise InvalidSize(f"invalid size byte {first}")
        return first

    def _next_byte(self) -> int:
        data = self._source.read(1)
        if not data:
            raise Eof()
        return data[0]

    def _unpack(self, fmt: str) -> Any:
        return struct.unpack(fmt, self._read_exact(SCALAR_SIZES[fmt]))[0]

    def _read_exact(self, n: int) -> bytes:
        data = self._source.read(n)
        if len(data) != n:
            raise Eof(f"expected {n} bytes, got {len(data)}")
        return data


def _compression_name(setting: int) -> str:
    try:
        return COMPRESSION_NAMES[Compression(setting)]
    except ValueError:
        return f"?{setting}"


# ── Convenience ─────────────────────────────────────────────────────────────


def loads(data: bytes, codecs: Optional[CodecSet] = None) -> Optional[Item]:
    """Decode the first value of an in-memory BSDF document."""
    with BsdfReader(data, codecs=codecs) as r:
        return r.parse()


def load(src: Any, codecs: Optional[CodecSet] = None) -> Optional[Item]:
    """Decode the first value from a path or binary stream."""
    with BsdfReader(src, codecs=codecs) as r:
        return r.parse()
