"""BSDF binary format constants, tag bytes, and struct layouts."""

import struct
from enum import IntEnum

# ── Magic & header ──────────────────────────────────────────────────────────

MAGIC = b"BSDF"

# Header (6 B):
#   magic[4]  version(u16)

HEADER_SIZE = 6
HEADER_FMT = "<4sH"

assert struct.calcsize(HEADER_FMT) == HEADER_SIZE

# ── Tag bytes (ASCII, one per value) ───────────────────────────────────────


class Tag(IntEnum):
    VOID = ord("v")
    FALSE = ord("n")
    TRUE = ord("y")
    INT16 = ord("h")
    INT64 = ord("i")
    F32 = ord("f")
    F64 = ord("d")
    STRING = ord("s")
    LIST = ord("l")
    MAP = ord("m")
    BLOB = ord("b")


# ── Size encoding ───────────────────────────────────────────────────────────
#
# 0..250      inline size
# 251..252    reserved (invalid)
# 253         extended: u64 follows
# 254..255    reserved (invalid)

LARGE_SIZE = 253
SMALL_SIZE_CUTOFF = 251

# ── Scalar struct formats (little-endian) ──────────────────────────────────

INT16_FMT = "<h"
INT64_FMT = "<q"
F32_FMT = "<f"
F64_FMT = "<d"
U64_FMT = "<Q"

SCALAR_SIZES: dict[str, int] = {
    fmt: struct.calcsize(fmt)
    for fmt in (INT16_FMT, INT64_FMT, F32_FMT, F64_FMT, U64_FMT)
}

# ── Blob settings ───────────────────────────────────────────────────────────


class Compression(IntEnum):
    NONE = 0
    ZLIB = 1
    BZ2 = 2


COMPRESSION_NAMES: dict[Compression, str] = {
    Compression.NONE: "none",
    Compression.ZLIB: "zlib",
    Compression.BZ2: "bz2",
}

CHECKSUM_SET = 0xFF
MD5_SIZE = 16

# ── Read tuning ─────────────────────────────────────────────────────────────

READ_CHUNK = 64 * 1024                   # largest single read from a source
DECOMPRESS_HINT_CAP = 16 * 1024 * 1024   # cap on the data_size buffer hint
