"""BSDF decode errors.

Every failure the reader can produce is one of the classes below.  They
fall into four groups:

  - structural truncation: ``MissingData``, ``Eof``
  - format violations: ``InvalidHeader``, ``InvalidSize``, ``InvalidUtf8``,
    ``InvalidBlobHash``
  - capability gaps: ``InvalidExtension``
  - transport failures: ``ReaderError``

Errors compare equal by category: two ``ReaderError`` instances are equal
when their causes are the same kind of I/O failure, and two
``InvalidExtension`` instances are equal when their sub-kind (and the
offending setting byte, if any) match.  Messages never take part.
"""

from __future__ import annotations

import errno as _errno
from enum import Enum


class BsdfError(Exception):
    """Base exception for BSDF decode errors."""

    code = "bsdf_error"
    default_message = "bsdf decode error"

    def __init__(self, msg: str = "") -> None:
        super().__init__(msg or self.default_message)

    def _key(self) -> tuple:
        return ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BsdfError):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash((type(self), self._key()))


class MissingData(BsdfError):
    """Stream ended before a structurally required region."""

    code = "missing_data"
    default_message = "not enough data"


class InvalidHeader(BsdfError):
    """Magic bytes do not match."""

    code = "invalid_header"
    default_message = "invalid header"


class Eof(BsdfError):
    """Stream ended in the middle of a field."""

    code = "eof"
    default_message = "sudden missing data"


class InvalidSize(BsdfError):
    """Size byte falls in the reserved band."""

    code = "invalid_size"
    default_message = "invalid size byte"


class InvalidUtf8(BsdfError):
    code = "invalid_utf8"
    default_message = "string is not utf-8"


class InvalidBlobHash(BsdfError):
    code = "invalid_blob_hash"
    default_message = "invalid blob hash"


# ── Extensions ──────────────────────────────────────────────────────────────


class ExtensionKind(Enum):
    ZLIB_UNAVAILABLE = "zlib is not available"
    BZ2_UNAVAILABLE = "bz2 is not available"
    INVALID_COMPRESSION_SETTING = "invalid compression setting"


class InvalidExtension(BsdfError):
    """Blob declares a codec this reader cannot honor.

    ``kind`` tells "recognized but unavailable here" apart from "unknown
    setting byte"; ``setting`` carries the byte for the latter.
    """

    code = "invalid_extension"

    def __init__(self, kind: ExtensionKind, setting: int | None = None) -> None:
        msg = kind.value
        if setting is not None:
            msg = f"{msg} ({setting})"
        super().__init__(msg)
        self.kind = kind
        self.setting = setting

    def _key(self) -> tuple:
        return (self.kind, self.setting)


# ── Transport ───────────────────────────────────────────────────────────────


class ReaderError(BsdfError):
    """The underlying byte source (or a decompressor draining it) failed."""

    code = "reader"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"reading data went wrong: {cause}")
        self.cause = cause

    @property
    def errno(self) -> int | None:
        return getattr(self.cause, "errno", None)

    @property
    def category(self) -> str:
        """Short name for the kind of failure, e.g. ``"EPIPE"`` or ``"error"``."""
        if self.errno is not None:
            return _errno.errorcode.get(self.errno, str(self.errno))
        return type(self.cause).__name__

    def _key(self) -> tuple:
        return (type(self.cause), self.errno)
