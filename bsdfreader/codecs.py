"""Optional checksum and compression support for blobs.

md5, zlib and bz2 are all optional in a given Python build: ``zlib`` and
``bz2`` are extension modules that may not be compiled in, and md5 is
refused by ``hashlib`` on FIPS-restricted builds.  A :class:`CodecSet`
records which of them a reader may use; the same decode logic runs with
any subset enabled.
"""

from __future__ import annotations

import hashlib
import importlib
import logging
import os
from dataclasses import dataclass, replace
from types import ModuleType
from typing import Mapping, Optional

from .errors import ExtensionKind, InvalidExtension, ReaderError
from .format import DECOMPRESS_HINT_CAP, Compression

logger = logging.getLogger("bsdfreader")

CODEC_NAMES = ("md5", "zlib", "bz2")
ENV_DISABLED = "BSDF_DISABLED_CODECS"

_modules: dict[str, object] = {}


def _get_module(name: str) -> Optional[ModuleType]:
    mod = _modules.get(name)
    if mod is None:
        try:
            mod = importlib.import_module(name)
        except ImportError:
            mod = False
        _modules[name] = mod
    return mod if mod else None


def _md5_usable() -> bool:
    try:
        hashlib.md5(b"", usedforsecurity=False)
    except ValueError:
        return False
    return True


@dataclass(frozen=True)
class CodecSet:
    """Which optional codecs a reader may use."""

    checksum: bool = True
    zlib: bool = True
    bz2: bool = True

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def detect(cls) -> CodecSet:
        """Enable every codec the running interpreter can actually provide."""
        return cls(
            checksum=_md5_usable(),
            zlib=_get_module("zlib") is not None,
            bz2=_get_module("bz2") is not None,
        )

    @classmethod
    def none(cls) -> CodecSet:
        return cls(checksum=False, zlib=False, bz2=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> CodecSet:
        """:meth:`detect`, minus codecs listed in ``BSDF_DISABLED_CODECS``."""
        env = os.environ if environ is None else environ
        raw = env.get(ENV_DISABLED, "")
        names = [n.strip().lower() for n in raw.split(",") if n.strip()]
        if names:
            logger.debug("codecs disabled via %s: %s", ENV_DISABLED, ", ".join(names))
        return cls.detect().without(*names)

    def without(self, *names: str) -> CodecSet:
        """Return a copy with the named codecs (``md5``/``zlib``/``bz2``) off."""
        changes: dict[str, bool] = {}
        for name in names:
            if name not in CODEC_NAMES:
                raise ValueError(
                    f"unknown codec {name!r} (expected one of {', '.join(CODEC_NAMES)})"
                )
            changes["checksum" if name == "md5" else name] = False
        return replace(self, **changes)

    @property
    def enabled(self) -> list[str]:
        flags = (self.checksum, self.zlib, self.bz2)
        return [name for name, on in zip(CODEC_NAMES, flags) if on]

    # ── Operations ───────────────────────────────────────────────────────

    def md5_digest(self, data: bytes) -> Optional[bytes]:
        """Return the MD5 digest of *data*, or None if checksums are off."""
        if not self.checksum or not _md5_usable():
            return None
        return hashlib.md5(data, usedforsecurity=False).digest()

    def decompress(self, setting: int, data: bytes, size_hint: int) -> bytes:
        """Decode a stored blob payload according to its compression byte.

        *size_hint* (the declared logical size) only sizes the initial
        output buffer; the result is never checked against it.
        """
        if setting == Compression.NONE:
            return data
        if setting == Compression.ZLIB:
            zlib = _get_module("zlib") if self.zlib else None
            if zlib is None:
                raise InvalidExtension(ExtensionKind.ZLIB_UNAVAILABLE)
            bufsize = min(max(size_hint, 1), DECOMPRESS_HINT_CAP)
            try:
                return zlib.decompress(data, bufsize=bufsize)
            except zlib.error as exc:
                raise ReaderError(exc) from exc
        if setting == Compression.BZ2:
            bz2 = _get_module("bz2") if self.bz2 else None
            if bz2 is None:
                raise InvalidExtension(ExtensionKind.BZ2_UNAVAILABLE)
            try:
                return bz2.decompress(data)
            except (OSError, ValueError) as exc:
                raise ReaderError(exc) from exc
        raise InvalidExtension(ExtensionKind.INVALID_COMPRESSION_SETTING, setting)
