"""Decoded BSDF values.

An :class:`Item` is a tagged union: ``kind`` names the variant and
``value`` holds its payload.  The payload type is fixed per kind:

    VOID    None
    BOOL    bool
    INT16   int  (-2**15 .. 2**15-1)
    INT64   int  (-2**63 .. 2**63-1)
    F32     float (binary32 precision)
    F64     float
    STRING  str
    BLOB    bytes
    LIST    list[Item]
    MAP     dict[str, Item]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

INT16_MIN = -(2**15)
INT16_MAX = 2**15 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ItemKind(Enum):
    VOID = "void"
    BOOL = "bool"
    INT16 = "int16"
    INT64 = "int64"
    F32 = "f32"
    F64 = "f64"
    STRING = "string"
    BLOB = "blob"
    LIST = "list"
    MAP = "map"


@dataclass(eq=True)
class Item:
    kind: ItemKind
    value: Any = None

    # ── Constructors ─────────────────────────────────────────────────────

    @classmethod
    def void(cls) -> Item:
        return cls(ItemKind.VOID)

    @classmethod
    def boolean(cls, value: bool) -> Item:
        return cls(ItemKind.BOOL, value)

    @classmethod
    def int16(cls, value: int) -> Item:
        return cls(ItemKind.INT16, value)

    @classmethod
    def int64(cls, value: int) -> Item:
        return cls(ItemKind.INT64, value)

    @classmethod
    def f32(cls, value: float) -> Item:
        return cls(ItemKind.F32, value)

    @classmethod
    def f64(cls, value: float) -> Item:
        return cls(ItemKind.F64, value)

    @classmethod
    def string(cls, value: str) -> Item:
        return cls(ItemKind.STRING, value)

    @classmethod
    def blob(cls, value: bytes) -> Item:
        return cls(ItemKind.BLOB, bytes(value))

    @classmethod
    def sequence(cls, items: list[Item]) -> Item:
        return cls(ItemKind.LIST, items)

    @classmethod
    def mapping(cls, entries: dict[str, Item]) -> Item:
        return cls(ItemKind.MAP, entries)

    # ── Predicates / accessors ───────────────────────────────────────────

    @property
    def is_void(self) -> bool:
        return self.kind is ItemKind.VOID

    def _as(self, kind: ItemKind) -> Any:
        return self.value if self.kind is kind else None

    def as_bool(self) -> bool | None:
        return self._as(ItemKind.BOOL)

    def as_int16(self) -> int | None:
        return self._as(ItemKind.INT16)

    def as_int64(self) -> int | None:
        return self._as(ItemKind.INT64)

    def as_f32(self) -> float | None:
        return self._as(ItemKind.F32)

    def as_f64(self) -> float | None:
        return self._as(ItemKind.F64)

    def as_string(self) -> str | None:
        return self._as(ItemKind.STRING)

    def as_blob(self) -> bytes | None:
        return self._as(ItemKind.BLOB)

    def as_list(self) -> list[Item] | None:
        """Return the live element list (mutations are visible), or ``None``."""
        return self._as(ItemKind.LIST)

    def as_map(self) -> dict[str, Item] | None:
        """Return the live entry dict (mutations are visible), or ``None``."""
        return self._as(ItemKind.MAP)

    # ── Visiting ─────────────────────────────────────────────────────────

    def to_python(self) -> Any:
        """Convert the tree to plain Python objects.

        VOID becomes ``None``, BLOB becomes ``bytes``, containers become
        ``list``/``dict``; every scalar is returned as-is.
        """
        if self.kind is ItemKind.LIST:
            return [child.to_python() for child in self.value]
        if self.kind is ItemKind.MAP:
            return {k: v.to_python() for k, v in self.value.items()}
        return self.value

    @classmethod
    def from_python(cls, obj: Any) -> Item:
        """Build an item tree from plain Python objects.

        Integers become INT16 when they fit in 16 bits, INT64 otherwise.
        Floats always become F64.
        """
        if obj is None:
            return cls.void()
        # bool before int: bool is an int subclass
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            if INT16_MIN <= obj <= INT16_MAX:
                return cls.int16(obj)
            if INT64_MIN <= obj <= INT64_MAX:
                return cls.int64(obj)
            raise OverflowError(f"integer {obj} outside int64 range")
        if isinstance(obj, float):
            return cls.f64(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.blob(bytes(obj))
        if isinstance(obj, (list, tuple)):
            return cls.sequence([cls.from_python(v) for v in obj])
        if isinstance(obj, dict):
            entries: dict[str, Item] = {}
            for k, v in obj.items():
                if not isinstance(k, str):
                    raise TypeError(f"map key must be str, got {type(k).__name__}")
                entries[k] = cls.from_python(v)
            return cls.mapping(entries)
        raise TypeError(f"unsupported type: {type(obj).__name__}")


Map = dict[str, Item]
