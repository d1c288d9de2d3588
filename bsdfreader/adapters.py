"""Bridges from decoded BSDF trees to other serialization formats."""

from __future__ import annotations

import base64
import json
from typing import Any, Optional

import msgpack

from .item import Item


def to_msgpack(item: Item) -> bytes:
    """Pack an item tree as msgpack (BLOB -> bin, VOID -> nil)."""
    return msgpack.packb(item.to_python(), use_bin_type=True)


def from_msgpack(data: bytes) -> Item:
    """Unpack msgpack bytes into an item tree."""
    return Item.from_python(msgpack.unpackb(data, raw=False))


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, bytes):
        return base64.b64encode(obj).decode("ascii")
    if isinstance(obj, list):
        return [_jsonable(v) for v in obj]
    if isinstance(obj, dict):
        return {k: _jsonable(v) for k, v in obj.items()}
    return obj


def to_json(item: Item, indent: Optional[int] = None) -> str:
    """Render an item tree as JSON text; blobs become base64 strings."""
    return json.dumps(_jsonable(item.to_python()), indent=indent, ensure_ascii=False)
