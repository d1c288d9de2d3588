"""bsdfreader – a streaming decoder for the BSDF binary format."""

__version__ = "0.1.0"

from .format import MAGIC, Compression, Tag
from .errors import (
    BsdfError,
    Eof,
    ExtensionKind,
    InvalidBlobHash,
    InvalidExtension,
    InvalidHeader,
    InvalidSize,
    InvalidUtf8,
    MissingData,
    ReaderError,
)
from .item import Item, ItemKind, Map
from .codecs import CodecSet
from .source import ByteSource, BytesSource, StreamSource, open_source
from .reader import BsdfReader, load, loads

__all__ = [
    "__version__",
    "MAGIC", "Compression", "Tag",
    "BsdfError", "MissingData", "InvalidHeader", "Eof", "InvalidSize",
    "InvalidUtf8", "InvalidBlobHash", "InvalidExtension", "ExtensionKind",
    "ReaderError",
    "Item", "ItemKind", "Map",
    "CodecSet",
    "ByteSource", "BytesSource", "StreamSource", "open_source",
    "BsdfReader", "load", "loads",
]
