"""BSDF CLI – inspect, validate, and convert BSDF files."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from . import __version__
from .adapters import to_json, to_msgpack
from .codecs import CODEC_NAMES, CodecSet
from .errors import BsdfError
from .item import Item, ItemKind
from .reader import BsdfReader


# ── Terminal UI (colors when TTY) ───────────────────────────────────────────

def _color_enabled() -> bool:
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return os.environ.get("NO_COLOR", "").strip() == ""

_COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "red": "\033[31m",
    "cyan": "\033[36m",
    "bold": "\033[1m",
}

def _c(name: str, text: str) -> str:
    if not _color_enabled() or name not in _COLORS:
        return text
    return f"{_COLORS[name]}{text}{_COLORS['reset']}"

def _section(title: str) -> str:
    return _c("cyan", f"\n  ◆ {title}")

def _ok(msg: str) -> str:
    return _c("green", "✓ ") + msg

def _fail(msg: str) -> str:
    return _c("red", "✗ ") + msg


def _codecs(args: argparse.Namespace) -> CodecSet:
    return CodecSet.from_env().without(*(args.disable_codec or []))


# ── inspect ─────────────────────────────────────────────────────────────────


_BLOB_PREVIEW = 16


def _render(item: Item, key: Optional[str], depth: int, out: list[str]) -> None:
    indent = "  " * (depth + 2)
    label = f"{key}: " if key is not None else ""
    kind = _c("cyan", item.kind.value)
    if item.kind is ItemKind.LIST:
        out.append(f"{indent}{label}{kind} [{len(item.value)}]")
        for child in item.value:
            _render(child, None, depth + 1, out)
    elif item.kind is ItemKind.MAP:
        out.append(f"{indent}{label}{kind} {{{len(item.value)}}}")
        for k, child in item.value.items():
            _render(child, k, depth + 1, out)
    elif item.kind is ItemKind.BLOB:
        preview = item.value[:_BLOB_PREVIEW].hex()
        more = "…" if len(item.value) > _BLOB_PREVIEW else ""
        out.append(f"{indent}{label}{kind} ({len(item.value)} bytes) {preview}{more}")
    elif item.kind is ItemKind.VOID:
        out.append(f"{indent}{label}{kind}")
    else:
        out.append(f"{indent}{label}{kind} {item.value!r}")


def cmd_inspect(args: argparse.Namespace) -> None:
    with BsdfReader(args.file, codecs=_codecs(args)) as reader:
        items = list(reader)
        print(_c("bold", f"\n  BSDF  v{reader.version}  ") + _c("dim", args.file))
        print(_c("dim", f"    codecs: {', '.join(reader.codecs.enabled) or 'none'}"))
        for i, item in enumerate(items):
            print(_section(f"Value {i}"))
            lines: list[str] = []
            _render(item, None, 0, lines)
            for line in lines:
                print(line)
        print()


# ── validate ────────────────────────────────────────────────────────────────


def cmd_validate(args: argparse.Namespace) -> None:
    with BsdfReader(args.file, codecs=_codecs(args)) as reader:
        count = sum(1 for _ in reader)
    print(_ok(f"{args.file}: {count} value(s), version {reader.version}"))


# ── convert ─────────────────────────────────────────────────────────────────


def cmd_convert(args: argparse.Namespace) -> None:
    with BsdfReader(args.file, codecs=_codecs(args)) as reader:
        item = reader.parse()
    if item is None:
        item = Item.void()

    if args.to == "json":
        payload = (to_json(item, indent=2) + "\n").encode("utf-8")
    else:
        payload = to_msgpack(item)

    if args.output:
        with open(args.output, "wb") as f:
            f.write(payload)
        print(_ok(f"wrote {len(payload)} bytes to {args.output}"))
    else:
        sys.stdout.buffer.write(payload)
        sys.stdout.flush()


# ── main ────────────────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bsdf",
        description="Inspect, validate, and convert BSDF files",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--disable-codec",
        action="append",
        choices=CODEC_NAMES,
        metavar="NAME",
        help=f"Treat a codec as unavailable ({', '.join(CODEC_NAMES)}); repeatable",
    )
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("inspect", help="Show header and value tree")
    p.add_argument("file")

    p = sub.add_parser("validate", help="Decode every value and report errors")
    p.add_argument("file")

    p = sub.add_parser("convert", help="Convert the first value to JSON or msgpack")
    p.add_argument("file")
    p.add_argument("--to", choices=["json", "msgpack"], default="json")
    p.add_argument("--output", "-o", metavar="FILE",
                   help="Write to FILE instead of stdout")

    sub.add_parser("version", help="Print version and exit")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"bsdfreader {__version__}")
        return

    commands = {
        "inspect": cmd_inspect,
        "validate": cmd_validate,
        "convert": cmd_convert,
    }
    try:
        commands[args.command](args)
    except BsdfError as e:
        msg = f"bsdf: error [{e.code}]: {e}"
        print(_fail(msg) if args.command == "validate" else msg, file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
