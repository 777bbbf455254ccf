"""Command-line interface: **jsonshape decode / dynamic / bench**"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, List, Optional

from .classifier import describe
from .decoder import TypedDecoder
from .dynamic import DynamicDecoder
from .encoder import JsonEncoder
from .errors import DecodeError, ShapeError

# -----------------------------------------------------------------------------
# Helper I/O
# -----------------------------------------------------------------------------

def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _write(text: str, path: Path):
    path.write_text(text, encoding="utf-8")


def _resolve_type(spec: str) -> Any:
    """'package.module:Name' -> the named object."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not attr:
        sys.exit(f"❌ --type must look like 'package.module:Name', got '{spec}'")
    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        sys.exit(f"❌ cannot import '{module_name}': {e}")
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            sys.exit(f"❌ '{module_name}' has no attribute '{attr}'")
    return obj


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

def cmd_decode(ns):
    target = _resolve_type(ns.type)
    text = _read(ns.input)

    t0 = time.perf_counter()
    try:
        value = TypedDecoder(max_depth=ns.max_depth).decode(target, text)
    except (DecodeError, ShapeError) as e:
        sys.exit(f"❌ {e}")
    dec_ms = (time.perf_counter() - t0) * 1000

    print(f"✓ decoded into {describe(target)} in {dec_ms:.2f} ms → {ns.output}")
    _write(JsonEncoder(pretty=ns.pretty).encode(value), ns.output)


def cmd_dynamic(ns):
    text = _read(ns.input)

    t0 = time.perf_counter()
    try:
        value = DynamicDecoder(max_depth=ns.max_depth).decode(text)
    except DecodeError as e:
        sys.exit(f"❌ {e}")
    dec_ms = (time.perf_counter() - t0) * 1000

    print(f"✓ decoded {len(value)} top-level keys in {dec_ms:.2f} ms → {ns.output}")
    _write(JsonEncoder(pretty=ns.pretty).encode(value), ns.output)


@dataclass
class BenchRecord:
    x: int
    y: List[int]
    label: str
    stamp: datetime
    note: Optional[str] = None


def cmd_bench(ns):
    """Benchmark encode → decode on synthetic records."""
    from random import Random

    rand = Random(0)
    base = datetime(2020, 1, 1)
    data = [
        BenchRecord(
            x=rand.randint(0, 9),
            y=[rand.randint(0, 9) for _ in range(5)],
            label=f"rec-{i}",
            stamp=base + timedelta(seconds=i),
        )
        for i in range(ns.n)
    ]

    t0 = time.perf_counter()
    text = JsonEncoder(pretty=False).encode(data)
    enc_ms = (time.perf_counter() - t0) * 1000

    t0 = time.perf_counter()
    restored = TypedDecoder().decode(List[BenchRecord], text)
    dec_ms = (time.perf_counter() - t0) * 1000

    status = "ok" if restored == data else "MISMATCH"
    print(f"n={ns.n:,} | encode {enc_ms:.2f} ms | decode {dec_ms:.2f} ms | round-trip {status}")


# -----------------------------------------------------------------------------
# Argument parsing
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(prog="jsonshape", description="typed JSON decode/encode toolkit")
    ap.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # decode ---------------------------------------------------------
    sp = sub.add_parser("decode", help="JSON → typed value → JSON")
    sp.add_argument("--type", "-t", required=True, help="target type as package.module:Name")
    sp.add_argument("--input", "-i", type=Path, required=True)
    sp.add_argument("--output", "-o", type=Path, required=True)
    sp.add_argument("--max-depth", type=int, default=None, help="nesting guard")
    sp.add_argument("--pretty", action="store_true", help="indent output")
    sp.set_defaults(func=cmd_decode)

    # dynamic --------------------------------------------------------
    sp = sub.add_parser("dynamic", help="JSON object → dict → JSON")
    sp.add_argument("--input", "-i", type=Path, required=True)
    sp.add_argument("--output", "-o", type=Path, required=True)
    sp.add_argument("--max-depth", type=int, default=None, help="nesting guard")
    sp.add_argument("--pretty", action="store_true", help="indent output")
    sp.set_defaults(func=cmd_dynamic)

    # bench ----------------------------------------------------------
    sp = sub.add_parser("bench", help="quick encode/decode benchmark")
    sp.add_argument("--n", type=int, default=10000, help="synthetic record count")
    sp.set_defaults(func=cmd_bench)

    ns = ap.parse_args(argv)
    if ns.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")
    ns.func(ns)


if __name__ == "__main__":
    main()
