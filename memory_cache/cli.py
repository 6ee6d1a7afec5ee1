# memory_cache/cli.py
from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from memory_cache import __version__
from memory_cache.cache import Cache
from memory_cache.config import CACHE_FILE, DEFAULT_TTL_SECONDS, MAX_EXPIRY
from memory_cache.errors import CacheError
from memory_cache.persist import load_cache, save_cache

log = logging.getLogger(__name__)

def _ttl(text: str) -> int:
    try:
        secs = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ttl: {text!r} (whole seconds)")
    if not 0 <= secs <= MAX_EXPIRY:
        raise argparse.ArgumentTypeError(f"invalid ttl: {text!r} (must be 0..{MAX_EXPIRY})")
    return secs

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="memory-cache", description="Key/value cache with per-key TTL, kept in ./" + CACHE_FILE)
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--debug", action="store_true", help="Verbose logging to stderr")
    sub = p.add_subparsers(dest="command", metavar="COMMAND", required=True)

    ins = sub.add_parser("insert", help="Insert (or overwrite) a key")
    ins.add_argument("-k", "--key", required=True)
    ins.add_argument("-v", "--value", required=True)
    ins.add_argument("-t", "--ttl", type=_ttl, default=DEFAULT_TTL_SECONDS, help=f"Seconds to live (default: {DEFAULT_TTL_SECONDS})")

    get = sub.add_parser("get", help="Print the value for a key if it has not expired")
    get.add_argument("-k", "--key", required=True)

    inv = sub.add_parser("invalidate", help="Remove a key")
    inv.add_argument("-k", "--key", required=True)
    return p

def run(args: argparse.Namespace, cache: Cache[str]) -> None:
    """Apply the one requested operation to an already-loaded cache."""
    if args.command == "insert":
        cache.insert(args.key, args.value, args.ttl)
        print(f"Inserted key '{args.key}'")
    elif args.command == "get":
        value = cache.get(args.key)
        if value is None:
            print(f"No value found for key '{args.key}'")
        else:
            print(f"Value for key '{args.key}': {value}")
    elif args.command == "invalidate":
        cache.invalidate(args.key)
        print(f"Invalidated key '{args.key}'")

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log.debug("command=%s key=%r", args.command, args.key)

    try:
        cache = load_cache(CACHE_FILE)
        run(args, cache)
        save_cache(cache, CACHE_FILE)
    except CacheError as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
