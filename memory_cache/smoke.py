"""
Post-install check: run one full load -> insert -> save -> reload cycle
against a throwaway state file, then validate what was written. Catches a
missing schema file or a broken pydantic/jsonschema install before the CLI
is pointed at a real cache_state.json.
"""
import sys
import tempfile
from pathlib import Path

from memory_cache.errors import CacheError
from memory_cache.persist import load_cache, parse_state, save_cache

KEY = "smoke"
VALUE = "ok"

def check(workdir: Path) -> None:
    path = workdir / "cache_state.json"

    cache = load_cache(path)
    if not path.exists():
        raise CacheError(f"first run did not create {path}")

    cache.insert(KEY, VALUE, 60)
    save_cache(cache, path)

    reloaded = load_cache(path)
    if reloaded.get(KEY) != VALUE:
        raise CacheError(f"{KEY!r} did not survive a save/load round trip")

    state = parse_state(path.read_text(encoding="utf-8"), source=str(path))
    if set(state.entries) != {KEY}:
        raise CacheError(f"unexpected keys on disk: {sorted(state.entries)}")

def main() -> int:
    with tempfile.TemporaryDirectory(prefix="memory-cache-smoke-") as tmp:
        try:
            check(Path(tmp))
        except CacheError as e:
            print(f"[smoke] failed: {e}", file=sys.stderr)
            return 1
    print("smoke-ok")
    return 0

if __name__ == "__main__":
    sys.exit(main())
