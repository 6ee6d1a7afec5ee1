# memory_cache/persist.py
from __future__ import annotations
import json
import logging
import time
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Union

from jsonschema import validate, ValidationError as JSONSchemaValidationError
from pydantic import ValidationError

from memory_cache.cache import Cache
from memory_cache.config import CACHE_FILE
from memory_cache.errors import DeserializationError, SerializationError, StorageError
from memory_cache.models import CacheState

log = logging.getLogger(__name__)

SCHEMAS = Path(__file__).resolve().parent / "schemas"
STATE_SCHEMA = SCHEMAS / "cache_state.schema.json"

PathLike = Union[str, Path]

@lru_cache(maxsize=1)
def load_schema() -> Dict[str, Any]:
    with STATE_SCHEMA.open("r", encoding="utf-8") as f:
        return json.load(f)

def parse_state(raw: str, source: str = "<string>") -> CacheState:
    """
    Decode a snapshot and check it twice:
    - shape against the JSON Schema (clear messages for hand-edited files)
    - types through the pydantic model (what the cache actually holds)
    Any failure is a DeserializationError; there is no partial recovery.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DeserializationError(f"{source}: not valid JSON ({e})") from e
    try:
        validate(instance=data, schema=load_schema())
    except JSONSchemaValidationError as e:
        raise DeserializationError(f"{source}: invalid cache state ({e.message})") from e
    try:
        return CacheState.model_validate(data)
    except ValidationError as e:
        raise DeserializationError(f"{source}: invalid cache state ({e})") from e

def load_cache(path: PathLike = CACHE_FILE,
               clock: Callable[[], float] = time.time) -> Cache[str]:
    """
    Read the snapshot at `path`. A missing file is the first-run case: an
    empty cache is saved right away (so the file exists) and returned.
    """
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.info("no state at %s, starting empty", p)
        cache: Cache[str] = Cache(clock=clock)
        save_cache(cache, p)
        return cache
    except UnicodeDecodeError as e:
        raise DeserializationError(f"{p}: not valid UTF-8 ({e})") from e
    except OSError as e:
        raise StorageError(f"cannot read {p}: {e}", path=str(p)) from e

    state = parse_state(raw, source=str(p))
    log.debug("loaded %d entries from %s", len(state.entries), p)
    return Cache.from_entries(state.entries, clock=clock)

def save_cache(cache: Cache[str], path: PathLike = CACHE_FILE) -> None:
    """Overwrite `path` with the full cache, expired-but-unread entries included."""
    p = Path(path)
    payload = {
        "entries": {
            key: {"value": entry.value, "expiry": entry.expiry}
            for key, entry in cache.entries().items()
        }
    }
    try:
        serialized = CacheState.model_validate(payload).model_dump_json()
    except ValidationError as e:
        raise SerializationError(f"cannot serialize cache: {e}") from e

    try:
        p.write_text(serialized, encoding="utf-8")
    except OSError as e:
        raise StorageError(f"cannot write {p}: {e}", path=str(p)) from e
    log.debug("saved %d entries to %s", len(payload["entries"]), p)
