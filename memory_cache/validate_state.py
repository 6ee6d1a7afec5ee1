import sys
from pathlib import Path
from typing import List, Optional

from memory_cache.config import CACHE_FILE
from memory_cache.errors import DeserializationError
from memory_cache.persist import parse_state


def validate_file(state_file: Path) -> bool:
    try:
        raw = state_file.read_text(encoding="utf-8")
        state = parse_state(raw, source=str(state_file))
        print(f"[OK] {state_file} validated successfully ({len(state.entries)} entries)")
        return True
    except FileNotFoundError:
        print(f"[ERROR] Missing file: {state_file}")
        return False
    except DeserializationError as e:
        print(f"[ERROR] {e}")
        return False
    except (OSError, UnicodeDecodeError) as e:
        print(f"[ERROR] Cannot read {state_file}: {e}")
        return False


def main(argv: Optional[List[str]] = None):
    paths = argv if argv is not None else sys.argv[1:]
    ok = True
    for p in paths or [CACHE_FILE]:
        ok &= validate_file(Path(p))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
