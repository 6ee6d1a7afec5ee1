import json
import os

import pytest

from memory_cache.cache import Cache
from memory_cache.errors import DeserializationError, SerializationError, StorageError
from memory_cache.persist import load_cache, parse_state, save_cache

NOW = 1_700_000_000


def _clock():
    return float(NOW)


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "cache_state.json"


def test_first_run_creates_empty_file(state_path):
    cache = load_cache(state_path, clock=_clock)
    assert len(cache) == 0
    assert state_path.exists()
    assert json.loads(state_path.read_text(encoding="utf-8")) == {"entries": {}}

    again = load_cache(state_path, clock=_clock)
    assert len(again) == 0


def test_round_trip_keeps_values_and_expiries(state_path):
    cache = Cache(clock=_clock)
    cache.insert("session", "abc123", 60)
    cache.insert("user", "alice", 5)
    save_cache(cache, state_path)

    loaded = load_cache(state_path, clock=_clock)
    original = {k: (e.value, e.expiry) for k, e in cache.entries().items()}
    restored = {k: (e.value, e.expiry) for k, e in loaded.entries().items()}
    assert restored == original


def test_save_writes_expired_entries_too(state_path):
    cache = Cache(clock=_clock)
    cache.insert("stale", "x", 0)
    save_cache(cache, state_path)

    data = json.loads(state_path.read_text(encoding="utf-8"))
    assert data == {"entries": {"stale": {"value": "x", "expiry": NOW}}}


def test_loads_snapshot_in_documented_layout(state_path):
    state_path.write_text(
        '{"entries":{"k":{"value":"v","expiry":%d}}}' % (NOW + 30), encoding="utf-8"
    )
    cache = load_cache(state_path, clock=_clock)
    assert cache.get("k") == "v"


def test_save_overwrites_whole_file(state_path):
    first = Cache(clock=_clock)
    first.insert("a", "1", 10)
    save_cache(first, state_path)

    second = Cache(clock=_clock)
    second.insert("b", "2", 10)
    save_cache(second, state_path)

    loaded = load_cache(state_path, clock=_clock)
    assert "a" not in loaded
    assert loaded.get("b") == "2"


@pytest.mark.parametrize("content", [
    "",
    "{not json",
    "[]",
    '{"entries": []}',
    '{"entries": {"k": {"value": 1, "expiry": 10}}}',
    '{"entries": {"k": {"value": "v", "expiry": -1}}}',
    '{"entries": {"k": {"value": "v"}}}',
    '{"entries": {}, "extra": true}',
])
def test_corrupt_file_raises_and_is_left_alone(state_path, content):
    state_path.write_text(content, encoding="utf-8")
    with pytest.raises(DeserializationError):
        load_cache(state_path, clock=_clock)
    assert state_path.read_text(encoding="utf-8") == content


def test_non_utf8_file_is_corrupt(state_path):
    state_path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(DeserializationError):
        load_cache(state_path, clock=_clock)


def test_unreadable_path_raises_storage_error(tmp_path):
    # a directory where the file should be
    with pytest.raises(StorageError):
        load_cache(tmp_path, clock=_clock)


def test_write_failure_raises_storage_error(tmp_path):
    target = tmp_path / "missing-dir" / "cache_state.json"
    with pytest.raises(StorageError) as exc:
        save_cache(Cache(clock=_clock), target)
    assert exc.value.path == str(target)


def test_first_run_propagates_write_failure(tmp_path):
    with pytest.raises(StorageError):
        load_cache(tmp_path / "missing-dir" / "cache_state.json", clock=_clock)


def test_non_string_values_cannot_be_saved(state_path):
    cache = Cache(clock=_clock)
    cache.insert("n", 42, 10)
    with pytest.raises(SerializationError):
        save_cache(cache, state_path)
    assert not state_path.exists()


def test_default_path_is_relative_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    load_cache(clock=_clock)
    assert os.path.exists(tmp_path / "cache_state.json")


def test_parse_state_reports_source():
    with pytest.raises(DeserializationError, match="snapshot.json"):
        parse_state("{", source="snapshot.json")
