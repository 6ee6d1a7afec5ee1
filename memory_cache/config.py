# memory_cache/config.py

# State file, relative to the current working directory
CACHE_FILE = "cache_state.json"

# TTL used by `insert` when --ttl is not given
DEFAULT_TTL_SECONDS = 30

# Expiry is stored as unsigned 64-bit Unix seconds
MAX_EXPIRY = 2**64 - 1
