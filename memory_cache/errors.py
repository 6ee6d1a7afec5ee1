# memory_cache/errors.py


class CacheError(Exception):
    """Base for every recoverable failure the CLI reports and exits on."""


class DeserializationError(CacheError):
    """State file exists but does not hold a valid cache snapshot."""


class SerializationError(CacheError):
    """Cache contents could not be encoded to JSON."""


class StorageError(CacheError):
    """Reading or writing the state file failed (other than 'file absent')."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class ClockError(RuntimeError):
    """System clock reports a time before the Unix epoch. Not recoverable."""


class ExpiryOverflowError(CacheError, ValueError):
    """now + ttl does not fit in an unsigned 64-bit expiry."""
