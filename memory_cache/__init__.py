"""Tiny key-value cache with per-key TTL, persisted to a JSON snapshot."""

__version__ = "0.1.0"
