from typing import Dict, Generic, TypeVar

from pydantic import BaseModel, Field

from memory_cache.config import MAX_EXPIRY

T = TypeVar("T")

class CacheEntry(BaseModel, Generic[T]):
    value: T
    expiry: int = Field(ge=0, le=MAX_EXPIRY)  # absolute, Unix seconds

class CacheState(BaseModel):
    entries: Dict[str, CacheEntry[str]] = Field(default_factory=dict)
