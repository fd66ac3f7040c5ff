"""In-memory cache of the last decoded response per location."""
from typing import Dict, Optional, Tuple
from weather_data import CacheEntry


class ResponseCache:
    """
    Maps location name to the last successful fetch.

    Entries are never evicted or invalidated; freshness is checked by the
    reader against the location's TTL. Not thread-safe on its own, the
    collector serializes all access.
    """

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, name: str) -> Tuple[Optional[CacheEntry], bool]:
        entry = self._entries.get(name)
        return entry, entry is not None

    def put(self, name: str, entry: CacheEntry) -> None:
        self._entries[name] = entry
