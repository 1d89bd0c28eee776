"""
Conditional request cache.

Maps the exact request path to the last ETag and body received for it, so a
repeated read can be answered from memory when the server replies 304.
"""

import logging
from typing import Dict, Optional

from github_api.models.types import CacheEntry

logger = logging.getLogger(__name__)


class ConditionalCache:
    """Process-lifetime ETag cache owned by one API client.

    Entries never expire; growth is bounded only by calling clear().
    """

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    def clear(self) -> None:
        """Drop all entries. Requests already in flight are not affected."""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} cached GitHub responses")

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
