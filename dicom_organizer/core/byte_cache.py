"""Byte Cache Shared with the Rendering Collaborator

Holds the raw bytes of every accepted archive entry for the duration of one
processing run. The orchestrator stores each entry under both its archive
path and its basename; the rendering side resolves an image key back to
bytes with :meth:`ByteCache.lookup`.

LOOKUP STRATEGY:
- Strip the ``dicom:`` image-key scheme if present
- Exact key match first
- Otherwise the first stored key (in insertion order) where either key
  contains the other

USAGE:
    cache = ByteCache()
    cache.store("study/series1/slice_001.dcm", data)
    cache.store("slice_001.dcm", data)

    data = cache.lookup("dicom:slice_001.dcm")

    stats = cache.get_statistics()
    print(f"Hit rate: {stats['hit_rate']:.1%}")
"""

from collections import OrderedDict

from dicom_organizer.utils.logger import get_logger

from .constants import IMAGE_KEY_SCHEME

logger = get_logger(__name__)


class ByteCache:
    """Insertion-ordered key to bytes store with containment fallback."""

    def __init__(self) -> None:
        self._entries: OrderedDict[str, bytes] = OrderedDict()

        # Statistics
        self._hits = 0
        self._containment_hits = 0
        self._misses = 0

    def store(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any previous value.

        Replacing a key keeps its original position in lookup order.
        """
        self._entries[key] = data
        logger.debug("cache_store", key=key, size_bytes=len(data))

    def lookup(self, key: str) -> bytes | None:
        """Resolve ``key`` (or a ``dicom:`` image key) to stored bytes.

        Returns:
            The stored bytes, or None if neither an exact nor a containment
            match exists

        """
        name = key.removeprefix(IMAGE_KEY_SCHEME)

        data = self._entries.get(name)
        if data is not None:
            self._hits += 1
            return data

        for stored_key, stored in self._entries.items():
            if name in stored_key or stored_key in name:
                self._containment_hits += 1
                logger.debug("cache_containment_match", key=name, matched=stored_key)
                return stored

        self._misses += 1
        logger.debug("cache_miss", key=name)
        return None

    def clear(self) -> None:
        """Drop every stored entry."""
        self._entries.clear()
        logger.info("cache_cleared")

    def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get_statistics(self) -> dict:
        """Get cache statistics.

        Returns:
            Dict with lookup counters and current size

        """
        total_requests = self._hits + self._containment_hits + self._misses
        found = self._hits + self._containment_hits
        hit_rate = found / total_requests if total_requests > 0 else 0.0

        return {
            "hits": self._hits,
            "containment_hits": self._containment_hits,
            "misses": self._misses,
            "total_requests": total_requests,
            "hit_rate": hit_rate,
            "current_entries": len(self._entries),
            "total_bytes": sum(len(v) for v in self._entries.values()),
        }
