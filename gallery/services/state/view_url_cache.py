"""Cache of presigned view URLs with lazy expiry."""

from collections.abc import MutableMapping
from datetime import datetime

from gallery.models.domain import ViewUrlEntry


class ViewUrlCache(MutableMapping[str, ViewUrlEntry]):
    """Holds view URLs keyed by image id.

    Entries are dropped lazily: an expired entry stays in memory until it is
    next looked up via ``get_valid`` (or pruned explicitly), but it is never
    returned from ``get_valid`` once ``now >= expires_at``. The cache is
    unbounded; one entry per image id in the gallery.

    Implements MutableMapping for dict-like inspection in callers and tests.
    """

    def __init__(self) -> None:
        self._cache: dict[str, ViewUrlEntry] = {}

    # MutableMapping abstract methods
    def __getitem__(self, key: str) -> ViewUrlEntry:
        return self._cache[key]

    def __setitem__(self, key: str, value: ViewUrlEntry) -> None:
        self._cache[key] = value

    def __delitem__(self, key: str) -> None:
        del self._cache[key]

    def __iter__(self):
        return iter(self._cache)

    def __len__(self) -> int:
        return len(self._cache)

    # Additional convenience methods
    def get_valid(self, image_id: str, now: datetime) -> ViewUrlEntry | None:
        """Return the entry for ``image_id`` if it has not expired.

        An expired entry is evicted as a side effect.

        Args:
            image_id: Image identifier.
            now: Current time (aware).

        Returns:
            The cached entry, or None if missing or expired.
        """
        entry = self._cache.get(image_id)
        if entry is None:
            return None
        if entry.is_expired(now):
            del self._cache[image_id]
            return None
        return entry

    def put(self, entry: ViewUrlEntry) -> None:
        """Store ``entry``, replacing any previous entry for the same id."""
        self._cache[entry.id] = entry

    def invalidate(self, image_id: str) -> None:
        self._cache.pop(image_id, None)

    def prune_expired(self, now: datetime) -> int:
        """Drop every expired entry.

        Returns:
            Number of entries removed.
        """
        expired = [k for k, v in self._cache.items() if v.is_expired(now)]
        for key in expired:
            del self._cache[key]
        return len(expired)

    def clear_all(self) -> None:
        """Clear all cached entries (useful for testing)."""
        self._cache.clear()
