"""Candidate index: equivalence key -> representative paths."""

from pathlib import Path

from .descriptor import EquivalenceKey


class CandidateIndex:
    """
    Maps each equivalence key to the representatives registered under it.

    With ``multiple=False`` a bucket never holds more than its first
    representative; later files whose content differs are left unregistered.
    With ``multiple=True`` they are appended, so a later file can still be
    linked to whichever representative it really matches.
    """

    def __init__(self, multiple: bool = True):
        self.multiple = multiple
        self._buckets: dict[EquivalenceKey, list[Path]] = {}

    def candidates(self, key: EquivalenceKey) -> list[Path]:
        """Representatives for ``key`` in registration order."""
        return list(self._buckets.get(key, ()))

    def register(self, key: EquivalenceKey, path: Path) -> bool:
        """
        Register ``path`` as a representative for ``key``.

        Returns:
            True if the path was added, False if the single-representative
            policy kept the existing entry
        """
        bucket = self._buckets.setdefault(key, [])
        if bucket and not self.multiple:
            return False
        bucket.append(path)
        return True

    def discard(self, key: EquivalenceKey, path: Path) -> None:
        """Drop a representative that can no longer serve as a link target."""
        bucket = self._buckets.get(key)
        if bucket and path in bucket:
            bucket.remove(path)
            if not bucket:
                del self._buckets[key]

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def __len__(self) -> int:
        """Total number of representatives across all buckets."""
        return sum(len(paths) for paths in self._buckets.values())

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)
