"""
Request-scoped index of prime pairs that have already been issued.
"""
import logging

from django.db import DatabaseError

from .exceptions import StoreReadError

logger = logging.getLogger(__name__)


def pair_key(a, b):
    """Canonical key of an unordered pair: "<min>-<max>"."""
    low, high = sorted((int(a), int(b)))
    return f"{low}-{high}"


class PairIndex:
    """
    Set of canonical pair keys, seeded from the ledger snapshot and grown as
    pairs are claimed during one batch. Not shared across requests.
    """

    def __init__(self, keys=()):
        self._keys = set(keys)

    @classmethod
    def load(cls, source, degrade_available=True):
        """
        Build an index from ``source()``, a table whose first row is a header
        and whose remaining rows hold (prime_a, prime_b).

        With ``degrade_available`` a failing read yields an empty index so that
        registration keeps working, at a higher risk of repeating a pair.
        """
        try:
            rows = source()
            if rows is None:
                rows = []
            if not isinstance(rows, (list, tuple)):
                raise StoreReadError(f"Malformed pair history: expected rows, got {type(rows).__name__}")
        except (StoreReadError, DatabaseError, OSError, ValueError) as e:
            if not degrade_available:
                raise
            logger.warning("Could not read issued pairs, continuing without history: %s", e)
            return cls()

        index = cls()
        skipped = 0
        for row in rows[1:]:
            if not isinstance(row, (list, tuple)):
                skipped += 1
                continue
            if len(row) < 2 or row[0] in (None, '') or row[1] in (None, ''):
                continue
            try:
                index.insert(pair_key(row[0], row[1]))
            except (TypeError, ValueError):
                skipped += 1

        if skipped:
            logger.debug("Skipped %d unparsable pair rows", skipped)
        logger.info("Found %d existing prime pairs", len(index))
        return index

    def contains(self, key):
        return key in self._keys

    def insert(self, key):
        self._keys.add(key)

    def __contains__(self, key):
        return self.contains(key)

    def __len__(self):
        return len(self._keys)
