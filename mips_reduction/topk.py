"""Bounded top-k lists for ranking candidates by score."""

import bisect

from mips_reduction.errors import InvalidInputError


class TopKList:
    """Keeps the k best (score, id) pairs seen so far.

    With ``largest=True`` higher scores rank first (inner-product ranking);
    otherwise lower scores rank first (distance ranking). Among equal scores
    the entry inserted first ranks ahead, and a full list rejects a new entry
    that only ties its current worst score.
    """

    def __init__(self, k, largest=True):
        if k < 1:
            raise InvalidInputError("k must be >= 1, got %r" % (k,))
        self.k = k
        self.largest = largest
        self._keys = []  # ascending; negated scores when largest
        self._entries = []

    def _key(self, score):
        return -score if self.largest else score

    def insert(self, score, item_id):
        """Offer a (score, id) pair. Returns True if it was retained."""
        key = self._key(score)
        if self.is_full() and key >= self._keys[-1]:
            return False
        pos = bisect.bisect_right(self._keys, key)
        self._keys.insert(pos, key)
        self._entries.insert(pos, (score, item_id))
        if len(self._keys) > self.k:
            self._keys.pop()
            self._entries.pop()
        return True

    def size(self):
        return len(self._entries)

    def is_full(self):
        return len(self._entries) >= self.k

    def ith_score(self, i):
        return self._entries[i][0]

    def ith_id(self, i):
        return self._entries[i][1]

    def worst_score(self):
        """Score of the lowest-ranked retained entry, or None when empty."""
        if not self._entries:
            return None
        return self._entries[-1][0]

    def items(self):
        """Retained (score, id) pairs, best first."""
        return list(self._entries)

    def ids(self):
        return [item_id for _, item_id in self._entries]

    def __len__(self):
        return len(self._entries)


class MinKList(TopKList):
    """Top-k list where smaller scores (distances) rank first."""

    def __init__(self, k):
        super().__init__(k, largest=False)


class MaxKList(TopKList):
    """Top-k list where larger scores (inner products) rank first."""

    def __init__(self, k):
        super().__init__(k, largest=True)
