# cache.py
import collections
import enum
import logging
from typing import NamedTuple, Optional

import numpy as np


class InvalidConfiguration(ValueError):
    """Raised for a bad cache capacity, policy token or run range."""


class Policy(enum.Enum):
    NONE = "NONE"
    LRU = "LRU"
    RR = "RR"

    @classmethod
    def parse(cls, token):
        if token is None:
            return cls.NONE
        if isinstance(token, cls):
            return token
        try:
            return cls(token)
        except ValueError:
            raise InvalidConfiguration(
                f"Invalid cache policy {token!r}. Use LRU, RR or NONE."
            ) from None


class CacheStats(NamedTuple):
    hits: int
    misses: int

    @property
    def lookups(self):
        return self.hits + self.misses

    @property
    def hit_rate(self) -> Optional[float]:
        # undefined until something has been looked up
        if not self.lookups:
            return None
        return self.hits / self.lookups


class RecencyOrder:
    """
    Slot indices ordered from least to most recently used.
    The OrderedDict keys are exactly the occupied slots.
    """

    def __init__(self):
        self._order = collections.OrderedDict()

    def admit(self, slot):
        self._order[slot] = True

    def touch(self, slot):
        self._order.move_to_end(slot)

    def select_victim(self, capacity):
        # the overwritten slot becomes the freshest one
        slot = next(iter(self._order))
        self._order.move_to_end(slot)
        return slot

    def slots(self):
        return list(self._order)


class RandomReplacement:
    """Uniform random victim, independent of recency and content."""

    def __init__(self, rng=None):
        # anything with numpy's Generator.integers(low, high) will do
        self.rng = rng if rng is not None else np.random.default_rng()

    def admit(self, slot):
        pass

    def touch(self, slot):
        pass

    def select_victim(self, capacity):
        return int(self.rng.integers(0, capacity))

    def slots(self):
        return []


class Cache:
    """
    Fixed-capacity memo of number -> Collatz step count.

    Entries live in slots 0..capacity-1, filled in order and then
    overwritten in place by the eviction policy; a slot never becomes
    empty again. A dict index maps each live key to its slot.
    With Policy.NONE nothing is stored and every lookup misses.
    """

    def __init__(self, capacity, policy="LRU", rng=None):
        if isinstance(capacity, bool) or not isinstance(capacity, (int, np.integer)) or capacity <= 0:
            raise InvalidConfiguration("Cache size must be greater than 0.")
        self.capacity = int(capacity)
        self.policy = Policy.parse(policy)
        self.hits = 0
        self.misses = 0

        if self.policy is Policy.NONE:
            self._slots = None
            self._index = None
            self._replacement = None
        else:
            self._slots = []
            self._index = {}
            if self.policy is Policy.LRU:
                self._replacement = RecencyOrder()
            else:
                self._replacement = RandomReplacement(rng)
        logging.debug(f"Cache initialized: policy={self.policy.value} capacity={self.capacity}")

    def __len__(self):
        return len(self._slots) if self._slots is not None else 0

    def __contains__(self, key):
        return self._index is not None and key in self._index

    @property
    def enabled(self):
        return self.policy is not Policy.NONE

    @property
    def is_full(self):
        return self.enabled and len(self._slots) == self.capacity

    def lookup(self, key) -> Optional[int]:
        """
        Return the cached step count for `key`, or None on a miss.
        A hit refreshes the slot's recency under LRU.
        """
        slot = self._index.get(key) if self._index is not None else None
        if slot is None:
            self.misses += 1
            return None
        self.hits += 1
        self._replacement.touch(slot)
        return self._slots[slot][1]

    def insert(self, key, steps):
        """
        Store `key` -> `steps`. Callers insert only after a miss; a key
        that is already live is rejected rather than duplicated.
        """
        if not self.enabled:
            return
        if key in self._index:
            raise ValueError(f"key {key!r} is already cached")

        if len(self._slots) < self.capacity:
            slot = len(self._slots)
            self._slots.append((key, steps))
            self._replacement.admit(slot)
        else:
            slot = self._replacement.select_victim(self.capacity)
            evicted_key, _ = self._slots[slot]
            del self._index[evicted_key]
            self._slots[slot] = (key, steps)
            logging.debug(f"Evicted {evicted_key} from slot {slot} for {key}")
        self._index[key] = slot

    def stats(self) -> CacheStats:
        return CacheStats(self.hits, self.misses)

    def entries(self):
        """(key, steps) pairs in slot order."""
        return list(self._slots) if self._slots is not None else []

    def recency(self):
        """Occupied slots from least to most recently used (LRU only)."""
        if self._replacement is None:
            return []
        return self._replacement.slots()

    def describe(self):
        stats = self.stats()
        return {
            "policy": self.policy.value,
            "capacity": self.capacity,
            "occupancy": len(self),
            "hits": stats.hits,
            "misses": stats.misses,
            "hit_rate": stats.hit_rate,
        }
