import logging
from typing import Iterator, List, Optional, Tuple

from subsets import canonical_sequence

StateKey = Tuple[int, int]  # (visited_mask, destination)

HASH_SEED = 17
HASH_PRIME = 31
MINIMUM_CAPACITY = 8
MAXIMUM_LOAD_FACTOR = 0.5


class MissingStateError(LookupError):
    """A state was looked up before it was ever written."""


class DuplicateStateError(ValueError):
    """A state was written twice into a table that does not allow overwrites."""


class MemoEntry:
    __slots__ = ("key", "cost", "predecessor")

    def __init__(self, key: StateKey, cost: float, predecessor: int):
        self.key = key
        self.cost = float(cost)
        self.predecessor = int(predecessor)

    def as_tuple(self) -> Tuple[float, int]:
        return self.cost, self.predecessor

    def __repr__(self):
        mask, destination = self.key
        return (f"{list(canonical_sequence(mask, destination))}, "
                f"cost= {self.cost}, prev city= {self.predecessor}")


def expected_states(n: int) -> int:
    """Upper bound on the number of DP states for an instance of n cities."""
    if n < 2:
        return 1
    return (1 << (n - 1)) * (n - 1)


def capacity_for(n_entries: int) -> int:
    """Smallest power of two that holds n_entries below the load threshold."""
    capacity = MINIMUM_CAPACITY
    while n_entries >= capacity * MAXIMUM_LOAD_FACTOR:
        capacity *= 2
    return capacity


class MemoTable:
    """
    Associative store for Held-Karp states: (visited_mask, destination) ->
    (cost, predecessor).

    Open addressing with linear probing over a flat list of slots. The
    table doubles and rehashes as soon as half of the slots are taken, so
    there is always a free slot and probe sequences stay short.

    Duplicate keys: with allow_overwrite the whole entry is replaced, cost
    and predecessor together; without it a second put of the same key
    raises DuplicateStateError.
    """

    def __init__(self, capacity: int = MINIMUM_CAPACITY, allow_overwrite: bool = True):
        self._capacity = max(MINIMUM_CAPACITY, int(capacity))
        self._slots: List[Optional[MemoEntry]] = [None] * self._capacity
        self._size = 0
        self.allow_overwrite = allow_overwrite
        self.resizes = 0

    @classmethod
    def for_cities(cls, n: int, allow_overwrite: bool = False) -> "MemoTable":
        """Table sized up front for every state of an n-city instance."""
        return cls(capacity_for(expected_states(n)), allow_overwrite=allow_overwrite)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def load_factor(self) -> float:
        return self._size / self._capacity

    def __len__(self):
        return self._size

    def __contains__(self, key: StateKey) -> bool:
        return self._slots[self._position(key)] is not None

    def _hash(self, key: StateKey) -> int:
        hash_code = HASH_SEED
        for component in key:
            hash_code = hash_code * HASH_PRIME + component
        return hash_code % self._capacity

    def _position(self, key: StateKey) -> int:
        """Slot holding key, or the first free slot on its probe sequence."""
        key = (int(key[0]), int(key[1]))
        pos = self._hash(key)
        slots = self._slots
        while slots[pos] is not None and slots[pos].key != key:
            pos += 1
            if pos == self._capacity:
                pos = 0
        return pos

    def put(self, key: StateKey, cost: float, predecessor: int) -> None:
        key = (int(key[0]), int(key[1]))
        pos = self._position(key)
        if self._slots[pos] is not None:
            if not self.allow_overwrite:
                raise DuplicateStateError(f"State {self._slots[pos]!r} is already stored")
            self._slots[pos] = MemoEntry(key, cost, predecessor)
            return

        self._slots[pos] = MemoEntry(key, cost, predecessor)
        self._size += 1
        if self._size >= self._capacity * MAXIMUM_LOAD_FACTOR:
            self._resize(self._capacity * 2)

    def get(self, key: StateKey) -> MemoEntry:
        key = (int(key[0]), int(key[1]))
        entry = self._slots[self._position(key)]
        if entry is None:
            raise MissingStateError(f"No state stored for visited mask {bin(key[0])} ending at city {key[1]}")
        return entry

    def _resize(self, new_capacity: int) -> None:
        logging.debug(f"Resizing memo table from {self._capacity} to {new_capacity} slots ({self._size} entries)")
        old_slots = self._slots
        self._capacity = new_capacity
        self._slots = [None] * new_capacity
        for entry in old_slots:
            if entry is not None:
                self._slots[self._position(entry.key)] = entry
        self.resizes += 1

    def items(self) -> Iterator[Tuple[StateKey, MemoEntry]]:
        for entry in self._slots:
            if entry is not None:
                yield entry.key, entry

    def __str__(self):
        return "\n".join(f"{pos} =  {entry!r}" for pos, entry in enumerate(self._slots) if entry is not None)
