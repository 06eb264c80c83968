from typing import Iterator, Sequence, Tuple


def subsets_of_size(cities: Sequence[int], k: int) -> Iterator[Tuple[int, ...]]:
    """
    Enumerate every subset of exactly k cities.

    Subsets come out in depth-first "choose k of n" order: the first
    element varies slowest, and each subset keeps the order in which
    ``cities`` lists its members (ascending when ``cities`` is sorted).
    Repeated calls on the same universe yield the same sequence.

    Parameters:
        cities (Sequence[int]): The city universe, usually 1..n-1.
        k (int): Subset size.

    Returns:
        Iterator of tuples. Nothing when k > len(cities) or k < 0,
        a single empty tuple when k == 0.
    """
    cities = tuple(cities)
    n = len(cities)
    if k < 0 or k > n:
        return
    # indices[i] is the position in `cities` of the i-th chosen element
    indices = list(range(k))
    yield tuple(cities[i] for i in indices)
    while True:
        # rightmost index that can still advance
        for pos in reversed(range(k)):
            if indices[pos] != pos + n - k:
                break
        else:
            return
        indices[pos] += 1
        for nxt in range(pos + 1, k):
            indices[nxt] = indices[nxt - 1] + 1
        yield tuple(cities[i] for i in indices)


def rotations_to_front(cities: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """
    Yield one variant of ``cities`` per member, with that member moved to
    the front and the others kept in their original relative order.

    e.g. (1, 2, 4, 5) -> (1, 2, 4, 5), (2, 1, 4, 5), (4, 1, 2, 5), (5, 1, 2, 4)
    """
    cities = tuple(cities)
    for pos, city in enumerate(cities):
        yield (city,) + cities[:pos] + cities[pos + 1:]


def to_mask(cities: Sequence[int]) -> int:
    mask = 0
    for city in cities:
        mask |= 1 << city
    return mask


def from_mask(mask: int) -> Tuple[int, ...]:
    """Members of a bitmask, ascending."""
    cities = []
    city = 0
    while mask:
        if mask & 1:
            cities.append(city)
        mask >>= 1
        city += 1
    return tuple(cities)


def canonical_sequence(mask: int, destination: int) -> Tuple[int, ...]:
    """
    Ordered form of a state: destination first, then the remaining members
    of the visited set in ascending order.
    """
    for variant in rotations_to_front(from_mask(mask)):
        if variant[0] == destination:
            return variant
    raise ValueError(f"City {destination} is not a member of the visited set {from_mask(mask)}")
