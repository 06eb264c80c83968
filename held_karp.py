import logging
import math
from typing import List, Tuple

import networkx as nx

from memo_table import MemoTable, StateKey
from subsets import subsets_of_size, to_mask
from tsp_utils import graph_to_distance_matrix
from utils import MAXIMUM_CITIES, MINIMUM_CITIES

ORIGIN = 0


class InvalidInstanceError(ValueError):
    """The distance matrix cannot be solved as given."""


class InstanceTooLargeError(InvalidInstanceError):
    """More cities than the solver is allowed to handle."""


class InfeasibleTourError(ValueError):
    """No tour of finite cost exists."""


def validate_distance_matrix(distance_matrix, max_cities: int = MAXIMUM_CITIES) -> List[List[float]]:
    """
    Check the shape and the entries of a distance matrix and return it as
    a list of float rows. The diagonal is ignored; off-diagonal entries
    must be non-negative, +inf meaning there is no direct edge.
    """
    if isinstance(distance_matrix, (str, bytes)):
        raise InvalidInstanceError("Distance matrix must be a sequence of rows, not a string.")
    try:
        raw_rows = list(distance_matrix)
    except TypeError as e:
        raise InvalidInstanceError("Distance matrix must be a sequence of rows.") from e
    # a string row would otherwise be read one character per entry
    if any(isinstance(row, (str, bytes)) for row in raw_rows):
        raise InvalidInstanceError("Distance matrix rows must be sequences of numbers, not strings.")
    try:
        rows = [[float(value) for value in row] for row in raw_rows]
    except (TypeError, ValueError) as e:
        raise InvalidInstanceError("Distance matrix must be a sequence of rows.") from e

    n = len(rows)
    if n < MINIMUM_CITIES:
        raise InvalidInstanceError(f"At least {MINIMUM_CITIES} cities are required, got {n}.")
    for i, row in enumerate(rows):
        if len(row) != n:
            raise InvalidInstanceError(f"Distance matrix must be square: row {i} has {len(row)} entries, expected {n}.")
    if n > max_cities:
        raise InstanceTooLargeError(f"{n} cities exceed the limit of {max_cities} for the exact solver.")

    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            if math.isnan(rows[i][j]) or rows[i][j] < 0:
                raise InvalidInstanceError(f"Distance from {i} to {j} must be non-negative, got {rows[i][j]}.")
        rows[i][i] = math.inf
    return rows


def solve_states(distance_matrix: List[List[float]]) -> Tuple[MemoTable, StateKey]:
    """
    Bottom-up Held-Karp sweep over an already validated matrix.

    Returns:
        (memo, terminal_key): the filled table and the key of the state
        that closes the tour at the origin.
    """
    dist = distance_matrix
    n = len(dist)
    cities = list(range(1, n))
    memo = MemoTable.for_cities(n)
    logging.debug(f"Solving {n} cities with a memo table of {memo.capacity} slots")

    # base case: straight from the origin
    for city in cities:
        memo.put((1 << city, city), dist[ORIGIN][city], ORIGIN)

    for subset_size in range(2, n):
        for subset in subsets_of_size(cities, subset_size):
            mask = to_mask(subset)
            for pos, city in enumerate(subset):
                rest = subset[:pos] + subset[pos + 1:]
                rest_mask = mask ^ (1 << city)

                best_cost = math.inf
                best_prev = None
                for prev in rest:
                    cost = memo.get((rest_mask, prev)).cost + dist[prev][city]
                    if best_prev is None or cost < best_cost:
                        best_cost = cost
                        best_prev = prev

                memo.put((mask, city), best_cost, best_prev)
        logging.debug(f"Subsets of size {subset_size} done, {len(memo)} states stored")

    return memo, close_tour(memo, dist)


def close_tour(memo: MemoTable, distance_matrix: List[List[float]]) -> StateKey:
    """
    Return to the origin from the cheapest last city and store the result
    as the terminal state.
    """
    n = len(distance_matrix)
    full_mask = to_mask(range(1, n))

    best_cost = math.inf
    best_last = None
    for city in range(1, n):
        cost = memo.get((full_mask, city)).cost + distance_matrix[city][ORIGIN]
        if best_last is None or cost < best_cost:
            best_cost = cost
            best_last = city

    if math.isinf(best_cost):
        raise InfeasibleTourError("TSP DP solver could not find a complete tour.")

    terminal_key = (full_mask | (1 << ORIGIN), ORIGIN)
    memo.put(terminal_key, best_cost, best_last)
    return terminal_key


def reconstruct_path(memo: MemoTable, terminal_key: StateKey) -> List[int]:
    """
    Follow predecessors from the terminal state back to the origin.

    Each step drops the current destination from the visited set and
    makes its predecessor the new destination.
    """
    mask, city = terminal_key
    backwards = []
    prev = memo.get((mask, city)).predecessor
    mask ^= 1 << city
    while prev != ORIGIN:
        backwards.append(prev)
        city = prev
        prev = memo.get((mask, city)).predecessor
        mask ^= 1 << city
    backwards.reverse()

    return [ORIGIN] + backwards + [ORIGIN]


def held_karp(distance_matrix, max_cities: int = MAXIMUM_CITIES) -> Tuple[List[int], float]:
    """
    Solve TSP exactly with the Held-Karp recurrence.

    Parameters:
        distance_matrix: n x n distances, diagonal treated as +inf.
        max_cities (int): Largest n accepted; the state count grows as 2^n.

    Returns:
        tuple: (tour, cost) where tour is [0, ..., 0] visiting every city once.

    Raises:
        InvalidInstanceError: bad shape or entries, or too many cities.
        InfeasibleTourError: every tour has infinite cost.
    """
    dist = validate_distance_matrix(distance_matrix, max_cities=max_cities)
    memo, terminal_key = solve_states(dist)
    tour = reconstruct_path(memo, terminal_key)
    cost = memo.get(terminal_key).cost
    logging.info(f"Held-Karp solved {len(dist)} cities, cost {cost}")
    return tour, cost


def mtsp_dp(G: nx.Graph, max_cities: int = MAXIMUM_CITIES) -> List[int]:
    """
    Solve TSP on a graph using Held-Karp DP.

    Distances are shortest-path lengths in G, so the graph does not need
    to be complete as long as every node can reach every other node.

    Returns:
      - tour: [0, ..., 0] visiting every node exactly once (except 0 repeated at end)
    """
    if 0 not in G:
        raise InvalidInstanceError("Graph must contain node 0 for the starting point.")

    nodes = [0] + sorted(node for node in G.nodes() if node != 0)
    if len(nodes) == 1:
        return [0, 0]

    dist = graph_to_distance_matrix(G, nodes)
    tour, _ = held_karp(dist, max_cities=max_cities)
    return [nodes[idx] for idx in tour]
