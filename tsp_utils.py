import logging
import math
import os

import matplotlib.pyplot as plt
import networkx as nx

from utils import *

def data_parser(input_data):
    """
    Parsing input data

    Every line holds one city as `id x y`, separated by spaces or tabs.
    Cities are numbered by line order; the id column is kept for validation.
    """
    city_ids = []
    coordinates = []
    for line in input_data:
        if len(line) < 3:
            raise ValueError(f"Expected 'id x y', got {' '.join(line)!r}")
        city_ids.append(int(line[0]))
        coordinates.append((float(line[1]), float(line[2])))
    return city_ids, coordinates

def coordinates_to_distance_matrix(coordinates):
    """
    Euclidean distance between every pair of cities.
    The distance from a city to itself is infinity.
    """
    n = len(coordinates)
    distance_matrix = [[math.inf] * n for _ in range(n)]
    for i in range(n):
        for j in range(n):
            if i != j:
                distance_matrix[i][j] = math.dist(coordinates[i], coordinates[j])
    return distance_matrix

def coordinates_to_graph(coordinates):
    """
    Complete directed graph over the cities, weighted by Euclidean distance.
    Node positions are stored in the 'pos' attribute.
    """
    G = nx.DiGraph()
    for i, (x, y) in enumerate(coordinates):
        G.add_node(i, pos=(x, y))
    distance_matrix = coordinates_to_distance_matrix(coordinates)
    for i in range(len(coordinates)):
        for j in range(len(coordinates)):
            if i != j:
                G.add_edge(i, j, weight=distance_matrix[i][j])
    return G

def graph_to_distance_matrix(G, nodes=None):
    """
    Shortest-path distances between the nodes of G, in the order of nodes
    (sorted node labels by default). Unreachable pairs and the diagonal
    are infinity.
    """
    if nodes is None:
        nodes = sorted(G.nodes())
    dist_iter = nx.all_pairs_dijkstra_path_length(G, weight="weight")
    dist = {u: dict(lengths) for u, lengths in dist_iter}
    distance_matrix = [[math.inf] * len(nodes) for _ in nodes]
    for i, u in enumerate(nodes):
        for j, v in enumerate(nodes):
            if i != j:
                distance_matrix[i][j] = float(dist[u].get(v, math.inf))
    return distance_matrix

def input_file_to_instance(file):
    """
    Create an instance of the TSP problem from a specific file.

    Parameters:
        file (str): Path of the input file.

    Returns:
        tuple: A tuple containing:
            - distance_matrix (list): n x n Euclidean distances, infinity on the diagonal.
            - coordinates (list): (x, y) of every city, in file order.
    """
    input_data = read_file(file)
    _, coordinates = data_parser(input_data)
    return coordinates_to_distance_matrix(coordinates), coordinates

def is_metric(distance_matrix):
    """
    Check whether a given distance matrix is metric or not,
    i.e., whether triangle inequality holds.
    """
    n = len(distance_matrix)
    for i in range(n):
        for j in range(n):
            for k in range(n):
                if len({i, j, k}) < 3:
                    continue
                if distance_matrix[i][j] > distance_matrix[i][k] + distance_matrix[k][j] + 1e-9:
                    return False
    return True

def is_valid_input(file: str, max_cities: int = MAXIMUM_CITIES) -> tuple:
    """
    Check if the given input file is valid.

    Parameters:
        file (str): Path to the input file.
        max_cities (int): Largest accepted number of cities.

    Returns:
        tuple: A tuple containing:
            - is_valid (bool): Whether the input file is valid.
            - message (str): A log message providing details about the validation result.
    """
    is_valid = True
    message = ''

    try:
        input_data = read_file(file)
    except OSError:
        return False, "Cannot read file"
    try:
        city_ids, coordinates = data_parser(input_data)
    except (ValueError, IndexError):
        return False, "Cannot parse data"

    number_of_cities = len(coordinates)
    if number_of_cities < MINIMUM_CITIES:
        is_valid = False
        message += 'not enough cities\n'

    if number_of_cities > max_cities:
        is_valid = False
        message += 'maximum number of cities exceeded\n'

    if len(set(city_ids)) != len(city_ids):
        is_valid = False
        message += 'city ids not distinct\n'

    if len(set(coordinates)) != len(coordinates):
        is_valid = False
        message += 'city coordinates not distinct\n'

    for x, y in coordinates:
        if not (math.isfinite(x) and math.isfinite(y)):
            is_valid = False
            message += 'coordinate not a finite number\n'
            break
        if abs(x) > MAXIMUM_COORDINATE or abs(y) > MAXIMUM_COORDINATE:
            is_valid = False
            message += 'maximum coordinate exceeded\n'
            break

    return is_valid, message


def analyze_solution(distance_matrix, tour):
    """
    Analyze the solution for a given instance of the problem.

    Parameters:
        distance_matrix (list): n x n distances.
        tour (list): The tour, as a list of cities.

    Returns:
        is_legitimate (bool): Whether the solution is legitimate or not.
        cost (float): Total length of the tour.

    Notes:
        A solution is legitimate if the following conditions hold:
        - The tour must begin and end at city 0.
        - Every city is visited exactly once (0 twice, as start and end).
        - Every leg of the tour has a finite distance.

        An illegitimate solution will have a cost of positive infinity.

    Examples:
        For the unit square (0,0), (0,1), (1,0), (1,1):
            tour = [0, 1, 3, 2, 0]

        The output would thus be:
            True, 4.0
    """
    n = len(distance_matrix)
    # the tour must start and end at city 0
    if len(tour) < 2 or not (tour[0] == 0 and tour[-1] == 0):
        logging.warning("Tour is not a cycle through city 0")
        return False, float('infinity')
    # every city exactly once
    if sorted(tour[:-1]) != list(range(n)):
        logging.warning(f"Tour {tour} does not visit all {n} cities exactly once")
        return False, float('infinity')
    for i in range(1, len(tour)):
        if math.isinf(distance_matrix[tour[i-1]][tour[i]]):
            logging.warning(f"Leg {tour[i-1], tour[i]} has no finite distance")
            return False, float('infinity')
    return True, tour_cost(distance_matrix, tour)


def tour_cost(distance_matrix, tour):
    """Sum of the legs of tour, without any validation"""
    return sum(distance_matrix[u][v] for u, v in zip(tour[:-1], tour[1:]))


def format_tour(tour):
    return ' -> '.join(str(city) for city in tour)


def write_tour_solution_to_out(tour, cost, in_file, out_dir=OUTPUT_FILE_DIRECTORY):
    if not os.path.exists(out_dir):
        os.makedirs(out_dir)
    file_name = os.path.splitext(os.path.basename(in_file))[0] + OUTPUT_FILE_EXTENSION
    out_file_path = os.path.join(out_dir, file_name)
    data = []
    data.append(' '.join(str(i) for i in tour))
    data.append(str(round(cost, ndigits=MAXIMUM_FLOAT_DIGITS)))
    write_to_file(out_file_path, '\n'.join(data) + '\n')
    return out_file_path


def draw_tour(coordinates, tour, save_to_path=None, show=True):
    """Draw the cities and the tour through them"""
    cities = coordinates_to_graph(coordinates)
    pos = nx.get_node_attributes(cities, 'pos')
    G = nx.DiGraph()
    G.add_nodes_from(cities.nodes)
    G.add_edges_from(zip(tour[:-1], tour[1:]))

    fig, ax = plt.subplots(figsize=(8, 8), facecolor='white')
    node_colors = ['salmon' if node == 0 else 'skyblue' for node in G.nodes()]
    nx.draw(G, pos, ax=ax, with_labels=True, node_color=node_colors, node_size=500, font_size=10)
    ax.set_title(format_tour(tour))

    if save_to_path is not None:
        plt.savefig(save_to_path, facecolor='white', transparent=False)
    if show:
        plt.show()
    plt.close(fig)
