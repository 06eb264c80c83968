import math
import os

import networkx as nx
import pytest

from tsp_utils import (
    analyze_solution,
    coordinates_to_distance_matrix,
    coordinates_to_graph,
    data_parser,
    draw_tour,
    format_tour,
    graph_to_distance_matrix,
    input_file_to_instance,
    is_metric,
    is_valid_input,
    tour_cost,
    write_tour_solution_to_out,
)

SQUARE = [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0)]


def write_input(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_data_parser_spaces_and_tabs():
    ids, coords = data_parser([["1", "0", "0"], ["2", "3.5", "4"]])
    assert ids == [1, 2]
    assert coords == [(0.0, 0.0), (3.5, 4.0)]
    with pytest.raises(ValueError):
        data_parser([["1", "0"]])


def test_distance_matrix_from_coordinates():
    dist = coordinates_to_distance_matrix([(0, 0), (3, 4)])
    assert dist[0][1] == 5.0
    assert dist[1][0] == 5.0
    assert math.isinf(dist[0][0]) and math.isinf(dist[1][1])


def test_input_file_to_instance(tmp_path):
    file = write_input(tmp_path, "square.txt", "1\t0\t0\n2\t0\t1\n\n3\t1\t0\n4\t1\t1\n")
    dist, coords = input_file_to_instance(file)
    assert coords == SQUARE
    assert dist[0][3] == pytest.approx(math.sqrt(2))


def test_graph_round_trip():
    G = coordinates_to_graph(SQUARE)
    assert G.number_of_edges() == 12
    assert G.nodes[3]["pos"] == (1.0, 1.0)
    dist = graph_to_distance_matrix(G)
    assert dist == coordinates_to_distance_matrix(SQUARE)


def test_graph_to_distance_matrix_unreachable():
    G = nx.DiGraph()
    G.add_edge(0, 1, weight=1.0)
    G.add_node(2)
    dist = graph_to_distance_matrix(G)
    assert dist[0][1] == 1.0
    assert math.isinf(dist[1][0])
    assert math.isinf(dist[0][2])


def test_is_metric():
    assert is_metric(coordinates_to_distance_matrix(SQUARE))
    dist = coordinates_to_distance_matrix(SQUARE)
    dist[0][3] = dist[3][0] = 10.0
    assert not is_metric(dist)


def test_is_valid_input(tmp_path):
    good = write_input(tmp_path, "good.txt", "1 0 0\n2 0 1\n3 1 0\n")
    assert is_valid_input(good) == (True, '')

    garbage = write_input(tmp_path, "garbage.txt", "1 a b\n")
    assert is_valid_input(garbage) == (False, "Cannot parse data")

    single = write_input(tmp_path, "single.txt", "1 0 0\n")
    is_valid, message = is_valid_input(single)
    assert not is_valid and 'not enough cities' in message

    duplicates = write_input(tmp_path, "dup.txt", "1 0 0\n1 0 0\n")
    is_valid, message = is_valid_input(duplicates)
    assert not is_valid
    assert 'city ids not distinct' in message
    assert 'city coordinates not distinct' in message

    big = write_input(tmp_path, "big.txt", "".join(f"{i} {i} 0\n" for i in range(1, 6)))
    is_valid, message = is_valid_input(big, max_cities=4)
    assert not is_valid and 'maximum number of cities exceeded' in message

    far = write_input(tmp_path, "far.txt", "1 0 0\n2 1e9 0\n")
    is_valid, message = is_valid_input(far)
    assert not is_valid and 'maximum coordinate exceeded' in message

    assert is_valid_input(str(tmp_path / "missing.txt")) == (False, "Cannot read file")


def test_analyze_solution():
    dist = coordinates_to_distance_matrix(SQUARE)
    assert analyze_solution(dist, [0, 1, 3, 2, 0]) == (True, pytest.approx(4.0))
    assert analyze_solution(dist, [1, 0, 3, 2, 1])[0] is False
    assert analyze_solution(dist, [0, 1, 1, 2, 0]) == (False, float('infinity'))
    assert analyze_solution(dist, [0, 1, 2, 0])[0] is False
    dist[1][3] = math.inf
    assert analyze_solution(dist, [0, 1, 3, 2, 0]) == (False, float('infinity'))


def test_tour_cost():
    dist = coordinates_to_distance_matrix(SQUARE)
    assert tour_cost(dist, [0, 1, 3, 2, 0]) == pytest.approx(4.0)
    assert tour_cost(dist, [0, 3, 1, 2, 0]) == pytest.approx(2 + 2 * math.sqrt(2))
    assert tour_cost(dist, [0]) == 0


def test_format_tour():
    assert format_tour([0, 1, 3, 2, 0]) == "0 -> 1 -> 3 -> 2 -> 0"


def test_write_tour_solution_to_out(tmp_path):
    out_dir = tmp_path / "outputs"
    path = write_tour_solution_to_out([0, 2, 1, 0], 3.14159265, "inputs/test3-21.txt", out_dir=str(out_dir))
    assert os.path.basename(path) == "test3-21.out"
    assert (out_dir / "test3-21.out").read_text() == "0 2 1 0\n3.14159\n"


def test_draw_tour(tmp_path):
    target = tmp_path / "tour.png"
    draw_tour(SQUARE, [0, 1, 3, 2, 0], save_to_path=str(target), show=False)
    assert target.exists()
