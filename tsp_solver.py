import argparse
import logging
import math
import os
import sys
import time
from typing import List, Optional, Tuple

from held_karp import held_karp
from tsp_utils import (
    analyze_solution,
    draw_tour,
    format_tour,
    input_file_to_instance,
    is_metric,
    is_valid_input,
    write_tour_solution_to_out,
)
from utils import (
    INPUT_FILE_DIRECTORY,
    INPUT_FILE_EXTENSION,
    MAXIMUM_CITIES,
    OUTPUT_FILE_DIRECTORY,
    TITLE_ART,
    get_files_with_extension,
    input_file_names_to_file_path,
    list_all_files,
)


def solve_file(
    file: str,
    max_cities: int = MAXIMUM_CITIES,
    write_output: bool = False,
    output_dir: str = OUTPUT_FILE_DIRECTORY,
    draw: bool = False,
) -> Tuple[List[int], float]:
    """
    Load one coordinate file, solve it and print the path, cost and running time.

    Raises ValueError (and subclasses) for invalid or unsolvable inputs.
    """
    start_time = time.perf_counter_ns()
    print(f"Loading from {file}")

    is_valid, message = is_valid_input(file, max_cities=max_cities)
    if not is_valid:
        raise ValueError(f"Invalid input {file}: {message.strip()}")
    distance_matrix, coordinates = input_file_to_instance(file)
    if not is_metric(distance_matrix):
        logging.warning(f"{file} does not satisfy the triangle inequality")
    print("File loaded.")

    print("Running Held-Karp.\n")
    tour, cost = held_karp(distance_matrix, max_cities=max_cities)
    is_legitimate, checked_cost = analyze_solution(distance_matrix, tour)
    if not is_legitimate or not math.isclose(checked_cost, cost, rel_tol=1e-9, abs_tol=1e-9):
        raise ValueError(f"Tour {format_tour(tour)} does not check out against {file} (cost {checked_cost}, expected {cost})")
    print(f"Path = {format_tour(tour)}")
    print(f"Cost = {cost}")

    total_time = time.perf_counter_ns() - start_time
    print(f"Running time = {total_time} nano seconds, {total_time / 1e9} seconds")

    if write_output:
        out_file = write_tour_solution_to_out(tour, cost, file, out_dir=output_dir)
        logging.info(f"Solution written to {out_file}")
    if draw:
        draw_tour(coordinates, tour)
    return tour, cost


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Exact TSP solver (Held-Karp dynamic programming).")
    parser.add_argument('files', nargs='*', help='input files, with or without extension (default: all inputs)')
    parser.add_argument('--input-dir', type=str, default=INPUT_FILE_DIRECTORY)
    parser.add_argument('--output-dir', type=str, default=OUTPUT_FILE_DIRECTORY)
    parser.add_argument('--max-cities', type=int, default=MAXIMUM_CITIES)
    parser.add_argument('--write-output', action='store_true', help='write <name>.out for each solved input')
    parser.add_argument('--draw', action='store_true', help='plot every solved tour')
    parser.add_argument('--list', action='store_true', help='list the available input files and exit')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s %(levelname)s %(message)s')

    if not os.path.isdir(args.input_dir):
        print(f"Input directory {args.input_dir} not found")
        return 1
    if args.list:
        list_all_files(args.input_dir, INPUT_FILE_EXTENSION)
        return 0

    print(TITLE_ART)
    in_files_all = get_files_with_extension(args.input_dir, INPUT_FILE_EXTENSION)
    if args.files:
        file_paths, message = input_file_names_to_file_path(args.files, in_files_all, args.input_dir)
        if message:
            print(message)
            return 1
    else:
        file_paths = [os.path.join(args.input_dir, file) for file in in_files_all]

    failed = 0
    for file in file_paths:
        try:
            solve_file(file, max_cities=args.max_cities, write_output=args.write_output,
                       output_dir=args.output_dir, draw=args.draw)
        except ValueError as e:
            logging.error(f"{file}: {e}")
            print(f"Failed to solve {file}: {e}")
            failed += 1
        print()
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
