import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from circuit_challenge.schemas import Coordinate, DiagonalDirection


# top-left corner of a 2x2 block -> diagonal committed in that block
DiagonalCommitments = Dict[Coordinate, DiagonalDirection]

DIRECTIONS = [
    (-1, 0),   # up
    (1, 0),    # down
    (0, -1),   # left
    (0, 1),    # right
    (-1, -1),  # up-left
    (-1, 1),   # up-right
    (1, -1),   # down-left
    (1, 1),    # down-right
]

SMALL_GRID_CELLS = 20


@dataclass
class PathResult:
    success: bool
    path: List[Coordinate] = field(default_factory=list)
    diagonal_commitments: DiagonalCommitments = field(default_factory=dict)
    error: Optional[str] = None


def get_diagonal_key(cell_a: Coordinate, cell_b: Coordinate) -> Coordinate:
    """The 2x2 block a diagonal belongs to, identified by its top-left corner"""
    return Coordinate(row=min(cell_a.row, cell_b.row), col=min(cell_a.col, cell_b.col))


def get_diagonal_direction(start: Coordinate, end: Coordinate) -> DiagonalDirection:
    """DR for down-right/up-left moves, DL for down-left/up-right moves"""
    row_diff = end.row - start.row
    col_diff = end.col - start.col
    if (row_diff > 0 and col_diff > 0) or (row_diff < 0 and col_diff < 0):
        return "DR"
    return "DL"


def is_diagonal_move(start: Coordinate, end: Coordinate) -> bool:
    return start.row != end.row and start.col != end.col


def get_adjacent(position: Coordinate, rows: int, cols: int) -> List[Coordinate]:
    """All in-bounds cells of the 8-neighborhood"""
    adjacent = []
    for d_row, d_col in DIRECTIONS:
        row, col = position.row + d_row, position.col + d_col
        if 0 <= row < rows and 0 <= col < cols:
            adjacent.append(Coordinate(row=row, col=col))
    return adjacent


def manhattan_distance(a: Coordinate, b: Coordinate) -> int:
    return abs(a.row - b.row) + abs(a.col - b.col)


def is_diagonal_move_valid(start: Coordinate, end: Coordinate, commitments: DiagonalCommitments) -> bool:
    """A diagonal move must agree with the diagonal already committed in its block"""
    if not is_diagonal_move(start, end):
        return True
    existing = commitments.get(get_diagonal_key(start, end))
    return existing is None or existing == get_diagonal_direction(start, end)


def count_direction_changes(path: List[Coordinate]) -> int:
    if len(path) < 3:
        return 0

    changes = 0
    previous = (path[1].row - path[0].row, path[1].col - path[0].col)
    for index in range(2, len(path)):
        delta = (path[index].row - path[index - 1].row, path[index].col - path[index - 1].col)
        if delta != previous:
            changes += 1
        previous = delta
    return changes


def is_interesting_path(path: List[Coordinate]) -> bool:
    """Shorter paths need fewer turns"""
    if len(path) < 6:
        min_changes = 1
    elif len(path) < 8:
        min_changes = 2
    else:
        min_changes = 3
    return count_direction_changes(path) >= min_changes


def _choose_next(current, valid_moves, visited, finish, progress_ratio, rows, cols) -> Coordinate:
    if rows * cols <= SMALL_GRID_CELLS:
        # small grid: mostly random, lean towards FINISH late in the walk
        if progress_ratio > 0.6 and random.random() < 0.4:
            return min(valid_moves, key=lambda move: manhattan_distance(move, finish))
        return random.choice(valid_moves)

    # large grid: prefer moves that keep options open, pull to FINISH near the length budget
    best_move, best_score = None, None
    for move in valid_moves:
        score = 0.0
        if progress_ratio > 0.7:
            score -= manhattan_distance(move, finish) * (progress_ratio - 0.5) * 2
        future_options = [
            option for option in get_adjacent(move, rows, cols)
            if option not in visited and option != current
        ]
        score += len(future_options) * 0.5
        score += random.random() * 0.5
        if best_score is None or score > best_score:
            best_move, best_score = move, score
    return best_move


def generate_path(rows: int, cols: int, min_length: int, max_length: int, max_attempts: int = 200) -> PathResult:
    """Random walk from START (0,0) to FINISH (rows-1, cols-1) within the length bounds"""
    start = Coordinate(row=0, col=0)
    finish = Coordinate(row=rows - 1, col=cols - 1)

    for _ in range(max_attempts):
        path = [start]
        visited = {start}
        commitments: DiagonalCommitments = {}
        current = start

        while current != finish:
            if len(path) > max_length:
                break

            valid_moves = [
                move for move in get_adjacent(current, rows, cols)
                if move not in visited and is_diagonal_move_valid(current, move, commitments)
            ]
            if not valid_moves:
                break

            next_cell = _choose_next(current, valid_moves, visited, finish, len(path) / max_length, rows, cols)

            if is_diagonal_move(current, next_cell):
                commitments[get_diagonal_key(current, next_cell)] = get_diagonal_direction(current, next_cell)

            path.append(next_cell)
            visited.add(next_cell)
            current = next_cell

        if current == finish and min_length <= len(path) <= max_length and is_interesting_path(path):
            return PathResult(success=True, path=path, diagonal_commitments=commitments)

    return PathResult(success=False, error=f"Failed to generate valid path after {max_attempts} attempts")
