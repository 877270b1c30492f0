import pytest

from circuit_challenge.engine.pathfinder import (
    count_direction_changes, generate_path, get_adjacent, get_diagonal_direction, get_diagonal_key,
    is_diagonal_move_valid, is_interesting_path,
)
from circuit_challenge.engine.connectors import are_adjacent
from conftest import c


def test_adjacent_cells_in_corner_and_middle():
    assert set(get_adjacent(c(0, 0), 3, 3)) == {c(0, 1), c(1, 0), c(1, 1)}
    assert len(get_adjacent(c(1, 1), 3, 3)) == 8


def test_diagonal_direction_and_block():
    assert get_diagonal_direction(c(0, 0), c(1, 1)) == "DR"
    assert get_diagonal_direction(c(1, 1), c(0, 0)) == "DR"
    assert get_diagonal_direction(c(0, 1), c(1, 0)) == "DL"
    assert get_diagonal_key(c(1, 2), c(2, 1)) == c(1, 1)


def test_committed_block_rejects_crossing_diagonal():
    commitments = {c(0, 0): "DR"}
    assert is_diagonal_move_valid(c(1, 1), c(0, 0), commitments)
    assert not is_diagonal_move_valid(c(0, 1), c(1, 0), commitments)
    assert is_diagonal_move_valid(c(0, 1), c(0, 0), commitments)


def test_direction_changes():
    straight = [c(0, 0), c(0, 1), c(0, 2)]
    assert count_direction_changes(straight) == 0
    assert count_direction_changes([c(0, 0), c(0, 1), c(1, 1), c(1, 2)]) == 2
    assert not is_interesting_path(straight)


@pytest.mark.parametrize("rows,cols", [(3, 4), (4, 4), (4, 5)])
def test_generated_path_shape(rows, cols):
    min_length, max_length = max(4, int(rows * cols * 0.6)), int(rows * cols * 0.85)
    result = generate_path(rows, cols, min_length, max_length)

    assert result.success
    path = result.path
    assert path[0] == c(0, 0)
    assert path[-1] == c(rows - 1, cols - 1)
    assert min_length <= len(path) <= max_length
    assert len(set(path)) == len(path)
    assert all(are_adjacent(a, b) for a, b in zip(path, path[1:]))

    for a, b in zip(path, path[1:]):
        if a.row != b.row and a.col != b.col:
            assert result.diagonal_commitments[get_diagonal_key(a, b)] == get_diagonal_direction(a, b)


def test_impossible_lengths_fail():
    result = generate_path(3, 4, 20, 30, max_attempts=5)
    assert not result.success
    assert "5 attempts" in result.error
