import random
from itertools import product

import pytest

from circuit_challenge.engine.difficulty import get_difficulty_by_level
from circuit_challenge.game import (
    CORRECT_MOVE_COINS, WRONG_MOVE_PENALTY, check_move_correctness, create_initial_game_state, game_reducer,
    get_connector_between_cells, is_adjacent,
)
from circuit_challenge.schemas import (
    ClearCoinAnimation, GeneratePuzzle, HideSolution, MakeMove, NewPuzzle, PuzzleGenerated, PuzzleGenerationFailed,
    ResetPuzzle, RevealHiddenResults, SetDifficulty, ShowSolution, StartTimer, TickTimer,
)
from conftest import SNAKE_PATH, build_puzzle, c, load


def move(state, row, col, now=1000):
    return game_reducer(state, MakeMove(payload=c(row, col)), now=now)


def hidden_state(puzzle):
    difficulty = get_difficulty_by_level(1).model_copy(update={"hidden_mode": True})
    return load(create_initial_game_state(difficulty), puzzle)


class TestHelpers:
    def test_is_adjacent(self):
        assert is_adjacent(c(1, 1), c(0, 0))
        assert is_adjacent(c(1, 1), c(1, 2))
        assert not is_adjacent(c(1, 1), c(1, 1))
        assert not is_adjacent(c(0, 0), c(0, 2))

    def test_is_adjacent_is_symmetric(self):
        cells = [c(row, col) for row, col in product(range(3), range(3))]
        for a, b in product(cells, cells):
            assert is_adjacent(a, b) == is_adjacent(b, a)
            assert is_adjacent(a, b) == (a != b and abs(a.row - b.row) <= 1 and abs(a.col - b.col) <= 1)

    def test_connector_between_cells_either_order(self, small_puzzle):
        forward = get_connector_between_cells(c(0, 0), c(0, 1), small_puzzle.connectors)
        backward = get_connector_between_cells(c(0, 1), c(0, 0), small_puzzle.connectors)
        assert forward is backward
        assert forward.value == 8

    def test_missing_diagonal_has_no_connector(self, small_puzzle):
        # all diagonals run down-right, (0,1)-(1,0) is the other diagonal of block (0,0)
        assert get_connector_between_cells(c(0, 1), c(1, 0), small_puzzle.connectors) is None

    def test_check_move_correctness(self, small_puzzle):
        start = small_puzzle.cell_at(c(0, 0))
        correct, connector = check_move_correctness(start, c(0, 1), small_puzzle.connectors)
        assert correct and connector.value == 8
        correct, connector = check_move_correctness(start, c(1, 1), small_puzzle.connectors)
        assert not correct and connector is not None


class TestLoading:
    def test_initial_state(self):
        state = create_initial_game_state()
        assert state.status == "setup"
        assert state.lives == state.max_lives == 5
        assert state.difficulty.name == "Times Tables"

    def test_generated_puzzle_makes_ready(self, ready_state, small_puzzle):
        assert ready_state.status == "ready"
        assert ready_state.puzzle.id == small_puzzle.id
        assert ready_state.current_position == c(0, 0)
        assert ready_state.visited_cells == [c(0, 0)]
        assert not ready_state.is_timer_running

    def test_stale_generation_result_is_dropped(self, small_puzzle):
        state = create_initial_game_state(get_difficulty_by_level(1))
        state = game_reducer(state, GeneratePuzzle(request_id=1))
        state = game_reducer(state, GeneratePuzzle(request_id=2))

        stale = game_reducer(state, PuzzleGenerated(payload=small_puzzle, request_id=1))
        assert stale is state

        stale = game_reducer(state, PuzzleGenerationFailed(payload="boom", request_id=1))
        assert stale.error is None

        fresh = game_reducer(state, PuzzleGenerated(payload=small_puzzle, request_id=2))
        assert fresh.status == "ready"

    def test_generation_failure_sets_error(self):
        state = game_reducer(create_initial_game_state(), GeneratePuzzle(request_id=1))
        state = game_reducer(state, PuzzleGenerationFailed(payload="no luck", request_id=1))
        assert state.status == "setup"
        assert state.error == "no luck"
        assert state.puzzle is None

    def test_set_difficulty_tracks_hidden_mode(self):
        hidden = get_difficulty_by_level(3).model_copy(update={"hidden_mode": True})
        state = game_reducer(create_initial_game_state(), SetDifficulty(payload=hidden))
        assert state.difficulty.name == "Easy"
        assert state.is_hidden_mode


class TestMoves:
    def test_correct_move(self, ready_state):
        state = move(ready_state, 0, 1, now=5000)
        assert state.status == "playing"
        assert state.start_time == 5000
        assert state.is_timer_running
        assert state.current_position == c(0, 1)
        assert state.visited_cells == [c(0, 0), c(0, 1)]
        assert state.puzzle_coins == CORRECT_MOVE_COINS
        assert state.coin_animations[0].type == "earn"
        assert state.move_history[0].correct

    def test_move_judged_by_adjacency_and_connector(self, ready_state):
        # (1,1) is adjacent and connected, START's 8 just doesn't lead there
        state = move(ready_state, 1, 1)
        assert state.lives == 4
        assert state.current_position == c(0, 0)
        assert not state.move_history[-1].correct
        assert state.move_history[-1].connector_value == 20

    @pytest.mark.parametrize("target", [(0, 0), (0, 2), (2, 2)])
    def test_invalid_targets_leave_state_unchanged(self, ready_state, target):
        assert move(ready_state, *target) is ready_state

    def test_visited_cell_rejected(self, ready_state):
        state = move(ready_state, 0, 1)
        assert move(state, 0, 0) is state

    def test_unconnected_diagonal_rejected(self, ready_state):
        state = move(ready_state, 0, 1)
        assert move(state, 1, 0) is state

    def test_moves_rejected_without_puzzle(self):
        state = create_initial_game_state()
        assert move(state, 0, 1) is state

    def test_input_state_not_mutated(self, ready_state):
        before = ready_state.model_dump()
        move(ready_state, 0, 1)
        move(ready_state, 1, 0)
        assert ready_state.model_dump() == before

    def test_win_stops_timer(self, ready_state):
        state = move(ready_state, 0, 1)
        state = move(state, 1, 2)
        state = move(state, 2, 2)
        assert state.status == "won"
        assert not state.is_timer_running
        assert state.puzzle_coins == 3 * CORRECT_MOVE_COINS

    def test_terminal_state_ignores_moves(self, ready_state):
        state = ready_state
        for row, col in [(0, 1), (1, 2), (2, 2)]:
            state = move(state, row, col)
        assert move(state, 2, 1) is state


class TestLives:
    def test_five_mistakes_lose(self, ready_state):
        state = ready_state
        for _ in range(5):
            state = move(state, 1, 0)
        assert state.status == "lost"
        assert state.lives == 0
        assert state.puzzle_coins == 0
        assert not state.is_timer_running
        assert len(state.coin_animations) == 5
        assert all(animation.value == -WRONG_MOVE_PENALTY for animation in state.coin_animations)

    def test_coins_never_negative(self, ready_state):
        state = move(ready_state, 0, 1)
        state = move(state, 0, 2)  # wrong, 10 - 30 clamps to 0
        assert state.puzzle_coins == 0
        assert state.lives == 4

    def test_lost_state_ignores_moves(self, ready_state):
        state = ready_state
        for _ in range(5):
            state = move(state, 1, 0)
        assert move(state, 0, 1) is state


class TestHiddenMode:
    def test_reveal_after_finish(self):
        puzzle = build_puzzle(4, 4, SNAKE_PATH, wrong_cells={c(0, 1), c(1, 2)})
        state = hidden_state(puzzle)

        for target in SNAKE_PATH[1:]:
            state = move(state, target.row, target.col)
            assert state.lives == 5
            assert state.puzzle_coins == 0

        assert state.status == "revealing"
        assert not state.is_timer_running
        assert state.hidden_mode_results.correct_count == 8
        assert state.hidden_mode_results.mistake_count == 2

        revealed = game_reducer(state, RevealHiddenResults())
        assert revealed.status == "won"
        assert revealed.puzzle_coins == 8 * CORRECT_MOVE_COINS - 2 * WRONG_MOVE_PENALTY

    def test_wrong_moves_still_advance(self, small_puzzle):
        state = move(hidden_state(small_puzzle), 1, 1)
        assert state.current_position == c(1, 1)
        assert state.hidden_mode_results.mistake_count == 1
        assert state.status == "playing"

    def test_reveal_coins_floor_at_zero(self, small_puzzle):
        state = hidden_state(small_puzzle)
        state = move(state, 1, 1)
        state = move(state, 2, 2)
        assert state.status == "revealing"
        assert game_reducer(state, RevealHiddenResults()).puzzle_coins == 0

    def test_mistakes_beyond_max_lives_never_lose(self):
        # every one of the first six path cells answers wrong, one more mistake than lives
        puzzle = build_puzzle(4, 4, SNAKE_PATH, wrong_cells=set(SNAKE_PATH[:6]))
        state = hidden_state(puzzle)

        for target in SNAKE_PATH[1:]:
            state = move(state, target.row, target.col)
            assert state.lives == state.max_lives
            assert state.status != "lost"

        assert state.hidden_mode_results.mistake_count == 6
        assert state.status == "revealing"
        assert game_reducer(state, RevealHiddenResults()).status == "won"

    def test_reveal_only_from_revealing(self, small_puzzle):
        state = move(hidden_state(small_puzzle), 0, 1)
        assert game_reducer(state, RevealHiddenResults()) is state


class TestReset:
    def test_reset_restores_attempt(self, snake_puzzle):
        state = load(create_initial_game_state(get_difficulty_by_level(1)), snake_puzzle)
        for target in SNAKE_PATH[1:4]:
            state = move(state, target.row, target.col)
        state = game_reducer(state, TickTimer(payload=4200))

        reset = game_reducer(state, ResetPuzzle())
        assert reset.status == "ready"
        assert reset.current_position == c(0, 0)
        assert reset.visited_cells == [c(0, 0)]
        assert reset.move_history == []
        assert reset.lives == reset.max_lives
        assert reset.puzzle_coins == 0
        assert reset.elapsed_ms == 0
        assert not reset.is_timer_running
        assert reset.puzzle.id == snake_puzzle.id

    def test_new_puzzle_drops_result_in_flight(self, ready_state, small_puzzle):
        pending = game_reducer(ready_state, GeneratePuzzle(request_id=5))
        state = game_reducer(pending, NewPuzzle())
        assert state.status == "setup"
        assert state.puzzle is None
        assert game_reducer(state, PuzzleGenerated(payload=small_puzzle, request_id=5)) is state


class TestTimer:
    def test_start_timer_is_idempotent(self, ready_state):
        started = game_reducer(ready_state, StartTimer(), now=100)
        assert started.status == "playing" and started.start_time == 100
        assert game_reducer(started, StartTimer(), now=900) is started

    def test_start_timer_needs_puzzle(self):
        state = create_initial_game_state()
        assert game_reducer(state, StartTimer()) is state

    def test_tick_only_while_running(self, ready_state):
        assert game_reducer(ready_state, TickTimer(payload=300)) is ready_state
        state = game_reducer(move(ready_state, 0, 1), TickTimer(payload=300))
        assert state.elapsed_ms == 300


class TestPresentation:
    def test_solution_toggle(self, ready_state):
        shown = game_reducer(ready_state, ShowSolution())
        assert shown.showing_solution
        assert not game_reducer(shown, HideSolution()).showing_solution

    def test_clear_coin_animation(self, ready_state):
        state = move(move(ready_state, 0, 1, now=1000), 1, 2, now=1500)
        first, second = state.coin_animations
        assert first.id != second.id

        state = game_reducer(state, ClearCoinAnimation(payload=first.id))
        assert state.coin_animations == [second]

    def test_unknown_action(self, ready_state):
        with pytest.raises(TypeError):
            game_reducer(ready_state, object())


class TestRandomPlay:
    @pytest.mark.parametrize("seed", range(10))
    def test_no_revisits_and_coins_never_negative(self, snake_puzzle, seed):
        rng = random.Random(seed)
        state = load(create_initial_game_state(get_difficulty_by_level(1)), snake_puzzle)
        cells = [c(row, col) for row, col in product(range(4), range(4))]

        for now in range(200):
            target = rng.choice(cells)
            state = game_reducer(state, MakeMove(payload=target), now=now)
            assert len(set(state.visited_cells)) == len(state.visited_cells)
            assert state.puzzle_coins >= 0
            assert 0 <= state.lives <= state.max_lives
            if state.status in ("won", "lost"):
                break
