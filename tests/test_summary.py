from circuit_challenge.engine.difficulty import get_difficulty_by_level
from circuit_challenge.game import build_summary, calculate_star_rating, create_initial_game_state, game_reducer
from circuit_challenge.game.summary import accuracy, average_tile_time_ms, format_time, time_threshold_ms
from circuit_challenge.schemas import MakeMove, RevealHiddenResults, TickTimer
from conftest import SNAKE_PATH, build_puzzle, c, load


def play(state, moves, elapsed_ms):
    for row, col in moves:
        state = game_reducer(state, MakeMove(payload=c(row, col)), now=0)
    # the reducer stops the timer on a win, set elapsed time directly
    return state.model_copy(update={"elapsed_ms": elapsed_ms})


def test_format_time():
    assert format_time(0) == "0:00"
    assert format_time(65_432) == "1:05"
    assert format_time(600_000) == "10:00"


def test_perfect_fast_win_three_stars(ready_state):
    state = play(ready_state, [(0, 1), (1, 2), (2, 2)], elapsed_ms=9000)
    assert calculate_star_rating(state) == 3
    assert accuracy(state) == 100
    assert average_tile_time_ms(state) == 3000


def test_slow_win_two_stars(ready_state):
    state = play(ready_state, [(0, 1), (1, 2), (2, 2)], elapsed_ms=30_000)
    assert calculate_star_rating(state) == 2


def test_win_with_mistake_one_star(ready_state):
    state = play(ready_state, [(1, 0), (0, 1), (1, 2), (2, 2)], elapsed_ms=3000)
    assert state.status == "won"
    assert calculate_star_rating(state) == 1
    assert accuracy(state) == 75


def test_unfinished_no_stars(ready_state):
    state = play(ready_state, [(0, 1)], elapsed_ms=1000)
    assert calculate_star_rating(state) == 0


def test_summary_and_progress(ready_state):
    state = play(ready_state, [(1, 0), (0, 1), (1, 2), (2, 2)], elapsed_ms=12_500)
    summary = build_summary(state, chapter=2, level=4)

    assert summary.won
    assert summary.formatted_time == "0:12"
    assert summary.total_moves == 4
    assert summary.correct_moves == 3
    assert summary.mistakes == 1
    assert summary.puzzle_coins == 30
    assert summary.time_threshold_ms == 3 * get_difficulty_by_level(1).seconds_per_step * 1000
    assert summary.progress.chapter == 2
    assert summary.progress.lives_lost == 1
    assert summary.progress.time_seconds == 12
    assert summary.progress.correct_tile_count == 3


def test_no_threshold_without_puzzle(ready_state):
    assert time_threshold_ms(ready_state.model_copy(update={"puzzle": None})) is None


def test_elapsed_follows_ticks(ready_state):
    state = game_reducer(ready_state, MakeMove(payload=c(0, 1)), now=0)
    state = game_reducer(state, TickTimer(payload=2500))
    assert build_summary(state).elapsed_ms == 2500


class TestStoryStars:
    def test_story_win_rated_by_lives_and_seconds_per_tile(self, ready_state):
        fast = play(ready_state, [(0, 1), (1, 2), (2, 2)], elapsed_ms=9000)
        assert build_summary(fast, chapter=1, level=1).stars == 3

        # 3 tiles allow 15 seconds
        slow = play(ready_state, [(0, 1), (1, 2), (2, 2)], elapsed_ms=15_000)
        assert build_summary(slow, chapter=1, level=1).stars == 2

        careless = play(ready_state, [(1, 0), (0, 1), (1, 2), (2, 2)], elapsed_ms=3000)
        assert build_summary(careless, chapter=1, level=1).stars == 1

    def test_hidden_story_win_keeps_lives(self):
        puzzle = build_puzzle(4, 4, SNAKE_PATH, wrong_cells={c(0, 1), c(1, 2)})
        difficulty = get_difficulty_by_level(1).model_copy(update={"hidden_mode": True})
        state = load(create_initial_game_state(difficulty), puzzle)
        state = play(state, [(target.row, target.col) for target in SNAKE_PATH[1:]], elapsed_ms=10_000)
        state = game_reducer(state, RevealHiddenResults())
        assert state.status == "won"

        # no lives are lost in hidden mode, so only the free play rating sees the mistakes
        assert build_summary(state, chapter=1, level=5).stars == 3
        assert build_summary(state).stars == 1

    def test_story_loss_has_no_stars(self, ready_state):
        state = play(ready_state, [(0, 1)], elapsed_ms=1000)
        assert build_summary(state, chapter=1, level=1).stars == 0
