import time
from typing import Optional, Sequence, Tuple

from circuit_challenge.core.config import settings
from circuit_challenge.engine.difficulty import get_difficulty_by_level
from circuit_challenge.schemas import (
    Cell, CoinAnimation, Connector, Coordinate, DifficultySettings, GameMoveResult, GameState, HiddenModeResults,
    TraversedConnector, TERMINAL_STATUSES,
    SetDifficulty, GeneratePuzzle, PuzzleGenerated, PuzzleGenerationFailed, StartTimer, TickTimer, MakeMove,
    ResetPuzzle, NewPuzzle, ShowSolution, HideSolution, RevealHiddenResults, ClearCoinAnimation,
)

CORRECT_MOVE_COINS = 10
WRONG_MOVE_PENALTY = 30

START = Coordinate(row=0, col=0)


def now_ms() -> int:
    return int(time.time() * 1000)


def is_adjacent(start: Coordinate, end: Coordinate) -> bool:
    """Neighbors in the 8-neighborhood, a cell is not adjacent to itself"""
    row_diff = abs(start.row - end.row)
    col_diff = abs(start.col - end.col)
    return row_diff <= 1 and col_diff <= 1 and (row_diff > 0 or col_diff > 0)


def get_connector_between_cells(
    start: Coordinate, end: Coordinate, connectors: Sequence[Connector]
) -> Optional[Connector]:
    for connector in connectors:
        if connector.joins(start, end):
            return connector
    return None


def check_move_correctness(
    from_cell: Cell, to_cell: Coordinate, connectors: Sequence[Connector]
) -> Tuple[bool, Optional[Connector]]:
    """A move is correct when the connector taken carries the departure cell's answer"""
    connector = get_connector_between_cells(from_cell.coordinate, to_cell, connectors)
    if connector is None:
        return False, None
    return from_cell.answer == connector.value, connector


def create_initial_game_state(difficulty: Optional[DifficultySettings] = None) -> GameState:
    difficulty = difficulty or get_difficulty_by_level(5)
    return GameState(
        status="setup",
        difficulty=difficulty,
        lives=settings.MAX_LIVES,
        max_lives=settings.MAX_LIVES,
        is_hidden_mode=difficulty.hidden_mode,
    )


def _fresh_attempt(state: GameState) -> dict:
    """Fields shared by a newly loaded puzzle and a reset of the same puzzle"""
    return {
        "status": "ready",
        "current_position": START,
        "visited_cells": [START],
        "traversed_connectors": [],
        "move_history": [],
        "lives": state.max_lives,
        "start_time": None,
        "elapsed_ms": 0,
        "is_timer_running": False,
        "puzzle_coins": 0,
        "coin_animations": [],
        "hidden_mode_results": HiddenModeResults() if state.is_hidden_mode else None,
        "showing_solution": False,
    }


def _coin_animation(value: int, timestamp: int, sequence: int) -> CoinAnimation:
    return CoinAnimation(
        id=f"coin-{timestamp}-{sequence}",
        value=value,
        type="earn" if value > 0 else "penalty",
        timestamp=timestamp,
    )


def _stop_timer_if_terminal(update: dict) -> dict:
    if update.get("status") in TERMINAL_STATUSES:
        update["is_timer_running"] = False
    return update


def _make_move(state: GameState, target: Coordinate, now: int) -> GameState:
    puzzle = state.puzzle
    if puzzle is None or state.status not in ("ready", "playing"):
        return state
    if not is_adjacent(state.current_position, target):
        return state
    if target in state.visited_cells:
        return state

    from_cell = puzzle.cell_at(state.current_position)
    correct, connector = check_move_correctness(from_cell, target, puzzle.connectors)
    if connector is None:
        return state

    move = GameMoveResult(
        correct=correct,
        from_cell=state.current_position,
        to_cell=target,
        connector_value=connector.value,
        cell_answer=from_cell.answer,
    )
    is_finish = target == puzzle.finish

    update = {"move_history": [*state.move_history, move]}

    # first accepted move starts the clock
    if state.status == "ready":
        update.update(status="playing", start_time=now, is_timer_running=True)
    status = update.get("status", state.status)

    advance = {
        "current_position": target,
        "visited_cells": [*state.visited_cells, target],
        "traversed_connectors": [
            *state.traversed_connectors,
            TraversedConnector(cell_a=state.current_position, cell_b=target),
        ],
    }

    if state.is_hidden_mode:
        results = state.hidden_mode_results or HiddenModeResults()
        update.update(advance)
        update["hidden_mode_results"] = HiddenModeResults(
            moves=[*results.moves, move],
            correct_count=results.correct_count + (1 if correct else 0),
            mistake_count=results.mistake_count + (0 if correct else 1),
        )
        update["status"] = "revealing" if is_finish else status
    elif correct:
        update.update(advance)
        update["puzzle_coins"] = state.puzzle_coins + CORRECT_MOVE_COINS
        update["coin_animations"] = [
            *state.coin_animations,
            _coin_animation(CORRECT_MOVE_COINS, now, len(state.move_history)),
        ]
        update["status"] = "won" if is_finish else status
    else:
        lives = state.lives - 1
        update["lives"] = lives
        update["puzzle_coins"] = max(0, state.puzzle_coins - WRONG_MOVE_PENALTY)
        update["coin_animations"] = [
            *state.coin_animations,
            _coin_animation(-WRONG_MOVE_PENALTY, now, len(state.move_history)),
        ]
        update["status"] = "lost" if lives <= 0 else status

    return state.model_copy(update=_stop_timer_if_terminal(update))


def game_reducer(state: GameState, action, now: Optional[int] = None) -> GameState:
    """
    Apply one action to the game state and return the new state.

    The input state is never modified. Actions that do not apply to the current
    state (a move to a visited cell, a stale generation result, ...) return it unchanged.
    """
    now = now_ms() if now is None else now

    if isinstance(action, SetDifficulty):
        return state.model_copy(update={
            "difficulty": action.payload,
            "is_hidden_mode": action.payload.hidden_mode,
        })

    if isinstance(action, GeneratePuzzle):
        return state.model_copy(update={
            "status": "setup",
            "error": None,
            "generation_request_id": action.request_id,
        })

    if isinstance(action, PuzzleGenerated):
        if action.request_id != state.generation_request_id:
            return state
        update = _fresh_attempt(state)
        update.update(puzzle=action.payload, error=None)
        return state.model_copy(update=update)

    if isinstance(action, PuzzleGenerationFailed):
        if action.request_id != state.generation_request_id:
            return state
        return state.model_copy(update={"status": "setup", "error": action.payload})

    if isinstance(action, StartTimer):
        if state.is_timer_running or state.status not in ("ready", "playing"):
            return state
        return state.model_copy(update={"status": "playing", "start_time": now, "is_timer_running": True})

    if isinstance(action, TickTimer):
        if not state.is_timer_running:
            return state
        return state.model_copy(update={"elapsed_ms": action.payload})

    if isinstance(action, MakeMove):
        return _make_move(state, action.payload, now)

    if isinstance(action, ResetPuzzle):
        if state.puzzle is None:
            return state
        return state.model_copy(update=_fresh_attempt(state))

    if isinstance(action, NewPuzzle):
        # bump the awaited id so a result still in flight is dropped
        return state.model_copy(update={
            "status": "setup",
            "puzzle": None,
            "error": None,
            "is_timer_running": False,
            "generation_request_id": state.generation_request_id + 1,
        })

    if isinstance(action, ShowSolution):
        return state.model_copy(update={"showing_solution": True})

    if isinstance(action, HideSolution):
        return state.model_copy(update={"showing_solution": False})

    if isinstance(action, RevealHiddenResults):
        results = state.hidden_mode_results
        if results is None or state.status != "revealing":
            return state
        earned = results.correct_count * CORRECT_MOVE_COINS
        penalty = results.mistake_count * WRONG_MOVE_PENALTY
        return state.model_copy(update={
            "status": "won",
            "puzzle_coins": max(0, earned - penalty),
            "is_timer_running": False,
        })

    if isinstance(action, ClearCoinAnimation):
        return state.model_copy(update={
            "coin_animations": [a for a in state.coin_animations if a.id != action.payload],
        })

    raise TypeError(f"Unknown game action: {action!r}")
