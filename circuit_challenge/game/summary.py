from typing import Optional

from circuit_challenge.engine.story_difficulty import calculate_stars
from circuit_challenge.schemas import GameState, GameSummary, ProgressRecord

# average time per correct move needed for the third star
THREE_STAR_TILE_MS = 5000


def correct_moves(state: GameState) -> int:
    if state.hidden_mode_results is not None:
        return state.hidden_mode_results.correct_count
    return sum(1 for move in state.move_history if move.correct)


def mistakes(state: GameState) -> int:
    if state.hidden_mode_results is not None:
        return state.hidden_mode_results.mistake_count
    return len(state.move_history) - correct_moves(state)


def accuracy(state: GameState) -> int:
    """Correct moves as a rounded percentage of all moves"""
    total = len(state.move_history)
    if total == 0:
        return 0
    return round(correct_moves(state) / total * 100)


def average_tile_time_ms(state: GameState) -> float:
    correct = correct_moves(state)
    if correct == 0:
        return 0.0
    return state.elapsed_ms / correct


def calculate_star_rating(state: GameState) -> int:
    """
    0 when not won, 1 for completing, 2 with no mistakes,
    3 with no mistakes and an average under 5 seconds per correct move.
    """
    if state.status != "won":
        return 0
    stars = 1
    if mistakes(state) == 0:
        stars = 2
        if average_tile_time_ms(state) < THREE_STAR_TILE_MS:
            stars = 3
    return stars


def format_time(elapsed_ms: int) -> str:
    """M:SS"""
    total_seconds = elapsed_ms // 1000
    return f"{total_seconds // 60}:{total_seconds % 60:02d}"


def time_threshold_ms(state: GameState) -> Optional[int]:
    if state.puzzle is None:
        return None
    return state.puzzle.solution.steps * state.difficulty.seconds_per_step * 1000


def build_summary(state: GameState, chapter: Optional[int] = None, level: Optional[int] = None) -> GameSummary:
    """Summary of a finished attempt plus the record handed to the progress collaborator.
    With a chapter the stars follow the story rating.
    """
    won = state.status == "won"
    correct = correct_moves(state)
    progress = ProgressRecord(
        chapter=chapter,
        level=level,
        won=won,
        lives_lost=state.max_lives - state.lives,
        time_seconds=state.elapsed_ms // 1000,
        correct_tile_count=correct,
    )
    stars = calculate_star_rating(state)
    if won and chapter is not None:
        # story levels rate lives lost and seconds per tile instead
        stars = calculate_stars(progress.lives_lost, progress.time_seconds, progress.correct_tile_count)
    return GameSummary(
        won=won,
        is_hidden_mode=state.is_hidden_mode,
        elapsed_ms=state.elapsed_ms,
        formatted_time=format_time(state.elapsed_ms),
        puzzle_coins=state.puzzle_coins,
        total_moves=len(state.move_history),
        correct_moves=correct,
        mistakes=mistakes(state),
        accuracy=accuracy(state),
        average_tile_time_ms=average_tile_time_ms(state),
        time_threshold_ms=time_threshold_ms(state),
        stars=stars,
        progress=progress,
    )
