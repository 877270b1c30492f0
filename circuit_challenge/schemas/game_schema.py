from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from circuit_challenge.schemas.coordinate_schema import Coordinate
from circuit_challenge.schemas.difficulty_schema import DifficultySettings
from circuit_challenge.schemas.puzzle_schema import Puzzle


GameStatus = Literal[
    "setup",      # waiting for a puzzle
    "ready",      # puzzle loaded, no move yet
    "playing",    # timer running
    "won",        # reached FINISH (or hidden mode revealed)
    "lost",       # out of lives, standard mode only
    "revealing",  # hidden mode reached FINISH, results not yet shown
]

TERMINAL_STATUSES = ("won", "lost", "revealing")


class GameMoveResult(BaseModel):
    """One accepted move attempt"""
    correct: bool
    from_cell: Coordinate
    to_cell: Coordinate
    connector_value: int
    cell_answer: Optional[int] = None


class CoinAnimation(BaseModel):
    """Transient coin event for the presentation layer"""
    id: str
    value: int # +10 or -30
    type: Literal["earn", "penalty"]
    timestamp: int # ms since epoch


class HiddenModeResults(BaseModel):
    moves: List[GameMoveResult] = Field(default_factory=list)
    correct_count: int = 0
    mistake_count: int = 0


class TraversedConnector(BaseModel):
    cell_a: Coordinate
    cell_b: Coordinate


class GameState(BaseModel):
    status: GameStatus = "setup"
    puzzle: Optional[Puzzle] = None
    difficulty: DifficultySettings

    current_position: Coordinate = Coordinate(row=0, col=0)
    visited_cells: List[Coordinate] = Field(default_factory=list)
    traversed_connectors: List[TraversedConnector] = Field(default_factory=list)
    move_history: List[GameMoveResult] = Field(default_factory=list)

    lives: int = 5
    max_lives: int = 5

    start_time: Optional[int] = None # ms since epoch
    elapsed_ms: int = 0
    is_timer_running: bool = False

    puzzle_coins: int = 0 # never negative
    coin_animations: List[CoinAnimation] = Field(default_factory=list)

    is_hidden_mode: bool = False
    hidden_mode_results: Optional[HiddenModeResults] = None

    showing_solution: bool = False
    error: Optional[str] = None

    # id of the generation request whose result is awaited, older results are dropped
    generation_request_id: int = 0
