from typing import Annotated, Literal, Union
from pydantic import BaseModel, Field

from circuit_challenge.schemas.coordinate_schema import Coordinate
from circuit_challenge.schemas.difficulty_schema import DifficultySettings
from circuit_challenge.schemas.puzzle_schema import Puzzle


class SetDifficulty(BaseModel):
    type: Literal["SET_DIFFICULTY"] = "SET_DIFFICULTY"
    payload: DifficultySettings


class GeneratePuzzle(BaseModel):
    type: Literal["GENERATE_PUZZLE"] = "GENERATE_PUZZLE"
    request_id: int


class PuzzleGenerated(BaseModel):
    type: Literal["PUZZLE_GENERATED"] = "PUZZLE_GENERATED"
    payload: Puzzle
    request_id: int


class PuzzleGenerationFailed(BaseModel):
    type: Literal["PUZZLE_GENERATION_FAILED"] = "PUZZLE_GENERATION_FAILED"
    payload: str
    request_id: int


class StartTimer(BaseModel):
    type: Literal["START_TIMER"] = "START_TIMER"


class TickTimer(BaseModel):
    type: Literal["TICK_TIMER"] = "TICK_TIMER"
    payload: int # elapsed ms


class MakeMove(BaseModel):
    type: Literal["MAKE_MOVE"] = "MAKE_MOVE"
    payload: Coordinate


class ResetPuzzle(BaseModel):
    type: Literal["RESET_PUZZLE"] = "RESET_PUZZLE"


class NewPuzzle(BaseModel):
    type: Literal["NEW_PUZZLE"] = "NEW_PUZZLE"


class ShowSolution(BaseModel):
    type: Literal["SHOW_SOLUTION"] = "SHOW_SOLUTION"


class HideSolution(BaseModel):
    type: Literal["HIDE_SOLUTION"] = "HIDE_SOLUTION"


class RevealHiddenResults(BaseModel):
    type: Literal["REVEAL_HIDDEN_RESULTS"] = "REVEAL_HIDDEN_RESULTS"


class ClearCoinAnimation(BaseModel):
    type: Literal["CLEAR_COIN_ANIMATION"] = "CLEAR_COIN_ANIMATION"
    payload: str # animation id


GameAction = Annotated[
    Union[
        SetDifficulty,
        GeneratePuzzle,
        PuzzleGenerated,
        PuzzleGenerationFailed,
        StartTimer,
        TickTimer,
        MakeMove,
        ResetPuzzle,
        NewPuzzle,
        ShowSolution,
        HideSolution,
        RevealHiddenResults,
        ClearCoinAnimation,
    ],
    Field(discriminator="type"),
]


class GameActionRequest(BaseModel):
    """Body of the actions endpoint, e.g. {"action": {"type": "RESET_PUZZLE"}}"""
    action: GameAction
