from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime

from circuit_challenge.schemas.cell_schema import Cell
from circuit_challenge.schemas.connector_schema import Connector
from circuit_challenge.schemas.coordinate_schema import Coordinate
from circuit_challenge.schemas.difficulty_schema import DifficultySettings


class Solution(BaseModel):
    path: List[Coordinate]
    steps: int # len(path) - 1

    model_config = ConfigDict(frozen=True)


class Puzzle(BaseModel):
    id: str
    difficulty: int # preset level 1-10, 0 for custom settings
    grid: List[List[Cell]]
    connectors: List[Connector]
    solution: Solution

    model_config = ConfigDict(frozen=True)

    @property
    def rows(self) -> int:
        return len(self.grid)

    @property
    def cols(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def start(self) -> Coordinate:
        return Coordinate(row=0, col=0)

    @property
    def finish(self) -> Coordinate:
        return Coordinate(row=self.rows - 1, col=self.cols - 1)

    def cell_at(self, coordinate: Coordinate) -> Cell:
        return self.grid[coordinate.row][coordinate.col]


class GenerationResult(BaseModel):
    """Outcome of puzzle generation: a puzzle or an error message"""
    success: bool
    puzzle: Optional[Puzzle] = None
    error: Optional[str] = None


# Data sent by user to generate and store a puzzle
class PuzzleGenerate(BaseModel):
    name: Optional[str] = None # stored label, defaults to the difficulty name
    level: Optional[int] = Field(default=None, ge=1, le=10) # preset level
    settings: Optional[DifficultySettings] = None # custom settings, used when level is not given


class PuzzleRead(BaseModel):
    """Stored puzzle as listed by the API"""
    id: str
    name: str
    difficulty: int
    grid_rows: int
    grid_cols: int
    steps: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
