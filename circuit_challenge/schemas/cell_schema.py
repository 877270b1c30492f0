from typing import Optional
from pydantic import BaseModel, ConfigDict

from circuit_challenge.schemas.coordinate_schema import Coordinate


class Cell(BaseModel):
    row: int
    col: int
    expression: str = "" # arithmetic prompt shown in the cell, e.g. "7 + 5"
    answer: Optional[int] = None # None only for FINISH
    is_start: bool = False
    is_finish: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(row=self.row, col=self.col)
