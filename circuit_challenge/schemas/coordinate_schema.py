from pydantic import BaseModel, ConfigDict


class Coordinate(BaseModel):
    """Grid position, compared by value"""
    row: int
    col: int

    model_config = ConfigDict(frozen=True) # hashable, usable in sets and dict keys

    def __str__(self) -> str:
        return f"({self.row},{self.col})"
