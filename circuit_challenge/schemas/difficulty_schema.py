from pydantic import BaseModel


class OperationWeights(BaseModel):
    """Relative weights used when picking an operation for an expression"""
    addition: int = 0
    subtraction: int = 0
    multiplication: int = 0
    division: int = 0


class DifficultySettings(BaseModel):
    name: str

    addition_enabled: bool
    subtraction_enabled: bool
    multiplication_enabled: bool
    division_enabled: bool

    add_sub_range: int # max operand for + and −
    mult_div_range: int # max factor / divisor for × and ÷

    connector_min: int
    connector_max: int

    grid_rows: int
    grid_cols: int

    min_path_length: int = 0 # 0 means derived from the grid size
    max_path_length: int = 0

    weights: OperationWeights

    hidden_mode: bool = False # no lives, results revealed at the end
    seconds_per_step: int # used for the time threshold
