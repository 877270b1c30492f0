from dataclasses import dataclass, field
from typing import List, Optional

from circuit_challenge.schemas import DifficultySettings, OperationWeights


def _preset(name, operations, add_sub_range, mult_div_range, connector_max, rows, cols, weights, seconds_per_step):
    addition, subtraction, multiplication, division = operations
    return DifficultySettings(
        name=name,
        addition_enabled=addition,
        subtraction_enabled=subtraction,
        multiplication_enabled=multiplication,
        division_enabled=division,
        add_sub_range=add_sub_range,
        mult_div_range=mult_div_range,
        connector_min=5,
        connector_max=connector_max,
        grid_rows=rows,
        grid_cols=cols,
        weights=OperationWeights(
            addition=weights[0], subtraction=weights[1], multiplication=weights[2], division=weights[3]
        ),
        hidden_mode=False,
        seconds_per_step=seconds_per_step,
    )


ADD = (True, False, False, False)
ADD_SUB = (True, True, False, False)
ADD_SUB_MULT = (True, True, True, False)
ALL_OPERATIONS = (True, True, True, True)

# path lengths are left at 0 and derived from the grid
DIFFICULTY_PRESETS: List[DifficultySettings] = [
    _preset("Tiny Tot", ADD, 10, 0, 10, 3, 4, (100, 0, 0, 0), 10),
    _preset("Beginner", ADD, 15, 0, 15, 4, 4, (100, 0, 0, 0), 9),
    _preset("Easy", ADD_SUB, 15, 0, 15, 4, 5, (60, 40, 0, 0), 8),
    _preset("Getting There", ADD_SUB, 20, 0, 20, 4, 5, (55, 45, 0, 0), 7),
    _preset("Times Tables", ADD_SUB_MULT, 20, 5, 25, 4, 5, (40, 35, 25, 0), 7),
    _preset("Confident", ADD_SUB_MULT, 25, 6, 36, 5, 5, (35, 30, 35, 0), 6),
    _preset("Adventurous", ADD_SUB_MULT, 30, 8, 64, 5, 6, (30, 30, 40, 0), 6),
    _preset("Division Intro", ALL_OPERATIONS, 30, 6, 36, 5, 6, (30, 25, 30, 15), 6),
    _preset("Challenge", ALL_OPERATIONS, 50, 10, 100, 6, 7, (25, 25, 30, 20), 5),
    _preset("Expert", ALL_OPERATIONS, 100, 12, 144, 6, 8, (25, 25, 30, 20), 5),
]


def calculate_min_path_length(rows: int, cols: int) -> int:
    """Roughly 60% of the cells"""
    return max(4, int(rows * cols * 0.6))


def calculate_max_path_length(rows: int, cols: int) -> int:
    """Roughly 85% of the cells"""
    return int(rows * cols * 0.85)


def with_path_lengths(settings: DifficultySettings) -> DifficultySettings:
    """Fill in path lengths left at 0"""
    update = {}
    if not settings.min_path_length:
        update["min_path_length"] = calculate_min_path_length(settings.grid_rows, settings.grid_cols)
    if not settings.max_path_length:
        update["max_path_length"] = calculate_max_path_length(settings.grid_rows, settings.grid_cols)
    return settings.model_copy(update=update) if update else settings


def get_difficulty_by_level(level: int) -> DifficultySettings:
    """Preset for level 1-10, clamped into range"""
    index = max(0, min(len(DIFFICULTY_PRESETS) - 1, level - 1))
    preset = DIFFICULTY_PRESETS[index]
    return preset.model_copy(update={
        "min_path_length": calculate_min_path_length(preset.grid_rows, preset.grid_cols),
        "max_path_length": calculate_max_path_length(preset.grid_rows, preset.grid_cols),
    }, deep=True)


def get_difficulty_by_name(name: str) -> Optional[DifficultySettings]:
    for level, preset in enumerate(DIFFICULTY_PRESETS, start=1):
        if preset.name == name:
            return get_difficulty_by_level(level)
    return None


def get_difficulty_level(settings: DifficultySettings) -> int:
    """Preset level for the settings' name, 0 for custom settings"""
    for level, preset in enumerate(DIFFICULTY_PRESETS, start=1):
        if preset.name == settings.name:
            return level
    return 0


def create_custom_difficulty(**overrides) -> DifficultySettings:
    """Level 5 merged with overrides; weights are split evenly among enabled operations unless given"""
    base = get_difficulty_by_level(5)
    data = base.model_dump()
    data.update(overrides)
    data["name"] = overrides.get("name", "Custom")

    if "weights" not in overrides:
        enabled = [
            operation for operation in ("addition", "subtraction", "multiplication", "division")
            if data[f"{operation}_enabled"]
        ]
        weight = 100 // len(enabled) if enabled else 0
        data["weights"] = {
            operation: (weight if operation in enabled else 0)
            for operation in ("addition", "subtraction", "multiplication", "division")
        }

    if "grid_rows" in overrides or "grid_cols" in overrides:
        data["min_path_length"] = calculate_min_path_length(data["grid_rows"], data["grid_cols"])
        data["max_path_length"] = calculate_max_path_length(data["grid_rows"], data["grid_cols"])

    return DifficultySettings.model_validate(data)


@dataclass
class DifficultyValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def validate_difficulty_settings(settings: DifficultySettings) -> DifficultyValidationResult:
    errors = []
    settings = with_path_lengths(settings)

    if not (settings.addition_enabled or settings.subtraction_enabled
            or settings.multiplication_enabled or settings.division_enabled):
        errors.append("At least one operation must be enabled")

    if settings.add_sub_range < 1:
        errors.append("Addition/subtraction range must be at least 1")

    if (settings.multiplication_enabled or settings.division_enabled) and settings.mult_div_range < 2:
        errors.append("Multiplication/division range must be at least 2")

    if settings.connector_min < 1:
        errors.append("Minimum connector value must be at least 1")

    if settings.connector_max <= settings.connector_min:
        errors.append("Maximum connector value must be greater than minimum")

    if settings.grid_rows < 3:
        errors.append("Grid must have at least 3 rows")

    if settings.grid_cols < 4:
        errors.append("Grid must have at least 4 columns")

    if settings.min_path_length < 4:
        errors.append("Minimum path length must be at least 4")

    if settings.max_path_length < settings.min_path_length:
        errors.append("Maximum path length must be at least equal to minimum")

    weights = settings.weights
    if settings.addition_enabled and weights.addition <= 0:
        errors.append("Addition weight must be positive when enabled")
    if settings.subtraction_enabled and weights.subtraction <= 0:
        errors.append("Subtraction weight must be positive when enabled")
    if settings.multiplication_enabled and weights.multiplication <= 0:
        errors.append("Multiplication weight must be positive when enabled")
    if settings.division_enabled and weights.division <= 0:
        errors.append("Division weight must be positive when enabled")

    if settings.seconds_per_step < 1:
        errors.append("Seconds per step must be at least 1")

    return DifficultyValidationResult(valid=not errors, errors=errors)
