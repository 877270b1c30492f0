import logging
from uuid import uuid4

from circuit_challenge.schemas import DifficultySettings, GenerationResult, Puzzle, Solution
from circuit_challenge.engine.pathfinder import generate_path
from circuit_challenge.engine.connectors import build_connector_graph, build_diagonal_grid
from circuit_challenge.engine.value_assigner import assign_connector_values
from circuit_challenge.engine.cell_assigner import assign_cell_answers
from circuit_challenge.engine.expressions import apply_expressions, expressible_values
from circuit_challenge.engine.validator import validate_puzzle
from circuit_challenge.engine.difficulty import get_difficulty_level, with_path_lengths

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 20

# a connector shares a cell with at most 14 others, a wider span always leaves a free value
MIN_CONNECTOR_SPAN = 20


def generate_puzzle(
    difficulty: DifficultySettings,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    validate_result: bool = True,
) -> GenerationResult:
    """
    Build a puzzle with exactly one correct path from START to FINISH.

    Each attempt walks a solution path, lays out connectors, values them, derives
    cell answers and expressions and validates the result. Attempts that fail at any
    step are dropped; after max_attempts the result carries an error instead of a puzzle.
    """
    settings = with_path_lengths(difficulty)
    rows, cols = settings.grid_rows, settings.grid_cols
    connector_max = max(settings.connector_max, settings.connector_min + MIN_CONNECTOR_SPAN)
    # only values some enabled operation can build within the operand ranges
    allowed_values = expressible_values(settings, settings.connector_min, connector_max)

    path_failures = 0
    connector_failures = 0
    validation_failures = 0

    for attempt in range(1, max_attempts + 1):
        try:
            # Step 1: solution path
            path_result = generate_path(rows, cols, settings.min_path_length, settings.max_path_length)
            if not path_result.success:
                path_failures += 1
                continue

            # Step 2: connector graph, diagonals follow the path's commitments
            diagonal_grid = build_diagonal_grid(rows, cols, path_result.diagonal_commitments)
            unvalued_connectors = build_connector_graph(rows, cols, diagonal_grid)

            # Step 3: connector values, unique per cell
            value_result = assign_connector_values(
                unvalued_connectors,
                settings.connector_min,
                connector_max,
                division_enabled=settings.division_enabled,
                solution_path=path_result.path,
                mult_div_range=settings.mult_div_range,
                allowed_values=allowed_values,
            )
            if not value_result.success:
                connector_failures += 1
                logger.debug("Attempt %s: %s", attempt, value_result.error)
                continue

            # Step 4: cell answers and expressions
            cell_grid = assign_cell_answers(
                rows, cols, path_result.path, value_result.connectors, value_result.division_connector_indices
            )
            grid = apply_expressions(cell_grid.cells, settings, cell_grid.division_cells)

            puzzle = Puzzle(
                id=str(uuid4()),
                difficulty=get_difficulty_level(settings),
                grid=grid,
                connectors=value_result.connectors,
                solution=Solution(path=path_result.path, steps=len(path_result.path) - 1),
            )

            # Step 5: validation, including the single-solution check
            if validate_result:
                validation = validate_puzzle(puzzle, settings)
                if not validation.valid:
                    validation_failures += 1
                    logger.warning("Attempt %s failed validation: %s", attempt, validation.errors)
                    continue

            logger.info(
                "Generated puzzle %s (%sx%s, %s steps) on attempt %s",
                puzzle.id, rows, cols, puzzle.solution.steps, attempt,
            )
            return GenerationResult(success=True, puzzle=puzzle)

        except ValueError as e:
            logger.warning("Attempt %s threw error: %s", attempt, e)
            continue

    logger.error(
        "Generation failed for %sx%s grid, connector range %s-%s. "
        "Path failures: %s, connector failures: %s, validation failures: %s",
        rows, cols, settings.connector_min, connector_max,
        path_failures, connector_failures, validation_failures,
    )
    return GenerationResult(
        success=False,
        error=f"Failed to generate puzzle after {max_attempts} attempts. Try adjusting difficulty settings.",
    )
