from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from circuit_challenge.schemas import Cell, Connector, Coordinate, DifficultySettings, Puzzle
from circuit_challenge.engine.connectors import are_adjacent, get_cell_connectors, get_connector_between
from circuit_challenge.engine.expressions import evaluate_expression, range_errors


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def _result(errors: List[str]) -> ValidationResult:
    return ValidationResult(valid=not errors, errors=errors)


def validate_path(path: Sequence[Coordinate], rows: int, cols: int) -> ValidationResult:
    """Path starts at START, ends at FINISH, stays in bounds, never repeats and only steps to neighbors"""
    errors = []
    if len(path) < 2:
        return _result(["Path must have at least 2 elements"])

    if path[0] != Coordinate(row=0, col=0):
        errors.append(f"Path must start at (0,0), but starts at {path[0]}")

    finish = Coordinate(row=rows - 1, col=cols - 1)
    if path[-1] != finish:
        errors.append(f"Path must end at {finish}, but ends at {path[-1]}")

    seen = set()
    for index, coordinate in enumerate(path):
        if not (0 <= coordinate.row < rows and 0 <= coordinate.col < cols):
            errors.append(f"Path coordinate {coordinate} is out of bounds")
        if coordinate in seen:
            errors.append(f"Duplicate coordinate in path: {coordinate}")
        seen.add(coordinate)
        if index > 0 and not are_adjacent(path[index - 1], coordinate):
            errors.append(f"Non-adjacent cells in path: {path[index - 1]} to {coordinate}")

    return _result(errors)


def validate_connector_uniqueness(connectors: Sequence[Connector], rows: int, cols: int) -> ValidationResult:
    """No cell touches two connectors with the same value"""
    errors = []
    for row in range(rows):
        for col in range(cols):
            cell = Coordinate(row=row, col=col)
            seen = set()
            for connector in get_cell_connectors(cell, connectors):
                if connector.value in seen:
                    errors.append(f"Duplicate connector value {connector.value} at cell {cell}")
                seen.add(connector.value)
    return _result(errors)


def validate_cell_answers(cells: Sequence[Sequence[Cell]], connectors: Sequence[Connector]) -> ValidationResult:
    """Every cell but FINISH has an answer matching exactly one touching connector"""
    errors = []
    for row in cells:
        for cell in row:
            if cell.is_finish:
                if cell.answer is not None:
                    errors.append(f"FINISH cell should have no answer, but has {cell.answer}")
                continue

            if cell.answer is None:
                errors.append(f"Cell {cell.coordinate} has no answer but is not FINISH")
                continue

            matching = [c for c in get_cell_connectors(cell.coordinate, connectors) if c.value == cell.answer]
            if not matching:
                errors.append(f"Cell {cell.coordinate} has answer {cell.answer} but no matching connector")
            elif len(matching) > 1:
                errors.append(f"Cell {cell.coordinate} has answer {cell.answer} matching {len(matching)} connectors")
    return _result(errors)


def validate_solution_path(
    path: Sequence[Coordinate],
    cells: Sequence[Sequence[Cell]],
    connectors: Sequence[Connector],
) -> ValidationResult:
    """Each path cell's answer equals the connector to the next path cell"""
    errors = []
    for current, following in zip(path, path[1:]):
        connector = get_connector_between(current, following, connectors)
        if connector is None:
            errors.append(f"No connector between path cells {current} and {following}")
            continue
        answer = cells[current.row][current.col].answer
        if answer != connector.value:
            errors.append(f"Cell {current} answer {answer} doesn't match connector value {connector.value}")
    return _result(errors)


def validate_expressions(
    cells: Sequence[Sequence[Cell]],
    settings: Optional[DifficultySettings] = None,
) -> ValidationResult:
    """Every expression evaluates to its cell's answer, and stays within the settings' operations and ranges"""
    errors = []
    for row in cells:
        for cell in row:
            if cell.is_finish:
                continue
            if not cell.expression:
                errors.append(f"Cell {cell.coordinate} has empty expression")
                continue
            result = evaluate_expression(cell.expression)
            if result is None:
                errors.append(f'Cannot evaluate expression "{cell.expression}" at {cell.coordinate}')
            elif result != cell.answer:
                errors.append(
                    f'Expression "{cell.expression}" = {result}, but cell answer is {cell.answer} at {cell.coordinate}'
                )
            elif settings is not None:
                for reason in range_errors(cell.expression, settings):
                    errors.append(f'Expression "{cell.expression}" at {cell.coordinate}: {reason}')
    return _result(errors)


def find_solution_paths(
    cells: Sequence[Sequence[Cell]],
    connectors: Sequence[Connector],
    limit: int = 2,
) -> List[List[Coordinate]]:
    """
    Search every simple path from START to FINISH where each step takes a connector whose
    value equals the current cell's answer. Stops once `limit` paths are found.
    """
    rows, cols = len(cells), len(cells[0])
    start = Coordinate(row=0, col=0)
    finish = Coordinate(row=rows - 1, col=cols - 1)

    touching: Dict[Coordinate, List[Connector]] = {}
    for connector in connectors:
        touching.setdefault(connector.cell_a, []).append(connector)
        touching.setdefault(connector.cell_b, []).append(connector)

    found: List[List[Coordinate]] = []
    path = [start]
    on_path = {start}

    def walk(current: Coordinate) -> None:
        if len(found) >= limit:
            return
        if current == finish:
            found.append(list(path))
            return
        answer = cells[current.row][current.col].answer
        for connector in touching.get(current, []):
            if connector.value != answer:
                continue
            following = connector.other_cell(current)
            if following in on_path:
                continue
            path.append(following)
            on_path.add(following)
            walk(following)
            on_path.discard(following)
            path.pop()

    walk(start)
    return found


def validate_unique_solution(
    path: Sequence[Coordinate],
    cells: Sequence[Sequence[Cell]],
    connectors: Sequence[Connector],
) -> ValidationResult:
    """Exactly one answer-following path reaches FINISH and it is the recorded one"""
    solutions = find_solution_paths(cells, connectors, limit=2)
    if not solutions:
        return _result(["No path from START follows the cell answers to FINISH"])
    if len(solutions) > 1:
        return _result(["More than one path from START follows the cell answers to FINISH"])
    if solutions[0] != list(path):
        return _result(["The path that follows the cell answers differs from the recorded solution"])
    return _result([])


def validate_puzzle(puzzle: Puzzle, settings: Optional[DifficultySettings] = None) -> ValidationResult:
    """Run all checks on a complete puzzle, operand ranges only when settings are given"""
    rows, cols = puzzle.rows, puzzle.cols
    path = puzzle.solution.path

    checks = [
        validate_path(path, rows, cols),
        validate_connector_uniqueness(puzzle.connectors, rows, cols),
        validate_cell_answers(puzzle.grid, puzzle.connectors),
        validate_solution_path(path, puzzle.grid, puzzle.connectors),
        validate_expressions(puzzle.grid, settings),
    ]
    if all(check.valid for check in checks):
        checks.append(validate_unique_solution(path, puzzle.grid, puzzle.connectors))

    return _result([error for check in checks for error in check.errors])
