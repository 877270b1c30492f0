import random
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set

from circuit_challenge.schemas import Cell, Connector, Coordinate
from circuit_challenge.engine.connectors import get_cell_connectors


@dataclass
class CellGrid:
    cells: List[List[Cell]]
    rows: int
    cols: int
    division_cells: Set[Coordinate] = field(default_factory=set) # cells that should prefer a division expression


def assign_cell_answers(
    rows: int,
    cols: int,
    solution_path: Sequence[Coordinate],
    connectors: Sequence[Connector],
    division_connector_indices: Sequence[int] = (),
) -> CellGrid:
    """
    Path cells get the value of the connector to the next path cell.
    Every other cell gets the value of a random touching connector, which opens a wrong trail.
    FINISH keeps a None answer.
    """
    division_set = set(division_connector_indices)
    division_cells: Set[Coordinate] = set()
    answers: Dict[Coordinate, int] = {}

    for current, following in zip(solution_path, solution_path[1:]):
        index = next(
            (i for i, connector in enumerate(connectors) if connector.joins(current, following)),
            None,
        )
        if index is None:
            raise ValueError(f"No connector found between {current} and {following}")

        answers[current] = connectors[index].value
        if index in division_set:
            division_cells.add(current)

    cells = []
    for row in range(rows):
        cell_row = []
        for col in range(cols):
            coordinate = Coordinate(row=row, col=col)
            is_finish = row == rows - 1 and col == cols - 1
            answer = answers.get(coordinate)
            if answer is None and not is_finish:
                touching = get_cell_connectors(coordinate, connectors)
                if not touching:
                    raise ValueError(f"No connectors found for cell {coordinate}")
                answer = random.choice(touching).value
            cell_row.append(Cell(row=row, col=col, answer=answer, is_start=(row == 0 and col == 0), is_finish=is_finish))
        cells.append(cell_row)

    return CellGrid(cells=cells, rows=rows, cols=cols, division_cells=division_cells)
