import random
from typing import List, Optional, Sequence, TypeVar

from circuit_challenge.schemas import Connector, Coordinate, DiagonalDirection, UnvaluedConnector
from circuit_challenge.engine.pathfinder import DiagonalCommitments


# direction of the diagonal in each 2x2 block, [row][col] for rows-1 x cols-1 blocks
DiagonalGrid = List[List[DiagonalDirection]]

C = TypeVar("C", bound=UnvaluedConnector)


def build_diagonal_grid(rows: int, cols: int, commitments: DiagonalCommitments) -> DiagonalGrid:
    """Use the directions committed by the solution path, pick the rest at random"""
    grid = []
    for row in range(rows - 1):
        grid_row = []
        for col in range(cols - 1):
            committed = commitments.get(Coordinate(row=row, col=col))
            grid_row.append(committed or random.choice(["DR", "DL"]))
        grid.append(grid_row)
    return grid


def build_connector_graph(rows: int, cols: int, diagonal_grid: DiagonalGrid) -> List[UnvaluedConnector]:
    """All horizontal and vertical edges plus one diagonal per 2x2 block"""
    connectors = []

    for row in range(rows):
        for col in range(cols - 1):
            connectors.append(UnvaluedConnector(
                type="horizontal",
                cell_a=Coordinate(row=row, col=col),
                cell_b=Coordinate(row=row, col=col + 1),
            ))

    for row in range(rows - 1):
        for col in range(cols):
            connectors.append(UnvaluedConnector(
                type="vertical",
                cell_a=Coordinate(row=row, col=col),
                cell_b=Coordinate(row=row + 1, col=col),
            ))

    for row in range(rows - 1):
        for col in range(cols - 1):
            if diagonal_grid[row][col] == "DR":
                connectors.append(UnvaluedConnector(
                    type="diagonal",
                    cell_a=Coordinate(row=row, col=col),
                    cell_b=Coordinate(row=row + 1, col=col + 1),
                    direction="DR",
                ))
            else:
                connectors.append(UnvaluedConnector(
                    type="diagonal",
                    cell_a=Coordinate(row=row, col=col + 1),
                    cell_b=Coordinate(row=row + 1, col=col),
                    direction="DL",
                ))

    return connectors


def get_cell_connectors(cell: Coordinate, connectors: Sequence[C]) -> List[C]:
    """Connectors touching a cell"""
    return [connector for connector in connectors if connector.touches(cell)]


def get_connector_between(cell_a: Coordinate, cell_b: Coordinate, connectors: Sequence[C]) -> Optional[C]:
    for connector in connectors:
        if connector.joins(cell_a, cell_b):
            return connector
    return None


def are_adjacent(a: Coordinate, b: Coordinate) -> bool:
    """Horizontal, vertical or diagonal neighbors"""
    row_diff = abs(a.row - b.row)
    col_diff = abs(a.col - b.col)
    return row_diff <= 1 and col_diff <= 1 and (row_diff + col_diff) > 0


def get_exit_cell(cell: Coordinate, answer: Optional[int], connectors: Sequence[Connector]) -> Optional[Coordinate]:
    """The neighbor a cell's answer leads to, None if no connector matches"""
    if answer is None:
        return None
    for connector in get_cell_connectors(cell, connectors):
        if connector.value == answer:
            return connector.other_cell(cell)
    return None
