from typing import Literal, Optional
from pydantic import BaseModel

from circuit_challenge.schemas.coordinate_schema import Coordinate


ConnectorType = Literal["horizontal", "vertical", "diagonal"]

# DR: down-right line of a 2x2 block, DL: down-left line
DiagonalDirection = Literal["DR", "DL"]


class UnvaluedConnector(BaseModel):
    """Connector before a value has been assigned"""
    type: ConnectorType
    cell_a: Coordinate
    cell_b: Coordinate
    direction: Optional[DiagonalDirection] = None

    def touches(self, cell: Coordinate) -> bool:
        return self.cell_a == cell or self.cell_b == cell

    def joins(self, first: Coordinate, second: Coordinate) -> bool:
        """True if the connector links the two cells, in either order"""
        return (
            (self.cell_a == first and self.cell_b == second)
            or (self.cell_a == second and self.cell_b == first)
        )

    def other_cell(self, cell: Coordinate) -> Coordinate:
        return self.cell_b if self.cell_a == cell else self.cell_a


class Connector(UnvaluedConnector):
    value: int
