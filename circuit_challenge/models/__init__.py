from circuit_challenge.models.puzzle_model import Puzzle
from circuit_challenge.models.cell_model import Cell
from circuit_challenge.models.connector_model import Connector
from circuit_challenge.models.path_nodes import PathNode
