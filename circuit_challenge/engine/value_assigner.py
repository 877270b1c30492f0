import random
from dataclasses import dataclass, field
from typing import Collection, Dict, List, Optional, Sequence

from circuit_challenge.schemas import Connector, Coordinate, UnvaluedConnector


# answers reserved for division stay small so the dividend stays readable
MAX_DIVISION_VALUE = 13

# share of solution path connectors reserved for division when it is enabled
DIVISION_CONNECTOR_RATIO = 0.25


@dataclass
class ValueAssignmentResult:
    success: bool
    connectors: List[Connector] = field(default_factory=list)
    division_connector_indices: List[int] = field(default_factory=list)
    error: Optional[str] = None


def _build_cell_connector_map(connectors: Sequence[UnvaluedConnector]) -> Dict[Coordinate, List[int]]:
    cell_map: Dict[Coordinate, List[int]] = {}
    for index, connector in enumerate(connectors):
        cell_map.setdefault(connector.cell_a, []).append(index)
        cell_map.setdefault(connector.cell_b, []).append(index)
    return cell_map


def _is_on_path(connector: UnvaluedConnector, path: Sequence[Coordinate]) -> bool:
    return any(connector.joins(current, following) for current, following in zip(path, path[1:]))


def _pick_value(
    index: int,
    connectors: Sequence[UnvaluedConnector],
    values: List[Optional[int]],
    cell_map: Dict[Coordinate, List[int]],
    min_value: int,
    max_value: int,
    allowed: Optional[Collection[int]] = None,
) -> Optional[int]:
    """Random value in range, and in allowed when given, not used by any connector sharing a cell with this one"""
    connector = connectors[index]
    used = {
        values[other]
        for other in cell_map[connector.cell_a] + cell_map[connector.cell_b]
        if values[other] is not None
    }
    available = [
        value for value in range(min_value, max_value + 1)
        if value not in used and (allowed is None or value in allowed)
    ]
    if not available:
        return None
    return random.choice(available)


def assign_connector_values(
    unvalued_connectors: Sequence[UnvaluedConnector],
    min_value: int,
    max_value: int,
    division_enabled: bool = False,
    solution_path: Sequence[Coordinate] = (),
    mult_div_range: int = 12,
    allowed_values: Optional[Collection[int]] = None,
) -> ValueAssignmentResult:
    """
    Give every connector a value so that no cell touches two connectors with the same value.

    With division enabled about a quarter of the solution path connectors are valued
    first from a small range, so the cells exiting through them can show a division.
    Values outside allowed_values, when given, are never picked.
    """
    cell_map = _build_cell_connector_map(unvalued_connectors)
    allowed = set(allowed_values) if allowed_values is not None else None
    values: List[Optional[int]] = [None] * len(unvalued_connectors)

    division_indices: List[int] = []
    if division_enabled and len(solution_path) > 1:
        path_indices = [
            index for index, connector in enumerate(unvalued_connectors)
            if _is_on_path(connector, solution_path)
        ]
        reserved = max(1, int(len(path_indices) * DIVISION_CONNECTOR_RATIO))
        division_indices = random.sample(path_indices, min(reserved, len(path_indices)))

        small_max = min(MAX_DIVISION_VALUE, mult_div_range, max_value)
        for index in division_indices:
            value = _pick_value(index, unvalued_connectors, values, cell_map, max(1, min_value), small_max, allowed)
            if value is None:
                value = _pick_value(index, unvalued_connectors, values, cell_map, min_value, max_value, allowed)
            if value is None:
                connector = unvalued_connectors[index]
                return ValueAssignmentResult(
                    success=False,
                    error=f"No available values for division connector between {connector.cell_a} and {connector.cell_b}",
                )
            values[index] = value

    reserved_set = set(division_indices)
    remaining = [index for index in range(len(unvalued_connectors)) if index not in reserved_set]
    random.shuffle(remaining)

    for index in remaining:
        value = _pick_value(index, unvalued_connectors, values, cell_map, min_value, max_value, allowed)
        if value is None:
            connector = unvalued_connectors[index]
            return ValueAssignmentResult(
                success=False,
                error=f"No available values for connector between {connector.cell_a} and {connector.cell_b}",
            )
        values[index] = value

    connectors = [
        Connector(**connector.model_dump(), value=value)
        for connector, value in zip(unvalued_connectors, values)
    ]
    return ValueAssignmentResult(success=True, connectors=connectors, division_connector_indices=division_indices)
