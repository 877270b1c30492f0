import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.orm import selectinload

from circuit_challenge import models, schemas
from circuit_challenge.core.config import settings
from circuit_challenge.engine import generate_puzzle, get_difficulty_by_level, validate_difficulty_settings

logger = logging.getLogger(__name__)


def resolve_difficulty(level: Optional[int], custom: Optional[schemas.DifficultySettings]) -> schemas.DifficultySettings:
    """Preset by level, or validated custom settings"""
    if level is not None:
        return get_difficulty_by_level(level)
    if custom is None:
        raise HTTPException(status_code=422, detail="Either a level or custom settings are required")

    validation = validate_difficulty_settings(custom)
    if not validation.valid:
        raise HTTPException(status_code=422, detail=validation.errors)
    return custom


class PuzzleServices:
    """ Handles puzzle generation and all puzzle related DB operation"""

    def __init__(self, db):
        self.db = db

    # generate puzzle
    def generate_puzzle(self, puzzle_config: schemas.PuzzleGenerate) -> schemas.Puzzle:
        """Run the generator for a preset level or custom settings"""
        difficulty = resolve_difficulty(puzzle_config.level, puzzle_config.settings)
        logger.info("Generating puzzle for difficulty %s", difficulty.name)

        result = generate_puzzle(difficulty, max_attempts=settings.GENERATION_MAX_ATTEMPTS)
        if not result.success:
            raise HTTPException(status_code=422, detail=result.error)
        return result.puzzle

    # create puzzle
    def create_puzzle(self, puzzle: schemas.Puzzle, name: Optional[str] = None) -> models.Puzzle:
        """Insert a generated puzzle with its cells, connectors and solution path"""
        if not name:
            name = get_difficulty_by_level(puzzle.difficulty).name if puzzle.difficulty else "Custom"
        record = models.Puzzle(
            id=puzzle.id,
            name=name,
            difficulty=puzzle.difficulty,
            grid_rows=puzzle.rows,
            grid_cols=puzzle.cols,
            steps=puzzle.solution.steps,
        )
        self.db.add(record)

        for row in puzzle.grid:
            for cell in row:
                record.cells.append(models.Cell(
                    row=cell.row,
                    col=cell.col,
                    expression=cell.expression,
                    answer=cell.answer,
                    is_start=cell.is_start,
                    is_finish=cell.is_finish,
                ))

        for index, connector in enumerate(puzzle.connectors):
            record.connectors.append(models.Connector(
                connector_index=index,
                type=connector.type,
                direction=connector.direction,
                cell_a_row=connector.cell_a.row,
                cell_a_col=connector.cell_a.col,
                cell_b_row=connector.cell_b.row,
                cell_b_col=connector.cell_b.col,
                value=connector.value,
            ))

        for index, coordinate in enumerate(puzzle.solution.path):
            record.path_nodes.append(models.PathNode(order_index=index, row=coordinate.row, col=coordinate.col))

        self.db.commit()
        logger.info("Stored puzzle %s as %r", puzzle.id, name)
        return record

    # get all puzzle
    def get_all_puzzle(
            self,
            name: Optional[str] = None,
            difficulty: Optional[int] = None,  # default None if no filter is selected
            sort_by: Optional[str] = None,
            order: Optional[str] = "asc"  # default asc
    ) -> List[models.Puzzle]:
        """Fetch puzzles with filter"""
        query = self.db.query(models.Puzzle)

        if name:
            query = query.filter(models.Puzzle.name == name)
        if difficulty is not None:
            query = query.filter(models.Puzzle.difficulty == difficulty)
        if sort_by:
            sort_column = getattr(models.Puzzle, sort_by, None)
            if sort_column is not None:
                query = query.order_by(sort_column.desc() if order == "desc" else sort_column.asc())

        return query.all()

    # get one puzzle by id
    def get_puzzle_by_id(self, puzzle_id: str) -> models.Puzzle:
        """Fetch puzzle by id"""
        puzzle = (self.db.query(models.Puzzle)
                  .options(selectinload(models.Puzzle.cells))
                  .options(selectinload(models.Puzzle.connectors))
                  .options(selectinload(models.Puzzle.path_nodes))
                  .filter(models.Puzzle.id == puzzle_id).first())
        if not puzzle:
            raise HTTPException(status_code=404, detail="Puzzle not found")
        return puzzle

    # delete one puzzle
    def delete_puzzle(self, puzzle_id: str) -> None:
        """Fetch puzzle by id and delete"""
        puzzle = self.get_puzzle_by_id(puzzle_id)
        self.db.delete(puzzle)
        self.db.commit()
        logger.info("Deleted puzzle %s", puzzle_id)

    # rebuild the playable puzzle from its rows
    def serialize_puzzle(self, puzzle_id: str) -> schemas.Puzzle:
        record = self.get_puzzle_by_id(puzzle_id)

        grid = [[None] * record.grid_cols for _ in range(record.grid_rows)]
        for cell in record.cells:
            grid[cell.row][cell.col] = schemas.Cell(
                row=cell.row,
                col=cell.col,
                expression=cell.expression,
                answer=cell.answer,
                is_start=cell.is_start,
                is_finish=cell.is_finish,
            )

        connectors = [
            schemas.Connector(
                type=connector.type,
                direction=connector.direction,
                cell_a=schemas.Coordinate(row=connector.cell_a_row, col=connector.cell_a_col),
                cell_b=schemas.Coordinate(row=connector.cell_b_row, col=connector.cell_b_col),
                value=connector.value,
            )
            for connector in sorted(record.connectors, key=lambda c: c.connector_index)
        ]

        path = [
            schemas.Coordinate(row=node.row, col=node.col)
            for node in sorted(record.path_nodes, key=lambda n: n.order_index)
        ]

        return schemas.Puzzle(
            id=record.id,
            difficulty=record.difficulty,
            grid=grid,
            connectors=connectors,
            solution=schemas.Solution(path=path, steps=record.steps),
        )
