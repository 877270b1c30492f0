import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from circuit_challenge.core.database import Base, get_db
from circuit_challenge.engine.connectors import build_connector_graph, get_cell_connectors
from circuit_challenge.engine.difficulty import get_difficulty_by_level
from circuit_challenge.game import create_initial_game_state, game_reducer
from circuit_challenge.main import app
from circuit_challenge.schemas import (
    Cell, Connector, Coordinate, GeneratePuzzle, Puzzle, PuzzleGenerated, Solution,
)
from circuit_challenge.services.game_services import game_services


def c(row, col):
    return Coordinate(row=row, col=col)


def build_puzzle(rows, cols, path, wrong_cells=()):
    """
    Puzzle with every 2x2 diagonal running down-right and connector values 8, 9, 10, ...
    in graph order, so (0,0)-(0,1) always carries 8 and values never repeat.
    Path cells answer with the connector to the next path cell, cells in wrong_cells
    with another touching connector instead.
    """
    diagonal_grid = [["DR"] * (cols - 1) for _ in range(rows - 1)]
    connectors = [
        Connector(**connector.model_dump(), value=8 + index)
        for index, connector in enumerate(build_connector_graph(rows, cols, diagonal_grid))
    ]

    answers = {}
    for current, following in zip(path, path[1:]):
        touching = get_cell_connectors(current, connectors)
        exit_connector = next(con for con in touching if con.joins(current, following))
        if current in wrong_cells:
            exit_connector = next(con for con in touching if con is not exit_connector)
        answers[current] = exit_connector.value

    grid = []
    for row in range(rows):
        grid_row = []
        for col in range(cols):
            coordinate = c(row, col)
            is_finish = row == rows - 1 and col == cols - 1
            answer = None
            if not is_finish:
                answer = answers.get(coordinate, get_cell_connectors(coordinate, connectors)[0].value)
            grid_row.append(Cell(
                row=row,
                col=col,
                expression="" if is_finish else f"{answer - 3} + 3",
                answer=answer,
                is_start=(row == 0 and col == 0),
                is_finish=is_finish,
            ))
        grid.append(grid_row)

    return Puzzle(
        id=f"test-{rows}x{cols}",
        difficulty=1,
        grid=grid,
        connectors=connectors,
        solution=Solution(path=list(path), steps=len(path) - 1),
    )


# 3x3: 8 from START to (0,1), then down-right, then down
SMALL_PATH = [c(0, 0), c(0, 1), c(1, 2), c(2, 2)]

# 4x4 snake, 10 moves
SNAKE_PATH = [
    c(0, 0), c(0, 1), c(0, 2), c(0, 3), c(1, 3), c(1, 2),
    c(1, 1), c(1, 0), c(2, 1), c(2, 2), c(3, 3),
]


def load(state, puzzle, request_id=1):
    state = game_reducer(state, GeneratePuzzle(request_id=request_id), now=0)
    return game_reducer(state, PuzzleGenerated(payload=puzzle, request_id=request_id), now=0)


@pytest.fixture(autouse=True)
def seeded_random():
    random.seed(1234)


@pytest.fixture
def small_puzzle():
    return build_puzzle(3, 3, SMALL_PATH)


@pytest.fixture
def snake_puzzle():
    return build_puzzle(4, 4, SNAKE_PATH)


@pytest.fixture
def ready_state(small_puzzle):
    return load(create_initial_game_state(get_difficulty_by_level(1)), small_puzzle)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    for session_id in list(game_services._sessions):
        game_services.delete_session(session_id)
