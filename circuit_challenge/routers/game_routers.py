from fastapi import APIRouter, Depends, Response
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from circuit_challenge import schemas
from circuit_challenge.core.database import get_db
from circuit_challenge.services import GameServices, PuzzleServices, get_game_services


router = APIRouter()


# Start a game session
@router.post("/", response_model=schemas.GameRead, status_code=201)
async def create_game(game_data: schemas.GameCreate, services: GameServices = Depends(get_game_services)):
    """Create a session from a preset level, custom settings or a story level"""
    session = services.create_session(game_data)
    if game_data.generate:
        await session.generate()
    return schemas.GameRead(session_id=session.id, state=session.state)


@router.get("/{session_id}", response_model=schemas.GameRead)
async def get_game(session_id: str, services: GameServices = Depends(get_game_services)):
    """Current game state"""
    session = services.get_session(session_id)
    session.clear_expired_coin_animations()
    return schemas.GameRead(session_id=session.id, state=session.tick())


# New puzzle for the session
@router.post("/{session_id}/generate", response_model=schemas.GameRead)
async def generate_game_puzzle(session_id: str, services: GameServices = Depends(get_game_services)):
    """Generate a fresh puzzle; on failure the state carries the error"""
    session = services.get_session(session_id)
    state = await session.generate()
    return schemas.GameRead(session_id=session.id, state=state)


# Play a stored puzzle
@router.post("/{session_id}/load/{puzzle_id}", response_model=schemas.GameRead)
async def load_game_puzzle(
    session_id: str,
    puzzle_id: str,
    services: GameServices = Depends(get_game_services),
    db: Session = Depends(get_db),
):
    """Load a stored puzzle into the session"""
    session = services.get_session(session_id)
    puzzle = await run_in_threadpool(PuzzleServices(db).serialize_puzzle, puzzle_id)
    return schemas.GameRead(session_id=session.id, state=session.load_puzzle(puzzle))


@router.post("/{session_id}/moves", response_model=schemas.GameRead)
async def make_move(
    session_id: str,
    coordinate: schemas.Coordinate,
    services: GameServices = Depends(get_game_services),
):
    """Move to an adjacent cell; invalid moves leave the state unchanged"""
    session = services.get_session(session_id)
    return schemas.GameRead(session_id=session.id, state=session.make_move(coordinate))


@router.post("/{session_id}/actions", response_model=schemas.GameRead)
async def dispatch_action(
    session_id: str,
    request: schemas.GameActionRequest,
    services: GameServices = Depends(get_game_services),
):
    """Dispatch any game action"""
    state = await services.dispatch(session_id, request.action)
    return schemas.GameRead(session_id=session_id, state=state)


@router.get("/{session_id}/summary", response_model=schemas.GameSummary)
async def get_summary(session_id: str, services: GameServices = Depends(get_game_services)):
    """Score, star rating and progress record of the attempt"""
    session = services.get_session(session_id)
    return session.summary()


@router.delete("/{session_id}", status_code=204)
async def delete_game(session_id: str, services: GameServices = Depends(get_game_services)):
    """Abandon the session"""
    services.delete_session(session_id)
    return Response(status_code=204)
