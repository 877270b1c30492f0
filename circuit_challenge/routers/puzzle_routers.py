# import moduls/libraries
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional


# import form project
from circuit_challenge import schemas
from circuit_challenge.core.database import get_db
from circuit_challenge.engine import DIFFICULTY_PRESETS, get_difficulty_by_level
from circuit_challenge.services import PuzzleServices


router = APIRouter()


# list difficulty presets
@router.get("/presets", response_model=List[schemas.DifficultySettings])
async def get_presets():
    """Difficulty presets, level 1 first"""
    return [get_difficulty_by_level(level) for level in range(1, len(DIFFICULTY_PRESETS) + 1)]


# Generate and store puzzle
@router.post("/generate", response_model=schemas.Puzzle, status_code=201)
def create_generated_puzzle(puzzle_generate: schemas.PuzzleGenerate, db: Session = Depends(get_db)):
    """Generate a new puzzle and store it"""
    services = PuzzleServices(db)
    puzzle = services.generate_puzzle(puzzle_generate)
    services.create_puzzle(puzzle, puzzle_generate.name)
    return puzzle


# get a list of puzzle (GET)
@router.get("/", response_model=List[schemas.PuzzleRead])
def get_puzzles(
    db: Session = Depends(get_db),
    name: Optional[str] = Query(None, description="Filter by name"),
    difficulty: Optional[int] = Query(None, description="Filter by preset level"),
    sort_by: Optional[str] = Query(None, description="Sort field"),
    order: Optional[str] = Query("asc", description="Sort order")
):
    """Get a list of puzzles, with optional filters and sorting"""
    services = PuzzleServices(db)
    return services.get_all_puzzle(name, difficulty, sort_by, order)


# Get puzzle by id
@router.get("/{puzzle_id}", response_model=schemas.Puzzle)
def get_puzzle(puzzle_id: str, db: Session = Depends(get_db)):
    """Fetch one stored puzzle by ID"""
    services = PuzzleServices(db)
    return services.serialize_puzzle(puzzle_id)


# API Delete Request
@router.delete("/{puzzle_id}", status_code=204)
def delete_puzzle(puzzle_id: str, db: Session = Depends(get_db)):
    """Delete a puzzle"""
    services = PuzzleServices(db)
    services.delete_puzzle(puzzle_id)
    return Response(status_code=204)
