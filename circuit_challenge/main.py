from fastapi import FastAPI

from circuit_challenge.core.database import Base, engine
from circuit_challenge.routers import game_routers, puzzle_routers
from circuit_challenge import models  # registers the tables on Base
from utils.logger_config import configure_logging

configure_logging()

# Create database tables
Base.metadata.create_all(bind=engine)

# create FastAPI
app = FastAPI(title="Circuit Challenge API", version="1.0")

# get routers
app.include_router(puzzle_routers.router, prefix="/puzzles", tags=["Puzzles"])
app.include_router(game_routers.router, prefix="/games", tags=["Games"])
