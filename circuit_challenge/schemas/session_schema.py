from pydantic import BaseModel, Field, field_validator
from typing import Optional

from circuit_challenge.schemas.difficulty_schema import DifficultySettings
from circuit_challenge.schemas.game_schema import GameState


class GameCreate(BaseModel):
    """Start a game session from a preset level, custom settings or a story level"""
    level: Optional[int] = Field(default=None, ge=1, le=10)
    settings: Optional[DifficultySettings] = None
    story_chapter: Optional[int] = Field(default=None, ge=1, le=10)
    story_level: Optional[str] = None # letter A-E
    generate: bool = True # generate the first puzzle right away

    @field_validator('story_level', mode='before') # runs before Pydantic type conversion. Recives row input
    @classmethod
    def empty_str_to_none(cls, value):
        """Convert empty string to None for story_level"""
        if value == "" or value is None:
            return None
        return value


class GameRead(BaseModel):
    session_id: str
    state: GameState


class ProgressRecord(BaseModel):
    """What the progress collaborator stores for a finished story attempt"""
    chapter: Optional[int] = None
    level: Optional[int] = None
    won: bool
    lives_lost: int
    time_seconds: int
    correct_tile_count: int


class GameSummary(BaseModel):
    won: bool
    is_hidden_mode: bool
    elapsed_ms: int
    formatted_time: str
    puzzle_coins: int
    total_moves: int
    correct_moves: int
    mistakes: int
    accuracy: int # percent
    average_tile_time_ms: float
    time_threshold_ms: Optional[int] = None
    stars: int
    progress: ProgressRecord
