from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings): # load all key=value pairs from .env
    """ Load game and storage settings"""
    DATABASE_URL: str = f"sqlite:///{BASE_DIR / 'circuit_challenge.db'}"
    MAX_LIVES: int = 5
    GENERATION_MAX_ATTEMPTS: int = 20
    TIMER_TICK_SECONDS: float = 0.1 # how often the running timer dispatches TICK_TIMER
    COIN_ANIMATION_MS: int = 1000 # lifetime of a coin animation before it is cleared
    LOG_FILE: str = "app_errors.log"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file = BASE_DIR/".env",
        env_file_encoding = "utf-8",
    )

settings = Settings()
