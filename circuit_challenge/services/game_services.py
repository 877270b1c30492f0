import logging
import threading
from typing import Callable, Dict, Optional
from uuid import uuid4

from fastapi import HTTPException
from fastapi.concurrency import run_in_threadpool

from circuit_challenge import schemas
from circuit_challenge.core.config import settings
from circuit_challenge.engine import create_story_level, generate_puzzle, get_story_difficulty, StoryLevel
from circuit_challenge.game import GameTimer, build_summary, create_initial_game_state, game_reducer
from circuit_challenge.game.reducer import now_ms
from circuit_challenge.services.puzzle_services import resolve_difficulty

logger = logging.getLogger(__name__)


class GameSession:
    """
    One player's attempt at Circuit Challenge. Owns the game state, feeds actions
    through the reducer, runs generation with request ids and keeps the timer
    in step with the state.
    """

    def __init__(
        self,
        difficulty: schemas.DifficultySettings,
        story_level: Optional[StoryLevel] = None,
        clock: Callable[[], int] = now_ms,
        session_id: Optional[str] = None,
    ):
        self.id = session_id or str(uuid4())
        self.story_level = story_level
        self.clock = clock
        self.state = create_initial_game_state(difficulty)
        self.timer = GameTimer(on_tick=self._on_tick, clock=clock)
        self._last_request_id = 0

    def dispatch(self, action) -> schemas.GameState:
        self.state = game_reducer(self.state, action, now=self.clock())
        self._sync_timer()
        return self.state

    def _sync_timer(self) -> None:
        if self.state.is_timer_running and not self.timer.running:
            self.timer.start(self.state.start_time)
        elif not self.state.is_timer_running and self.timer.running:
            self.timer.stop()

    def _on_tick(self, elapsed_ms: int) -> None:
        self.dispatch(schemas.TickTimer(payload=elapsed_ms))

    def tick(self) -> schemas.GameState:
        """Bring elapsed time up to date, for callers without a running event loop"""
        if self.state.is_timer_running and self.state.start_time is not None:
            self.dispatch(schemas.TickTimer(payload=self.clock() - self.state.start_time))
        return self.state

    def next_request_id(self) -> int:
        self._last_request_id = max(self._last_request_id, self.state.generation_request_id) + 1
        return self._last_request_id

    def request_generation(self) -> int:
        """Enter generating under a fresh request id, results for older ids are dropped from now on"""
        request_id = self.next_request_id()
        self.dispatch(schemas.GeneratePuzzle(request_id=request_id))
        return request_id

    async def generate(self, max_attempts: Optional[int] = None) -> schemas.GameState:
        """
        Request, generate and deliver a puzzle; a failure leaves the state in setup with an error.
        The generator runs on the threadpool so the event loop keeps serving other requests.
        """
        request_id = self.request_generation()
        result = await run_in_threadpool(
            generate_puzzle,
            self.state.difficulty,
            max_attempts=max_attempts or settings.GENERATION_MAX_ATTEMPTS,
        )
        return self.deliver(result, request_id)

    def deliver(self, result: schemas.GenerationResult, request_id: int) -> schemas.GameState:
        """Hand a generation result to the state machine, stale request ids are dropped by the reducer"""
        if request_id != self.state.generation_request_id:
            logger.debug("Session %s dropped result of stale request %s", self.id, request_id)
        if result.success:
            logger.info("Session %s loaded puzzle %s", self.id, result.puzzle.id)
            return self.dispatch(schemas.PuzzleGenerated(payload=result.puzzle, request_id=request_id))
        logger.warning("Session %s puzzle generation failed: %s", self.id, result.error)
        return self.dispatch(schemas.PuzzleGenerationFailed(payload=result.error, request_id=request_id))

    def load_puzzle(self, puzzle: schemas.Puzzle) -> schemas.GameState:
        """Play a stored puzzle"""
        request_id = self.request_generation()
        return self.deliver(schemas.GenerationResult(success=True, puzzle=puzzle), request_id)

    def make_move(self, coordinate: schemas.Coordinate) -> schemas.GameState:
        self.tick()
        self.dispatch(schemas.MakeMove(payload=coordinate))
        self.clear_expired_coin_animations()
        if self.state.status in schemas.TERMINAL_STATUSES:
            logger.info("Session %s reached %s after %s moves", self.id, self.state.status, len(self.state.move_history))
        return self.state

    def clear_expired_coin_animations(self) -> schemas.GameState:
        now = self.clock()
        for animation in list(self.state.coin_animations):
            if now - animation.timestamp >= settings.COIN_ANIMATION_MS:
                self.dispatch(schemas.ClearCoinAnimation(payload=animation.id))
        return self.state

    def summary(self) -> schemas.GameSummary:
        chapter = self.story_level.chapter if self.story_level else None
        level = self.story_level.level if self.story_level else None
        return build_summary(self.state, chapter=chapter, level=level)

    def close(self) -> None:
        self.timer.stop()


class GameServices:
    """ In-memory registry of game sessions"""

    def __init__(self):
        self._sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def create_session(self, game_data: schemas.GameCreate) -> GameSession:
        story_level = None
        if game_data.story_chapter is not None:
            story_level = create_story_level(game_data.story_chapter, game_data.story_level or "A")
            if story_level is None:
                raise HTTPException(status_code=422, detail=f"Unknown story level {game_data.story_level!r}")
            difficulty = get_story_difficulty(story_level)
        else:
            difficulty = resolve_difficulty(game_data.level, game_data.settings)

        session = GameSession(difficulty, story_level=story_level)
        with self._lock:
            self._sessions[session.id] = session
        logger.info("Created session %s with difficulty %s", session.id, difficulty.name)
        return session

    def get_session(self, session_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Game session not found")
        return session

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise HTTPException(status_code=404, detail="Game session not found")
        session.close()
        logger.info("Closed session %s", session_id)

    async def dispatch(self, session_id: str, action) -> schemas.GameState:
        """Apply any action; GENERATE_PUZZLE runs the generator for the session"""
        session = self.get_session(session_id)
        if isinstance(action, schemas.GeneratePuzzle):
            return await session.generate()
        if isinstance(action, schemas.MakeMove):
            return session.make_move(action.payload)
        return session.dispatch(action)


game_services = GameServices()


def get_game_services() -> GameServices:
    return game_services
