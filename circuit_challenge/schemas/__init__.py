from circuit_challenge.schemas.coordinate_schema import Coordinate
from circuit_challenge.schemas.cell_schema import Cell
from circuit_challenge.schemas.connector_schema import Connector, UnvaluedConnector, ConnectorType, DiagonalDirection
from circuit_challenge.schemas.difficulty_schema import DifficultySettings, OperationWeights
from circuit_challenge.schemas.puzzle_schema import Puzzle, Solution, GenerationResult, PuzzleGenerate, PuzzleRead
from circuit_challenge.schemas.game_schema import (
    GameState, GameStatus, GameMoveResult, CoinAnimation, HiddenModeResults, TraversedConnector, TERMINAL_STATUSES
)
from circuit_challenge.schemas.action_schema import (
    GameAction, SetDifficulty, GeneratePuzzle, PuzzleGenerated, PuzzleGenerationFailed, StartTimer, TickTimer,
    MakeMove, ResetPuzzle, NewPuzzle, ShowSolution, HideSolution, RevealHiddenResults, ClearCoinAnimation,
    GameActionRequest,
)
from circuit_challenge.schemas.session_schema import GameCreate, GameRead, GameSummary, ProgressRecord
