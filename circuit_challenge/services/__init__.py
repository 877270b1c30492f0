from circuit_challenge.services.puzzle_services import PuzzleServices
from circuit_challenge.services.game_services import GameServices, GameSession, get_game_services
