from circuit_challenge.game.reducer import (
    CORRECT_MOVE_COINS,
    WRONG_MOVE_PENALTY,
    check_move_correctness,
    create_initial_game_state,
    game_reducer,
    get_connector_between_cells,
    is_adjacent,
)
from circuit_challenge.game.summary import build_summary, calculate_star_rating
from circuit_challenge.game.timer import GameTimer
