from circuit_challenge.engine.generator import generate_puzzle
from circuit_challenge.engine.difficulty import (
    DIFFICULTY_PRESETS,
    calculate_max_path_length,
    calculate_min_path_length,
    create_custom_difficulty,
    get_difficulty_by_level,
    get_difficulty_by_name,
    get_difficulty_level,
    validate_difficulty_settings,
)
from circuit_challenge.engine.story_difficulty import (
    StoryLevel,
    calculate_stars,
    create_story_level,
    get_story_difficulty,
)
from circuit_challenge.engine.validator import validate_puzzle, find_solution_paths
