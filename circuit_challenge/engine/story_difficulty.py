import math
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from circuit_challenge.schemas import DifficultySettings, OperationWeights
from circuit_challenge.engine.difficulty import calculate_max_path_length, calculate_min_path_length


LEVEL_LETTERS = ["A", "B", "C", "D", "E"]

STORY_SECONDS_PER_STEP = 5


@dataclass(frozen=True)
class StoryLevel:
    chapter: int # 1-10
    level: int # 1-5, A-E

    @property
    def letter(self) -> str:
        return get_level_letter(self.level)

    @property
    def display_name(self) -> str:
        return f"{self.chapter}-{self.letter}"


@dataclass(frozen=True)
class ChapterConfig:
    operations: FrozenSet[str]
    add_sub_max: int
    mult_div_max: int # largest answer for × and ÷
    start_grid: Tuple[int, int]
    end_grid: Tuple[int, int]
    all_hidden: bool = False


CHAPTER_CONFIGS: Dict[int, ChapterConfig] = {
    1: ChapterConfig(frozenset({"add"}), 10, 0, (3, 4), (6, 7)),
    2: ChapterConfig(frozenset({"add", "subtract"}), 15, 0, (4, 5), (6, 7)),
    3: ChapterConfig(frozenset({"add", "subtract"}), 20, 0, (4, 5), (6, 7)),
    4: ChapterConfig(frozenset({"add", "subtract"}), 35, 0, (4, 5), (6, 7)),
    5: ChapterConfig(frozenset({"add", "subtract", "multiply"}), 20, 20, (4, 5), (6, 7)),
    6: ChapterConfig(frozenset({"add", "subtract", "multiply"}), 30, 50, (4, 5), (6, 7)),
    7: ChapterConfig(frozenset({"add", "subtract", "multiply"}), 40, 100, (4, 5), (6, 7)),
    8: ChapterConfig(frozenset({"add", "subtract", "multiply", "divide"}), 50, 100, (4, 5), (6, 7)),
    9: ChapterConfig(frozenset({"add", "subtract", "multiply", "divide"}), 100, 144, (6, 7), (6, 7)),
    10: ChapterConfig(frozenset({"add", "subtract", "multiply", "divide"}), 100, 144, (8, 9), (8, 9), all_hidden=True),
}


def get_level_letter(level: int) -> str:
    if 1 <= level <= len(LEVEL_LETTERS):
        return LEVEL_LETTERS[level - 1]
    return "A"


def create_story_level(chapter: int, letter: str) -> Optional[StoryLevel]:
    """StoryLevel from a chapter and a level letter, None for an unknown letter"""
    letter = letter.upper()
    if letter not in LEVEL_LETTERS:
        return None
    return StoryLevel(chapter=chapter, level=LEVEL_LETTERS.index(letter) + 1)


def calculate_grid(level: int, start: Tuple[int, int], end: Tuple[int, int]) -> Tuple[int, int]:
    """Grid grows from the chapter's start size towards its end size over levels A-D, E uses the end size"""
    if level == 5 or start == end:
        return end

    rows, cols = start
    total_growth = (end[0] - start[0]) + (end[1] - start[1])
    growth = (level - 1) * (total_growth // 4)

    # alternate rows and columns
    for step in range(growth):
        if step % 2 == 0 and rows < end[0]:
            rows += 1
        elif cols < end[1]:
            cols += 1
        elif rows < end[0]:
            rows += 1
    return rows, cols


def calculate_weights(operations: FrozenSet[str]) -> OperationWeights:
    if not operations:
        return OperationWeights(addition=100)
    weight = 100 // len(operations)
    return OperationWeights(
        addition=weight if "add" in operations else 0,
        subtraction=weight if "subtract" in operations else 0,
        multiplication=weight if "multiply" in operations else 0,
        division=weight if "divide" in operations else 0,
    )


def get_story_difficulty(story_level: StoryLevel) -> DifficultySettings:
    """Settings for a story level, unknown chapters fall back to 1-A"""
    config = CHAPTER_CONFIGS.get(story_level.chapter)
    if config is None:
        return get_story_difficulty(StoryLevel(chapter=1, level=1))

    rows, cols = calculate_grid(story_level.level, config.start_grid, config.end_grid)

    # operands for × and ÷ come from the largest answer, e.g. 50 -> 7 (7 × 7 = 49)
    mult_div_range = math.isqrt(config.mult_div_max) if config.mult_div_max > 0 else 0

    return DifficultySettings(
        name=f"Story {story_level.display_name}",
        addition_enabled="add" in config.operations,
        subtraction_enabled="subtract" in config.operations,
        multiplication_enabled="multiply" in config.operations,
        division_enabled="divide" in config.operations,
        add_sub_range=config.add_sub_max,
        mult_div_range=mult_div_range,
        connector_min=5,
        connector_max=max(config.add_sub_max, config.mult_div_max),
        grid_rows=rows,
        grid_cols=cols,
        min_path_length=calculate_min_path_length(rows, cols),
        max_path_length=calculate_max_path_length(rows, cols),
        weights=calculate_weights(config.operations),
        hidden_mode=config.all_hidden or story_level.level == 5,
        seconds_per_step=STORY_SECONDS_PER_STEP,
    )


def calculate_stars(lives_lost: int, time_seconds: float, tile_count: int) -> int:
    """1 star for completing, 2 with no lives lost, 3 when also under 5 seconds per tile"""
    stars = 1
    if lives_lost == 0:
        stars = 2
        if time_seconds < tile_count * STORY_SECONDS_PER_STEP:
            stars = 3
    return stars
