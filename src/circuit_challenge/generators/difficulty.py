"""
Difficulty presets and story-mode level settings.
"""

import math
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from .. import config
from ..core.puzzle import DifficultySettings, OperationWeights, Operation


def calculate_min_path_length(rows: int, cols: int) -> int:
    """Minimum path length as a graduated share of the grid area"""
    total = rows * cols
    if total <= 16:
        percentage = 0.50
    elif total <= 25:
        percentage = 0.55
    elif total <= 42:
        percentage = 0.50
    else:
        percentage = 0.45
    return max(config.MIN_PATH_FLOOR, math.floor(total * percentage))


def calculate_max_path_length(rows: int, cols: int) -> int:
    """Maximum path length, about 85% of the grid area"""
    return math.floor(rows * cols * config.MAX_PATH_RATIO)


def with_path_lengths(settings: DifficultySettings) -> DifficultySettings:
    """Copy of settings with any unset path length derived from the grid"""
    changes = {}
    if not settings.min_path_length:
        changes['min_path_length'] = calculate_min_path_length(settings.grid_rows, settings.grid_cols)
    if not settings.max_path_length:
        changes['max_path_length'] = calculate_max_path_length(settings.grid_rows, settings.grid_cols)
    return settings.copy(**changes)


def _preset(name: str, ops: str, add_sub: int, mult_div: int, connector_max: int,
            rows: int, cols: int, weights: Tuple[int, int, int, int],
            seconds: int) -> DifficultySettings:
    return DifficultySettings(
        name=name,
        addition_enabled='+' in ops,
        subtraction_enabled='-' in ops,
        multiplication_enabled='x' in ops,
        division_enabled='/' in ops,
        add_sub_range=add_sub,
        mult_div_range=mult_div,
        connector_min=5,
        connector_max=connector_max,
        grid_rows=rows,
        grid_cols=cols,
        weights=OperationWeights(*weights),
        hidden_mode=False,
        seconds_per_step=seconds,
    )


# Path lengths are left at 0 here and derived on lookup
PRESETS: List[DifficultySettings] = [
    _preset("Tiny Tot", "+", 10, 0, 10, 3, 4, (100, 0, 0, 0), 10),
    _preset("Beginner", "+", 15, 0, 15, 4, 4, (100, 0, 0, 0), 9),
    _preset("Easy", "+-", 15, 0, 15, 4, 5, (60, 40, 0, 0), 8),
    _preset("Getting There", "+-", 20, 0, 20, 4, 5, (55, 45, 0, 0), 7),
    _preset("Times Tables", "+-x", 20, 5, 25, 4, 5, (40, 35, 25, 0), 7),
    _preset("Confident", "+-x", 25, 6, 36, 5, 5, (35, 30, 35, 0), 6),
    _preset("Adventurous", "+-x", 30, 8, 64, 5, 6, (30, 30, 40, 0), 6),
    _preset("Division Intro", "+-x/", 30, 6, 36, 5, 6, (30, 25, 30, 15), 6),
    _preset("Challenge", "+-x/", 50, 10, 100, 6, 7, (25, 25, 30, 20), 5),
    _preset("Expert", "+-x/", 100, 12, 144, 6, 8, (25, 25, 30, 20), 5),
]


def by_level(level: int) -> DifficultySettings:
    """Preset for a level number, clamped to 1-10"""
    index = max(0, min(len(PRESETS) - 1, level - 1))
    return with_path_lengths(PRESETS[index])


def by_name(name: str) -> Optional[DifficultySettings]:
    """Preset by display name, or None if unknown"""
    for preset in PRESETS:
        if preset.name.lower() == name.lower():
            return with_path_lengths(preset)
    return None


def all_presets() -> List[DifficultySettings]:
    return [with_path_lengths(preset) for preset in PRESETS]


# Story mode

LEVEL_LETTERS = "ABCDE"


@dataclass(frozen=True)
class StoryLevel:
    """A story-mode level, e.g. chapter 3 level C"""
    chapter: int  # 1-10
    level: int    # 1-5

    @property
    def letter(self) -> str:
        return LEVEL_LETTERS[self.level - 1]

    @property
    def display_name(self) -> str:
        return f"{self.chapter}-{self.letter}"

    @classmethod
    def parse(cls, text: str) -> 'StoryLevel':
        """Parse "3-C" style names"""
        chapter, _, letter = text.partition('-')
        letter = letter.strip().upper()
        if not chapter.strip().isdigit() or len(letter) != 1 or letter not in LEVEL_LETTERS:
            raise ValueError(f"Invalid story level: {text!r}")
        return cls(int(chapter), LEVEL_LETTERS.index(letter) + 1)


@dataclass(frozen=True)
class ChapterConfig:
    operations: FrozenSet[Operation]
    add_sub_max: int
    mult_div_max: int
    start_grid: Tuple[int, int]
    end_grid: Tuple[int, int]
    all_hidden: bool = False


_ADD = frozenset({Operation.ADDITION})
_ADD_SUB = _ADD | {Operation.SUBTRACTION}
_NO_DIV = _ADD_SUB | {Operation.MULTIPLICATION}
_ALL = _NO_DIV | {Operation.DIVISION}

CHAPTERS: Dict[int, ChapterConfig] = {
    1: ChapterConfig(_ADD, 10, 0, (3, 4), (6, 7)),
    2: ChapterConfig(_ADD_SUB, 15, 0, (4, 5), (6, 7)),
    3: ChapterConfig(_ADD_SUB, 20, 0, (4, 5), (6, 7)),
    4: ChapterConfig(_ADD_SUB, 35, 0, (4, 5), (6, 7)),
    5: ChapterConfig(_NO_DIV, 20, 20, (4, 5), (6, 7)),
    6: ChapterConfig(_NO_DIV, 30, 50, (4, 5), (6, 7)),
    7: ChapterConfig(_NO_DIV, 40, 100, (4, 5), (6, 7)),
    8: ChapterConfig(_ALL, 50, 100, (4, 5), (6, 7)),
    9: ChapterConfig(_ALL, 100, 144, (6, 7), (6, 7)),
    10: ChapterConfig(_ALL, 100, 144, (8, 9), (8, 9), all_hidden=True),
}


def story_grid(level: int, start: Tuple[int, int], end: Tuple[int, int]) -> Tuple[int, int]:
    """Grid size for levels A-D grows towards the chapter's end grid; E uses it"""
    if level == 5 or start == end:
        return end

    growth_per_level = ((end[0] - start[0]) + (end[1] - start[1])) // 4
    rows, cols = start
    for i in range((level - 1) * growth_per_level):
        if i % 2 == 0 and rows < end[0]:
            rows += 1
        elif cols < end[1]:
            cols += 1
        elif rows < end[0]:
            rows += 1
    return rows, cols


def story_settings(story_level: StoryLevel) -> DifficultySettings:
    """Settings for a story level; unknown chapters fall back to 1-A"""
    chapter = CHAPTERS.get(story_level.chapter)
    if chapter is None or not 1 <= story_level.level <= 5:
        return story_settings(StoryLevel(1, 1))

    rows, cols = story_grid(story_level.level, chapter.start_grid, chapter.end_grid)
    base_weight = 100 // len(chapter.operations)

    def weight(op: Operation) -> int:
        return base_weight if op in chapter.operations else 0

    settings = DifficultySettings(
        name=f"Story {story_level.display_name}",
        addition_enabled=Operation.ADDITION in chapter.operations,
        subtraction_enabled=Operation.SUBTRACTION in chapter.operations,
        multiplication_enabled=Operation.MULTIPLICATION in chapter.operations,
        division_enabled=Operation.DIVISION in chapter.operations,
        add_sub_range=chapter.add_sub_max,
        mult_div_range=math.isqrt(chapter.mult_div_max) if chapter.mult_div_max > 0 else 0,
        connector_min=5,
        connector_max=max(chapter.add_sub_max, chapter.mult_div_max),
        grid_rows=rows,
        grid_cols=cols,
        weights=OperationWeights(
            weight(Operation.ADDITION), weight(Operation.SUBTRACTION),
            weight(Operation.MULTIPLICATION), weight(Operation.DIVISION),
        ),
        hidden_mode=chapter.all_hidden or story_level.level == 5,
        seconds_per_step=5,
    )
    return with_path_lengths(settings)
