import pytest

from circuit_challenge.core.puzzle import Operation
from circuit_challenge.generators.difficulty import (
    PRESETS, by_level, by_name, all_presets,
    calculate_min_path_length, calculate_max_path_length,
    StoryLevel, story_settings, story_grid
)


class TestPathLengths:
    @pytest.mark.parametrize("rows,cols,expected", [
        (2, 2, 4),
        (3, 4, 6),
        (4, 4, 8),
        (4, 5, 11),
        (5, 5, 13),
        (5, 6, 15),
        (6, 7, 21),
        (6, 8, 21),
    ])
    def test_min(self, rows, cols, expected):
        assert calculate_min_path_length(rows, cols) == expected

    @pytest.mark.parametrize("rows,cols,expected", [(3, 4, 10), (5, 5, 21), (6, 8, 40)])
    def test_max(self, rows, cols, expected):
        assert calculate_max_path_length(rows, cols) == expected


class TestPresets:
    def test_ten_presets_in_order(self):
        assert len(PRESETS) == 10
        assert PRESETS[0].name == "Tiny Tot"
        assert PRESETS[-1].name == "Expert"

    def test_presets_are_valid(self):
        for settings in all_presets():
            settings.validate()
            assert settings.min_path_length <= settings.max_path_length
            assert not settings.hidden_mode

    def test_level_numbers_line_up(self):
        for level in range(1, 11):
            assert by_level(level).level_number == level

    def test_by_level_clamps(self):
        assert by_level(0).name == "Tiny Tot"
        assert by_level(-3).name == "Tiny Tot"
        assert by_level(42).name == "Expert"

    def test_by_level_fills_path_lengths(self):
        settings = by_level(1)
        assert (settings.min_path_length, settings.max_path_length) == (6, 10)

    def test_returns_copies(self):
        settings = by_level(1)
        settings.weights.addition = 1
        settings.grid_rows = 9
        assert by_level(1).weights.addition == 100
        assert PRESETS[0].grid_rows == 3
        assert PRESETS[0].min_path_length == 0

    def test_by_name(self):
        assert by_name("Times Tables").mult_div_range == 5
        assert by_name("times tables").name == "Times Tables"
        assert by_name("Nope") is None

    def test_division_intro(self):
        settings = by_name("Division Intro")
        assert settings.enabled_operations == list(Operation)
        assert settings.weights.division == 15
        assert (settings.grid_rows, settings.grid_cols) == (5, 6)


class TestStoryLevel:
    def test_display_name(self):
        assert StoryLevel(3, 3).display_name == "3-C"
        assert StoryLevel(10, 5).letter == "E"

    def test_parse(self):
        assert StoryLevel.parse("3-c") == StoryLevel(3, 3)

    @pytest.mark.parametrize("text", ["3", "x-A", "3-F", "3-AB"])
    def test_parse_rejects(self, text):
        with pytest.raises(ValueError):
            StoryLevel.parse(text)


class TestStorySettings:
    def test_grid_growth(self):
        assert story_grid(1, (3, 4), (6, 7)) == (3, 4)
        assert story_grid(2, (3, 4), (6, 7)) == (4, 4)
        assert story_grid(3, (3, 4), (6, 7)) == (4, 5)
        assert story_grid(4, (3, 4), (6, 7)) == (5, 5)
        assert story_grid(5, (3, 4), (6, 7)) == (6, 7)

    def test_fixed_grid_chapter(self):
        assert story_grid(2, (6, 7), (6, 7)) == (6, 7)

    def test_chapter_one(self):
        settings = story_settings(StoryLevel(1, 1))
        assert settings.name == "Story 1-A"
        assert settings.enabled_operations == [Operation.ADDITION]
        assert settings.weights.addition == 100
        assert (settings.grid_rows, settings.grid_cols) == (3, 4)
        assert not settings.hidden_mode
        assert settings.seconds_per_step == 5

    def test_level_e_is_hidden(self):
        settings = story_settings(StoryLevel(2, 5))
        assert settings.hidden_mode
        assert (settings.grid_rows, settings.grid_cols) == (6, 7)

    def test_chapter_five_ranges(self):
        settings = story_settings(StoryLevel(5, 2))
        assert settings.mult_div_range == 4
        assert settings.connector_max == 20
        assert settings.connector_min == 5
        assert settings.weights.multiplication == 33
        assert settings.weights.division == 0

    def test_chapter_ten_all_hidden(self):
        for level in range(1, 6):
            settings = story_settings(StoryLevel(10, level))
            assert settings.hidden_mode
            assert (settings.grid_rows, settings.grid_cols) == (8, 9)
            assert settings.mult_div_range == 12

    def test_unknown_chapter_falls_back(self):
        assert story_settings(StoryLevel(11, 2)).name == "Story 1-A"

    def test_story_settings_are_valid(self):
        for chapter in range(1, 11):
            for level in range(1, 6):
                settings = story_settings(StoryLevel(chapter, level))
                settings.validate()
                assert settings.min_path_length > 0
