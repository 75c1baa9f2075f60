import json

import pytest

from circuit_challenge.core.grid import Coordinate
from circuit_challenge.core.puzzle import (
    Puzzle, DifficultySettings, OperationWeights, Operation, GameMode
)


class TestDifficultySettings:
    def test_defaults_are_valid(self):
        DifficultySettings().validate()

    def test_enabled_operations(self):
        settings = DifficultySettings(subtraction_enabled=True, division_enabled=True)
        assert settings.enabled_operations == [
            Operation.ADDITION, Operation.SUBTRACTION, Operation.DIVISION
        ]

    @pytest.mark.parametrize("changes", [
        {'addition_enabled': False},
        {'grid_rows': 1},
        {'connector_min': 10, 'connector_max': 5},
        {'min_path_length': 8, 'max_path_length': 6},
    ])
    def test_validate_rejects(self, changes):
        with pytest.raises(ValueError):
            DifficultySettings(**changes).validate()

    def test_copy_does_not_share_weights(self):
        settings = DifficultySettings()
        copy = settings.copy(name="Other")
        copy.weights.addition = 1
        assert settings.weights.addition == 100
        assert copy.name == "Other"

    def test_game_mode(self):
        assert DifficultySettings(hidden_mode=True).game_mode is GameMode.HIDDEN
        assert DifficultySettings().game_mode is GameMode.STANDARD

    def test_level_number(self):
        assert DifficultySettings(name="Expert").level_number == 10
        assert DifficultySettings().level_number == 0

    def test_dict_round_trip(self):
        settings = DifficultySettings(
            name="Mine", multiplication_enabled=True, mult_div_range=6,
            weights=OperationWeights(addition=50, multiplication=50)
        )
        assert DifficultySettings.from_dict(settings.to_dict()) == settings

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="colour"):
            DifficultySettings.from_dict({'colour': 'red'})

    def test_yaml_round_trip(self, tmp_path):
        settings = DifficultySettings(name="Yaml", grid_rows=4, grid_cols=5)
        path = tmp_path / "settings.yaml"
        settings.save_yaml(path)
        assert DifficultySettings.load_yaml(path) == settings

    def test_load_yaml_partial_file(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text("name: Partial\nsubtraction_enabled: true\n"
                        "weights:\n  addition: 60\n  subtraction: 40\n")
        settings = DifficultySettings.load_yaml(path)
        assert settings.subtraction_enabled
        assert settings.weights.subtraction == 40
        assert settings.grid_rows == 3

    def test_load_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DifficultySettings.load_yaml(tmp_path / "missing.yaml")

    def test_load_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            DifficultySettings.load_yaml(path)


class TestPuzzle:
    def test_shape(self, sample_puzzle):
        assert sample_puzzle.rows == 3
        assert sample_puzzle.cols == 4
        assert len(sample_puzzle.cells()) == 12
        assert sample_puzzle.solution.steps == 3

    def test_cell_at_out_of_bounds(self, sample_puzzle):
        assert sample_puzzle.cell_at(Coordinate(5, 5)) is None

    def test_connector_between(self, sample_puzzle):
        connector = sample_puzzle.connector_between(Coordinate(0, 1), Coordinate(0, 0))
        assert connector is not None
        assert connector.touches(Coordinate(0, 0))
        assert sample_puzzle.connector_between(Coordinate(0, 0), Coordinate(2, 2)) is None

    def test_dict_round_trip(self, sample_puzzle):
        restored = Puzzle.from_dict(sample_puzzle.to_dict())
        assert restored.to_dict() == sample_puzzle.to_dict()
        assert restored.solution.path == sample_puzzle.solution.path

    def test_save_load(self, sample_puzzle, tmp_path):
        path = tmp_path / "puzzle.json"
        sample_puzzle.save(path)
        data = json.loads(path.read_text(encoding='utf-8'))
        assert data['id'] == "sample"
        assert Puzzle.load(path).to_dict() == sample_puzzle.to_dict()

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Puzzle.load(tmp_path / "nope.json")

    def test_from_dict_malformed(self):
        with pytest.raises(ValueError):
            Puzzle.from_dict({'grid': []})

    def test_str_marks_finish(self, sample_puzzle):
        assert "FINISH" in str(sample_puzzle)
