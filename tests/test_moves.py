from circuit_challenge.core.grid import Coordinate
from circuit_challenge.core.moves import check_move, follow_answers, is_finish_cell, adjacent_cells

from conftest import SAMPLE_PATH


class TestCheckMove:
    def test_solution_moves_are_correct(self, sample_puzzle):
        for current, nxt in zip(SAMPLE_PATH, SAMPLE_PATH[1:]):
            result = check_move(sample_puzzle, current, nxt)
            assert result.correct
            assert result.connector.value == sample_puzzle.cell_at(current).answer

    def test_wrong_move(self, sample_puzzle):
        result = check_move(sample_puzzle, Coordinate(0, 0), Coordinate(1, 0))
        assert not result.correct
        assert result.connector is not None

    def test_non_adjacent_move(self, sample_puzzle):
        result = check_move(sample_puzzle, Coordinate(0, 0), Coordinate(2, 2))
        assert not result.correct
        assert result.connector is None

    def test_missing_diagonal(self, sample_puzzle):
        # Block 0,0 only carries the DR diagonal
        assert check_move(sample_puzzle, Coordinate(0, 1), Coordinate(1, 0)).connector is None

    def test_does_not_modify_puzzle(self, sample_puzzle):
        before = sample_puzzle.to_dict()
        check_move(sample_puzzle, Coordinate(0, 0), Coordinate(0, 1))
        assert sample_puzzle.to_dict() == before


class TestHelpers:
    def test_is_finish_cell(self, sample_puzzle):
        assert is_finish_cell(sample_puzzle, Coordinate(2, 3))
        assert not is_finish_cell(sample_puzzle, Coordinate(0, 0))

    def test_adjacent_cells(self, sample_puzzle):
        assert len(adjacent_cells(sample_puzzle, Coordinate(1, 1))) == 8

    def test_follow_answers_reaches_finish(self, sample_puzzle):
        assert follow_answers(sample_puzzle) == SAMPLE_PATH

    def test_follow_answers_stops_at_dead_end(self, sample_puzzle):
        sample_puzzle.grid[0][1].answer = 999
        assert follow_answers(sample_puzzle) == SAMPLE_PATH[:2]
