import pytest

from circuit_challenge.core.grid import (
    Coordinate, DiagonalDirection, START, get_adjacent, are_adjacent,
    manhattan_distance, is_diagonal_move, block_key, diagonal_direction, finish_of
)


class TestCoordinate:
    def test_key_round_trip(self):
        coord = Coordinate(2, 7)
        assert coord.key == "2,7"
        assert Coordinate.from_key("2,7") == coord

    @pytest.mark.parametrize("key", ["", "1", "1,2,3", "a,b"])
    def test_from_key_rejects_garbage(self, key):
        with pytest.raises(ValueError):
            Coordinate.from_key(key)

    def test_hashable_by_value(self):
        assert {Coordinate(1, 1), Coordinate(1, 1)} == {Coordinate(1, 1)}

    def test_start(self):
        assert START == Coordinate(0, 0)


class TestAdjacency:
    def test_corner_has_three_neighbours(self):
        assert set(get_adjacent(Coordinate(0, 0), 3, 4)) == {
            Coordinate(0, 1), Coordinate(1, 0), Coordinate(1, 1)
        }

    def test_interior_has_eight_neighbours(self):
        assert len(get_adjacent(Coordinate(1, 1), 3, 4)) == 8

    def test_are_adjacent(self):
        assert are_adjacent(Coordinate(0, 0), Coordinate(1, 1))
        assert not are_adjacent(Coordinate(0, 0), Coordinate(0, 0))
        assert not are_adjacent(Coordinate(0, 0), Coordinate(0, 2))

    def test_manhattan_distance(self):
        assert manhattan_distance(Coordinate(0, 0), Coordinate(2, 3)) == 5


class TestDiagonals:
    def test_is_diagonal_move(self):
        assert is_diagonal_move(Coordinate(1, 1), Coordinate(2, 0))
        assert not is_diagonal_move(Coordinate(1, 1), Coordinate(1, 2))

    def test_block_key_is_top_left(self):
        assert block_key(Coordinate(1, 2), Coordinate(0, 1)) == "0,1"
        assert block_key(Coordinate(0, 2), Coordinate(1, 1)) == "0,1"

    @pytest.mark.parametrize("src,dst,expected", [
        ((0, 0), (1, 1), DiagonalDirection.DR),
        ((1, 1), (0, 0), DiagonalDirection.DR),
        ((0, 1), (1, 0), DiagonalDirection.DL),
        ((1, 0), (0, 1), DiagonalDirection.DL),
    ])
    def test_diagonal_direction(self, src, dst, expected):
        assert diagonal_direction(Coordinate(*src), Coordinate(*dst)) == expected

    def test_finish(self):
        assert finish_of(3, 4) == Coordinate(2, 3)
