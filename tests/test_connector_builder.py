from collections import Counter, defaultdict

import pytest

from circuit_challenge.core.grid import Coordinate, ConnectorType, DiagonalDirection, block_key
from circuit_challenge.generators.connector_builder import (
    build_diagonal_grid, build_connector_graph, path_connector_indices,
    ConnectorValueAssigner, assign_connector_values, connector_between, connectors_for
)
from circuit_challenge.generators.path_generator import PathGenerator


def _values_by_cell(connectors):
    values = defaultdict(list)
    for connector in connectors:
        values[connector.cell_a].append(connector.value)
        values[connector.cell_b].append(connector.value)
    return values


class TestDiagonalGrid:
    def test_dimensions(self, rng):
        grid = build_diagonal_grid(3, 4, {}, rng)
        assert len(grid) == 2
        assert all(len(row) == 3 for row in grid)

    def test_commitments_are_kept(self, rng):
        commitments = {"0,1": DiagonalDirection.DL, "1,2": DiagonalDirection.DR}
        for _ in range(10):
            grid = build_diagonal_grid(3, 4, commitments, rng)
            assert grid[0][1] == DiagonalDirection.DL
            assert grid[1][2] == DiagonalDirection.DR


class TestConnectorGraph:
    def test_counts(self, rng):
        connectors = build_connector_graph(3, 4, build_diagonal_grid(3, 4, {}, rng))
        counts = Counter(c.type for c in connectors)
        assert counts[ConnectorType.HORIZONTAL] == 9
        assert counts[ConnectorType.VERTICAL] == 8
        assert counts[ConnectorType.DIAGONAL] == 6

    def test_one_diagonal_per_block(self, rng):
        connectors = build_connector_graph(5, 6, build_diagonal_grid(5, 6, {}, rng))
        blocks = Counter(block_key(c.cell_a, c.cell_b) for c in connectors
                         if c.type == ConnectorType.DIAGONAL)
        assert len(blocks) == 4 * 5
        assert set(blocks.values()) == {1}

    def test_diagonal_endpoints(self):
        grid = [[DiagonalDirection.DR, DiagonalDirection.DL]]
        diagonals = [c for c in build_connector_graph(2, 3, grid) if c.type == ConnectorType.DIAGONAL]
        assert diagonals[0].connects(Coordinate(0, 0), Coordinate(1, 1))
        assert diagonals[1].connects(Coordinate(0, 2), Coordinate(1, 1))
        assert diagonals[1].direction == DiagonalDirection.DL

    def test_path_connector_indices(self):
        grid = [[DiagonalDirection.DR] * 3 for _ in range(2)]
        connectors = build_connector_graph(3, 4, grid)
        path = [Coordinate(0, 0), Coordinate(0, 1), Coordinate(1, 2)]
        indices = path_connector_indices(connectors, path)
        assert len(indices) == 2
        assert {connectors[i].type for i in indices} == {ConnectorType.HORIZONTAL, ConnectorType.DIAGONAL}


class TestValueAssignment:
    def _unvalued(self, rows, cols, rng):
        return build_connector_graph(rows, cols, build_diagonal_grid(rows, cols, {}, rng))

    def test_values_unique_per_cell(self, rng):
        for _ in range(5):
            result = assign_connector_values(self._unvalued(4, 5, rng), 1, 40, rng=rng)
            assert result.success
            for values in _values_by_cell(result.connectors).values():
                assert len(values) == len(set(values))
            assert all(1 <= c.value <= 40 for c in result.connectors)

    def test_preserves_geometry(self, rng):
        unvalued = self._unvalued(3, 4, rng)
        result = assign_connector_values(unvalued, 1, 30, rng=rng)
        assert [(c.type, c.cell_a, c.cell_b) for c in result.connectors] == \
               [(u.type, u.cell_a, u.cell_b) for u in unvalued]

    def test_division_connectors_are_small(self, rng):
        path_result = PathGenerator(rng).generate_path(5, 6, 15, 25)
        grid = build_diagonal_grid(5, 6, path_result.diagonal_commitments, rng)
        unvalued = build_connector_graph(5, 6, grid)

        result = ConnectorValueAssigner(rng).assign(
            unvalued, 1, 60, division_enabled=True,
            solution_path=path_result.path, mult_div_range=6
        )
        assert result.success
        on_path = path_connector_indices(unvalued, path_result.path)
        expected = max(1, int(len(on_path) * 0.25))
        assert len(result.division_connector_indices) == expected
        for index in result.division_connector_indices:
            assert index in on_path
            assert result.connectors[index].value <= 6

    def test_no_division_without_flag(self, rng):
        result = assign_connector_values(self._unvalued(3, 4, rng), 1, 30, rng=rng)
        assert result.division_connector_indices == []

    def test_starved_range_fails(self, rng):
        result = assign_connector_values(self._unvalued(2, 2, rng), 1, 1, rng=rng)
        assert not result.success
        assert "No available values" in result.error
        assert result.connectors == []


class TestLookups:
    def test_connector_between_and_for(self, sample_puzzle):
        index = connector_between(Coordinate(1, 2), Coordinate(0, 1), sample_puzzle.connectors)
        assert index is not None
        assert sample_puzzle.connectors[index].type == ConnectorType.DIAGONAL
        assert connector_between(Coordinate(0, 0), Coordinate(2, 3), sample_puzzle.connectors) is None
        assert len(connectors_for(Coordinate(0, 0), sample_puzzle.connectors)) == 3

    @pytest.mark.parametrize("cell,expected", [((1, 1), 6), ((2, 3), 3)])
    def test_degree(self, sample_puzzle, cell, expected):
        assert len(connectors_for(Coordinate(*cell), sample_puzzle.connectors)) == expected


class TestRepair:
    def test_tight_range_is_repaired(self):
        # Six values for a 3x4 grid whose busiest cell touches six connectors
        grid = [[DiagonalDirection.DR, DiagonalDirection.DR, DiagonalDirection.DR],
                [DiagonalDirection.DL, DiagonalDirection.DL, DiagonalDirection.DL]]
        unvalued = build_connector_graph(3, 4, grid)
        assert max(Counter(
            cell for c in unvalued for cell in (c.cell_a, c.cell_b)
        ).values()) <= 6

        for seed in range(10):
            result = ConnectorValueAssigner(seed).assign(unvalued, 5, 10)
            assert result.success, result.error
            for values in _values_by_cell(result.connectors).values():
                assert len(values) == len(set(values))

    def test_overloaded_cell_fails_fast(self):
        # (1,1) touches all four diagonals plus four straight connectors
        grid = [[DiagonalDirection.DR, DiagonalDirection.DL, DiagonalDirection.DR],
                [DiagonalDirection.DL, DiagonalDirection.DR, DiagonalDirection.DR]]
        unvalued = build_connector_graph(3, 4, grid)
        result = ConnectorValueAssigner(0).assign(unvalued, 5, 10)
        assert not result.success
