"""Tests for the Grid class."""

import numpy as np
import pytest

from lifelike.core.errors import InvalidDimensions, OutOfBounds, SizeMismatch
from lifelike.core.grid import CellState, Grid, GridView


class TestCellState:
    """Test cases for CellState coercion."""

    def test_coerce_accepts_common_forms(self):
        assert CellState.coerce(True) is CellState.ALIVE
        assert CellState.coerce(0) is CellState.DEAD
        assert CellState.coerce("1") is CellState.ALIVE
        assert CellState.coerce(" Dead ") is CellState.DEAD
        assert CellState.coerce(CellState.ALIVE) is CellState.ALIVE

    def test_coerce_rejects_unknown_values(self):
        with pytest.raises(ValueError):
            CellState.coerce(2)
        with pytest.raises(ValueError):
            CellState.coerce("x")
        with pytest.raises(ValueError):
            CellState.coerce(None)


class TestGrid:
    """Test cases for the Grid class."""

    def test_initialization(self):
        """Test grid initialization."""
        grid = Grid(10, 20)
        assert grid.width == 10
        assert grid.height == 20
        assert grid.shape == (10, 20)
        assert grid.size == 200
        assert grid.population == 0
        assert grid.cells.shape == (20, 10)

    def test_initial_states_row_major(self):
        """Initial states are laid out with index y * width + x."""
        states = [0, 1, 0, 0, 0, 1]
        grid = Grid(3, 2, states)
        assert grid.get(1, 0) is CellState.ALIVE
        assert grid.get(2, 1) is CellState.ALIVE
        assert grid.get(0, 1) is CellState.DEAD
        assert grid.states() == [CellState(s) for s in states]

    def test_initial_states_from_string_tags(self):
        grid = Grid(2, 2, ["0", "1", "1", "0"])
        assert grid.population == 2
        assert grid.get(1, 0) is CellState.ALIVE

    def test_initial_states_from_2d_array(self):
        data = np.array([[1, 0, 0], [0, 0, 1]], dtype=bool)
        grid = Grid(3, 2, data)
        assert grid.get(0, 0) is CellState.ALIVE
        assert grid.get(2, 1) is CellState.ALIVE
        assert grid.population == 2

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (0, 0), (-1, 3), (True, 3)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(InvalidDimensions):
            Grid(width, height)

    def test_invalid_dimensions_is_value_error(self):
        with pytest.raises(ValueError):
            Grid(0, 1)

    def test_initial_size_mismatch(self):
        with pytest.raises(SizeMismatch):
            Grid(3, 3, [0] * 8)
        with pytest.raises(SizeMismatch):
            Grid(3, 2, np.zeros((3, 2)))

    def test_ragged_states_are_size_mismatch(self):
        with pytest.raises(SizeMismatch):
            Grid(2, 2, [[0, 1], [0]])

        grid = Grid(2, 2, [1, 0, 0, 1])
        with pytest.raises(SizeMismatch):
            grid.replace_all([[1, 1], [1]])
        assert grid.population == 2

    def test_get_out_of_bounds(self):
        """Accessor never wraps coordinates."""
        grid = Grid(4, 3)

        with pytest.raises(OutOfBounds):
            grid.get(4, 0)
        with pytest.raises(OutOfBounds):
            grid.get(0, 3)
        with pytest.raises(OutOfBounds):
            grid.get(-1, 0)
        with pytest.raises(IndexError):
            grid.get(0, -1)

    def test_index_and_coords(self):
        grid = Grid(5, 3)
        assert grid.index(0, 0) == 0
        assert grid.index(4, 0) == 4
        assert grid.index(2, 2) == 12
        assert grid.coords(12) == (2, 2)
        assert all(grid.coords(grid.index(x, y)) == (x, y) for x in range(5) for y in range(3))

        with pytest.raises(OutOfBounds):
            grid.index(5, 0)
        with pytest.raises(OutOfBounds):
            grid.coords(15)

    def test_periodic_neighbor_coords_single_cell(self):
        """A 1x1 grid wraps onto itself on both axes."""
        grid = Grid(1, 1)
        assert grid.periodic_neighbor_coords(0, 0) == ((0, 0), (0, 0))

    def test_periodic_neighbor_coords_left_edge(self):
        grid = Grid(5, 3)
        for y in range(3):
            before, after = grid.periodic_neighbor_coords(0, y)
            assert before[0] == 4
            assert after[0] == 1

    def test_periodic_neighbor_coords_corners_and_interior(self):
        grid = Grid(5, 3)
        assert grid.periodic_neighbor_coords(0, 0) == ((4, 2), (1, 1))
        assert grid.periodic_neighbor_coords(4, 2) == ((3, 1), (0, 0))
        assert grid.periodic_neighbor_coords(2, 1) == ((1, 0), (3, 2))

    def test_periodic_neighbor_coords_single_axis(self):
        """Each axis self-wraps independently when its size is 1."""
        column = Grid(1, 4)
        assert column.periodic_neighbor_coords(0, 0) == ((0, 3), (0, 1))
        assert column.periodic_neighbor_coords(0, 3) == ((0, 2), (0, 0))

        row = Grid(4, 1)
        assert row.periodic_neighbor_coords(3, 0) == ((2, 0), (0, 0))

    def test_periodic_neighbor_coords_out_of_bounds(self):
        grid = Grid(3, 3)
        with pytest.raises(OutOfBounds):
            grid.periodic_neighbor_coords(3, 0)

    def test_replace_all(self):
        grid = Grid(2, 2)
        grid.replace_all([CellState.ALIVE, CellState.DEAD, CellState.DEAD, CellState.ALIVE])
        assert grid.population == 2
        assert grid.get(0, 0) is CellState.ALIVE
        assert grid.get(1, 1) is CellState.ALIVE

    def test_replace_all_size_mismatch_leaves_grid_intact(self):
        grid = Grid(3, 2, [1, 0, 0, 0, 0, 1])
        before = grid.to_array()

        with pytest.raises(SizeMismatch):
            grid.replace_all([1] * 5)
        with pytest.raises(SizeMismatch):
            grid.replace_all([1] * 7)

        assert grid.cells.size == grid.width * grid.height
        assert np.array_equal(grid.cells, before)

    def test_replace_all_invalid_value_leaves_grid_intact(self):
        grid = Grid(2, 2, [1, 0, 0, 1])

        with pytest.raises(ValueError):
            grid.replace_all([1, 2, 0, 0])

        assert grid.states() == [CellState.ALIVE, CellState.DEAD, CellState.DEAD, CellState.ALIVE]

    def test_cells_view_is_read_only(self):
        grid = Grid(3, 3)
        with pytest.raises(ValueError):
            grid.cells[0, 0] = 1
        assert grid.population == 0

    def test_to_array_is_a_copy(self):
        grid = Grid(3, 3)
        arr = grid.to_array()
        arr[1, 1] = 1
        assert grid.population == 0

    def test_copy_and_equality(self):
        grid = Grid(3, 3, [0, 1, 0] * 3)
        clone = grid.copy()
        assert clone == grid
        assert clone is not grid

        clone.replace_all([0] * 9)
        assert clone != grid
        assert grid.population == 3

    def test_bounding_box(self):
        grid = Grid(6, 6)
        assert grid.get_bounding_box() is None

        states = [0] * 36
        states[grid.index(1, 2)] = 1
        states[grid.index(4, 3)] = 1
        grid.replace_all(states)
        assert grid.get_bounding_box() == (1, 2, 4, 3)

    def test_str_representation(self):
        grid = Grid(3, 2, [1, 0, 0, 0, 1, 1])
        assert str(grid) == "*..\n.**"

    def test_view_tracks_grid(self):
        grid = Grid(2, 2)
        view = grid.view()
        assert isinstance(view, GridView)
        assert view.population == 0

        grid.replace_all([1, 1, 0, 0])
        assert view.population == 2
        assert view.get(1, 0) is CellState.ALIVE
        assert view.shape == (2, 2)
        assert not hasattr(view, "replace_all")

    def test_view_members_are_documented(self):
        for name in ("width", "height", "shape", "cells", "population", "get", "states", "to_array"):
            assert getattr(GridView, name).__doc__
