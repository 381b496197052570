"""Toroidal grid data structure for life-like cellular automata."""

from enum import IntEnum
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np

from .errors import InvalidDimensions, OutOfBounds, SizeMismatch

Coord = Tuple[int, int]


class CellState(IntEnum):
    """Binary cell state."""

    DEAD = 0
    ALIVE = 1

    @classmethod
    def coerce(cls, value: Any) -> "CellState":
        """Convert a bool, int, CellState or string tag to a CellState.

        Args:
            value: ``True``/``False``, ``0``/``1``, ``"0"``/``"1"`` or
                ``"dead"``/``"alive"``

        Returns:
            The matching CellState

        Raises:
            ValueError: If the value does not name a cell state
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (str, np.str_)):
            tag = value.strip().lower()
            if tag in ("0", "dead"):
                return cls.DEAD
            if tag in ("1", "alive"):
                return cls.ALIVE
            raise ValueError(f"Unknown cell state tag: {value!r}")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid cell state: {value!r}") from None


def _as_buffer(states: Iterable[Any], width: int, height: int) -> np.ndarray:
    """Convert caller-supplied states into a fresh (height, width) int8 array."""
    if not isinstance(states, np.ndarray):
        states = list(states)
    try:
        arr = np.asarray(states)
    except ValueError as exc:
        raise SizeMismatch(f"Cell states do not form a regular sequence: {exc}") from None

    if arr.ndim == 2:
        if arr.shape != (height, width):
            raise SizeMismatch(f"State array shape {arr.shape} doesn't match grid {(height, width)}")
    elif arr.ndim != 1:
        raise SizeMismatch(f"Expected a flat sequence of cell states, got {arr.ndim} dimensions")

    if arr.size != width * height:
        raise SizeMismatch(f"Got {arr.size} cell states for a {width}x{height} grid ({width * height} cells)")

    if arr.dtype.kind in ("U", "S", "O"):
        buffer = np.fromiter((CellState.coerce(s) for s in arr.ravel()), dtype=np.int8, count=arr.size)
    elif arr.dtype.kind in ("b", "i", "u"):
        if arr.size and (arr.min() < 0 or arr.max() > 1):
            raise ValueError("Cell states must be 0 (dead) or 1 (alive)")
        buffer = arr.astype(np.int8).ravel()
    else:
        raise ValueError(f"Unsupported cell state dtype: {arr.dtype}")

    return buffer.reshape(height, width).copy()


class Grid:
    """A fixed-size 2D toroidal grid of binary cells.

    Cells are laid out row-major: the flat index of ``(x, y)`` is
    ``y * width + x``. The buffer is a numpy array of shape
    ``(height, width)`` and is only ever replaced as a whole.
    """

    def __init__(self, width: int, height: int, initial: Optional[Iterable[Any]] = None) -> None:
        """Initialize a new grid.

        Args:
            width: Number of columns (at least 1)
            height: Number of rows (at least 1)
            initial: Row-major cell states; all dead when omitted

        Raises:
            InvalidDimensions: If width or height is not a positive integer
            SizeMismatch: If initial does not hold width * height states
        """
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
                raise InvalidDimensions(f"Grid {name} must be a positive integer, got {value!r}")

        self.width = int(width)
        self.height = int(height)

        if initial is None:
            self._cells = np.zeros((self.height, self.width), dtype=np.int8)
        else:
            self._cells = _as_buffer(initial, self.width, self.height)

    @property
    def shape(self) -> Coord:
        """Get grid dimensions as (width, height)."""
        return (self.width, self.height)

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the current buffer, shape (height, width)."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.count_nonzero(self._cells))

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise OutOfBounds(f"Coordinates ({x}, {y}) out of bounds for {self.width}x{self.height} grid")

    def index(self, x: int, y: int) -> int:
        """Flat row-major index of a cell.

        Raises:
            OutOfBounds: If the coordinates are off the grid
        """
        self._check_bounds(x, y)
        return y * self.width + x

    def coords(self, index: int) -> Coord:
        """Inverse of :meth:`index`.

        Raises:
            OutOfBounds: If the index is not in [0, width * height)
        """
        if not 0 <= index < self.size:
            raise OutOfBounds(f"Index {index} out of bounds for {self.size} cells")
        return (index % self.width, index // self.width)

    def get(self, x: int, y: int) -> CellState:
        """Get the state of a cell.

        Coordinates are never wrapped here.

        Args:
            x: Column coordinate
            y: Row coordinate

        Returns:
            CellState of the cell

        Raises:
            OutOfBounds: If x is not in [0, width) or y is not in [0, height)
        """
        self._check_bounds(x, y)
        return CellState(int(self._cells[y, x]))

    def periodic_neighbor_coords(self, x: int, y: int) -> Tuple[Coord, Coord]:
        """Wrapped predecessor and successor coordinates along each axis.

        Each axis wraps independently: at 0 the predecessor is ``size - 1``,
        at ``size - 1`` the successor is 0. An axis of size 1 wraps onto
        itself, so both are 0.

        Args:
            x: Column coordinate
            y: Row coordinate

        Returns:
            ``((x_before, y_before), (x_after, y_after))``

        Raises:
            OutOfBounds: If the coordinates are off the grid
        """
        self._check_bounds(x, y)
        x_before = self.width - 1 if x == 0 else x - 1
        x_after = 0 if x == self.width - 1 else x + 1
        y_before = self.height - 1 if y == 0 else y - 1
        y_after = 0 if y == self.height - 1 else y + 1
        return (x_before, y_before), (x_after, y_after)

    def replace_all(self, new_states: Iterable[Any]) -> None:
        """Swap in a whole new generation.

        The new buffer is fully validated before it replaces the old one, so a
        failed call leaves the grid unchanged.

        Args:
            new_states: Row-major cell states, width * height of them

        Raises:
            SizeMismatch: If the number of states differs from width * height
            ValueError: If a value is not a valid cell state
        """
        buffer = _as_buffer(new_states, self.width, self.height)
        self._cells = buffer

    def states(self) -> List[CellState]:
        """Row-major list of all cell states."""
        return [CellState(int(v)) for v in self._cells.ravel()]

    def to_array(self) -> np.ndarray:
        """Writable copy of the buffer, shape (height, width)."""
        return self._cells.copy()

    def copy(self) -> "Grid":
        """Create an independent grid with the same states."""
        return Grid(self.width, self.height, self._cells)

    def view(self) -> "GridView":
        """Read-only view of this grid."""
        return GridView(self)

    def get_bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Get bounding box of living cells.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y) or None if no living cells
        """
        ys, xs = np.nonzero(self._cells)
        if len(xs) == 0:
            return None
        return (int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max()))

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self._cells, other._cells)

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, population={self.population})"

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        return "\n".join("".join("*" if v else "." for v in row) for row in self._cells)


class GridView:
    """Read-only window onto a Grid, handed to generation callbacks."""

    def __init__(self, grid: Grid) -> None:
        self._grid = grid

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._grid.width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._grid.height

    @property
    def shape(self) -> Coord:
        """Grid dimensions as (width, height)."""
        return self._grid.shape

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the current buffer, shape (height, width)."""
        return self._grid.cells

    @property
    def population(self) -> int:
        """Number of living cells."""
        return self._grid.population

    def get(self, x: int, y: int) -> CellState:
        """State of a cell; raises OutOfBounds off the grid."""
        return self._grid.get(x, y)

    def states(self) -> List[CellState]:
        """Row-major list of all cell states."""
        return self._grid.states()

    def to_array(self) -> np.ndarray:
        """Writable copy of the buffer, shape (height, width)."""
        return self._grid.to_array()

    def __repr__(self) -> str:
        return f"GridView({self._grid!r})"

    def __str__(self) -> str:
        return str(self._grid)
