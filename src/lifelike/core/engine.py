"""Synchronous generation stepping for life-like cellular automata."""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional
import logging

import numpy as np
import torch
import torch.nn.functional as F

from .grid import CellState, Coord, Grid, GridView
from .rules import NeighborhoodMode, Rule

logger = logging.getLogger(__name__)

BACKENDS = ("torch", "python")

GenerationCallback = Callable[[int, GridView], Any]

# Neighbor counting kernels, one per neighborhood shape
_KERNELS = {
    NeighborhoodMode.MOORE: [[1, 1, 1], [1, 0, 1], [1, 1, 1]],
    NeighborhoodMode.VON_NEUMANN: [[0, 1, 0], [1, 0, 1], [0, 1, 0]],
}


def neighbor_coords(grid: Grid, x: int, y: int, mode: NeighborhoodMode) -> List[Coord]:
    """Coordinates of the neighbors of a cell under toroidal wraparound.

    The order is top, bottom, left, right, followed in Moore mode by
    top-left, top-right, bottom-left, bottom-right. "Top" is the successor
    row and "bottom" the predecessor row.

    Args:
        grid: Grid supplying the dimensions
        x: Column coordinate
        y: Row coordinate
        mode: Neighborhood shape

    Returns:
        List of 4 or 8 (x, y) tuples; on axes of size 1 or 2 the same cell
        can appear more than once
    """
    mode = NeighborhoodMode.parse(mode)
    (x_before, y_before), (x_after, y_after) = grid.periodic_neighbor_coords(x, y)
    coords = [(x, y_after), (x, y_before), (x_before, y), (x_after, y)]
    if mode is NeighborhoodMode.MOORE:
        coords += [(x_before, y_after), (x_after, y_after), (x_before, y_before), (x_after, y_before)]
    return coords


def count_live_neighbors(grid: Grid, x: int, y: int, mode: NeighborhoodMode) -> int:
    """Count live neighbors of a single cell."""
    cells = grid.cells
    return sum(int(cells[ny, nx]) for nx, ny in neighbor_coords(grid, x, y, mode))


def count_all_neighbors(cells: np.ndarray, mode: NeighborhoodMode) -> np.ndarray:
    """Count neighbors for all cells using a circularly padded convolution.

    Args:
        cells: Buffer of shape (height, width)
        mode: Neighborhood shape

    Returns:
        Array of shape (height, width) with live neighbor counts
    """
    kernel = torch.tensor(_KERNELS[mode], dtype=torch.float32).unsqueeze(0).unsqueeze(0)
    state = torch.from_numpy(cells.astype(np.float32)).unsqueeze(0).unsqueeze(0)

    # Circular padding gives the toroidal topology, including size-1 axes
    padded = F.pad(state, (1, 1, 1, 1), mode="circular")
    neighbors = F.conv2d(padded, kernel)

    return neighbors[0, 0].round().to(torch.int16).numpy()


def _apply_rule(cells: np.ndarray, counts: np.ndarray, rule: Rule) -> np.ndarray:
    alive = cells > 0
    survive = alive & (counts >= rule.death) & (counts <= rule.survival)
    born = ~alive & (counts == rule.reproduction)
    return (survive | born).astype(np.int8)


def _step_torch(grid: Grid, rule: Rule, mode: NeighborhoodMode) -> np.ndarray:
    cells = grid.cells
    return _apply_rule(cells, count_all_neighbors(cells, mode), rule)


def _step_python(grid: Grid, rule: Rule, mode: NeighborhoodMode, workers: Optional[int]) -> np.ndarray:
    # Every row reads the same pre-step buffer, so rows are independent
    cells = grid.cells

    def evaluate_row(y: int) -> np.ndarray:
        row = np.empty(grid.width, dtype=np.int8)
        for x in range(grid.width):
            live = sum(int(cells[ny, nx]) for nx, ny in neighbor_coords(grid, x, y, mode))
            row[x] = rule.next_state(CellState(int(cells[y, x])), live)
        return row

    if workers is not None and workers > 1 and grid.height > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            rows = list(pool.map(evaluate_row, range(grid.height)))
    else:
        rows = [evaluate_row(y) for y in range(grid.height)]

    return np.stack(rows)


def next_generation(
    grid: Grid,
    rule: Rule,
    mode: NeighborhoodMode,
    backend: str = "torch",
    workers: Optional[int] = None,
) -> np.ndarray:
    """Compute the next generation as a (height, width) int8 array.

    Same semantics as :func:`step`, without converting to CellState.
    """
    rule = Rule.parse(rule)
    mode = NeighborhoodMode.parse(mode)
    if backend == "torch":
        return _step_torch(grid, rule, mode)
    if backend == "python":
        return _step_python(grid, rule, mode, workers)
    raise ValueError(f"Unknown backend '{backend}'. Available: {', '.join(BACKENDS)}")


def step(
    grid: Grid,
    rule: Rule,
    mode: NeighborhoodMode,
    backend: str = "torch",
    workers: Optional[int] = None,
) -> List[CellState]:
    """Compute one synchronous generation without touching the grid.

    Every cell is evaluated against the untouched current buffer; the result
    is meant to be handed to :meth:`Grid.replace_all`.

    Args:
        grid: Current generation
        rule: DSR thresholds, or ``"D/S/R"`` text
        mode: Moore or von Neumann neighborhood
        backend: ``"torch"`` for whole-grid convolution, ``"python"`` for
            per-cell neighbor enumeration
        workers: Thread count for the python backend (rows are split
            across threads when greater than 1)

    Returns:
        Row-major list of width * height next states

    Raises:
        ValueError: If the backend, rule or mode is invalid
    """
    new_cells = next_generation(grid, rule, mode, backend=backend, workers=workers)
    return [CellState(int(v)) for v in new_cells.ravel()]


def run(
    grid: Grid,
    rule: Rule,
    mode: NeighborhoodMode,
    generations: int,
    on_generation: Optional[GenerationCallback] = None,
    backend: str = "torch",
    workers: Optional[int] = None,
) -> int:
    """Advance a grid through successive generations.

    ``on_generation(index, view)`` is called once for the initial state
    (index 0) and once after every step, so a full run reports
    ``generations + 1`` states in increasing order. If the callback returns
    a truthy value the run stops at that generation boundary.

    Args:
        grid: Grid to advance in place
        rule: DSR thresholds
        mode: Moore or von Neumann neighborhood
        generations: Number of steps to perform
        on_generation: Optional observer of each generation
        backend: Stepping backend, see :func:`step`
        workers: Thread count for the python backend

    Returns:
        Number of generations actually stepped

    Raises:
        ValueError: If generations is negative or the backend is unknown
    """
    if generations < 0:
        raise ValueError(f"generations must be non-negative, got {generations}")
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}'. Available: {', '.join(BACKENDS)}")

    rule = Rule.parse(rule)
    mode = NeighborhoodMode.parse(mode)
    view = grid.view()
    logger.debug("Running %d generations of %s (%s) on %dx%d grid", generations, rule, mode.value, grid.width, grid.height)

    if on_generation is not None and on_generation(0, view):
        logger.debug("Run stopped by callback at generation 0")
        return 0

    for generation in range(1, generations + 1):
        grid.replace_all(next_generation(grid, rule, mode, backend=backend, workers=workers))
        if on_generation is not None and on_generation(generation, view):
            logger.debug("Run stopped by callback at generation %d", generation)
            return generation

    return generations
