"""Core cellular automata logic."""

from .errors import LifelikeError, InvalidDimensions, SizeMismatch, OutOfBounds
from .grid import CellState, Grid, GridView
from .rules import Rule, NeighborhoodMode, CONWAY
from .engine import step, run, neighbor_coords, count_live_neighbors
from .automaton import CellularAutomaton
from .patterns import Pattern, PatternLibrary
from .config import SimulationConfig, build_automaton, run_simulation

__all__ = [
    "LifelikeError",
    "InvalidDimensions",
    "SizeMismatch",
    "OutOfBounds",
    "CellState",
    "Grid",
    "GridView",
    "Rule",
    "NeighborhoodMode",
    "CONWAY",
    "step",
    "run",
    "neighbor_coords",
    "count_live_neighbors",
    "CellularAutomaton",
    "Pattern",
    "PatternLibrary",
    "SimulationConfig",
    "build_automaton",
    "run_simulation",
]
