"""Life-like cellular automata on toroidal grids with configurable DSR rules."""

__version__ = "0.1.0"

from .core.errors import LifelikeError, InvalidDimensions, SizeMismatch, OutOfBounds
from .core.grid import CellState, Grid
from .core.rules import Rule, NeighborhoodMode, CONWAY
from .core.engine import step, run
from .core.automaton import CellularAutomaton
from .core.patterns import Pattern, PatternLibrary
from .core.config import SimulationConfig, build_automaton, run_simulation

__all__ = [
    "LifelikeError",
    "InvalidDimensions",
    "SizeMismatch",
    "OutOfBounds",
    "CellState",
    "Grid",
    "Rule",
    "NeighborhoodMode",
    "CONWAY",
    "step",
    "run",
    "CellularAutomaton",
    "Pattern",
    "PatternLibrary",
    "SimulationConfig",
    "build_automaton",
    "run_simulation",
]
