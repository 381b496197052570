"""Simulation configuration and automaton construction."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional
import logging

import numpy as np

from .automaton import CellularAutomaton
from .engine import BACKENDS, GenerationCallback
from .grid import Grid
from .patterns import PatternLibrary
from .rules import NeighborhoodMode, Rule

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""

    width: int = 100
    height: int = 100
    rule: str = "2/3/3"
    neighborhood: str = "moore"
    max_generations: int = 1000
    population_rate: float = 0.0
    pattern: Optional[str] = None
    pattern_x: Optional[int] = None
    pattern_y: Optional[int] = None
    seed: Optional[int] = None
    backend: str = "torch"
    workers: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        """Create a config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def validate(self) -> None:
        """Check that the configuration describes a runnable simulation.

        Raises:
            ValueError: On the first invalid setting found
        """
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        Rule.parse(self.rule)
        NeighborhoodMode.parse(self.neighborhood)
        if self.max_generations < 0:
            raise ValueError(f"max_generations must be non-negative, got {self.max_generations}")
        if not 0.0 <= self.population_rate <= 1.0:
            raise ValueError(f"population_rate must be between 0.0 and 1.0, got {self.population_rate}")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{self.backend}'. Available: {', '.join(BACKENDS)}")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")


def build_automaton(config: SimulationConfig, library: Optional[PatternLibrary] = None) -> CellularAutomaton:
    """Create an automaton from a configuration.

    A named pattern is placed at (pattern_x, pattern_y), or centered when no
    offset is given. Otherwise cells are alive with probability
    ``population_rate``; a rate of 0 leaves the grid all dead.

    Args:
        config: Simulation settings
        library: Pattern source (built-in patterns by default)

    Raises:
        ValueError: If the configuration is invalid
    """
    config.validate()
    library = library or PatternLibrary()
    grid = Grid(config.width, config.height)

    if config.pattern is not None:
        pattern = library.get_pattern(config.pattern)
        if pattern is None:
            raise ValueError(f"Unknown pattern '{config.pattern}'")
        pattern_width, pattern_height = pattern.get_size()
        offset_x = config.pattern_x if config.pattern_x is not None else (config.width - pattern_width) // 2
        offset_y = config.pattern_y if config.pattern_y is not None else (config.height - pattern_height) // 2
        logger.debug("Placing pattern '%s' at (%d, %d)", pattern.name, offset_x, offset_y)
        pattern.apply_to_grid(grid, offset_x, offset_y)
    elif config.population_rate > 0:
        rng = np.random.default_rng(config.seed)
        grid.replace_all(rng.random((config.height, config.width)) < config.population_rate)

    return CellularAutomaton(
        grid,
        rule=Rule.parse(config.rule),
        mode=NeighborhoodMode.parse(config.neighborhood),
        backend=config.backend,
        workers=config.workers,
    )


def run_simulation(config: SimulationConfig, on_generation: Optional[GenerationCallback] = None) -> CellularAutomaton:
    """Build an automaton and run it for ``config.max_generations`` steps.

    Returns:
        The automaton in its final state
    """
    automaton = build_automaton(config)
    stepped = automaton.run(config.max_generations, on_generation)
    logger.debug("Simulation finished after %d generations", stepped)
    return automaton
