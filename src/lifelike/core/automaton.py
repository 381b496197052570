"""Stateful driver for a life-like cellular automaton."""

from typing import Any, Deque, Dict, Iterable, List, Optional, Tuple
from collections import deque
import logging

from .engine import BACKENDS, GenerationCallback, next_generation
from .grid import Grid
from .rules import CONWAY, NeighborhoodMode, Rule

logger = logging.getLogger(__name__)


class CellularAutomaton:
    """A grid together with the rule and neighborhood that evolve it.

    Tracks the generation count, recent population and previously seen
    states so that cycles (including still lifes) can be detected.
    """

    def __init__(
        self,
        grid: Grid,
        rule: Rule = CONWAY,
        mode: NeighborhoodMode = NeighborhoodMode.MOORE,
        backend: str = "torch",
        workers: Optional[int] = None,
        max_history: int = 1000,
    ) -> None:
        """Initialize the automaton.

        Args:
            grid: The cellular grid to simulate
            rule: DSR thresholds
            mode: Neighborhood shape, fixed for the lifetime of the automaton
            backend: Stepping backend (``"torch"`` or ``"python"``)
            workers: Thread count for the python backend
            max_history: Number of past states remembered for cycle detection
                (at least 1)
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{backend}'. Available: {', '.join(BACKENDS)}")
        if max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {max_history}")

        self.grid = grid
        self.rule = Rule.parse(rule)
        self.mode = NeighborhoodMode.parse(mode)
        self.backend = backend
        self.workers = workers
        self.max_history = max_history

        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[bytes] = deque(maxlen=max_history)
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._record_state()

    @classmethod
    def empty(
        cls,
        width: int = 100,
        height: int = 100,
        rule: Rule = CONWAY,
        moore: bool = True,
        **kwargs: Any,
    ) -> "CellularAutomaton":
        """Build an automaton on an all-dead grid.

        Args:
            width: Number of columns
            height: Number of rows
            rule: DSR thresholds
            moore: Use the Moore neighborhood (von Neumann otherwise)
        """
        mode = NeighborhoodMode.MOORE if moore else NeighborhoodMode.VON_NEUMANN
        return cls(Grid(width, height), rule=rule, mode=mode, **kwargs)

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.grid.population

    @property
    def population_history(self) -> List[int]:
        """Population of the most recent generations."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        return self._cycle_start_generation

    def step(self) -> None:
        """Advance the simulation by one generation."""
        new_cells = next_generation(self.grid, self.rule, self.mode, backend=self.backend, workers=self.workers)
        self.grid.replace_all(new_cells)
        self._generation += 1
        self._record_state()

    def _record_state(self) -> None:
        self._population_history.append(self.population)

        if self._cycle_detected:
            return

        state = self.grid.cells.tobytes()
        first_seen = self._seen_states.get(state)
        if first_seen is not None:
            self._cycle_detected = True
            self._cycle_length = self._generation - first_seen
            self._cycle_start_generation = first_seen
            logger.info(
                "Cycle of length %d detected at generation %d (first seen at %d)",
                self._cycle_length,
                self._generation,
                first_seen,
            )
            return

        # Forget the oldest state once the history window is full
        if len(self._state_history) == self._state_history.maxlen:
            del self._seen_states[self._state_history[0]]

        self._seen_states[state] = self._generation
        self._state_history.append(state)

    def run(self, generations: int, on_generation: Optional[GenerationCallback] = None) -> int:
        """Step repeatedly, reporting each generation to a callback.

        The callback receives the absolute generation number and a read-only
        view of the grid, first for the current state and then after each
        step. A truthy return value stops the run.

        Returns:
            Number of generations stepped
        """
        if generations < 0:
            raise ValueError(f"generations must be non-negative, got {generations}")

        view = self.grid.view()
        if on_generation is not None and on_generation(self._generation, view):
            return 0

        for stepped in range(1, generations + 1):
            self.step()
            if on_generation is not None and on_generation(self._generation, view):
                return stepped

        return generations

    def run_until_stable(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Run simulation until it cycles, dies out, or hits the limit.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of
            'cycle', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            self.step()

            if self._cycle_detected:
                return self._generation, "cycle"

            if self.population == 0:
                logger.info("Population extinct at generation %d", self._generation)
                return self._generation, "extinction"

        return self._generation, "max_generations"

    def reset(self, initial: Optional[Iterable[Any]] = None) -> None:
        """Reset the simulation.

        Args:
            initial: New row-major cell states; all dead when omitted
        """
        if initial is None:
            initial = [0] * self.grid.size
        self.grid.replace_all(initial)

        self._generation = 0
        self._population_history.clear()
        self._state_history.clear()
        self._seen_states.clear()
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._record_state()

    def get_statistics(self) -> Dict[str, Any]:
        """Get simulation statistics.

        Returns:
            Dictionary with various statistics
        """
        bbox = self.grid.get_bounding_box()

        stats: Dict[str, Any] = {
            "generation": self._generation,
            "population": self.population,
            "population_density": self.population / self.grid.size,
            "rule": str(self.rule),
            "neighborhood": self.mode.value,
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": self.grid.shape,
        }

        if bbox:
            stats["bounding_box"] = bbox
            stats["bounding_box_size"] = (bbox[2] - bbox[0] + 1, bbox[3] - bbox[1] + 1)
        else:
            stats["bounding_box"] = None
            stats["bounding_box_size"] = (0, 0)

        return stats
