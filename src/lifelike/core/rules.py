"""Death/survival/reproduction rules and neighborhood shapes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Tuple, Union

from .grid import CellState


@dataclass(frozen=True)
class Rule:
    """A life-like DSR transition rule.

    A live cell with fewer than ``death`` live neighbors dies, survives with
    ``death`` to ``survival`` live neighbors inclusive, and dies above
    ``survival``. A dead cell comes alive when it has exactly
    ``reproduction`` live neighbors.
    """

    death: int
    survival: int
    reproduction: int

    def __post_init__(self) -> None:
        for name in ("death", "survival", "reproduction"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"Rule {name} threshold must be a non-negative integer, got {value!r}")

    def next_state(self, state: CellState, live_neighbors: int) -> CellState:
        """Apply the rule to one cell.

        Args:
            state: Current state of the cell
            live_neighbors: Number of live cells in its neighborhood

        Returns:
            State of the cell in the next generation
        """
        if state == CellState.ALIVE:
            if self.death <= live_neighbors <= self.survival:
                return CellState.ALIVE
            return CellState.DEAD
        if live_neighbors == self.reproduction:
            return CellState.ALIVE
        return CellState.DEAD

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.death, self.survival, self.reproduction)

    @classmethod
    def parse(cls, value: Union["Rule", str, Sequence[int]]) -> "Rule":
        """Build a rule from ``"D/S/R"`` text or a ``(D, S, R)`` triple.

        Raises:
            ValueError: If the value cannot be read as three thresholds
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            parts: Sequence[Any] = value.strip().split("/")
            try:
                parts = [int(p) for p in parts]
            except ValueError:
                raise ValueError(f"Invalid rule string '{value}'. Expected 'D/S/R', e.g. '2/3/3'") from None
        else:
            parts = tuple(value)
        if len(parts) != 3:
            raise ValueError(f"A rule needs exactly three thresholds (D, S, R), got {value!r}")
        return cls(*parts)

    def __str__(self) -> str:
        return f"{self.death}/{self.survival}/{self.reproduction}"


CONWAY = Rule(2, 3, 3)


class NeighborhoodMode(Enum):
    """Which adjacent cells count as neighbors."""

    MOORE = "moore"
    VON_NEUMANN = "von_neumann"

    @property
    def neighbor_count(self) -> int:
        return 8 if self is NeighborhoodMode.MOORE else 4

    @property
    def offsets(self) -> Tuple[Tuple[int, int], ...]:
        """Relative (dx, dy) offsets of the neighborhood."""
        orthogonal = ((0, -1), (0, 1), (-1, 0), (1, 0))
        if self is NeighborhoodMode.VON_NEUMANN:
            return orthogonal
        return orthogonal + ((-1, -1), (1, -1), (-1, 1), (1, 1))

    @classmethod
    def parse(cls, value: Union["NeighborhoodMode", str]) -> "NeighborhoodMode":
        """Look up a mode by name (case and separators are ignored).

        Raises:
            ValueError: If the name is not a known neighborhood
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        if key in ("moore", "moore8"):
            return cls.MOORE
        if key in ("vonneumann", "neumann", "vonneumann4"):
            return cls.VON_NEUMANN
        raise ValueError(f"Unknown neighborhood '{value}'. Available: moore, von_neumann")
