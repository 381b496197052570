"""Exceptions raised by the cellular automaton core."""


class LifelikeError(Exception):
    """Base class for all errors raised by this package."""


class InvalidDimensions(LifelikeError, ValueError):
    """Grid width or height is not a positive integer."""


class SizeMismatch(LifelikeError, ValueError):
    """A state buffer does not hold exactly width * height cells."""


class OutOfBounds(LifelikeError, IndexError):
    """Coordinates fall outside the grid."""
