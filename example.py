#!/usr/bin/env python3
"""
Example usage of the lifelike package.
"""

import logging

from lifelike import CONWAY, Grid, NeighborhoodMode, PatternLibrary, Rule, run


def main():
    """Drive a glider for a few generations and print each one."""
    logging.basicConfig(level=logging.DEBUG)

    grid = Grid(12, 12)
    library = PatternLibrary()
    library.get_pattern("Glider").apply_to_grid(grid, offset_x=4, offset_y=4)

    def show(generation, view):
        print(f"Generation {generation} (population {view.population}):")
        print(view)
        print()

    run(grid, CONWAY, NeighborhoodMode.MOORE, 4, show)

    # New seed under a different rule and neighborhood
    library.get_pattern("R-pentomino").apply_to_grid(grid, offset_x=5, offset_y=5)
    run(grid, Rule(1, 4, 2), NeighborhoodMode.VON_NEUMANN, 3, show)


if __name__ == "__main__":
    main()
