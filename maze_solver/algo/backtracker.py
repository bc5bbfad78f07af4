import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from maze_solver.core.errors import InvalidDimension
from maze_solver.core.grid import Cell, MazeGrid, PATH, neighbors

logger = logging.getLogger(__name__)


@dataclass
class Maze:
    grid: MazeGrid
    rows: int
    cols: int
    start: Cell
    end: Cell
    # Grid cells in the order they were opened, for step-by-step replay
    carve_order: List[Cell] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "grid": self.grid.to_rows(),
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "rows": self.rows,
            "cols": self.cols,
        }


def _check_dimension(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidDimension(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidDimension(f"{name} must be >= 1, got {value}")


def _to_grid(cell: Cell) -> Cell:
    return Cell(cell.row * 2 + 1, cell.col * 2 + 1)


def generate_maze(rows: int, cols: int, rng=None, seed: Optional[int] = None) -> Maze:
    """
    Randomized iterative depth-first backtracker.

    rng: anything with a ``shuffle(list)`` method. Defaults to
         ``random.Random(seed)`` so a seed alone gives a reproducible maze.
    """
    _check_dimension("rows", rows)
    _check_dimension("cols", cols)

    if rng is None:
        rng = random.Random(seed)

    grid = MazeGrid.for_cells(rows, cols)
    visited = [[False] * cols for _ in range(rows)]
    carve_order: List[Cell] = []

    # Start at (0,0)
    stack: List[Cell] = [Cell(0, 0)]
    visited[0][0] = True

    while stack:
        current = stack[-1]
        here = _to_grid(current)
        if not grid.is_path(*here):
            grid.set_path(*here)
            carve_order.append(here)

        candidates = [n for n in neighbors(current.row, current.col, rows, cols)
                      if not visited[n.row][n.col]]

        if candidates:
            if len(candidates) > 1:
                rng.shuffle(candidates)
            nxt = candidates[0]
            visited[nxt.row][nxt.col] = True

            # Carve the wall slot between the two cells
            there = _to_grid(nxt)
            wall = Cell((here.row + there.row) // 2, (here.col + there.col) // 2)
            grid.set_path(*wall)
            carve_order.append(wall)

            stack.append(nxt)
        else:
            # Backtrack
            stack.pop()

    start = _to_grid(Cell(0, 0))
    end = _to_grid(Cell(rows - 1, cols - 1))
    grid.set_path(*start)
    grid.set_path(*end)

    # Entrance above start, exit below end
    for opening in (Cell(0, start.col), Cell(grid.rows - 1, end.col)):
        grid.set_path(*opening)
        carve_order.append(opening)

    logger.debug("Generated %dx%d maze (%d open cells)", rows, cols, grid.count(PATH))
    return Maze(grid=grid, rows=rows, cols=cols, start=start, end=end, carve_order=carve_order)
