import logging
from typing import Any, Dict, Optional

from maze_solver import config
from maze_solver.algo.backtracker import generate_maze
from maze_solver.algo.bfs import solve_maze
from maze_solver.core.errors import InvalidDimension, InvalidEndpoint, InvalidGrid
from maze_solver.core.grid import Cell, MazeGrid, PATH, WALL, as_cell

logger = logging.getLogger(__name__)


def parse_cell(name: str, value: Any) -> Cell:
    try:
        return as_cell(value)
    except (KeyError, TypeError, ValueError):
        raise InvalidEndpoint(f"{name} must be a {{row, col}} cell, got {value!r}")


def parse_grid(data: Any, rows: Optional[int] = None, cols: Optional[int] = None) -> MazeGrid:
    """
    Validates a wire grid (list of lists of 0/1) and packs it into a MazeGrid.
    rows / cols are the cell-space size the caller claims the grid has.
    """
    if isinstance(data, MazeGrid):
        grid = data
    else:
        if not isinstance(data, (list, tuple)) or not data:
            raise InvalidGrid("grid must be a non-empty list of rows")
        width = None
        for r, line in enumerate(data):
            if not isinstance(line, (list, tuple)) or not line:
                raise InvalidGrid(f"grid row {r} is not a non-empty list")
            if width is None:
                width = len(line)
            elif len(line) != width:
                raise InvalidGrid(f"grid row {r} has {len(line)} columns, expected {width}")
            for value in line:
                if isinstance(value, bool) or not isinstance(value, int) or value not in (WALL, PATH):
                    raise InvalidGrid(f"grid row {r} holds {value!r}, expected 0 or 1")
        grid = MazeGrid.from_rows(data)

    for name, value in (("rows", rows), ("cols", cols)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise InvalidGrid(f"{name} must be an integer, got {value!r}")

    if rows is not None and grid.rows != rows * 2 + 1:
        raise InvalidGrid(f"grid has {grid.rows} rows, expected {rows * 2 + 1} for rows={rows}")
    if cols is not None and grid.cols != cols * 2 + 1:
        raise InvalidGrid(f"grid has {grid.cols} columns, expected {cols * 2 + 1} for cols={cols}")
    return grid


class MazeService:
    """
    In-process implementation of the generate / solve contract.
    Every call is stateless; nothing is kept between requests.
    """

    def __init__(self, max_size: int = None):
        self.max_size = config.MAX_SIZE if max_size is None else max_size

    def health_check(self) -> bool:
        return True

    def generate(self, size: int = config.DEFAULT_SIZE, seed: Optional[int] = None) -> Dict[str, Any]:
        if not isinstance(size, bool) and isinstance(size, int) and size > self.max_size:
            raise InvalidDimension(f"size must be <= {self.max_size}, got {size}")
        maze = generate_maze(size, size, seed=seed)
        logger.info("Generated %dx%d maze (seed=%s)", size, size, seed)
        return maze.to_dict()

    def _solve(self, grid: Any, rows: Optional[int], cols: Optional[int],
               start: Any, end: Any):
        maze_grid = parse_grid(grid, rows, cols)
        return solve_maze(maze_grid, parse_cell("start", start), parse_cell("end", end))

    def solve(self, grid: Any, rows: Optional[int], cols: Optional[int],
              start: Any, end: Any) -> Dict[str, Any]:
        result = self._solve(grid, rows, cols, start, end)
        logger.info("Solved maze: found=%s length=%d", result.found, result.path_length)
        return result.to_dict(with_steps=False)

    def solve_with_steps(self, grid: Any, rows: Optional[int], cols: Optional[int],
                         start: Any, end: Any) -> Dict[str, Any]:
        result = self._solve(grid, rows, cols, start, end)
        logger.info("Solved maze with steps: found=%s length=%d visited=%d",
                    result.found, result.path_length, len(result.visited_order))
        return result.to_dict(with_steps=True)
