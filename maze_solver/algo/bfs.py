import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from maze_solver.core.errors import InvalidEndpoint
from maze_solver.core.grid import Cell, MazeGrid, PATH, as_cell, cells_equal

logger = logging.getLogger(__name__)


@dataclass
class SolveResult:
    path: List[Cell] = field(default_factory=list)
    visited_order: List[Cell] = field(default_factory=list)
    found: bool = False

    @property
    def path_length(self) -> int:
        return len(self.path)

    def to_dict(self, with_steps: bool = True) -> dict:
        payload = {
            "solution": [c.to_dict() for c in self.path],
            "pathLength": self.path_length,
            "found": self.found,
        }
        if with_steps:
            payload["visitedOrder"] = [c.to_dict() for c in self.visited_order]
        return payload


def _endpoint(grid: MazeGrid, name: str, point: Sequence[int]) -> Cell:
    try:
        cell = as_cell(point)
    except (KeyError, TypeError, ValueError):
        raise InvalidEndpoint(f"{name} is not a (row, col) pair: {point!r}")
    if not grid.in_bounds(*cell):
        raise InvalidEndpoint(f"{name} {tuple(cell)} is outside the {grid.rows}x{grid.cols} grid")
    if not grid.is_path(*cell):
        raise InvalidEndpoint(f"{name} {tuple(cell)} is a wall")
    return cell


def reconstruct_path(parents: Dict[Cell, Cell], start: Cell, end: Cell) -> List[Cell]:
    path = [end]
    curr = end
    while curr != start:
        curr = parents[curr]
        path.append(curr)
    path.reverse()
    return path


def solve_maze(grid: MazeGrid, start: Sequence[int], end: Sequence[int]) -> SolveResult:
    """
    Breadth-first search from start to end over PATH cells.

    The grid is only read. visited_order lists every cell in the order it
    was first discovered (start first), whether or not end is reached.
    """
    start = _endpoint(grid, "start", start)
    end = _endpoint(grid, "end", end)

    queue = deque([start])
    visited = {start}
    parents: Dict[Cell, Cell] = {}
    visited_order = [start]

    while queue:
        current = queue.popleft()

        if cells_equal(current, end):
            path = reconstruct_path(parents, start, end)
            logger.debug("BFS reached %s: path %d, visited %d", tuple(end), len(path), len(visited_order))
            return SolveResult(path=path, visited_order=visited_order, found=True)

        for nxt in grid.open_neighbors(*current):
            if nxt not in visited:
                visited.add(nxt)
                parents[nxt] = current
                queue.append(nxt)
                visited_order.append(nxt)

    logger.debug("BFS exhausted after %d cells, %s unreachable", len(visited_order), tuple(end))
    return SolveResult(path=[], visited_order=visited_order, found=False)


def shortest_distance(grid: MazeGrid, start: Sequence[int], end: Sequence[int]) -> int:
    """Hop count between start and end over PATH cells, -1 if unreachable."""
    start = _endpoint(grid, "start", start)
    end = _endpoint(grid, "end", end)

    # Dense distance array, -1 = unseen
    dist = [-1] * (grid.rows * grid.cols)
    dist[grid.get_index(*start)] = 0
    queue = deque([start])
    while queue:
        cr, cc = queue.popleft()
        d = dist[cr * grid.cols + cc]
        if (cr, cc) == end:
            return d
        for nr, nc in ((cr - 1, cc), (cr + 1, cc), (cr, cc - 1), (cr, cc + 1)):
            if grid.in_bounds(nr, nc):
                idx = nr * grid.cols + nc
                if dist[idx] == -1 and grid.cells[idx] == PATH:
                    dist[idx] = d + 1
                    queue.append((nr, nc))
    return -1
