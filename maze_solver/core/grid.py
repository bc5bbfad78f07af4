from array import array
from numbers import Integral
from typing import Any, Dict, Iterator, List, NamedTuple, Sequence

import numpy as np

# Cell values
WALL = 0
PATH = 1

# Direction Helpers (row, col) - order matters, BFS tie-breaking depends on it
UP = (-1, 0)
DOWN = (1, 0)
LEFT = (0, -1)
RIGHT = (0, 1)
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)


class Cell(NamedTuple):
    row: int
    col: int

    def to_dict(self) -> Dict[str, int]:
        return {"row": self.row, "col": self.col}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Cell":
        return cls(_coord(data["row"]), _coord(data["col"]))


def _coord(value: Any) -> int:
    # bool is an Integral too, and floats must not be truncated onto a cell
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"cell coordinate must be an integer, got {value!r}")
    return int(value)


def as_cell(value: Any) -> Cell:
    """Accepts {"row": r, "col": c}, a Cell, or a 2-item sequence of integers."""
    if isinstance(value, dict):
        return Cell.from_dict(value)
    row, col = value
    return Cell(_coord(row), _coord(col))


def neighbors(row: int, col: int, rows: int, cols: int) -> List[Cell]:
    """
    Returns the in-bounds axis-aligned neighbours of (row, col),
    always in up, down, left, right order.
    Does NOT check walls (that's for pathfinding).
    """
    result = []
    for dr, dc in DIRECTIONS:
        nr, nc = row + dr, col + dc
        if 0 <= nr < rows and 0 <= nc < cols:
            result.append(Cell(nr, nc))
    return result


def cells_equal(a: Sequence[int], b: Sequence[int]) -> bool:
    return a[0] == b[0] and a[1] == b[1]


class MazeGrid:
    """
    Rasterized maze: a rows x cols matrix of WALL / PATH bytes.
    Odd (row, col) positions are cells, everything else is a wall slot.
    """

    __slots__ = ('rows', 'cols', 'cells')

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        # 'B' (unsigned char) -> 1 byte per cell, all walls to start
        self.cells = array('B', [WALL] * (rows * cols))

    @classmethod
    def for_cells(cls, cell_rows: int, cell_cols: int) -> "MazeGrid":
        """Grid sized to hold a cell_rows x cell_cols cell maze."""
        return cls(cell_rows * 2 + 1, cell_cols * 2 + 1)

    def get_index(self, row: int, col: int) -> int:
        if 0 <= row < self.rows and 0 <= col < self.cols:
            return row * self.cols + col
        raise IndexError(f"Coordinate ({row}, {col}) out of bounds")

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, row: int, col: int) -> int:
        return self.cells[self.get_index(row, col)]

    def is_path(self, row: int, col: int) -> bool:
        return self.cells[self.get_index(row, col)] == PATH

    def set_path(self, row: int, col: int, value: int = PATH):
        self.cells[self.get_index(row, col)] = value

    def neighbors(self, row: int, col: int) -> List[Cell]:
        return neighbors(row, col, self.rows, self.cols)

    def open_neighbors(self, row: int, col: int) -> Iterator[Cell]:
        """
        Yields neighbours that are PATH cells, in up, down, left, right order.
        """
        for cell in neighbors(row, col, self.rows, self.cols):
            if self.cells[cell.row * self.cols + cell.col] == PATH:
                yield cell

    def count(self, value: int = PATH) -> int:
        return self.cells.count(value)

    def copy(self) -> "MazeGrid":
        clone = MazeGrid(self.rows, self.cols)
        clone.cells = array('B', self.cells)
        return clone

    def to_rows(self) -> List[List[int]]:
        return [list(self.cells[r * self.cols:(r + 1) * self.cols]) for r in range(self.rows)]

    @classmethod
    def from_rows(cls, data: Sequence[Sequence[int]]) -> "MazeGrid":
        rows = len(data)
        cols = len(data[0]) if rows else 0
        grid = cls(rows, cols)
        flat = []
        for r, line in enumerate(data):
            if len(line) != cols:
                raise ValueError(f"Row {r} has {len(line)} columns, expected {cols}")
            flat.extend(line)
        grid.cells = array('B', flat)
        return grid

    def to_numpy(self) -> np.ndarray:
        return np.frombuffer(self.cells.tobytes(), dtype=np.uint8).reshape(self.rows, self.cols)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MazeGrid):
            return NotImplemented
        return (self.rows, self.cols) == (other.rows, other.cols) and self.cells == other.cells

    def __repr__(self) -> str:
        return f"MazeGrid({self.rows}x{self.cols})"
