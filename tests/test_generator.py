import unittest
import random
import sys
import os
from collections import deque

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_solver.algo.backtracker import generate_maze
from maze_solver.algo.bfs import solve_maze
from maze_solver.core.errors import InvalidDimension
from maze_solver.core.grid import Cell, PATH, WALL


class KeepOrder:
    """rng double: leaves the candidates in up/down/left/right order."""
    def __init__(self):
        self.calls = 0

    def shuffle(self, items):
        self.calls += 1


class ReverseOrder:
    def shuffle(self, items):
        items.reverse()


def flood(grid, start):
    """Independent flood fill over PATH cells."""
    seen = {tuple(start)}
    queue = deque([tuple(start)])
    while queue:
        r, c = queue.popleft()
        for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
            if 0 <= nr < grid.rows and 0 <= nc < grid.cols and grid.is_path(nr, nc) and (nr, nc) not in seen:
                seen.add((nr, nc))
                queue.append((nr, nc))
    return seen


def carved_walls(maze):
    """Open wall slots strictly inside the border (the spanning-tree edges)."""
    grid = maze.grid
    count = 0
    for r in range(1, grid.rows - 1):
        for c in range(1, grid.cols - 1):
            if (r % 2) != (c % 2) and grid.is_path(r, c):
                count += 1
    return count


# The two 2x2 mazes: only cell (0,0) has a choice, down-first or right-first
DOWN_FIRST = [
    [0, 1, 0, 0, 0],
    [0, 1, 0, 1, 0],
    [0, 1, 0, 1, 0],
    [0, 1, 1, 1, 0],
    [0, 0, 0, 1, 0],
]
RIGHT_FIRST = [
    [0, 1, 0, 0, 0],
    [0, 1, 1, 1, 0],
    [0, 0, 0, 1, 0],
    [0, 1, 1, 1, 0],
    [0, 0, 0, 1, 0],
]


class TestGenerator(unittest.TestCase):
    def test_dimensions_and_endpoints(self):
        for rows, cols in [(1, 1), (1, 5), (4, 2), (7, 7), (10, 13)]:
            maze = generate_maze(rows, cols, seed=rows * 31 + cols)
            self.assertEqual((maze.grid.rows, maze.grid.cols), (2 * rows + 1, 2 * cols + 1))
            self.assertEqual(maze.start, Cell(1, 1))
            self.assertEqual(maze.end, Cell(2 * rows - 1, 2 * cols - 1))
            self.assertTrue(maze.grid.is_path(*maze.start))
            self.assertTrue(maze.grid.is_path(*maze.end))

    def test_perfect_maze(self):
        for seed in range(5):
            maze = generate_maze(12, 9, seed=seed)
            reached = flood(maze.grid, maze.start)
            for r in range(1, maze.grid.rows, 2):
                for c in range(1, maze.grid.cols, 2):
                    self.assertIn((r, c), reached, f"cell {(r, c)} unreachable (seed {seed})")
            # Spanning tree: exactly one edge fewer than cells
            self.assertEqual(carved_walls(maze), 12 * 9 - 1)

    def test_wall_lattice_untouched(self):
        # Even/even positions are pillars and never open
        maze = generate_maze(6, 6, seed=3)
        for r in range(0, maze.grid.rows, 2):
            for c in range(0, maze.grid.cols, 2):
                self.assertEqual(maze.grid.get(r, c), WALL)

    def test_boundary_openings(self):
        maze = generate_maze(5, 8, seed=11)
        grid = maze.grid
        self.assertTrue(grid.is_path(0, maze.start.col))
        self.assertTrue(grid.is_path(grid.rows - 1, maze.end.col))
        border = [(0, c) for c in range(grid.cols)] + [(grid.rows - 1, c) for c in range(grid.cols)]
        border += [(r, 0) for r in range(grid.rows)] + [(r, grid.cols - 1) for r in range(grid.rows)]
        self.assertEqual(sum(grid.is_path(r, c) for r, c in set(border)), 2)

    def test_single_cell(self):
        maze = generate_maze(1, 1, rng=KeepOrder())
        self.assertEqual(maze.grid.to_rows(), [
            [0, 1, 0],
            [0, 1, 0],
            [0, 1, 0],
        ])
        self.assertEqual(maze.start, maze.end)
        self.assertEqual(maze.start, Cell(1, 1))

        result = solve_maze(maze.grid, maze.start, maze.end)
        self.assertTrue(result.found)
        self.assertEqual(result.path, [Cell(1, 1)])

    def test_known_grid_keep_order(self):
        rng = KeepOrder()
        maze = generate_maze(2, 2, rng=rng)
        self.assertEqual(maze.grid.to_rows(), DOWN_FIRST)
        # Only (0,0) ever has two unvisited neighbours
        self.assertEqual(rng.calls, 1)
        self.assertEqual(maze.carve_order, [
            Cell(1, 1), Cell(2, 1), Cell(3, 1), Cell(3, 2),
            Cell(3, 3), Cell(2, 3), Cell(1, 3), Cell(0, 1), Cell(4, 3),
        ])

        result = solve_maze(maze.grid, Cell(1, 1), Cell(3, 3))
        self.assertTrue(result.found)
        self.assertTrue(3 <= result.path_length <= 5)
        self.assertEqual(result.path, [Cell(1, 1), Cell(2, 1), Cell(3, 1), Cell(3, 2), Cell(3, 3)])

    def test_known_grid_reverse_order(self):
        maze = generate_maze(2, 2, rng=ReverseOrder())
        self.assertEqual(maze.grid.to_rows(), RIGHT_FIRST)

    def test_known_grid_fixed_seed(self):
        seen = set()
        for seed in range(20):
            # Replay the one shuffle a 2x2 maze makes, on (0,0)'s [down, right] candidates
            first = [Cell(1, 0), Cell(0, 1)]
            random.Random(seed).shuffle(first)
            expected = DOWN_FIRST if first[0] == Cell(1, 0) else RIGHT_FIRST

            maze = generate_maze(2, 2, seed=seed)
            self.assertEqual(maze.grid.to_rows(), expected, seed)
            self.assertEqual(generate_maze(2, 2, seed=seed).grid.to_rows(), expected, seed)
            seen.add(expected is DOWN_FIRST)
        # 20 seeds land on both mazes
        self.assertEqual(seen, {True, False})
        self.assertEqual(generate_maze(2, 2, seed=0).grid.to_rows(), DOWN_FIRST)

    def test_carve_order_covers_every_open_cell(self):
        maze = generate_maze(6, 4, seed=8)
        self.assertEqual(len(maze.carve_order), len(set(maze.carve_order)))
        self.assertEqual(len(maze.carve_order), maze.grid.count(PATH))
        self.assertEqual(maze.carve_order[0], maze.start)

    def test_determinism(self):
        a = generate_maze(10, 10, seed=12345)
        b = generate_maze(10, 10, rng=random.Random(12345))
        self.assertEqual(a.grid.cells.tobytes(), b.grid.cells.tobytes())
        self.assertEqual(a.carve_order, b.carve_order)

    def test_invalid_dimensions(self):
        with self.assertRaises(InvalidDimension):
            generate_maze(0, 5)
        with self.assertRaises(InvalidDimension):
            generate_maze(5, -1)
        with self.assertRaises(InvalidDimension):
            generate_maze(2.5, 2)
        with self.assertRaises(InvalidDimension):
            generate_maze(True, 2)
        # Still a ValueError for callers that only know the builtin
        with self.assertRaises(ValueError):
            generate_maze(0, 0)


if __name__ == '__main__':
    unittest.main()
