import struct
import json
import zlib
from typing import Dict, Any, Tuple
from array import array

from maze_solver.algo.backtracker import Maze
from maze_solver.core.grid import Cell, MazeGrid


class MazeSerializer:
    MAGIC = b"MAZE"
    VERSION = 2

    # Flags
    FLAG_COMPRESSED = 1

    @staticmethod
    def save(maze: Maze, filepath: str, meta: Dict[str, Any] = None, compress=False):
        """
        Saves the maze to a binary file.
        Format:
        - MAGIC (4 bytes)
        - VERSION (1 byte)
        - FLAGS (1 byte)
        - CELL ROWS, CELL COLS (4 bytes each)
        - START ROW, START COL, END ROW, END COL (4 bytes each)
        - META_LEN (2 bytes)
        - META_JSON (META_LEN bytes)
        - DATA_LEN (4 bytes)
        - DATA (one byte per grid cell, compressed or raw)
        """
        if meta is None:
            meta = {}

        flags = 0
        if compress:
            flags |= MazeSerializer.FLAG_COMPRESSED

        meta_bytes = json.dumps(meta).encode('utf-8')

        with open(filepath, "wb") as f:
            f.write(MazeSerializer.MAGIC)
            f.write(struct.pack("<BB", MazeSerializer.VERSION, flags))
            f.write(struct.pack("<II", maze.rows, maze.cols))
            f.write(struct.pack("<IIII", maze.start.row, maze.start.col, maze.end.row, maze.end.col))
            f.write(struct.pack("<H", len(meta_bytes)))
            f.write(meta_bytes)

            data = maze.grid.cells.tobytes()
            if compress:
                data = zlib.compress(data)

            f.write(struct.pack("<I", len(data)))
            f.write(data)

    @staticmethod
    def load(filepath: str) -> Tuple[Maze, Dict[str, Any]]:
        with open(filepath, "rb") as f:
            magic = f.read(4)
            if magic != MazeSerializer.MAGIC:
                raise ValueError("Invalid file format")

            version, flags = struct.unpack("<BB", f.read(2))
            if version != MazeSerializer.VERSION:
                raise ValueError(f"Unsupported maze file version {version}")

            rows, cols = struct.unpack("<II", f.read(8))
            sr, sc, er, ec = struct.unpack("<IIII", f.read(16))
            meta_len = struct.unpack("<H", f.read(2))[0]
            meta = json.loads(f.read(meta_len).decode('utf-8'))

            data_len = struct.unpack("<I", f.read(4))[0]
            data = f.read(data_len)
            if flags & MazeSerializer.FLAG_COMPRESSED:
                data = zlib.decompress(data)

            grid = MazeGrid.for_cells(rows, cols)
            if len(data) != len(grid.cells):
                raise ValueError(f"Grid payload has {len(data)} bytes, expected {len(grid.cells)}")
            grid.cells = array('B', data)

            maze = Maze(grid=grid, rows=rows, cols=cols, start=Cell(sr, sc), end=Cell(er, ec))
            return maze, meta
