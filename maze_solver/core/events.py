import struct
from typing import Iterator, Tuple

from maze_solver.core.grid import PATH

# Event Types
EVT_CARVE = 0x01
EVT_SOLVER_SCAN = 0x02
EVT_PATH_ADD = 0x03

MAGIC = b"MAZELOG"


class EventWriter:
    """
    Binary step log.
    Header: MAGIC + grid rows (4b) + grid cols (4b), then one record per
    event: 1 byte type + 2 byte row + 2 byte col (big-endian).
    """

    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")

    def write_header(self, rows: int, cols: int):
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", rows, cols))

    def _log(self, event: int, row: int, col: int):
        # 'H' (unsigned short) is plenty, grids are capped far below 65535
        self.file.write(struct.pack(">BHH", event, row, col))

    def log_carve(self, row: int, col: int):
        self._log(EVT_CARVE, row, col)

    def log_solver_scan(self, row: int, col: int):
        self._log(EVT_SOLVER_SCAN, row, col)

    def log_path_add(self, row: int, col: int):
        self._log(EVT_PATH_ADD, row, col)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class EventReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.rows = 0
        self.cols = 0

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise ValueError("Invalid event log file")
        data = self.file.read(8)
        self.rows, self.cols = struct.unpack(">II", data)
        return self.rows, self.cols

    def stream_events(self) -> Iterator[Tuple[int, Tuple[int, int]]]:
        while True:
            type_byte = self.file.read(1)
            if not type_byte:
                break

            type_code = ord(type_byte)
            if type_code not in (EVT_CARVE, EVT_SOLVER_SCAN, EVT_PATH_ADD):
                raise ValueError(f"Unknown event type 0x{type_code:02x}")

            data = self.file.read(4)
            if len(data) != 4:
                raise ValueError("Truncated event log")
            yield (type_code, struct.unpack(">HH", data))

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def write_maze_events(writer: EventWriter, maze):
    """
    Header plus one carve per opened cell. Mazes loaded from disk carry no
    carve order, so their open cells are logged in row-major order instead.
    """
    grid = maze.grid
    writer.write_header(grid.rows, grid.cols)
    order = maze.carve_order or [
        divmod(idx, grid.cols) for idx, value in enumerate(grid.cells) if value == PATH
    ]
    for row, col in order:
        writer.log_carve(row, col)


def write_solve_events(writer: EventWriter, result):
    for row, col in result.visited_order:
        writer.log_solver_scan(row, col)
    for row, col in result.path:
        writer.log_path_add(row, col)
