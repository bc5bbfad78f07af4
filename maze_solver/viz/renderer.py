import logging
from typing import List, Optional, Set

import pygame

from maze_solver.core.grid import Cell, MazeGrid, PATH
from maze_solver.viz.playback import Playback
from maze_solver.viz.recorder import VideoRecorder

logger = logging.getLogger(__name__)


class Renderer:
    """
    Shows a maze and replays its step sequences:
    carve order (if any), then the BFS frontier, then the final path.
    """
    COLOR_BG = (10, 10, 10)
    COLOR_WALL = (30, 30, 40)
    COLOR_PATH = (200, 200, 200)
    COLOR_VISITED = (100, 150, 200)  # Blue tint
    COLOR_SOLUTION = (255, 215, 0)  # Gold
    COLOR_ENDPOINT = (220, 60, 60)

    def __init__(self, grid: MazeGrid, playbacks: List[Playback] = None, steps_per_frame: int = 1,
                 endpoints=(), width=1280, height=720, record=False, output_file: Optional[str] = None):
        self.grid = grid
        self.playbacks = list(playbacks or [])
        self.steps_per_frame = max(1, steps_per_frame)
        self.endpoints = [Cell(*e) for e in endpoints]
        self.screen_width = width
        self.screen_height = height

        # Display state, filled in by playback
        self.shown = grid
        self.visited: Set[Cell] = set()
        self.solution: List[Cell] = []

        self.cell_size = 1.0
        self.offset_x = 0.0
        self.offset_y = 0.0

        self.recorder = VideoRecorder(active=record, output_file=output_file)
        self.running = True
        self.clock = None
        self.surface = None
        self.font = None

    def _has_carve(self) -> bool:
        return bool(self.playbacks) and self.playbacks[0].kind == "carve"

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire grid on screen with padding."""
        padding = 40
        zoom_x = (self.screen_width - padding * 2) / self.grid.cols
        zoom_y = (self.screen_height - padding * 2) / self.grid.rows
        self.cell_size = max(1.0, min(zoom_x, zoom_y))

        self.offset_x = (self.screen_width - self.grid.cols * self.cell_size) / 2
        self.offset_y = (self.screen_height - self.grid.rows * self.cell_size) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Maze Solver - {self.grid.rows}x{self.grid.cols}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        if self._has_carve():
            # Carve playback opens cells one by one from a blank slate
            self.shown = MazeGrid(self.grid.rows, self.grid.cols)
        self.fit_to_screen()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                for playback in self.playbacks:
                    playback.cancel()
            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h
                self.fit_to_screen()

    def step(self, now: float = None):
        """Consume the next chunk of the first unfinished playback, once its delay has passed."""
        if now is None:
            now = pygame.time.get_ticks() / 1000.0
        while self.playbacks and (self.playbacks[0].finished or self.playbacks[0].cancelled):
            done = self.playbacks.pop(0)
            logger.debug("Playback %s stopped at step %d/%d", done.kind, done.position, len(done.steps))
        if not self.playbacks:
            return

        playback = self.playbacks[0]
        kind = playback.kind
        for cell in playback.advance(self.steps_per_frame, now=now):
            if kind == "carve":
                self.shown.set_path(*cell)
            elif kind == "path":
                self.solution.append(cell)
            else:
                self.visited.add(cell)

    def _rect(self, row: int, col: int):
        size = int(self.cell_size) + 1
        px = int(col * self.cell_size + self.offset_x)
        py = int(row * self.cell_size + self.offset_y)
        return (px, py, size, size)

    def draw_grid(self):
        self.surface.fill(self.COLOR_BG)
        cols = self.shown.cols
        for row in range(self.shown.rows):
            for col in range(cols):
                color = self.COLOR_PATH if self.shown.cells[row * cols + col] == PATH else self.COLOR_WALL
                pygame.draw.rect(self.surface, color, self._rect(row, col))

        for row, col in self.visited:
            pygame.draw.rect(self.surface, self.COLOR_VISITED, self._rect(row, col))
        for row, col in self.solution:
            pygame.draw.rect(self.surface, self.COLOR_SOLUTION, self._rect(row, col))
        for row, col in self.endpoints:
            pygame.draw.rect(self.surface, self.COLOR_ENDPOINT, self._rect(row, col))

    def draw_hud(self):
        info = [
            f"FPS: {int(self.clock.get_fps())}",
            f"Grid: {self.grid.rows}x{self.grid.cols}",
            f"Visited: {len(self.visited)}",
            f"Path: {len(self.solution)}",
            "REC" if self.recorder.active else "",
        ]
        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self, fps: int = 60):
        while self.running:
            self.handle_input()
            self.step()

            self.draw_grid()
            self.draw_hud()
            pygame.display.flip()

            if self.recorder.active:
                self.recorder.capture_frame(self.surface)

            self.clock.tick(fps)

        self.recorder.stop()
        pygame.quit()
