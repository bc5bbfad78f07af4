import threading
from typing import Any, Iterator, List, Sequence, Tuple

from maze_solver import config
from maze_solver.core.grid import Cell, as_cell


def synthesize_steps(path: Sequence[Any]) -> List[Cell]:
    """Approximate step sequence when only the final path is known."""
    return [as_cell(item) for item in path]


class Playback:
    """
    Replays a finished step sequence at a fixed pace.

    The algorithm has already run to completion; this only decides when
    each step is shown. cancel() may be called from any thread and stops
    playback before the next step.
    """

    def __init__(self, steps: Sequence[Any], delay_ms: int = None, kind: str = "visit"):
        # kind tells a renderer what a step means: "carve", "visit" or "path"
        self.kind = kind
        self.steps = [as_cell(s) for s in steps]
        self.delay = (config.STEP_DELAY_MS if delay_ms is None else delay_ms) / 1000.0
        self._cancelled = threading.Event()
        self.position = 0
        # Clock reading (seconds) before which advance(now=...) hands out nothing
        self.next_due = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def finished(self) -> bool:
        return self.position >= len(self.steps)

    def cancel(self):
        self._cancelled.set()

    def frames(self) -> Iterator[Tuple[int, Cell]]:
        while not self.finished and not self.cancelled:
            index = self.position
            self.position += 1
            yield index, self.steps[index]
            # Event.wait doubles as the delay and the cancellation check
            if self.delay > 0 and not self.finished:
                if self._cancelled.wait(self.delay):
                    break

    def due(self, now: float) -> bool:
        return self.next_due is None or now >= self.next_due

    def advance(self, count: int = 1, now: float = None) -> List[Cell]:
        """
        Non-blocking: hand out the next `count` steps, for frame-driven loops.

        With `now` (any monotonic clock in seconds) the per-step delay is
        honoured: nothing is returned until `delay` has passed for every
        step of the previous chunk. Without it, steps are paced by the caller.
        """
        if self.cancelled:
            return []
        if now is not None and not self.due(now):
            return []
        chunk = self.steps[self.position:self.position + count]
        self.position += len(chunk)
        if now is not None:
            self.next_due = now + self.delay * len(chunk)
        return chunk
