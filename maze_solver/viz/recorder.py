import logging
import os
from datetime import datetime

import cv2
import numpy as np
import pygame

logger = logging.getLogger(__name__)


def default_output_file(prefix: str = "maze") -> str:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    fname = f"{prefix}_{ts}.mp4"
    if os.path.isdir("recordings"):
        return os.path.join("recordings", fname)
    return fname


class VideoRecorder:
    def __init__(self, active=False, output_file=None, fps=30):
        self.active = active
        self.output_file = output_file
        self.fps = fps
        self.writer = None
        self.frame_count = 0

        if self.active and not self.output_file:
            self.output_file = default_output_file()

    def capture_frame(self, surface: pygame.Surface):
        if not self.active:
            return

        if self.writer is None:
            fourcc = cv2.VideoWriter_fourcc(*'mp4v')
            self.writer = cv2.VideoWriter(self.output_file, fourcc, self.fps, surface.get_size())
            logger.info("Recording started: %s", self.output_file)

        # surfarray is (width, height, 3) RGB, OpenCV wants (height, width, 3) BGR
        frame = np.ascontiguousarray(np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2)))
        self.writer.write(cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))
        self.frame_count += 1

    def stop(self):
        if self.writer:
            self.writer.release()
            logger.info("Video saved: %s (%d frames)", self.output_file, self.frame_count)
            self.writer = None
