import unittest
import sys
import os
import io
import importlib
import logging
import shutil
from contextlib import redirect_stdout
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_solver.core.events import EventReader
from maze_solver.core.grid import MazeGrid
from maze_solver.io.serializer import MazeSerializer
from maze_solver import config
from maze_solver.main import log_level, main, render_ascii


class TestCLI(unittest.TestCase):
    def setUp(self):
        os.makedirs("test_out", exist_ok=True)

    def tearDown(self):
        shutil.rmtree("test_out", ignore_errors=True)

    def run_cli(self, *argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_render_ascii(self):
        grid = MazeGrid.from_rows([[0, 1, 0], [0, 1, 0], [0, 1, 0]])
        self.assertEqual(render_ascii(grid), "# #\n# #\n# #")
        self.assertEqual(render_ascii(grid, [(1, 1)]), "# #\n#.#\n# #")

    def test_generate_then_solve(self):
        code, out = self.run_cli("generate", "--size", "6", "--seed", "4", "--out", "test_out/m.maze")
        self.assertEqual(code, 0)
        self.assertIn("Grid 13x13", out)

        maze, meta = MazeSerializer.load("test_out/m.maze")
        self.assertEqual(meta["seed"], 4)

        code, out = self.run_cli("solve", "test_out/m.maze", "--record-events", "test_out/s.events")
        self.assertEqual(code, 0)
        self.assertIn("Path Length:", out)

        with EventReader("test_out/s.events") as reader:
            self.assertEqual(reader.read_header(), (13, 13))
            self.assertGreater(len(list(reader.stream_events())), 0)

    def test_generate_print(self):
        code, out = self.run_cli("generate", "--rows", "2", "--cols", "3", "--seed", "1", "--print")
        self.assertEqual(code, 0)
        lines = out.splitlines()
        self.assertEqual(lines[0], "# #####")
        self.assertEqual(len(lines[0]), 7)

    def test_invalid_dimension_exit_code(self):
        code, _ = self.run_cli("generate", "--rows", "0", "--cols", "5")
        self.assertEqual(code, 1)

    def test_remote_unavailable(self):
        with mock.patch("maze_solver.service.client.RemoteMazeService.health_check", return_value=False):
            code, _ = self.run_cli("remote", "--url", "http://localhost:1")
        self.assertEqual(code, 1)

    def test_benchmark(self):
        code, out = self.run_cli("benchmark", "--size", "16")
        self.assertEqual(code, 0)
        self.assertIn("PATH LEN", out)

    def test_log_level_names_are_case_insensitive(self):
        with mock.patch.object(config, "LOG_LEVEL", "debug"):
            self.assertEqual(log_level(False), logging.DEBUG)
        with mock.patch.object(config, "LOG_LEVEL", None):
            self.assertEqual(log_level(False), logging.INFO)
        self.assertEqual(log_level(True), logging.DEBUG)
        with mock.patch.object(config, "LOG_LEVEL", "chatty"):
            with self.assertRaises(SystemExit):
                log_level(False)

    def test_log_level_from_environment(self):
        try:
            with mock.patch.dict(os.environ, {"MAZE_LOG_LEVEL": " warning "}):
                importlib.reload(config)
                self.assertEqual(config.LOG_LEVEL, "WARNING")
                self.assertEqual(log_level(False), logging.WARNING)
        finally:
            importlib.reload(config)

    def test_no_command(self):
        code, _ = self.run_cli()
        self.assertEqual(code, 0)


if __name__ == '__main__':
    unittest.main()
