"""
Maze core over HTTP (Flask).
Endpoints (all under /api/maze):
  GET  /generate?size=N[&seed=S]  -> { grid, start, end, rows, cols }
  POST /solve                     -> { solution, pathLength, found }
  POST /solve-with-steps          -> { solution, visitedOrder, pathLength, found }
  GET  /health                    -> { status: "UP" }
Request body for the solve endpoints: { grid, rows, cols, start, end }.
"""
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from maze_solver import config
from maze_solver.core.errors import InvalidDimension, InvalidGrid, InvalidRequest, MazeError
from maze_solver.service.local import MazeService

logger = logging.getLogger(__name__)


def _int_arg(name: str, default=None, error=InvalidDimension):
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise error(f"{name} must be an integer, got {raw!r}")


def _solve_payload():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidGrid("request body must be a JSON object")
    return (payload.get("grid"), payload.get("rows"), payload.get("cols"),
            payload.get("start"), payload.get("end"))


def create_app(service: MazeService = None) -> Flask:
    app = Flask(__name__)
    CORS(app)
    core = service or MazeService()

    @app.errorhandler(MazeError)
    def handle_maze_error(err):
        logger.warning("Rejected request: %s", err)
        return jsonify({"error": str(err), "type": type(err).__name__}), 400

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        if isinstance(err, HTTPException):
            return err
        logger.exception("Unhandled error serving %s", request.path)
        return jsonify({"error": "internal server error"}), 500

    @app.route(f"{config.API_PREFIX}/health", methods=["GET"])
    def health():
        return jsonify({"status": "UP" if core.health_check() else "DOWN"})

    @app.route(f"{config.API_PREFIX}/generate", methods=["GET"])
    def generate():
        size = _int_arg("size", config.DEFAULT_SIZE)
        seed = _int_arg("seed", error=InvalidRequest)
        return jsonify(core.generate(size, seed=seed))

    @app.route(f"{config.API_PREFIX}/solve", methods=["POST"])
    def solve():
        return jsonify(core.solve(*_solve_payload()))

    @app.route(f"{config.API_PREFIX}/solve-with-steps", methods=["POST"])
    def solve_with_steps():
        return jsonify(core.solve_with_steps(*_solve_payload()))

    return app


def serve(host: str = config.SERVER_HOST, port: int = config.SERVER_PORT, debug: bool = False):
    app = create_app()
    logger.info("Serving maze core on %s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
