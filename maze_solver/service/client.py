import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from maze_solver import config
from maze_solver.core.errors import (
    BackendUnavailable,
    CapabilityUnavailable,
    ERROR_TYPES,
    MazeError,
)
from maze_solver.core.grid import Cell
from maze_solver.service.local import parse_cell
from maze_solver.viz.playback import synthesize_steps

logger = logging.getLogger(__name__)

# Status codes meaning "this server has no such endpoint"
MISSING_CAPABILITY = (404, 405)


def cells_from_payload(items: Sequence[Dict[str, int]]) -> List[Cell]:
    return [Cell.from_dict(item) for item in items]


class RemoteMazeService:
    """
    HTTP client for a maze core served by ``maze_solver.service.server``
    (or anything exposing the same /api/maze routes).

    Transport failures raise BackendUnavailable; they are never reported
    as "no path found".
    """

    def __init__(self, base_url: str = None, timeout: float = None, session: requests.Session = None):
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.api_base = f"{self.base_url}{config.API_PREFIX}"
        self.timeout = config.REQUEST_TIMEOUT if timeout is None else timeout
        self.session = session or requests.Session()
        logger.debug("RemoteMazeService using %s", self.api_base)

    def _request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.api_base}/{endpoint}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise BackendUnavailable(f"{method} {url} failed: {e}") from e

        if response.status_code in MISSING_CAPABILITY:
            raise CapabilityUnavailable(f"{url} not supported (HTTP {response.status_code})")

        if response.status_code == 400:
            body = self._json(response, url, strict=False) or {}
            error_cls = ERROR_TYPES.get(body.get("type"), MazeError)
            raise error_cls(body.get("error") or f"{url} rejected the request")

        if not response.ok:
            raise BackendUnavailable(f"{url} returned HTTP {response.status_code}")

        return self._json(response, url)

    @staticmethod
    def _json(response, url: str, strict: bool = True) -> Optional[Dict[str, Any]]:
        try:
            body = response.json()
        except ValueError as e:
            if not strict:
                return None
            raise BackendUnavailable(f"{url} returned malformed JSON") from e
        if not isinstance(body, dict):
            if not strict:
                return None
            raise BackendUnavailable(f"{url} returned {type(body).__name__}, expected an object")
        return body

    def health_check(self) -> bool:
        try:
            body = self._request("GET", "health")
        except MazeError as e:
            logger.error("Health check failed: %s", e)
            return False
        return body.get("status") == "UP"

    def generate(self, size: int = config.DEFAULT_SIZE, seed: Optional[int] = None) -> Dict[str, Any]:
        params = {"size": size}
        if seed is not None:
            params["seed"] = seed
        body = self._request("GET", "generate", params=params)
        try:
            return {
                "grid": body["grid"],
                "start": Cell.from_dict(body["start"]).to_dict(),
                "end": Cell.from_dict(body["end"]).to_dict(),
                "rows": int(body["rows"]),
                "cols": int(body["cols"]),
            }
        except (KeyError, TypeError, ValueError) as e:
            raise BackendUnavailable(f"generate response is missing fields: {e}") from e

    def _solve_body(self, grid, rows, cols, start, end) -> Dict[str, Any]:
        if hasattr(grid, "to_rows"):
            grid = grid.to_rows()
        return {
            "grid": grid,
            "rows": rows,
            "cols": cols,
            "start": parse_cell("start", start).to_dict(),
            "end": parse_cell("end", end).to_dict(),
        }

    @staticmethod
    def _solution(body: Dict[str, Any], with_steps: bool) -> Dict[str, Any]:
        try:
            solution = cells_from_payload(body.get("solution") or [])
            result = {
                "solution": [c.to_dict() for c in solution],
                "pathLength": int(body.get("pathLength") or 0),
                "found": bool(body.get("found")),
            }
            if with_steps:
                steps = cells_from_payload(body.get("visitedOrder") or [])
                result["visitedOrder"] = [c.to_dict() for c in steps]
        except (KeyError, TypeError, ValueError) as e:
            raise BackendUnavailable(f"solve response is malformed: {e}") from e
        return result

    def solve(self, grid, rows, cols, start, end) -> Dict[str, Any]:
        body = self._request("POST", "solve", json=self._solve_body(grid, rows, cols, start, end))
        return self._solution(body, with_steps=False)

    def solve_with_steps(self, grid, rows, cols, start, end) -> Dict[str, Any]:
        """
        Falls back to plain ``solve`` only when the server lacks the
        steps endpoint; the step sequence is then synthesized from the path.
        """
        payload = self._solve_body(grid, rows, cols, start, end)
        try:
            body = self._request("POST", "solve-with-steps", json=payload)
        except CapabilityUnavailable as e:
            logger.warning("%s; falling back to plain solve", e)
            result = self.solve(grid, rows, cols, start, end)
            result["visitedOrder"] = [c.to_dict() for c in synthesize_steps(result["solution"])]
            return result
        return self._solution(body, with_steps=True)
