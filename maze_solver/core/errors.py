class MazeError(Exception):
    """Base class for every error raised by maze_solver."""


class InvalidDimension(MazeError, ValueError):
    """Generator asked for a non-positive (or oversized) cell grid."""


class InvalidEndpoint(MazeError, ValueError):
    """Start or end lies outside the grid or on a WALL cell."""


class InvalidGrid(MazeError, ValueError):
    """Maze grid payload is malformed or disagrees with its declared size."""


class InvalidRequest(MazeError, ValueError):
    """Request parameter that is not part of the maze itself is malformed."""


class BackendUnavailable(MazeError):
    """Remote core could not be reached or returned an unusable response."""


class CapabilityUnavailable(BackendUnavailable):
    """Remote core is up but does not implement the requested endpoint."""


# Lookup used to rebuild validation errors named in a server response
ERROR_TYPES = {
    cls.__name__: cls
    for cls in (InvalidDimension, InvalidEndpoint, InvalidGrid, InvalidRequest)
}
