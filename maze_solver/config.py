import os

# --- Remote core ---
# MAZE_API_URL wins, otherwise a local backend on 8080
API_URL = os.environ.get("MAZE_API_URL", "http://localhost:8080").rstrip("/")
API_PREFIX = "/api/maze"
REQUEST_TIMEOUT = float(os.environ.get("MAZE_REQUEST_TIMEOUT", "10"))

# --- Generation ---
DEFAULT_SIZE = 25
MAX_SIZE = int(os.environ.get("MAZE_MAX_SIZE", "200"))

# --- Playback ---
STEP_DELAY_MS = int(os.environ.get("MAZE_STEP_DELAY_MS", "10"))

# --- Server ---
SERVER_HOST = os.environ.get("HOST", "0.0.0.0")
SERVER_PORT = int(os.environ.get("PORT", "8080"))

# --- Logging ---
# Level name, e.g. "debug" or "WARNING"
LOG_LEVEL = os.environ.get("MAZE_LOG_LEVEL", "").strip().upper() or None
