"""Game configuration constants."""

# Baseline board
GRID_ROWS = 5
GRID_COLS = 5

# Dock: gap between board and dock, in grid cells
DOCK_GAP = 1

# Generation bounds
MAX_GENERATION_RETRIES = 200  # carve + partition attempts inside one worker request
MAX_WORKER_RETRIES = 10  # re-requests after an exhausted worker request
PARTITION_MAX_STEPS = 400
GROWTH_ATTEMPTS = 8
WORKER_TIMEOUT = 30.0  # seconds


def get_dock_y(board_rows: int) -> int:
    """First dock row for a board of the given height."""
    return board_rows + DOCK_GAP
