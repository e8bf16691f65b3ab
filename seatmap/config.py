import os
from pathlib import Path

DATABASE_URL = os.environ.get("SEATMAP_DATABASE_URL", "sqlite:///./seatmap.db")

EXPORT_DIR = Path(os.environ.get("SEATMAP_EXPORT_DIR", "./exports"))

LOG_LEVEL = os.environ.get("SEATMAP_LOG_LEVEL", "INFO").upper()

# grid defaults used when the input adapter gets nothing usable
DEFAULT_ROWS = 4
DEFAULT_COLS = 6
DEFAULT_SEAT_SIZE = 64
DEFAULT_GAP = 16

ROWS_RANGE = (1, 30)
COLS_RANGE = (1, 30)
SEAT_SIZE_RANGE = (30, 120)
GAP_RANGE = (0, 40)

DEFAULT_CLASS_NAME = "Klasse"
