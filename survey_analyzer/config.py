"""Survey analyzer configuration."""
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
REPORT_DIR = DATA_DIR / "reports"

DEFAULT_SURVEY_FILE = Path(os.getenv("SURVEY_FILE", str(DATA_DIR / "so_2024_raw.xlsx")))
REPORT_FILE_NAME = "survey_analysis_report.md"

DATA_SHEET = "raw data"
SCHEMA_SHEET = "schema"
SUPPORTED_SUFFIXES = (".xlsx", ".xlsm")

# Cells that mean "no answer" (compared case-insensitively after trimming)
MISSING_MARKERS = ("na",)

MULTI_CHOICE_DELIMITER = ";"
MULTI_CHOICE_FALLBACK_DELIMITER = ","

DEFAULT_TOP_N = 10
DETAIL_ROW_LIMIT = 10
OPTIONS_DISPLAY_LIMIT = 20


def ensure_dirs():
    """Create necessary directories."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    REPORT_DIR.mkdir(parents=True, exist_ok=True)


def get_report_path() -> Path:
    ensure_dirs()
    return REPORT_DIR / REPORT_FILE_NAME
