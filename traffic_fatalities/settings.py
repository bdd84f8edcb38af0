# traffic_fatalities/settings.py
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_FILE = PROJECT_ROOT / "data" / "traffic_fatalities.csv"
FIG_DIR = PROJECT_ROOT / "figures"

# date/time columns are US-local wall clock, month first
TIMEZONE = "America/New_York"
DATETIME_FORMAT = "%m/%d/%Y %I:%M %p"

UNKNOWN_LABEL = "unknown"
EMPTY_SENTINELS = ("", " ")

REQUIRED_COLUMNS = ["date", "time", "victim_type", "gender", "age", "child_adult", "charges"]
NORMALIZE_REQUIRED = ["date", "time", "victim_type"]

LOG_LEVEL = "INFO"
