from pathlib import Path

DEFAULT_DATA_DIR = (Path(__file__).parent.parent.resolve() / "data").absolute().resolve()
DATA_DIR_ENV_VAR = "QUALITY_TRACKER_DATA_DIR"

# History retention
HISTORY_CAP = 10  # Last 10 scans per source
GLOBAL_SOURCE_ID = "global"  # Implicit key for single-source (global) history

# Storage categories and keys
STORAGE_CATEGORY_SETTINGS = "settings"
STORAGE_CATEGORY_HISTORY = "history"
STORAGE_KEY_SOURCES = "sources"
STORAGE_KEY_LAST_META = "last_meta"

# Report fetching
FETCH_TIMEOUT_SECONDS = 25.0
MAX_REDIRECTS = 5
BODY_SNIPPET_LENGTH = 400  # Characters of a failed response shown for diagnostics
FETCH_CONCURRENCY = 3  # Max concurrent fetches for "fetch --all"

# Source registry
SOURCE_ID_LENGTH = 10

# Issue drill-down limits
ISSUES_MAX_FILES = 15
ISSUES_MAX_PER_FILE = 50

# Score display bands
SCORE_BAND_GOOD = 70
SCORE_BAND_FAIR = 50
