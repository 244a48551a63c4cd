"""Local data paths.

All data paths should be imported from here to avoid magic strings.
"""

from pathlib import Path

# Base directory (relative to the working directory unless overridden)
DATA_DIR = Path("data")

SETTINGS_FILENAME = "settings.json"
LOCAL_WORDS_FILENAME = "words.json"


def get_settings_path(data_dir: Path = DATA_DIR) -> Path:
    """Get path to the persisted settings file (api key + demo flag)."""
    return Path(data_dir) / SETTINGS_FILENAME


def get_local_words_path(data_dir: Path = DATA_DIR) -> Path:
    """Get path to the local (no session) word list."""
    return Path(data_dir) / LOCAL_WORDS_FILENAME
