from pathlib import Path

from halal.utilities.config import DATA_DIR as _CONFIGURED_DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIGURED_DATA_DIR).resolve()
EXPORTS_DIR = DATA_DIR / 'exports'


def key_file(data_dir: Path, key: str) -> Path:
    """Return the JSON file that backs a storage key."""
    return Path(data_dir) / f"{key}.json"


__all__ = ['DATA_DIR', 'EXPORTS_DIR', 'key_file']
