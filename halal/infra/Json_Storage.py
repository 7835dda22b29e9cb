"""Key/value persistence adapter backed by one JSON file per key.

Reads of a missing or corrupt key return the caller's default; writes and
removals report success as a bool. Failures are logged, never raised.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

from halal.domain.Errors import PersistenceFailure
from halal.infra.paths import DATA_DIR, key_file

logger = logging.getLogger(__name__)


class JsonStorage:
    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return key_file(self.data_dir, key)

    def get(self, key: str, default: Any = None) -> Any:
        path = self.path_for(key)
        if not path.exists():
            return default
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            logger.warning(f"Invalid JSON stored under '{key}': {e}")
            return default
        except OSError as e:
            logger.warning(f"Could not read '{key}' from {path}: {e}")
            return default

    def set(self, key: str, value: Any) -> bool:
        try:
            self._atomic_write(key, value)
            return True
        except PersistenceFailure as e:
            logger.error(str(e))
            return False

    def remove(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
            return True
        except OSError as e:
            logger.error(f"Could not remove '{key}' ({path}): {e}")
            return False

    def _atomic_write(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        try:
            payload = json.dumps(value, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceFailure(key, f"value is not JSON serializable ({e})") from e
        tmp_path = None
        try:
            os.makedirs(path.parent, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{key}_", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(payload)
            shutil.move(tmp_path, path)
        except OSError as e:
            raise PersistenceFailure(key, str(e)) from e
        finally:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.warning(f"Could not clean up temporary file {tmp_path}")
