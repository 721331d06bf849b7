"""Local key-value persistence backed by a JSON file."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from ..config import config

logger = logging.getLogger(__name__)


class LocalStore:
    """String key-value store kept in a single JSON object file.

    A missing or unreadable file behaves like an empty store.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path else config.storage_path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {self._path}, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Unexpected content in {self._path}, treating as empty")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        """Replace the file in one step so a failed write keeps the old contents."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_path = Path(tmp.name)
            try:
                json.dump(data, tmp, ensure_ascii=False, indent=2)
            except Exception:
                tmp.close()
                tmp_path.unlink(missing_ok=True)
                raise
        os.replace(tmp_path, self._path)

    def load(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def save(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
        logger.debug(f"Saved {key} to {self._path}")

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
            logger.debug(f"Removed {key} from {self._path}")
