import json
import logging
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class LocalStorage:
    """String key-value slots kept in a single JSON file"""

    def __init__(self, file_path: str):
        self.file_path = file_path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.file_path) or os.path.getsize(self.file_path) == 0:
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self.file_path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: top level is not an object", self.file_path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value

        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # Write whole file then swap it in
        tmp = self.file_path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as file:
            json.dump(data, file, indent=2, sort_keys=True)
        os.replace(tmp, self.file_path)

