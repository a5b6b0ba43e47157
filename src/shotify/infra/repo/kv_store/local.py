import os
import json
import logging
from typing import Any, Dict, Optional

from shotify.infra.repo.kv_store.base import KeyValueStore

logger = logging.getLogger(__name__)


class LocalFileKeyValueStore(KeyValueStore):
    """
    An in-memory store that also persists to a local JSON file.
    Format on disk (tracker_storage.json):
    {
      "stats-dQw4w9WgXcQ": [ {...GameEvent dict...}, ... ],
      "teams-dQw4w9WgXcQ": {"team1": {"name": "...", "players": [...]}, "team2": {...}}
    }
    """
    def __init__(self, filename: str = "tracker_storage.json"):
        self.filename = filename
        self._storage: Dict[str, Any] = {}
        self._load_from_file()

    def get(self, key: str) -> Optional[Any]:
        return self._storage.get(key)

    def set(self, key: str, value: Any) -> None:
        self._storage[key] = value
        self._save_to_file()

    def remove(self, key: str) -> None:
        if key in self._storage:
            del self._storage[key]
        self._save_to_file()

    # ------------- Internal JSON handling -------------
    def _load_from_file(self):
        if not os.path.exists(self.filename):
            self._storage = {}
            return
        with open(self.filename, "r", encoding="utf-8") as f:
            try:
                self._storage = json.load(f)
            except json.JSONDecodeError:
                logger.error(f"Corrupt storage file {self.filename}, starting empty")
                self._storage = {}

    def _save_to_file(self):
        with open(self.filename, "w", encoding="utf-8") as f:
            json.dump(self._storage, f, indent=2)
