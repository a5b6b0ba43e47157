import copy
from typing import Any, Dict, Optional

from shotify.infra.repo.kv_store.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store. Values are deep-copied in and out like a JSON round-trip."""
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._storage: Dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str) -> Optional[Any]:
        if key not in self._storage:
            return None
        return copy.deepcopy(self._storage[key])

    def set(self, key: str, value: Any) -> None:
        self._storage[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._storage.pop(key, None)
