from typing import Any, Optional


class KeyValueStore:
    """Interface/base class for the tracker's browser-style storage."""
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError
