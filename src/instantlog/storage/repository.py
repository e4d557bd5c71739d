from __future__ import annotations

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Single-device local storage. Writes are last-writer-wins."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError
