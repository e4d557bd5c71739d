from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest


class InMemoryStore:
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 10, 9, 0, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()
