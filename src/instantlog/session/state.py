from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from ..core.constants import THEME_KEY
from ..core.enums import Role, Theme
from ..storage.repository import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after a PIN login."""

    user_id: int
    name: str
    emp_code: str
    role: Role

    @classmethod
    def from_session(cls, data: Mapping[str, Any]) -> Optional["SessionUser"]:
        if "user_id" not in data:
            return None
        return cls(
            user_id=int(data["user_id"]),
            name=str(data.get("name") or ""),
            emp_code=str(data.get("emp_code") or ""),
            role=Role(data.get("role") or Role.EMPLOYEE.value),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.user_id, "name": self.name, "emp_code": self.emp_code, "role": self.role.value}


@dataclass(frozen=True)
class AppState:
    theme: Theme = Theme.LIGHT
    user: Optional[SessionUser] = None

    @property
    def is_dark(self) -> bool:
        return self.theme == Theme.DARK

    def to_dict(self) -> dict[str, Any]:
        return {
            "theme": self.theme.value,
            "isDark": self.is_dark,
            "user": self.user.to_dict() if self.user else None,
        }


class AppStateStore:
    """Explicit load/save lifecycle for app-wide state.

    Only the theme is persisted; the user lives in the request session.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store

    def load(self, user: Optional[SessionUser] = None) -> AppState:
        saved = self._store.get(THEME_KEY)
        return AppState(theme=Theme.DARK if saved == Theme.DARK.value else Theme.LIGHT, user=user)

    def save(self, state: AppState) -> None:
        self._store.set(THEME_KEY, state.theme.value)

    def toggle_theme(self, user: Optional[SessionUser] = None) -> AppState:
        state = self.load(user)
        new_state = replace(state, theme=Theme.LIGHT if state.is_dark else Theme.DARK)
        self.save(new_state)
        logger.debug("Theme switched to %s", new_state.theme.value)
        return new_state
