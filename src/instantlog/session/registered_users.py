from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

from ..api.client import ApiClient
from ..common.validators import require_pin
from ..core.constants import REGISTERED_USERS_KEY
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..core.result import Err, Result
from ..storage.repository import KeyValueStore
from .state import SessionUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredUser:
    """A user linked on this device for quick (biometric) login."""

    id: int
    name: str
    emp_code: str
    pin: str
    role: str = Role.EMPLOYEE.value

    def public_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("pin")
        return data


class RegisteredUserRepository:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def list(self) -> list[RegisteredUser]:
        raw = self._store.get(REGISTERED_USERS_KEY)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except ValueError:
            logger.warning("Stored registered users are not valid JSON; ignoring")
            return []

        users: list[RegisteredUser] = []
        for item in items if isinstance(items, list) else []:
            try:
                users.append(
                    RegisteredUser(
                        id=int(item["id"]),
                        name=str(item.get("name") or ""),
                        emp_code=str(item.get("emp_code") or ""),
                        pin=str(item["pin"]),
                        role=str(item.get("role") or Role.EMPLOYEE.value),
                    )
                )
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed registered user entry")
        return users

    def save_all(self, users: list[RegisteredUser]) -> None:
        self._store.set(REGISTERED_USERS_KEY, json.dumps([asdict(u) for u in users]))


class RegisteredUserService:
    def __init__(self, users: RegisteredUserRepository):
        self._users = users

    def list(self) -> list[RegisteredUser]:
        return self._users.list()

    def register(self, user: RegisteredUser) -> RegisteredUser:
        require_pin(user.pin)
        users = self._users.list()
        if any(u.id == user.id for u in users):
            raise ValidationError("This user is already registered.")
        users.append(user)
        self._users.save_all(users)
        return user

    def remove(self, user_id: int) -> bool:
        users = self._users.list()
        kept = [u for u in users if u.id != int(user_id)]
        if len(kept) == len(users):
            return False
        self._users.save_all(kept)
        return True

    def find_by_pin(self, pin: str) -> Optional[RegisteredUser]:
        for user in self._users.list():
            if user.pin == pin:
                return user
        return None


def _session_user(data: dict) -> SessionUser:
    user = data.get("user") or {}
    role_s = str(data.get("role") or "").lower()
    try:
        role = Role(role_s)
    except ValueError:
        raise AuthenticationError(f"Unsupported role: {role_s or 'none'}") from None
    try:
        return SessionUser(
            user_id=int(user["id"]),
            name=str(user.get("name") or ""),
            emp_code=str(user.get("emp_code") or ""),
            role=role,
        )
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("Invalid user data") from None


class AuthService:
    """PIN login is checked by the backend; this only drives it."""

    def __init__(self, client: ApiClient, registered: RegisteredUserService):
        self._client = client
        self._registered = registered

    def login(self, pin: str) -> SessionUser:
        pin = require_pin(pin)
        result = self._client.login_by_pin(pin)
        if isinstance(result, Err):
            raise AuthenticationError(result.msg or "Invalid PIN entered.")
        return _session_user(result.data)

    def quick_login(self) -> SessionUser:
        """Try each registered user's PIN in turn; first success wins."""

        users = self._registered.list()
        if not users:
            raise AuthenticationError("Please register your biometric first.")

        for user in users:
            result = self._client.login_by_pin(user.pin)
            if isinstance(result, Err):
                logger.debug("Quick login failed for registered user %s: %s", user.id, result.kind.value)
                continue
            try:
                return _session_user(result.data)
            except AuthenticationError:
                continue

        raise AuthenticationError("No matching user found. Please login with PIN.")

    def register_device_user(self, pin: str) -> RegisteredUser:
        """Verify the PIN with the backend, then remember the user locally."""

        if self._registered.find_by_pin(pin.strip()) is not None:
            raise ValidationError("This user is already registered.")
        session_user = self.login(pin)
        return self._registered.register(
            RegisteredUser(
                id=session_user.user_id,
                name=session_user.name,
                emp_code=session_user.emp_code,
                pin=pin.strip(),
                role=session_user.role.value,
            )
        )

    def whoami(self, pin: str, *, requester: Role) -> Result[dict]:
        """Look up the employee behind a PIN. Admins only."""

        if requester != Role.ADMIN:
            raise AuthorizationError("Only admins can look up users by PIN.")
        return self._client.whoami(require_pin(pin))
