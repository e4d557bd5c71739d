import json

import pytest

from instantlog.core.enums import ApiErrorKind, Role
from instantlog.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from instantlog.core.result import Err, Ok
from instantlog.session.registered_users import (
    AuthService,
    RegisteredUser,
    RegisteredUserRepository,
    RegisteredUserService,
)


class FakeClient:
    def __init__(self, by_pin: dict):
        self.by_pin = by_pin
        self.tried = []

    def login_by_pin(self, pin):
        self.tried.append(pin)
        return self.by_pin.get(pin, Err(ApiErrorKind.REJECTED, "Invalid PIN"))

    def whoami(self, pin):
        self.tried.append(pin)
        return self.by_pin.get(pin, Err(ApiErrorKind.REJECTED, "User not found"))


def _ok(user_id: int, name: str, role: str = "employee"):
    return Ok({"success": True, "role": role, "user": {"id": user_id, "name": name, "emp_code": f"E{user_id}"}})


def _service(store):
    return RegisteredUserService(RegisteredUserRepository(store))


def test_register_list_remove(store):
    svc = _service(store)
    svc.register(RegisteredUser(id=1, name="Asha", emp_code="E1", pin="1111"))

    assert [u.id for u in svc.list()] == [1]
    assert json.loads(store.data["registered_users"])[0]["pin"] == "1111"
    assert svc.find_by_pin("1111").name == "Asha"
    assert svc.find_by_pin("2222") is None
    assert svc.remove(1) is True
    assert svc.remove(1) is False
    assert svc.list() == []


def test_register_duplicate_rejected(store):
    svc = _service(store)
    svc.register(RegisteredUser(id=1, name="Asha", emp_code="E1", pin="1111"))

    with pytest.raises(ValidationError):
        svc.register(RegisteredUser(id=1, name="Asha", emp_code="E1", pin="1111"))


def test_corrupt_store_reads_empty(store):
    store.set("registered_users", "{not json")
    assert _service(store).list() == []

    store.set("registered_users", json.dumps([{"id": "x"}, {"id": 2, "pin": "2222", "name": "B"}]))
    assert [u.id for u in _service(store).list()] == [2]


def test_login_maps_user(store):
    auth = AuthService(FakeClient({"1234": _ok(3, "Ravi")}), _service(store))

    user = auth.login("1234")

    assert user.user_id == 3
    assert user.role == Role.EMPLOYEE


def test_login_failure_and_bad_pin(store):
    auth = AuthService(FakeClient({}), _service(store))

    with pytest.raises(AuthenticationError):
        auth.login("9999")
    with pytest.raises(ValidationError):
        auth.login("12a4")


def test_quick_login_tries_each_user(store):
    svc = _service(store)
    svc.register(RegisteredUser(id=1, name="Old", emp_code="E1", pin="1111"))
    svc.register(RegisteredUser(id=2, name="Ravi", emp_code="E2", pin="2222"))
    client = FakeClient({"2222": _ok(2, "Ravi")})

    user = AuthService(client, svc).quick_login()

    assert client.tried == ["1111", "2222"]
    assert user.name == "Ravi"


def test_quick_login_without_users(store):
    with pytest.raises(AuthenticationError):
        AuthService(FakeClient({}), _service(store)).quick_login()


def test_register_device_user_verifies_with_backend(store):
    svc = _service(store)
    auth = AuthService(FakeClient({"4321": _ok(9, "Meera", role="admin")}), svc)

    user = auth.register_device_user("4321")

    assert user.role == "admin"
    assert svc.find_by_pin("4321").id == 9
    assert "pin" not in user.public_dict()


def test_register_device_user_rejects_known_pin_before_backend(store):
    svc = _service(store)
    svc.register(RegisteredUser(id=9, name="Meera", emp_code="E9", pin="4321"))
    client = FakeClient({"4321": _ok(9, "Meera")})

    with pytest.raises(ValidationError):
        AuthService(client, svc).register_device_user("4321")
    assert client.tried == []


def test_whoami_requires_admin(store):
    client = FakeClient({"4321": _ok(9, "Meera")})
    auth = AuthService(client, _service(store))

    with pytest.raises(AuthorizationError):
        auth.whoami("4321", requester=Role.EMPLOYEE)
    with pytest.raises(ValidationError):
        auth.whoami("43", requester=Role.ADMIN)

    assert auth.whoami("4321", requester=Role.ADMIN).data["user"]["name"] == "Meera"
    assert client.tried == ["4321"]
