import pytest

from instantlog.core.exceptions import ValidationError
from instantlog.core.result import Ok
from instantlog.leave.service import LeaveService


class FakeClient:
    def __init__(self):
        self.calls = []

    def apply_leave(self, emp_id, kind, reason, from_date=None, to_date=None):
        self.calls.append((emp_id, kind, reason, from_date, to_date))
        return Ok({"success": True})


def test_quick_leave():
    client = FakeClient()

    LeaveService(client).apply(7, "Sick Leave")

    assert client.calls == [(7, "quick", "Sick Leave", None, None)]


def test_custom_leave():
    client = FakeClient()

    LeaveService(client).apply(7, "Trip", from_date="2024-02-01", to_date="2024-02-03")

    assert client.calls == [(7, "custom", "Trip", "2024-02-01", "2024-02-03")]


@pytest.mark.parametrize(
    "emp_id, reason, kwargs",
    [
        (7, "", {}),
        (None, "Trip", {}),
        (7, "Trip", {"from_date": "2024-02-03", "to_date": "2024-02-01"}),
        (7, "Trip", {"from_date": "2024-02-03"}),
        (7, "Trip", {"from_date": "tomorrow", "to_date": "2024-02-05"}),
    ],
)
def test_invalid_requests(emp_id, reason, kwargs):
    client = FakeClient()

    with pytest.raises(ValidationError):
        LeaveService(client).apply(emp_id, reason, **kwargs)
    assert client.calls == []
