from __future__ import annotations

import logging

import requests

from instantlog.api.client import ApiClient, format_location, handle_response
from instantlog.core.enums import ApiErrorKind
from instantlog.core.result import Err, Ok


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "{}"):
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


class FakeSession:
    def __init__(self, response=None, error: Exception | None = None):
        self._response = response or FakeResponse()
        self._error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self._error is not None:
            raise self._error
        return self._response


def _client(response=None, error=None):
    session = FakeSession(response, error)
    return ApiClient("http://backend.test/", timeout=2, session=session), session


def test_handle_response_ok():
    result = handle_response(FakeResponse(200, '{"success": true, "x": 1}'))

    assert isinstance(result, Ok)
    assert result.data["x"] == 1


def test_handle_response_empty_body_is_empty_object():
    assert handle_response(FakeResponse(200, "")) == Ok({})


def test_handle_response_html_error_page():
    result = handle_response(FakeResponse(404, "<!DOCTYPE html><html>Not found</html>"))

    assert result == Err(ApiErrorKind.ERROR_PAGE, "Server returned an error page (404/500)")


def test_handle_response_invalid_json():
    result = handle_response(FakeResponse(200, "oops"))

    assert result.kind == ApiErrorKind.INVALID_JSON
    assert result.msg == "Invalid JSON from server"


def test_handle_response_server_error_message_precedence():
    assert handle_response(FakeResponse(500, '{"message": "m", "msg": "x"}')).msg == "m"
    assert handle_response(FakeResponse(400, '{"msg": "bad pin"}')).msg == "bad pin"
    assert handle_response(FakeResponse(503, "{}")).msg == "Server error (503)"


def test_transport_error_becomes_err():
    client, _ = _client(error=requests.ConnectionError("down"))

    result = client.get_history(5)

    assert result == Err(ApiErrorKind.TRANSPORT, "Network connection failed")


def test_base_url_trailing_slash_is_stripped():
    client, session = _client(FakeResponse(200, '{"attendance": []}'))

    client.get_history(5)

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", "http://backend.test/mobile/history/5")
    assert kwargs["timeout"] == 2.0


def test_login_validates_pin_and_shape():
    client, session = _client(FakeResponse(200, '{"success": true}'))

    assert client.login_by_pin("12").kind == ApiErrorKind.VALIDATION
    assert session.calls == []
    assert client.login_by_pin("1234") == Err(ApiErrorKind.UNEXPECTED_SHAPE, "Invalid user data")


def test_login_rejected_by_backend():
    client, _ = _client(FakeResponse(200, '{"success": false, "msg": "Invalid PIN"}'))

    assert client.login_by_pin("1234") == Err(ApiErrorKind.REJECTED, "Invalid PIN")


def test_punch_builds_location():
    client, session = _client(FakeResponse(200, '{"success": true, "time": "09:00"}'))

    result = client.punch("1234", "in", {"latitude": 1.5, "longitude": 2.5, "address": "Pune, MH", "timestamp": "t"})

    assert isinstance(result, Ok)
    body = session.calls[0][2]["json"]
    assert body["location"]["city"] == "Pune"
    assert body["type"] == "in"


def test_punch_rejects_unknown_type():
    client, session = _client()

    assert client.punch("1234", "sideways").kind == ApiErrorKind.VALIDATION
    assert session.calls == []


def test_apply_leave_custom_requires_dates():
    client, session = _client()

    assert client.apply_leave(1, "custom", "Trip").kind == ApiErrorKind.VALIDATION
    assert client.apply_leave(1, "weekly", "Trip").kind == ApiErrorKind.VALIDATION
    assert session.calls == []

    client.apply_leave(1, "custom", "Trip", "2024-01-01", "2024-01-02")
    assert session.calls[0][2]["json"]["from_date"] == "2024-01-01"


def test_ping_unreachable():
    client, _ = _client(error=requests.Timeout())

    assert client.ping() == Err(ApiErrorKind.TRANSPORT, "Server unreachable")


def test_format_location():
    loc = format_location("HQ|18.5|73.8")

    assert loc.address == "HQ"
    assert loc.maps_url == "https://www.google.com/maps?q=18.5,73.8"
    assert format_location("Somewhere").latitude is None
    assert format_location("—") is None
    assert format_location(None) is None


def test_format_location_from_object():
    loc = format_location({"address": "HQ", "latitude": 1.0, "longitude": "2.5"})

    assert loc.address == "HQ"
    assert (loc.latitude, loc.longitude) == (1.0, 2.5)
    assert loc.maps_url == "https://www.google.com/maps?q=1.0,2.5"
    assert format_location({"address": "Gate 2"}).maps_url is None
    assert format_location({}) is None


def test_format_location_ignores_other_types():
    assert format_location(["HQ", 1, 2]) is None
    assert format_location(42) is None


def test_transport_failure_log_hides_pin(caplog):
    client, _ = _client(error=requests.ConnectionError("down"))

    with caplog.at_level(logging.WARNING, logger="instantlog.api.client"):
        result = client.whoami("4821")

    assert result.kind == ApiErrorKind.TRANSPORT
    assert "/mobile/whoami/<pin>" in caplog.text
    assert "4821" not in caplog.text
